"""Principal dependencies for FastAPI."""

from typing import Any

from fastapi import Request


async def get_current_principal(request: Request) -> Any | None:
    """Get the principal resolved for this request, ``None`` for guests."""
    return getattr(request.state, "principal", None)
