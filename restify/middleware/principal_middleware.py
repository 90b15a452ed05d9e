"""Principal resolution middleware."""

import inspect
import logging
from collections.abc import Callable
from typing import Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

PrincipalResolver = Callable[[Request], Any]


class PrincipalMiddleware(BaseHTTPMiddleware):
    """
    Store the authenticated principal on ``request.state.principal``.

    Authentication itself belongs to the host application: the resolver
    receives the request and returns the principal, or ``None`` for guests.
    It may be a plain function or a coroutine function.
    """

    def __init__(self, app: Any, resolver: PrincipalResolver | None = None):
        super().__init__(app)
        self.resolver = resolver

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Resolve the principal before the route runs."""

        principal = None
        if self.resolver is not None:
            principal = self.resolver(request)
            if inspect.isawaitable(principal):
                principal = await principal

        request.state.principal = principal

        if principal is not None:
            logger.debug(
                "Resolved principal",
                extra={"principal_id": getattr(principal, "id", None), "path": request.url.path},
            )

        return await call_next(request)
