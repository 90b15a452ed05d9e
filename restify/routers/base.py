"""Base router class with common functionality."""

import logging
from typing import Any

from fastapi import APIRouter

from restify.utils.response_builders import ResponseBuilder


class BaseRouter:
    """Wraps an ``APIRouter`` with a response builder and an audit logger."""

    def __init__(
        self,
        prefix: str = "",
        tags: list[str] | None = None,
        dependencies: list[Any] | None = None,
        responses: dict[int | str, dict[str, Any]] | None = None,
    ):
        self.router = APIRouter(
            prefix=prefix,
            tags=tags or [],
            dependencies=dependencies or [],
            responses=responses,
        )
        self.response_builder = ResponseBuilder()
        self.logger = logging.getLogger(f"{__name__}.{type(self).__name__}")

    def log_operation(self, operation: str, repository: str, principal: Any, **context):
        """Audit a completed repository operation."""
        principal_id = getattr(principal, "id", None)
        actor = f"Principal {principal_id}" if principal is not None else "Guest"

        self.logger.info(
            f"{actor} performed {operation} on {repository}",
            extra={
                "operation": operation,
                "repository": repository,
                "principal_id": principal_id,
                **context,
            },
        )
