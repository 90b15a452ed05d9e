"""Request/Response logging middleware."""

import logging
import time
import uuid
from collections.abc import Callable
from typing import Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

REDACTED = "[REDACTED]"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Log every repository request with the principal and repository involved.

    Runs outside ``PrincipalMiddleware``, so the principal is read from
    ``request.state`` once the inner application has answered.
    """

    def __init__(
        self,
        app: Any,
        api_prefix: str = "",
        log_headers: bool = False,
        sensitive_headers: set[str] | None = None,
        exclude_paths: set[str] | None = None,
    ):
        """
        Initialize request logging middleware.

        Args:
            app: ASGI application
            api_prefix: Prefix the repository routes are mounted under
            log_headers: Whether to log request headers
            sensitive_headers: Headers to redact when logging
            exclude_paths: Paths that are not logged
        """
        super().__init__(app)
        self.api_prefix = api_prefix.rstrip("/")
        self.log_headers = log_headers
        self.sensitive_headers = {
            header.lower() for header in sensitive_headers or {"authorization", "cookie"}
        }
        self.exclude_paths = exclude_paths or {
            "/health",
            f"{self.api_prefix}/docs",
            f"{self.api_prefix}/redoc",
            f"{self.api_prefix}/openapi.json",
        }

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Log the request outcome with timing and a request id."""

        if request.url.path in self.exclude_paths:
            return await call_next(request)

        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        request.state.request_id = request_id
        context = self._request_context(request, request_id)
        started = time.perf_counter()

        logger.debug("Repository request received", extra=context)

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"Repository request failed with {type(e).__name__}",
                extra={**context, "elapsed": self._elapsed(started)},
                exc_info=True,
            )
            raise

        elapsed = self._elapsed(started)
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = elapsed

        principal = getattr(request.state, "principal", None)
        context.update(
            status_code=response.status_code,
            elapsed=elapsed,
            principal_id=getattr(principal, "id", None),
        )

        message = f"{request.method} {request.url.path} -> {response.status_code}"
        if response.status_code >= 500:
            logger.error(message, extra=context)
        elif response.status_code in (401, 403):
            logger.info(message, extra=context)
        elif response.status_code >= 400:
            logger.warning(message, extra=context)
        else:
            logger.info(message, extra=context)

        return response

    def _request_context(self, request: Request, request_id: str) -> dict[str, Any]:
        context = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "repository": self._repository_key(request.url.path),
        }
        if request.query_params:
            context["query_params"] = dict(request.query_params)
        if self.log_headers:
            context["headers"] = {
                key: REDACTED if key.lower() in self.sensitive_headers else value
                for key, value in request.headers.items()
            }
        return context

    def _repository_key(self, path: str) -> str | None:
        """Uri key of the repository addressed by the path, if any."""
        if not path.startswith(f"{self.api_prefix}/"):
            return None
        segments = path[len(self.api_prefix) :].strip("/").split("/")
        return segments[0] or None

    @staticmethod
    def _elapsed(started: float) -> str:
        return f"{time.perf_counter() - started:.4f}"
