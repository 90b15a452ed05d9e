"""Exception handlers translating package errors into JSON responses."""

import logging
from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from restify.utils.exceptions import (
    AuthorizationError,
    BaseRestifyException,
    NotFoundError,
    SubjectNotFound,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Status per exception class; subclasses inherit their base's status
STATUS_MAPPING: dict[type[BaseRestifyException], int] = {
    AuthorizationError: status.HTTP_403_FORBIDDEN,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    SubjectNotFound: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
}

# Substring of the driver message -> (message, error code)
INTEGRITY_VIOLATIONS = (
    ("unique", ("Resource already exists", "DUPLICATE_RESOURCE")),
    ("foreign key", ("Referenced resource not found", "FOREIGN_KEY_VIOLATION")),
    ("not null", ("Required field is missing", "REQUIRED_FIELD_MISSING")),
)


def status_for(exc: BaseRestifyException) -> int:
    """HTTP status for a package exception, resolved along its MRO."""
    for klass in type(exc).__mro__:
        if klass in STATUS_MAPPING:
            return STATUS_MAPPING[klass]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(
    status_code: int,
    message: Any,
    error_code: str | None,
    details: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build the JSON error body shared by every handler."""
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "message": message,
            "error_code": error_code,
            "details": details or {},
        },
        headers=headers,
    )


def _request_extra(request: Request, **extra: Any) -> dict[str, Any]:
    return {"path": request.url.path, "method": request.method, **extra}


class ExceptionHandlers:
    """Centralized exception handlers for the application."""

    @staticmethod
    async def restify_exception_handler(request: Request, exc: BaseRestifyException) -> JSONResponse:
        """Handle authorization, lookup and configuration errors."""

        status_code = status_for(exc)
        extra = _request_extra(request, error_code=exc.error_code, details=exc.details)

        if status_code >= 500:
            logger.error(f"{type(exc).__name__}: {exc.message}", extra=extra)
        else:
            logger.warning(f"{type(exc).__name__}: {exc.message}", extra=extra)

        return error_response(status_code, exc.message, exc.error_code, exc.details)

    @staticmethod
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Handle malformed request bodies and query parameters."""

        errors = exc.errors()
        logger.warning(
            f"Invalid request to {request.url.path}",
            extra=_request_extra(request, error_count=len(errors)),
        )

        return error_response(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "Validation failed",
            "VALIDATION_ERROR",
            {
                "validation_errors": [
                    {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
                    for error in errors
                ]
            },
        )

    @staticmethod
    async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
        """Handle constraint violations raised while persisting a repository."""

        logger.error(
            f"Integrity error in {request.method} {request.url.path}",
            extra=_request_extra(request, driver_error=str(exc.orig)),
        )

        reason = str(exc.orig).lower()
        message, error_code = "Database constraint violation", "INTEGRITY_ERROR"
        for marker, violation in INTEGRITY_VIOLATIONS:
            if marker in reason:
                message, error_code = violation
                break

        return error_response(status.HTTP_409_CONFLICT, message, error_code)

    @staticmethod
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """Handle routing errors and explicit HTTP exceptions."""

        logger.warning(
            f"HTTP {exc.status_code} for {request.method} {request.url.path}",
            extra=_request_extra(request, status_code=exc.status_code),
        )

        return error_response(
            exc.status_code,
            exc.detail,
            HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR"),
            headers=getattr(exc, "headers", None),
        )

    @staticmethod
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""

        logger.error(
            f"Unexpected {type(exc).__name__} in {request.method} {request.url.path}",
            extra=_request_extra(request),
            exc_info=True,
        )

        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", "INTERNAL_ERROR"
        )


def register_exception_handlers(app: Any) -> None:
    """Register all exception handlers with the FastAPI app."""

    handlers = ExceptionHandlers()

    app.add_exception_handler(BaseRestifyException, handlers.restify_exception_handler)
    app.add_exception_handler(IntegrityError, handlers.integrity_error_handler)
    app.add_exception_handler(StarletteHTTPException, handlers.http_exception_handler)
    app.add_exception_handler(RequestValidationError, handlers.validation_exception_handler)
    app.add_exception_handler(Exception, handlers.general_exception_handler)
