"""Custom exceptions for the package."""

from typing import Any, Dict, Optional


class BaseRestifyException(Exception):
    """Base exception for repository and authorization errors."""

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class AuthorizationError(BaseRestifyException):
    """Raised when authorization fails."""

    def __init__(self, message: str = "Access denied", **kwargs):
        kwargs.setdefault("error_code", "ACCESS_DENIED")
        super().__init__(message, **kwargs)


class AuthorizationDenied(AuthorizationError):
    """Raised by the throwing authorization variants on an explicit ``False``."""

    def __init__(self, message: str = "This action is unauthorized.", **kwargs):
        super().__init__(message, **kwargs)


class SubjectNotFound(BaseRestifyException):
    """Raised when a repository has no wrapped model to authorize against.

    This is a configuration error, surfaced as a server error.
    """

    def __init__(self, class_name: str, message: Optional[str] = None, **kwargs):
        self.class_name = class_name
        kwargs.setdefault("error_code", "SUBJECT_NOT_FOUND")
        super().__init__(message or f"Model is not declared in {class_name}.", **kwargs)


class ValidationError(BaseRestifyException):
    """Raised when validation fails."""

    def __init__(self, message: str = "Validation failed", **kwargs):
        kwargs.setdefault("error_code", "VALIDATION_ERROR")
        super().__init__(message, **kwargs)


class NotFoundError(BaseRestifyException):
    """Raised when a resource is not found."""

    def __init__(self, message: str = "Resource not found", **kwargs):
        kwargs.setdefault("error_code", "NOT_FOUND")
        super().__init__(message, **kwargs)


class RepositoryNotFoundError(NotFoundError):
    """Raised when no repository is registered under a uri key."""

    def __init__(self, message: str = "Repository not found", **kwargs):
        super().__init__(message, error_code="REPOSITORY_NOT_FOUND", **kwargs)


class ResourceNotFoundError(NotFoundError):
    """Raised when a repository has no entry with the requested key."""

    def __init__(self, message: str = "Resource not found", **kwargs):
        super().__init__(message, error_code="RESOURCE_NOT_FOUND", **kwargs)


class PolicyRegistryFrozen(RuntimeError):
    """Raised when a policy is registered after bootstrap."""
