"""Utility functions and classes."""

from .exceptions import *
from .naming import *

__all__ = [
    # Exceptions
    "BaseRestifyException",
    "AuthorizationError",
    "AuthorizationDenied",
    "SubjectNotFound",
    "ValidationError",
    "NotFoundError",
    "RepositoryNotFoundError",
    "ResourceNotFoundError",
    "PolicyRegistryFrozen",
    # Naming
    "camel_to_snake",
    "kebab_case",
    "pluralize",
]
