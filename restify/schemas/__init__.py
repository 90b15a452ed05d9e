"""Pydantic schemas for request/response models."""

from .common import *
from .repository import *

__all__ = [
    # Common
    "BaseResponse",
    "ErrorResponse",
    "PaginationMeta",
    # Repository
    "RepositoryActionResponse",
    "RepositoryAuthorizationMeta",
    "RepositoryEntry",
    "RepositoryEntryResponse",
    "RepositoryIndexMeta",
    "RepositoryIndexResponse",
]
