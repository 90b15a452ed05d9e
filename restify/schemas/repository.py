"""Repository response schemas."""

from typing import Any

from pydantic import BaseModel, Field

from .common import BaseResponse, PaginationMeta


class RepositoryAuthorizationMeta(BaseModel):
    """Actions the current principal may perform on an entry."""

    authorizedToShow: bool
    authorizedToStore: bool
    authorizedToUpdate: bool
    authorizedToDelete: bool


class RepositoryEntry(BaseModel):
    """Serialized repository entry."""

    id: Any
    type: str
    attributes: dict[str, Any] = Field(default_factory=dict)
    meta: RepositoryAuthorizationMeta


class RepositoryEntryResponse(BaseResponse):
    """Single entry response."""

    data: RepositoryEntry


class RepositoryIndexMeta(BaseModel):
    """Collection level authorization for the current principal."""

    authorizedToShowEvery: bool
    authorizedToStore: bool


class RepositoryIndexResponse(BaseResponse):
    """Paginated entries response."""

    data: list[RepositoryEntry]
    pagination: PaginationMeta
    meta: RepositoryIndexMeta


class RepositoryActionResponse(BaseResponse):
    """Custom action response."""

    action: str
    data: Any = None
