"""Response builder utilities for consistent API responses."""

from typing import Any

from fastapi.encoders import jsonable_encoder

from restify.repositories.repository import Repository
from restify.schemas.common import PaginationMeta
from restify.schemas.repository import (
    RepositoryActionResponse,
    RepositoryEntry,
    RepositoryEntryResponse,
    RepositoryIndexMeta,
    RepositoryIndexResponse,
)


class ResponseBuilder:
    """Builder class for standardized API responses."""

    @staticmethod
    def entry(repository: Repository, principal: Any, message: str) -> RepositoryEntryResponse:
        """Build single entry response."""
        return RepositoryEntryResponse(
            success=True,
            message=message,
            data=RepositoryEntry(**jsonable_encoder(repository.serialize(principal))),
        )

    @staticmethod
    def index(
        repositories: list[Repository],
        principal: Any,
        pagination: PaginationMeta,
        authorized_to_show_every: bool,
        authorized_to_store: bool,
        message: str = "Repositories retrieved successfully",
    ) -> RepositoryIndexResponse:
        """Build paginated entries response."""
        return RepositoryIndexResponse(
            success=True,
            message=message,
            data=[
                RepositoryEntry(**jsonable_encoder(repository.serialize(principal)))
                for repository in repositories
            ],
            pagination=pagination,
            meta=RepositoryIndexMeta(
                authorizedToShowEvery=authorized_to_show_every,
                authorizedToStore=authorized_to_store,
            ),
        )

    @staticmethod
    def action(name: str, result: Any) -> RepositoryActionResponse:
        """Build custom action response."""
        return RepositoryActionResponse(
            success=True,
            message=f"Action {name} performed successfully",
            action=name,
            data=jsonable_encoder(result),
        )
