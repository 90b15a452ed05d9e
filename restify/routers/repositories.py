"""Generated repository routes."""

from typing import Any

from fastapi import Body, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from restify.constants import get_success_status
from restify.dependencies.auth import get_current_principal
from restify.dependencies.database import get_db
from restify.repositories.registry import RepositoryRegistry
from restify.repositories.service import RepositoryService
from restify.schemas.common import ErrorResponse, PaginationMeta
from restify.schemas.repository import (
    RepositoryActionResponse,
    RepositoryEntryResponse,
    RepositoryIndexResponse,
)
from restify.utils.exceptions import NotFoundError

from .base import BaseRouter

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid key"},
    403: {"model": ErrorResponse, "description": "This action is unauthorized"},
    404: {"model": ErrorResponse, "description": "Repository, entry or action not found"},
}


class RepositoryRouter(BaseRouter):
    """
    Index/show/store/update/delete and custom action routes for every
    repository in a registry.

    Each route runs the throwing authorization variant before touching the
    database row, and the boolean variants to advertise what the principal
    may do next.
    """

    def __init__(
        self,
        registry: RepositoryRegistry,
        prefix: str = "",
        tags: list[str] | None = None,
        dependencies: list[Any] | None = None,
    ):
        super().__init__(prefix, tags or ["Repositories"], dependencies, responses=ERROR_RESPONSES)
        self.registry = registry
        self._add_routes()

    def _add_routes(self):
        router = self.router
        registry = self.registry
        builder = self.response_builder

        @router.get(
            "/{repository}",
            response_model=RepositoryIndexResponse,
            status_code=get_success_status("index"),
        )
        async def index(
            repository: str,
            page: int = Query(1, ge=1, description="Page number"),
            per_page: int = Query(20, ge=1, le=100, alias="perPage", description="Items per page"),
            principal: Any = Depends(get_current_principal),
            db: AsyncSession = Depends(get_db),
        ):
            """List entries the principal may see."""

            repository_class = registry.get(repository)
            repository_class.authorize_to_show_any(principal)

            entries, total = await RepositoryService(db, repository_class).list(page, per_page)

            # Without showEvery each entry is checked on its own
            show_every = repository_class.authorized_to_show_every(principal) is not False
            if not show_every:
                entries = [entry for entry in entries if entry.authorized_to_show(principal) is not False]

            self.log_operation("index", repository, principal, page=page, per_page=per_page)

            return builder.index(
                entries,
                principal,
                PaginationMeta.build(page, per_page, total),
                authorized_to_show_every=show_every,
                authorized_to_store=repository_class.authorized_to_store(principal) is not False,
            )

        @router.get(
            "/{repository}/{key}",
            response_model=RepositoryEntryResponse,
            status_code=get_success_status("show"),
        )
        async def show(
            repository: str,
            key: str,
            principal: Any = Depends(get_current_principal),
            db: AsyncSession = Depends(get_db),
        ):
            """Get one entry."""

            repository_class = registry.get(repository)
            entry = await RepositoryService(db, repository_class).get(key)
            entry.authorize_to_show(principal)

            return builder.entry(entry, principal, "Repository retrieved successfully")

        @router.post(
            "/{repository}",
            response_model=RepositoryEntryResponse,
            status_code=get_success_status("store"),
        )
        async def store(
            repository: str,
            payload: dict[str, Any] = Body(...),
            principal: Any = Depends(get_current_principal),
            db: AsyncSession = Depends(get_db),
        ):
            """Create an entry."""

            repository_class = registry.get(repository)
            repository_class.authorize_to_store(principal)

            entry = await RepositoryService(db, repository_class).create(payload)
            self.log_operation("store", repository, principal, resource_id=entry.get_key())

            return builder.entry(entry, principal, "Repository created successfully")

        @router.api_route(
            "/{repository}/{key}",
            methods=["PUT", "PATCH"],
            response_model=RepositoryEntryResponse,
            status_code=get_success_status("update"),
        )
        async def update(
            repository: str,
            key: str,
            payload: dict[str, Any] = Body(...),
            principal: Any = Depends(get_current_principal),
            db: AsyncSession = Depends(get_db),
        ):
            """Update an entry."""

            repository_class = registry.get(repository)
            service = RepositoryService(db, repository_class)
            entry = await service.get(key)
            entry.authorize_to_update(principal)

            entry = await service.update(entry, payload)
            self.log_operation("update", repository, principal, resource_id=entry.get_key())

            return builder.entry(entry, principal, "Repository updated successfully")

        @router.delete(
            "/{repository}/{key}",
            status_code=get_success_status("delete"),
            response_class=Response,
        )
        async def delete(
            repository: str,
            key: str,
            principal: Any = Depends(get_current_principal),
            db: AsyncSession = Depends(get_db),
        ):
            """Delete an entry."""

            repository_class = registry.get(repository)
            service = RepositoryService(db, repository_class)
            entry = await service.get(key)
            entry.authorize_to_delete(principal)

            resource_id = entry.get_key()
            await service.delete(entry)
            self.log_operation("delete", repository, principal, resource_id=resource_id)

            return Response(status_code=get_success_status("delete"))

        @router.post(
            "/{repository}/{key}/actions/{action}",
            response_model=RepositoryActionResponse,
            status_code=get_success_status("action"),
        )
        async def perform_action(
            repository: str,
            key: str,
            action: str,
            payload: dict[str, Any] | None = Body(None),
            principal: Any = Depends(get_current_principal),
            db: AsyncSession = Depends(get_db),
        ):
            """Run a custom action, authorized by the ability of the same name."""

            repository_class = registry.get(repository)
            if not repository_class.has_action(action):
                raise NotFoundError(
                    f"Action {action} not found",
                    details={"repository": repository, "action": action},
                )

            entry = await RepositoryService(db, repository_class).get(key)
            entry.authorize_to(principal, action)

            result = await entry.get_action(action)(db, payload or {})
            self.log_operation(action, repository, principal, resource_id=entry.get_key())

            return builder.action(action, result)


def create_repository_router(registry: RepositoryRegistry) -> RepositoryRouter:
    """Create router for the repositories in a registry."""
    return RepositoryRouter(registry)
