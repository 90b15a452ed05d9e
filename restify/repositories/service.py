"""Persistence operations behind the repository routes."""

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from restify.utils.exceptions import ResourceNotFoundError

from .repository import Repository


class RepositoryService:
    """Service for loading and persisting models wrapped by a repository."""

    def __init__(self, db: AsyncSession, repository: type[Repository]):
        self.db = db
        self.repository = repository
        self.model = repository.subject_type()

    async def list(self, page: int = 1, per_page: int = 20) -> tuple[list[Repository], int]:
        """Get one page of repositories and the total count."""

        count_result = await self.db.execute(select(func.count()).select_from(self.model))
        total = count_result.scalar_one()

        primary_key = getattr(self.model, self.repository.primary_key())
        query = (
            select(self.model)
            .order_by(primary_key)
            .offset((page - 1) * per_page)
            .limit(per_page)
        )
        result = await self.db.execute(query)

        return [self.repository(resource) for resource in result.scalars().all()], total

    async def get(self, key: Any) -> Repository:
        """Get the repository wrapping the model with the given key."""

        key = self.repository.coerce_key(key)
        resource = await self.db.get(self.model, key)
        if resource is None:
            raise ResourceNotFoundError(
                f"{self.model.__name__} {key} not found",
                details={"repository": self.repository.get_uri_key(), "id": key},
            )

        return self.repository(resource)

    async def create(self, payload: dict[str, Any]) -> Repository:
        """Create a model from the fillable payload attributes."""

        repository = self.repository(self.repository.new_model())
        repository.fill(payload)

        self.db.add(repository.resource)
        await self.db.commit()
        await self.db.refresh(repository.resource)

        return repository

    async def update(self, repository: Repository, payload: dict[str, Any]) -> Repository:
        """Update the wrapped model from the fillable payload attributes."""

        repository.fill(payload)
        await self.db.commit()
        await self.db.refresh(repository.resource)

        return repository

    async def delete(self, repository: Repository) -> None:
        """Delete the wrapped model."""

        await self.db.delete(repository.resource)
        await self.db.commit()
