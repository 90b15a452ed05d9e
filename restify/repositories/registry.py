"""Registry of repositories exposed over HTTP."""

import logging
from typing import Any

from restify.utils.exceptions import RepositoryNotFoundError, SubjectNotFound

from .repository import Repository

logger = logging.getLogger(__name__)


class RepositoryRegistry:
    """Mapping of uri keys to repository classes."""

    def __init__(self):
        self._repositories: dict[str, type[Repository]] = {}

    def register(self, *repositories: type[Repository]) -> None:
        """
        Register repository classes under their uri keys.

        Usage:
            registry.register(PostRepository, UserRepository)
        """
        for repository in repositories:
            if repository.model is None:
                raise SubjectNotFound(repository.__name__)

            uri_key = repository.get_uri_key()
            self._repositories[uri_key] = repository
            logger.debug(
                f"Registered {repository.__name__} at /{uri_key}",
                extra={"repository": repository.__name__, "uri_key": uri_key},
            )

    def bind(self, gate: Any) -> "RepositoryRegistry":
        """
        Copy of the registry whose repositories authorize against ``gate``.

        Each repository is replaced by a subclass carrying the gate, so the
        registered classes themselves are left untouched.
        """
        bound = RepositoryRegistry()
        for uri_key, repository in self._repositories.items():
            bound.register(
                type(
                    repository.__name__,
                    (repository,),
                    {
                        "__module__": repository.__module__,
                        "__qualname__": repository.__qualname__,
                        "__doc__": repository.__doc__,
                        "uri_key": uri_key,
                        "authorization_gate": gate,
                    },
                )
            )
        return bound

    def get(self, uri_key: str) -> type[Repository]:
        """Get the repository class for a uri key."""
        repository = self._repositories.get(uri_key)
        if repository is None:
            raise RepositoryNotFoundError(
                f"Repository {uri_key} not found", details={"repository": uri_key}
            )
        return repository

    def all(self) -> list[type[Repository]]:
        return list(self._repositories.values())

    def models(self) -> list[type]:
        """Model classes behind the registered repositories."""
        return [repository.model for repository in self._repositories.values()]

    def __contains__(self, uri_key: str) -> bool:
        return uri_key in self._repositories

    def __len__(self) -> int:
        return len(self._repositories)


# Default registry used by the application factory
repository_registry = RepositoryRegistry()
