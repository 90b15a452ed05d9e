"""Repositories exposing models over the generated REST endpoints."""

from .registry import RepositoryRegistry, repository_registry
from .repository import Repository, action
from .service import RepositoryService

__all__ = [
    "Repository",
    "RepositoryRegistry",
    "RepositoryService",
    "action",
    "repository_registry",
]
