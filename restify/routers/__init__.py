"""API routers."""

from .base import BaseRouter
from .repositories import RepositoryRouter, create_repository_router

__all__ = ["BaseRouter", "RepositoryRouter", "create_repository_router"]
