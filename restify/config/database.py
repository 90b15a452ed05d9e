"""Database configuration."""

from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from .settings import settings

# Created on first use so importing the package never opens a connection pool
_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def engine_options(database_url: str, debug: bool = False) -> dict[str, Any]:
    """Engine keyword arguments for the database backend."""
    options: dict[str, Any] = {"echo": debug}

    if make_url(database_url).get_backend_name() == "sqlite":
        options["connect_args"] = {"check_same_thread": False}
    else:
        options["pool_pre_ping"] = True

    return options


def get_async_engine() -> AsyncEngine:
    """Get or create the async engine for ``DATABASE_URL``."""
    global _engine
    if _engine is None:
        _engine = create_async_engine(
            settings.DATABASE_URL, **engine_options(settings.DATABASE_URL, settings.DEBUG)
        )
    return _engine


def get_async_session_local() -> async_sessionmaker[AsyncSession]:
    """Get or create the session factory bound to the engine."""
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            get_async_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _session_factory


async def reset_engines() -> None:
    """Dispose the engine and forget the session factory."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None
