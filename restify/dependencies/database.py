"""Database dependencies for FastAPI."""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from restify.config.database import get_async_session_local


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    One session per request.

    Route handlers commit explicitly; anything left uncommitted when the
    request fails is rolled back.
    """
    async with get_async_session_local()() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
