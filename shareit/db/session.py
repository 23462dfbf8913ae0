"""
Async database session management.
Design: one session (one transaction) per request; commit on success, rollback on error.
"""

import logging
from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from shareit.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    pool_pre_ping=True,  # Verify connections before use
    pool_size=10,
    max_overflow=20,
)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


_AFTER_COMMIT = "after_commit"


def after_commit(session: AsyncSession, callback: Callable[[], Awaitable[None]]) -> None:
    """Queue an async callback (e.g. cache invalidation) to run once the session has committed."""
    session.info.setdefault(_AFTER_COMMIT, []).append(callback)


async def commit(session: AsyncSession) -> None:
    """Commit, then run the callbacks queued with after_commit in order."""
    await session.commit()
    for callback in session.info.pop(_AFTER_COMMIT, []):
        await callback()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a database session per request. Persistence errors are rolled back and re-raised, never retried."""
    async with async_session_maker() as session:
        try:
            yield session
            await commit(session)
        except Exception:
            logger.debug("Rolling back request transaction")
            session.info.pop(_AFTER_COMMIT, None)
            await session.rollback()
            raise


DbSession = Annotated[AsyncSession, Depends(get_db)]
