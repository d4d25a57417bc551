"""Database session management with the SQLAlchemy async engine."""

from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.ext.asyncio import async_sessionmaker as _async_sessionmaker
from sqlalchemy.ext.asyncio import create_async_engine as _create_async_engine

from result_service.core.settings import get_db_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger(__name__)

db_settings = get_db_settings()

# Engines connect lazily, so building one at import time never touches the network
engine = _create_async_engine(
    db_settings.url,
    echo=db_settings.echo,
    pool_pre_ping=db_settings.pool_pre_ping,
)

AsyncSessionLocal = _async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
    autocommit=False,
)


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Provide a session that rolls back on error and always closes.

    Usable from route dependencies, CLI commands and scripts alike:

        async with get_async_session() as session:
            task = await session.get(Task, 1)
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def init_database() -> None:
    """Create missing tables when enabled in settings."""
    if not db_settings.create_tables:
        logger.info("Skipping table creation (DB_CREATE_TABLES=false)")
        return

    from result_service.core.database import Base

    # Register models on Base.metadata before create_all
    import result_service.features.projects.models  # noqa: F401
    import result_service.features.results.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("Database tables ensured", extra={"backend": engine.dialect.name})


async def close_database() -> None:
    """Dispose of the engine's connection pool."""
    await engine.dispose()
    logger.info("Database connections closed")
