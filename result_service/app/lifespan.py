"""Application lifespan management.

Startup Order:
1. Core (logging)
2. Database (tables created when configured)
3. Export directory

Shutdown Order: Reverse of startup
"""

from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import TYPE_CHECKING

from result_service.core.settings import (
    get_app_settings,
    get_datatransfer_settings,
    get_db_settings,
    get_logging_settings,
)
from result_service.infra.logging import setup_logging, shutdown

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

logger = logging.getLogger(__name__)


async def _startup_core() -> None:
    """Configure logging."""
    app = get_app_settings()
    setup_logging(log_settings=get_logging_settings(), force=True)
    logger.info(
        "Application starting",
        extra={"service": app.service_name, "environment": app.environment},
    )


async def _startup_database() -> None:
    """Initialize the database and create tables if configured."""
    from result_service.infra.database.session import init_database

    db = get_db_settings()
    try:
        await init_database()
    except Exception:
        logger.exception("Database initialization failed, failing startup")
        raise
    logger.info(
        "Database connection initialized",
        extra={"sqlite": db.is_sqlite, "create_tables": db.create_tables},
    )


async def _startup_exports() -> None:
    """Make sure the transient export directory exists."""
    settings = get_datatransfer_settings()
    export_dir = settings.ensure_export_dir()
    logger.info(
        "Export directory ready",
        extra={"export_dir": str(export_dir), "default_page_size": settings.default_page_size},
    )


async def _shutdown_database() -> None:
    """Close database connection."""
    from result_service.infra.database.session import close_database

    await close_database()


async def _shutdown_core() -> None:
    """Flush and stop the logging queue listener."""
    logger.info("Application shutdown complete")
    shutdown()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifecycle.

    Args:
        app: FastAPI application instance.

    Yields:
        None during application runtime.
    """
    _ = app

    # =========================================================================
    # STARTUP PHASE
    # =========================================================================

    await _startup_core()
    await _startup_database()
    await _startup_exports()

    app_settings = get_app_settings()
    logger.info(
        "Application startup complete - listening on %s:%s",
        app_settings.host,
        app_settings.port,
        extra={
            "service": app_settings.service_name,
            "environment": app_settings.environment,
            "version": app_settings.version,
            "api_prefix": app_settings.api_prefix,
        },
    )

    yield

    # =========================================================================
    # SHUTDOWN PHASE - Close services in reverse order
    # =========================================================================

    logger.info("Application shutting down", extra={"service": app_settings.service_name})
    await _shutdown_database()
    await _shutdown_core()


__all__ = ["lifespan"]
