"""Pytest configuration and shared fixtures.

Organization:
    - Settings Fixtures: per-test export directory
    - Database Fixtures: SQLAlchemy engine, session, and seeded tasks
    - Application Fixtures: FastAPI app and HTTP client
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable, Iterator
import json
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

if TYPE_CHECKING:
    from fastapi import FastAPI
    from sqlalchemy.ext.asyncio import AsyncEngine

    from result_service.core.settings import DataTransferSettings
    from result_service.features.projects.models import Task

# Ensure tests run without external infrastructure
os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("DB_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("DB_CREATE_TABLES", "false")
os.environ.setdefault("LOG_JSON_LOGS", "false")

SeedTask = Callable[..., Awaitable["Task"]]


# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture
def export_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point the export directory at a per-test temporary path.

    Yields:
        The export directory (not created yet).
    """
    from result_service.core.settings import clear_all_caches

    directory = tmp_path / "exports"
    monkeypatch.setenv("DATATRANSFER_EXPORT_DIR", str(directory))
    clear_all_caches()
    try:
        yield directory
    finally:
        clear_all_caches()


@pytest.fixture
def datatransfer_settings(export_dir: Path) -> DataTransferSettings:
    """Data transfer settings bound to the per-test export directory."""
    from result_service.core.settings import get_datatransfer_settings

    return get_datatransfer_settings()


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """Create async SQLAlchemy engine with in-memory SQLite.

    StaticPool keeps a single connection so every session sees the same
    in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Create async database session with all tables created.

    Example:
        async def test_fetch(db_session):
            project = Project(name="Acme")
            db_session.add(project)
            await db_session.flush()
    """
    from result_service.core.database import Base
    import result_service.features.projects.models  # noqa: F401
    import result_service.features.results.models  # noqa: F401

    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_maker = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async with session_maker() as session:
        try:
            yield session
        finally:
            await session.rollback()

    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def seed_task(db_session: AsyncSession) -> SeedTask:
    """Factory creating a project, one task, and its results.

    Payloads may be dicts (stored as JSON) or raw strings (stored verbatim).

    Example:
        async def test_export(seed_task):
            task = await seed_task([{"title": "a"}, {"title": "b"}], project_name="Acme")
    """
    from result_service.features.projects.models import Project, Task
    from result_service.features.projects.repository import (
        get_project_repository,
        get_task_repository,
    )
    from result_service.features.results.models import Result
    from result_service.features.results.repository import get_result_repository

    async def _seed(
        payloads: list[dict[str, Any] | str] | None = None,
        *,
        project_name: str = "Proj",
        settings: dict[str, Any] | None = None,
    ) -> Task:
        project = await get_project_repository().create(
            db_session, Project(name=project_name, settings=settings or {})
        )
        task = await get_task_repository().create(
            db_session, Task(project_id=project.id, name=f"{project_name} crawl")
        )
        await get_result_repository().create_many(
            db_session,
            [
                Result(
                    task_id=task.id,
                    result=payload if isinstance(payload, str) else json.dumps(payload),
                )
                for payload in payloads or []
            ],
        )
        return task

    return _seed


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
async def app(db_session: AsyncSession, export_dir: Path) -> FastAPI:
    """Create FastAPI application bound to the test database session."""
    from result_service.app.main import create_app
    from result_service.core.dependencies.database import get_db_session

    application = create_app()

    async def _override_session() -> AsyncGenerator[AsyncSession]:
        yield db_session

    application.dependency_overrides[get_db_session] = _override_session
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for testing.

    Example:
        async def test_formats(client):
            response = await client.get("/api/v1/formats")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
