"""Repositories for projects and tasks."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select

from result_service.core.database.repository import BaseRepository
from result_service.features.projects.models import Project, Task

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


class ProjectRepository(BaseRepository[Project]):
    """Repository for Project model."""

    def __init__(self) -> None:
        super().__init__(Project)

    async def get_by_name(self, session: AsyncSession, name: str) -> Project | None:
        """Get a project by its unique name."""
        result = await session.execute(select(Project).where(Project.name == name))
        project = result.scalar_one_or_none()

        self._lazy.debug(lambda: f"db.get_by_name({name!r}) -> {project is not None}")
        return project


class TaskRepository(BaseRepository[Task]):
    """Repository for Task model."""

    def __init__(self) -> None:
        super().__init__(Task)


_project_repository: ProjectRepository | None = None
_task_repository: TaskRepository | None = None


def get_project_repository() -> ProjectRepository:
    """Get the shared ProjectRepository instance."""
    global _project_repository
    if _project_repository is None:
        _project_repository = ProjectRepository()
    return _project_repository


def get_task_repository() -> TaskRepository:
    """Get the shared TaskRepository instance."""
    global _task_repository
    if _task_repository is None:
        _task_repository = TaskRepository()
    return _task_repository
