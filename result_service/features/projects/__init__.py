"""Projects and tasks: the metadata that owns stored results."""

from __future__ import annotations

from .models import Project, Task
from .repository import (
    ProjectRepository,
    TaskRepository,
    get_project_repository,
    get_task_repository,
)

__all__ = [
    "Project",
    "ProjectRepository",
    "Task",
    "TaskRepository",
    "get_project_repository",
    "get_task_repository",
]
