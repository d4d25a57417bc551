"""SQLAlchemy models for projects and their crawl tasks."""

from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from result_service.core.database import Base, IntegerPKMixin, TimestampMixin


class Project(Base, IntegerPKMixin, TimestampMixin):
    """A project groups tasks and carries free-form settings.

    Only the name and settings matter to exports: the name becomes the SQL
    table name and part of the artifact file name, the settings may override
    the export page size.
    """

    __tablename__ = "projects"

    name: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        comment="Project name (used for export table and file names)",
    )
    settings: Mapped[dict[str, Any]] = mapped_column(
        JSON,
        default=dict,
        nullable=False,
        comment="Free-form project settings",
    )

    def get_setting(self, key: str, default: Any = None) -> Any:
        """Return a raw setting value, or ``default`` when unset."""
        return (self.settings or {}).get(key, default)

    def get_int_setting(self, key: str, default: int) -> int:
        """Return an integer setting.

        Accepts integers and numeric strings; falls back to ``default`` when
        the key is missing or the value does not parse as an integer.
        """
        value = self.get_setting(key)
        if value is None or isinstance(value, bool):
            return default
        if isinstance(value, int):
            return value
        try:
            return int(str(value).strip())
        except ValueError:
            return default

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, name={self.name!r})>"


class Task(Base, IntegerPKMixin, TimestampMixin):
    """A unit of crawl work whose captured output is stored as results."""

    __tablename__ = "tasks"

    project_id: Mapped[int] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, project_id={self.project_id})>"
