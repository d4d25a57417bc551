"""SQLAlchemy model for captured task results."""

from __future__ import annotations

from sqlalchemy import ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column

from result_service.core.database import Base, CreatedAtMixin, IntegerPKMixin


class Result(Base, IntegerPKMixin, CreatedAtMixin):
    """One stored unit of captured output for a task.

    ``result`` holds a JSON object mapping field name to string value. Field
    sets may differ between results of the same task. Ids increase
    monotonically and serve as the export cursor.
    """

    __tablename__ = "results"

    task_id: Mapped[int] = mapped_column(
        ForeignKey("tasks.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    result: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="JSON object of captured fields",
    )

    def __repr__(self) -> str:
        return f"<Result(id={self.id}, task_id={self.task_id})>"
