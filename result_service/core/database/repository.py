"""Minimal generic repository for SQLAlchemy models.

Provides basic operations with explicit session passing.
For complex queries, use the session directly - this is a convenience, not a cage.

Example:
    from result_service.core.database import BaseRepository

    class TaskRepository(BaseRepository[Task]):
        async def list_for_project(self, session: AsyncSession, project_id: int) -> Sequence[Task]:
            stmt = select(Task).where(Task.project_id == project_id)
            result = await session.execute(stmt)
            return result.scalars().all()
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from sqlalchemy import Select, func, select

from result_service.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")


@dataclass(slots=True, frozen=True)
class SearchResult(Generic[T]):
    """Paginated search result container.

    Attributes:
        items: List of items for current page
        total: Total count across all pages
        limit: Page size
        offset: Current offset
    """

    items: Sequence[T]
    total: int
    limit: int
    offset: int

    @property
    def page(self) -> int:
        """Current page number (1-indexed)."""
        return (self.offset // self.limit) + 1 if self.limit else 1

    @property
    def pages(self) -> int:
        """Total number of pages."""
        if self.limit == 0:
            return 1
        return (self.total + self.limit - 1) // self.limit

    @property
    def has_next(self) -> bool:
        """Whether there are more pages after current."""
        return self.offset + len(self.items) < self.total


class BaseRepository(Generic[T]):
    """Minimal generic repository.

    Provides:
        - get(session, id) -> T | None
        - search(session, statement, limit, offset) -> SearchResult[T]
        - create(session, instance) -> T
        - create_many(session, instances) -> Sequence[T]

    Session is always explicit - no hidden state.
    """

    __slots__ = ("_lazy", "model")

    def __init__(self, model: type[T]) -> None:
        """Initialize repository with model class.

        Args:
            model: SQLAlchemy model class (e.g., Task, Result)
        """
        self.model = model
        # Lazy logger for DEBUG (zero overhead when DEBUG disabled)
        self._lazy = get_lazy_logger(f"repository.{model.__name__}")

    async def get(
        self,
        session: AsyncSession,
        id: Any,  # noqa: A002
    ) -> T | None:
        """Get entity by primary key.

        Args:
            session: Database session
            id: Primary key value

        Returns:
            Entity if found, None otherwise
        """
        instance = await session.get(self.model, id)

        self._lazy.debug(
            lambda: f"db.get: {self.model.__name__}({id}) -> {'found' if instance else 'not found'}"
        )
        return instance

    async def search(
        self,
        session: AsyncSession,
        statement: Select[tuple[T]],
        *,
        limit: int = 50,
        offset: int = 0,
    ) -> SearchResult[T]:
        """Execute paginated search with total count.

        Takes a pre-built statement (with filters and ordering applied) and
        adds offset pagination.

        Args:
            session: Database session
            statement: SQLAlchemy select statement
            limit: Page size
            offset: Results to skip

        Returns:
            SearchResult with items, total count, and pagination info
        """
        count_stmt = select(func.count()).select_from(statement.order_by(None).subquery())
        total = (await session.execute(count_stmt)).scalar_one()

        result = await session.execute(statement.limit(limit).offset(offset))
        items = result.scalars().all()

        search_result = SearchResult(items=items, total=total, limit=limit, offset=offset)
        self._lazy.debug(
            lambda: f"db.search: {self.model.__name__}(limit={limit}, offset={offset}) -> {len(items)}/{total} items, page {search_result.page}/{search_result.pages}"
        )
        return search_result

    async def create(self, session: AsyncSession, instance: T) -> T:
        """Persist a new entity.

        Adds to session, flushes to get generated values (like id),
        and refreshes to ensure instance is up-to-date.
        """
        session.add(instance)
        await session.flush()
        await session.refresh(instance)

        entity_id = getattr(instance, "id", None)
        self._lazy.debug(lambda: f"db.create: {self.model.__name__}(id={entity_id})")
        return instance

    async def create_many(self, session: AsyncSession, instances: Iterable[T]) -> Sequence[T]:
        """Persist multiple entities in insertion order."""
        instances_list = list(instances)
        session.add_all(instances_list)
        await session.flush()

        self._lazy.debug(
            lambda: f"db.create_many: {self.model.__name__} -> {len(instances_list)} created"
        )
        return instances_list


__all__ = [
    "BaseRepository",
    "SearchResult",
]
