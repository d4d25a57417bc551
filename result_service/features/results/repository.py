"""Repository for stored task results.

Two read paths share this repository:

- ``browse`` pages through a task's results with offset pagination and a
  total count, for the listing endpoint.
- ``fetch_after`` reads an ascending, bounded batch strictly after a cursor
  id, for exports that drain every result of a task.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select

from result_service.core.database.repository import BaseRepository, SearchResult
from result_service.features.results.models import Result

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession


class ResultRepository(BaseRepository[Result]):
    """Repository for Result model."""

    def __init__(self) -> None:
        super().__init__(Result)

    async def fetch_after(
        self,
        session: AsyncSession,
        task_id: int,
        after_id: int,
        page_size: int,
    ) -> Sequence[Result]:
        """Fetch up to ``page_size`` results with ``id > after_id``, ascending.

        Args:
            session: Database session
            task_id: Owning task
            after_id: Exclusive lower bound on result id (0 for the first page)
            page_size: Maximum number of results to return

        Returns:
            Results ordered by id ascending
        """
        stmt = (
            select(Result)
            .where(Result.task_id == task_id, Result.id > after_id)
            .order_by(Result.id.asc())
            .limit(page_size)
        )
        result = await session.execute(stmt)
        items = result.scalars().all()

        self._lazy.debug(
            lambda: f"db.fetch_after(task_id={task_id}, after_id={after_id}, page_size={page_size}) -> {len(items)} items"
        )
        return items

    async def browse(
        self,
        session: AsyncSession,
        task_id: int,
        page: int,
        page_size: int,
    ) -> SearchResult[Result]:
        """Fetch one offset page of a task's results with the total count.

        Args:
            session: Database session
            task_id: Owning task
            page: 1-indexed page number
            page_size: Results per page
        """
        stmt = select(Result).where(Result.task_id == task_id).order_by(Result.id.asc())
        return await self.search(
            session,
            stmt,
            limit=page_size,
            offset=(page - 1) * page_size,
        )


_result_repository: ResultRepository | None = None


def get_result_repository() -> ResultRepository:
    """Get the shared ResultRepository instance.

    Usage in FastAPI routes:
        @router.get("/results")
        async def list_results(
            session: AsyncSession = Depends(get_db_session),
            repo: ResultRepository = Depends(get_result_repository),
        ):
            return await repo.browse(session, task_id, 1, 20)
    """
    global _result_repository
    if _result_repository is None:
        _result_repository = ResultRepository()
    return _result_repository
