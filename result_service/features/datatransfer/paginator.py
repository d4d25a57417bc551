"""Cursor pagination over a task's results.

Pages are fetched with an exclusive lower bound on the result id. A page
shorter than the requested size ends the export, so a task whose result count
is an exact multiple of the page size needs one extra fetch that comes back
empty.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from sqlalchemy.exc import SQLAlchemyError

from .exceptions import QueryError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .encoders import ResultRecord

logger = logging.getLogger(__name__)


class ResultExportQuery(Protocol):
    """Fetch up to ``page_size`` results of a task with ``id > after_id``, ascending."""

    async def fetch_after(
        self, task_id: int, after_id: int, page_size: int
    ) -> Sequence[ResultRecord]: ...


class CursorPaginator:
    """Fetch ascending, bounded pages of a task's results."""

    def __init__(self, query: ResultExportQuery) -> None:
        self._query = query

    async def fetch_next_page(
        self, task_id: int, after_id: int, page_size: int
    ) -> Sequence[ResultRecord]:
        """Fetch the page following ``after_id``.

        Args:
            task_id: Task whose results are fetched.
            after_id: Cursor; 0 for the first page.
            page_size: Maximum number of records.

        Returns:
            Records ordered by ascending id.

        Raises:
            QueryError: On any storage fault, or if the page does not move
                strictly past the cursor.
        """
        try:
            page = await self._query.fetch_after(task_id, after_id, page_size)
        except (SQLAlchemyError, OSError) as e:
            logger.exception(
                "Result page fetch failed",
                extra={"task_id": task_id, "after_id": after_id, "page_size": page_size},
            )
            raise QueryError(
                f"Failed to fetch results of task {task_id} after id {after_id}",
                extra={"task_id": task_id, "after_id": after_id},
            ) from e

        self._check_order(task_id, after_id, page)
        return page

    @staticmethod
    def _check_order(task_id: int, after_id: int, page: Sequence[ResultRecord]) -> None:
        previous = after_id
        for record in page:
            if record.id <= previous:
                raise QueryError(
                    f"Results of task {task_id} are not ordered past cursor {after_id}",
                    extra={"task_id": task_id, "after_id": after_id, "record_id": record.id},
                )
            previous = record.id

    @staticmethod
    def advance(cursor: int, page: Sequence[ResultRecord]) -> int:
        """Return the cursor for the next fetch; unchanged for an empty page."""
        if not page:
            return cursor
        return page[-1].id

    @staticmethod
    def is_exhausted(page: Sequence[ResultRecord], page_size: int) -> bool:
        """Return True if ``page`` is the last page."""
        return len(page) < page_size


__all__ = ["CursorPaginator", "ResultExportQuery"]
