"""Tests for ResultRepository queries."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from result_service.features.results.repository import (
    ResultRepository,
    get_result_repository,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


@pytest.fixture
def repository() -> ResultRepository:
    return ResultRepository()


@pytest.mark.asyncio
async def test_fetch_after_is_bounded_and_exclusive(
    db_session: AsyncSession, seed_task, repository: ResultRepository
) -> None:
    task = await seed_task([{"n": str(i)} for i in range(5)])
    first_id = (await repository.fetch_after(db_session, task.id, 0, 1))[0].id

    page = await repository.fetch_after(db_session, task.id, first_id, 2)

    assert [r.id for r in page] == [first_id + 1, first_id + 2]


@pytest.mark.asyncio
async def test_fetch_after_ignores_other_tasks(
    db_session: AsyncSession, seed_task, repository: ResultRepository
) -> None:
    task_a = await seed_task([{"n": "a1"}, {"n": "a2"}], project_name="A")
    await seed_task([{"n": "b1"}], project_name="B")

    page = await repository.fetch_after(db_session, task_a.id, 0, 10)

    assert [r.task_id for r in page] == [task_a.id, task_a.id]


@pytest.mark.asyncio
async def test_cursor_pages_match_browse_order(
    db_session: AsyncSession, seed_task, repository: ResultRepository
) -> None:
    task = await seed_task([{"n": str(i)} for i in range(7)], project_name="A")
    await seed_task([{"n": "other"}], project_name="B")

    drained: list[int] = []
    cursor = 0
    while True:
        page = await repository.fetch_after(db_session, task.id, cursor, 3)
        drained.extend(r.id for r in page)
        if len(page) < 3:
            break
        cursor = page[-1].id

    browsed = await repository.browse(db_session, task.id, page=1, page_size=100)

    assert drained == [r.id for r in browsed.items]
    assert drained == sorted(set(drained))


@pytest.mark.asyncio
async def test_browse_reports_total_and_pages(
    db_session: AsyncSession, seed_task, repository: ResultRepository
) -> None:
    task = await seed_task([{"n": str(i)} for i in range(5)])

    second = await repository.browse(db_session, task.id, page=2, page_size=2)

    assert second.total == 5
    assert second.page == 2
    assert second.pages == 3
    assert [r.result for r in second.items] == ['{"n": "2"}', '{"n": "3"}']
    assert second.has_next is True


def test_get_result_repository_returns_singleton() -> None:
    assert get_result_repository() is get_result_repository()
