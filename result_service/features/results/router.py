"""Result listing REST API endpoint."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from result_service.core.dependencies.database import get_db_session

from .repository import ResultRepository, get_result_repository
from .schemas import ResultPage, ResultRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/results", tags=["results"])


@router.get(
    "",
    response_model=ResultPage,
    summary="List task results",
    description="Page through the stored results of a task, oldest first.",
)
async def list_results(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    repo: Annotated[ResultRepository, Depends(get_result_repository)],
    task_id: Annotated[int, Query(alias="taskId", ge=0, description="Task to list results for")] = 0,
    page: Annotated[int, Query(ge=1, description="Page number (1-indexed)")] = 1,
    page_size: Annotated[
        int, Query(alias="pageSize", ge=1, le=1000, description="Results per page")
    ] = 20,
) -> ResultPage:
    """List results of one task.

    Without a task id the listing is empty; storage is not queried.
    """
    if task_id == 0:
        return ResultPage(page=page, page_size=page_size, total=0)

    found = await repo.browse(session, task_id, page, page_size)
    return ResultPage(
        page=page,
        page_size=page_size,
        total=found.total,
        data=[ResultRead.model_validate(item) for item in found.items],
    )
