"""Result export REST API endpoints."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Annotated

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from result_service.core.dependencies.database import get_db_session
from result_service.core.schemas import ProblemDetails

from .schemas import ExportRequest, SupportedFormatsResponse
from .service import ExportArtifact, ExportOrchestrator, get_export_orchestrator

if TYPE_CHECKING:
    from starlette.types import Receive, Scope, Send

logger = logging.getLogger(__name__)

router = APIRouter(tags=["data-transfer"])


class ExportFileResponse(FileResponse):
    """File response that deletes the export archive once it has been sent.

    Cleanup also runs when sending fails or the client disconnects.
    """

    def __init__(self, artifact: ExportArtifact) -> None:
        super().__init__(
            artifact.path,
            media_type=artifact.media_type,
            filename=artifact.download_name,
        )
        self.artifact = artifact

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await super().__call__(scope, receive, send)
        finally:
            self.artifact.close()


async def get_orchestrator(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> ExportOrchestrator:
    """Provide an export orchestrator bound to the request's session."""
    return get_export_orchestrator(session)


@router.get(
    "/results/export",
    summary="Export task results",
    description=(
        "Export every result of a task as a single-entry tar.gz archive "
        "containing SQL inserts, CSV rows, or JSON lines."
    ),
    response_class=FileResponse,
    responses={
        200: {"content": {"application/gzip": {}}, "description": "Export archive"},
        400: {"model": ProblemDetails, "description": "Unsupported format"},
        404: {"model": ProblemDetails, "description": "Task or project not found"},
        422: {"model": ProblemDetails, "description": "Malformed stored result"},
        500: {"model": ProblemDetails, "description": "Query, I/O, or compression failure"},
    },
)
async def export_results(
    request: Request,
    orchestrator: Annotated[ExportOrchestrator, Depends(get_orchestrator)],
    task_id: Annotated[int, Query(alias="taskId", ge=1, description="Task to export")],
    format: Annotated[str, Query(description="Export format: sql, csv, or json")] = "sql",  # noqa: A002
) -> ExportFileResponse:
    """Export and download all results of a task.

    The archive is built on disk, streamed with range and conditional
    request support, then deleted.
    """
    artifact = await orchestrator.export(
        ExportRequest(task_id=task_id, format=format),
        is_cancelled=request.is_disconnected,
    )

    logger.info(
        "Serving export",
        extra={
            "task_id": task_id,
            "format": artifact.context.format_label,
            "download_name": artifact.download_name,
            "size_bytes": artifact.size,
        },
    )
    return ExportFileResponse(artifact)


@router.get(
    "/formats",
    response_model=SupportedFormatsResponse,
    summary="Get supported export formats",
)
async def get_supported_formats() -> SupportedFormatsResponse:
    """Get list of supported export formats."""
    return SupportedFormatsResponse()
