"""Result export service.

Drives one export end to end: validate the request against task and project
metadata, drain the task's results page by page through an encoder into a
transient file, compress that file, and hand back an artifact that deletes
itself once it has been served.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
import logging
import time
from typing import TYPE_CHECKING, Protocol

from result_service.core.settings import get_datatransfer_settings
from result_service.features.projects.repository import (
    ProjectRepository,
    TaskRepository,
    get_project_repository,
    get_task_repository,
)
from result_service.features.results.repository import (
    ResultRepository,
    get_result_repository,
)
from result_service.infra.logging import log_context
from result_service.infra.metrics import prometheus as metrics

from .archiver import Archiver
from .encoders import BaseEncoder, get_encoder
from .exceptions import ExportCancelledError, ExportError, ExportIOError, ExportValidationError
from .paginator import CursorPaginator, ResultExportQuery
from .schemas import ExportFormat, ExportRequest, ExportState
from .tempfiles import TransientFileManager, safe_name
from .writer import StreamWriter

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from sqlalchemy.ext.asyncio import AsyncSession

    from result_service.core.settings import DataTransferSettings

    from .encoders import ResultRecord

logger = logging.getLogger(__name__)

ARCHIVE_MEDIA_TYPE = "application/gzip"

CancellationCheck = Callable[[], Awaitable[bool]]


class TaskLike(Protocol):
    id: int
    project_id: int


class ProjectLike(Protocol):
    id: int
    name: str

    def get_int_setting(self, key: str, default: int) -> int: ...


class TaskLookup(Protocol):
    async def get_task(self, task_id: int) -> TaskLike | None: ...


class ProjectLookup(Protocol):
    async def get_project(self, project_id: int) -> ProjectLike | None: ...


class SessionExportSources:
    """Bind the result, task, and project repositories to one session.

    Satisfies ``ResultExportQuery``, ``TaskLookup`` and ``ProjectLookup``.
    """

    def __init__(
        self,
        session: AsyncSession,
        results: ResultRepository | None = None,
        tasks: TaskRepository | None = None,
        projects: ProjectRepository | None = None,
    ) -> None:
        self.session = session
        self.results = results or get_result_repository()
        self.tasks = tasks or get_task_repository()
        self.projects = projects or get_project_repository()

    async def fetch_after(
        self, task_id: int, after_id: int, page_size: int
    ) -> Sequence[ResultRecord]:
        return await self.results.fetch_after(self.session, task_id, after_id, page_size)

    async def get_task(self, task_id: int) -> TaskLike | None:
        return await self.tasks.get(self.session, task_id)

    async def get_project(self, project_id: int) -> ProjectLike | None:
        return await self.projects.get(self.session, project_id)


@dataclass(slots=True)
class ExportContext:
    """Mutable state of one export, owned by the orchestrator."""

    task_id: int
    requested_format: str
    state: ExportState = ExportState.VALIDATING
    format: ExportFormat | None = None
    project_name: str = ""
    page_size: int = 0
    timestamp_ms: int = field(default_factory=lambda: int(datetime.now(UTC).timestamp() * 1000))
    cursor: int = 0
    page_number: int = 0
    records: int = 0
    rows: int = 0
    encoder: BaseEncoder | None = None

    @property
    def format_label(self) -> str:
        return self.format.value if self.format else "unsupported"


@dataclass(slots=True)
class ExportArtifact:
    """A finished archive ready to be served.

    The archive is transient: ``close()`` deletes it and must be called once
    the response has been sent or has failed.
    """

    path: Path
    download_name: str
    size: int
    last_modified: float
    context: ExportContext
    files: TransientFileManager
    media_type: str = ARCHIVE_MEDIA_TYPE

    def close(self) -> None:
        """Delete the archive; safe to call more than once."""
        self.files.cleanup()
        if self.context.state == ExportState.SERVING:
            self.context.state = ExportState.DONE
            logger.debug(
                "Export artifact released",
                extra={"task_id": self.context.task_id, "file": str(self.path)},
            )


class ExportOrchestrator:
    """Run exports of a task's results.

    Example:
        orchestrator = ExportOrchestrator(sources, sources, sources)
        artifact = await orchestrator.export(ExportRequest(task_id=7, format="csv"))
        try:
            upload(artifact.path)
        finally:
            artifact.close()
    """

    def __init__(
        self,
        results: ResultExportQuery,
        tasks: TaskLookup,
        projects: ProjectLookup,
        settings: DataTransferSettings | None = None,
        archiver: Archiver | None = None,
    ) -> None:
        self.settings = settings or get_datatransfer_settings()
        self.paginator = CursorPaginator(results)
        self.tasks = tasks
        self.projects = projects
        self.archiver = archiver or Archiver(self.settings.compression_level)

    async def export(
        self,
        request: ExportRequest,
        *,
        is_cancelled: CancellationCheck | None = None,
    ) -> ExportArtifact:
        """Export every result of a task as a compressed archive.

        Args:
            request: Task and format to export.
            is_cancelled: Polled before each page fetch and before
                compression; a True result aborts the export.

        Returns:
            The archive to serve. The caller owns it and must close it.

        Raises:
            ExportError: Any validation, query, decode, I/O, compression, or
                cancellation failure. No file is left behind.
        """
        context = ExportContext(task_id=request.task_id, requested_format=request.format)
        files: TransientFileManager | None = None
        started = time.perf_counter()

        with log_context(task_id=request.task_id, export_format=request.format):
            try:
                await self._validate(request, context)

                try:
                    export_dir = self.settings.ensure_export_dir()
                except OSError as e:
                    raise ExportIOError(
                        "Export directory is not usable",
                        extra={"export_dir": self.settings.export_dir},
                    ) from e
                files = TransientFileManager(export_dir)

                data_path, arcname = self._allocate_data_file(files, context)
                await self._drain(context, data_path, is_cancelled)
                artifact = await self._compress(context, files, data_path, arcname, is_cancelled)
            except ExportCancelledError:
                failed_in = self._fail(context, files, status="cancelled")
                logger.info(
                    "Export cancelled by client",
                    extra={"state": failed_in, "page": context.page_number},
                )
                raise
            except ExportError as e:
                failed_in = self._fail(context, files)
                logger.warning(
                    "Export failed: %s",
                    e.detail,
                    extra={"state": failed_in, "error_type": e.type, "page": context.page_number},
                )
                raise
            except asyncio.CancelledError:
                failed_in = self._fail(context, files, status="cancelled")
                logger.info(
                    "Export task cancelled",
                    extra={"state": failed_in, "page": context.page_number},
                )
                raise
            except BaseException:
                failed_in = self._fail(context, files)
                logger.exception(
                    "Export failed unexpectedly",
                    extra={"state": failed_in, "page": context.page_number},
                )
                raise

            duration = time.perf_counter() - started
            metrics.export_requests_total.labels(format=context.format_label, status="success").inc()
            metrics.export_duration_seconds.labels(format=context.format_label).observe(duration)
            metrics.export_archive_bytes.labels(format=context.format_label).observe(artifact.size)
            logger.info(
                "Export completed",
                extra={
                    "records": context.records,
                    "rows": context.rows,
                    "pages": context.page_number,
                    "size_bytes": artifact.size,
                    "duration_seconds": round(duration, 3),
                },
            )
            return artifact

    async def _validate(self, request: ExportRequest, context: ExportContext) -> None:
        context.state = ExportState.VALIDATING
        context.format = ExportFormat.parse(request.format)

        task = await self.tasks.get_task(request.task_id)
        if task is None:
            raise ExportValidationError.task_not_found(request.task_id)

        project = await self.projects.get_project(task.project_id)
        if project is None:
            raise ExportValidationError.project_not_found(task.project_id)

        configured = project.get_int_setting(
            self.settings.page_size_setting_key, self.settings.default_page_size
        )
        context.page_size = self.settings.clamp_page_size(configured)
        context.project_name = project.name
        context.encoder = get_encoder(context.format, project.name)

    def _allocate_data_file(
        self, files: TransientFileManager, context: ExportContext
    ) -> tuple[Path, str]:
        assert context.format is not None
        prefix = "t_" if context.format == ExportFormat.SQL else ""
        stem = f"{prefix}{safe_name(context.project_name)}-{context.task_id}-{context.timestamp_ms}"
        extension = context.format.value
        path = files.allocate(f"{stem}-{files.new_token()}.{extension}")
        return path, f"{stem}.{extension}"

    async def _drain(
        self,
        context: ExportContext,
        data_path: Path,
        is_cancelled: CancellationCheck | None,
    ) -> None:
        encoder = context.encoder
        assert encoder is not None
        label = context.format_label

        with StreamWriter(data_path) as writer:
            writer.write_preamble(encoder.preamble())
            while True:
                await self._check_cancelled(context, is_cancelled)

                context.state = ExportState.PAGINATING
                context.page_number += 1
                logger.info(
                    "Exporting page %d",
                    context.page_number,
                    extra={"after_id": context.cursor, "page_size": context.page_size},
                )
                page = await self.paginator.fetch_next_page(
                    context.task_id, context.cursor, context.page_size
                )
                metrics.export_pages_total.labels(format=label).inc()

                context.state = ExportState.ENCODING
                for record in page:
                    if encoder.encode(record, writer.buffer):
                        context.rows += 1
                context.records += len(page)
                metrics.export_records_total.labels(format=label).inc(len(page))

                context.state = ExportState.FLUSHING
                written = writer.flush()
                logger.debug(
                    "Flushed page %d",
                    context.page_number,
                    extra={"records": len(page), "chars": written},
                )

                context.cursor = self.paginator.advance(context.cursor, page)
                if self.paginator.is_exhausted(page, context.page_size):
                    break

    async def _compress(
        self,
        context: ExportContext,
        files: TransientFileManager,
        data_path: Path,
        arcname: str,
        is_cancelled: CancellationCheck | None,
    ) -> ExportArtifact:
        await self._check_cancelled(context, is_cancelled)

        context.state = ExportState.COMPRESSING
        archive_path = files.allocate(f"{data_path.name}.tar.gz")
        size = await self.archiver.archive(data_path, archive_path, arcname)
        files.release(data_path)

        context.state = ExportState.SERVING
        return ExportArtifact(
            path=archive_path,
            download_name=(
                f"{safe_name(context.project_name)}-{context.task_id}-"
                f"{context.timestamp_ms}.{context.format_label}.tar.gz"
            ),
            size=size,
            last_modified=archive_path.stat().st_mtime,
            context=context,
            files=files,
        )

    @staticmethod
    async def _check_cancelled(
        context: ExportContext, is_cancelled: CancellationCheck | None
    ) -> None:
        if is_cancelled is not None and await is_cancelled():
            raise ExportCancelledError(context.task_id)

    @staticmethod
    def _fail(
        context: ExportContext, files: TransientFileManager | None, status: str = "failed"
    ) -> ExportState:
        failed_in = context.state
        context.state = ExportState.FAILED
        metrics.export_requests_total.labels(format=context.format_label, status=status).inc()
        if files is not None:
            try:
                files.cleanup()
            except OSError:
                # Each failed delete is already logged; the export error wins.
                logger.warning(
                    "Export files left behind after failure",
                    extra={"state": failed_in, "export_dir": str(files.directory)},
                )
        return failed_in


def get_export_orchestrator(session: AsyncSession) -> ExportOrchestrator:
    """Build an orchestrator whose collaborators share ``session``."""
    sources = SessionExportSources(session)
    return ExportOrchestrator(results=sources, tasks=sources, projects=sources)


__all__ = [
    "ARCHIVE_MEDIA_TYPE",
    "ExportArtifact",
    "ExportContext",
    "ExportOrchestrator",
    "ProjectLookup",
    "SessionExportSources",
    "TaskLookup",
    "get_export_orchestrator",
]
