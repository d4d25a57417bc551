"""Result export feature.

Drains a task's stored results through a format encoder into a transient
file, compresses it into a tar.gz archive, and serves it as a download.

Example:
    from result_service.features.datatransfer import ExportRequest, get_export_orchestrator

    orchestrator = get_export_orchestrator(session)
    artifact = await orchestrator.export(ExportRequest(task_id=7, format="csv"))
"""

from __future__ import annotations

from .archiver import Archiver
from .encoders import CSVEncoder, JSONLinesEncoder, SQLEncoder, decode_payload, get_encoder
from .exceptions import (
    CompressionError,
    ExportCancelledError,
    ExportError,
    ExportIOError,
    ExportValidationError,
    MalformedRecordError,
    QueryError,
)
from .paginator import CursorPaginator
from .router import router
from .schemas import ExportFormat, ExportRequest, ExportState
from .service import (
    ExportArtifact,
    ExportContext,
    ExportOrchestrator,
    SessionExportSources,
    get_export_orchestrator,
)
from .tempfiles import TransientFileManager
from .writer import StreamWriter

__all__ = [
    "Archiver",
    "CSVEncoder",
    "CompressionError",
    "CursorPaginator",
    "ExportArtifact",
    "ExportCancelledError",
    "ExportContext",
    "ExportError",
    "ExportFormat",
    "ExportIOError",
    "ExportOrchestrator",
    "ExportRequest",
    "ExportState",
    "ExportValidationError",
    "JSONLinesEncoder",
    "MalformedRecordError",
    "QueryError",
    "SQLEncoder",
    "SessionExportSources",
    "StreamWriter",
    "TransientFileManager",
    "decode_payload",
    "get_encoder",
    "get_export_orchestrator",
    "router",
]
