"""Export failure taxonomy.

Every export failure is an ``AppException`` so the application-wide handler
renders it as the standard error envelope. None of these are retried.
"""

from __future__ import annotations

from typing import Any

from result_service.core.exceptions import AppException


class ExportError(AppException):
    """Base class for all export failures."""


class ExportValidationError(ExportError):
    """The request cannot be served: unknown format, task, or project.

    Raised before any temporary resource is allocated.
    """

    @classmethod
    def unsupported_format(cls, value: str, supported: list[str]) -> ExportValidationError:
        return cls(
            status_code=400,
            detail=f"Unsupported export format {value!r}; expected one of: {', '.join(supported)}",
            type="unsupported-format",
            extra={"format": value, "supported": supported},
        )

    @classmethod
    def task_not_found(cls, task_id: int) -> ExportValidationError:
        return cls(
            status_code=404,
            detail=f"Task {task_id} does not exist",
            type="task-not-found",
            extra={"task_id": task_id},
        )

    @classmethod
    def project_not_found(cls, project_id: int) -> ExportValidationError:
        return cls(
            status_code=404,
            detail=f"Project {project_id} does not exist",
            type="project-not-found",
            extra={"project_id": project_id},
        )


class QueryError(ExportError):
    """Storage fault while fetching a page of results."""

    def __init__(self, detail: str, extra: dict[str, Any] | None = None) -> None:
        super().__init__(
            status_code=500,
            detail=detail,
            type="export-query-failed",
            extra=extra,
        )


class MalformedRecordError(ExportError):
    """A stored payload does not decode to a mapping of string fields."""

    def __init__(self, record_id: int, reason: str) -> None:
        self.record_id = record_id
        super().__init__(
            status_code=422,
            detail=f"Result {record_id} has a malformed payload: {reason}",
            type="malformed-record",
            extra={"record_id": record_id},
        )


class ExportIOError(ExportError):
    """Creating or writing a temporary export file failed."""

    def __init__(self, detail: str, extra: dict[str, Any] | None = None) -> None:
        super().__init__(
            status_code=500,
            detail=detail,
            type="export-io-error",
            extra=extra,
        )


class CompressionError(ExportError):
    """Archiving the finished export file failed."""

    def __init__(self, detail: str, extra: dict[str, Any] | None = None) -> None:
        super().__init__(
            status_code=500,
            detail=detail,
            type="export-compression-failed",
            extra=extra,
        )


class ExportCancelledError(ExportError):
    """The client went away before the export finished."""

    def __init__(self, task_id: int) -> None:
        super().__init__(
            status_code=499,
            detail=f"Export of task {task_id} was cancelled by the client",
            type="export-cancelled",
            extra={"task_id": task_id},
        )


__all__ = [
    "CompressionError",
    "ExportCancelledError",
    "ExportError",
    "ExportIOError",
    "ExportValidationError",
    "MalformedRecordError",
    "QueryError",
]
