"""Data transfer schemas for result exports."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field

from .exceptions import ExportValidationError


class ExportFormat(StrEnum):
    """Supported export formats."""

    SQL = "sql"
    CSV = "csv"
    JSON = "json"

    @classmethod
    def parse(cls, value: str) -> ExportFormat:
        """Resolve a user-supplied format name.

        Matching ignores case and surrounding whitespace.

        Raises:
            ExportValidationError: If the format is not supported.
        """
        normalized = value.strip().lower()
        try:
            return cls(normalized)
        except ValueError:
            raise ExportValidationError.unsupported_format(
                value, [member.value for member in cls]
            ) from None


class ExportState(StrEnum):
    """Lifecycle of a single export."""

    VALIDATING = "validating"
    PAGINATING = "paginating"
    ENCODING = "encoding"
    FLUSHING = "flushing"
    COMPRESSING = "compressing"
    SERVING = "serving"
    DONE = "done"
    FAILED = "failed"


class ExportRequest(BaseModel):
    """Request to export every result of a task."""

    task_id: int = Field(ge=1, description="Task whose results are exported")
    format: str = Field(default=ExportFormat.SQL.value, description="Export format name")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"task_id": 42, "format": "csv"},
                {"task_id": 42, "format": "json"},
            ],
        },
    }


class SupportedFormatsResponse(BaseModel):
    """Response listing supported export formats."""

    export_formats: list[str] = Field(
        default_factory=lambda: [f.value for f in ExportFormat],
        description="Supported export formats",
    )
