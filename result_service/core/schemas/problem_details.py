"""Error envelope schema for error responses."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

DETAIL_MAX_LENGTH = 2000
INSTANCE_MAX_LENGTH = 500


class ProblemDetails(BaseModel):
    """RFC 7807 Problem Details extended with a ``message`` field.

    Every failed request answers with this envelope: ``status`` and
    ``message`` for simple clients, the remaining RFC 7807 fields for
    machine-readable handling.

    See: https://datatracker.ietf.org/doc/html/rfc7807
    """

    type: str = Field(
        default="about:blank",
        min_length=1,
        max_length=200,
        description="URI reference identifying the problem type",
    )
    title: str = Field(
        min_length=1, max_length=200, description="Short, human-readable summary of the problem"
    )
    status: int = Field(ge=100, le=599, description="HTTP status code")
    message: str = Field(description="Human-readable error message")
    detail: str | None = Field(
        default=None,
        max_length=DETAIL_MAX_LENGTH,
        description="Human-readable explanation specific to this occurrence",
    )
    instance: str | None = Field(
        default=None,
        max_length=INSTANCE_MAX_LENGTH,
        description="URI reference identifying the specific occurrence",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "type": "unsupported-format",
                "title": "Bad Request",
                "status": 400,
                "message": "Unsupported export format 'xml'; expected one of: sql, csv, json",
                "detail": "Unsupported export format 'xml'; expected one of: sql, csv, json",
                "instance": "/api/v1/results/export",
            }
        },
    )


class FieldError(BaseModel):
    """A single request field that failed validation."""

    field: str = Field(description="Dotted location of the invalid field")
    message: str = Field(description="Validation error message")
    type: str = Field(description="Validation error type")


class ValidationProblemDetails(ProblemDetails):
    """Problem details for request validation failures."""

    errors: list[FieldError] = Field(default_factory=list, description="Per-field errors")
