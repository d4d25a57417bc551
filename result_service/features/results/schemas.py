"""Result browse schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ResultRead(BaseModel):
    """A stored result as returned by the listing endpoint."""

    id: int
    task_id: int = Field(serialization_alias="taskId")
    result: str = Field(description="Stored JSON payload, verbatim")
    created_at: datetime | None = Field(default=None, serialization_alias="createdAt")

    model_config = ConfigDict(from_attributes=True)


class ResultPage(BaseModel):
    """One page of results for a task."""

    page: int = Field(ge=1, description="Current page (1-indexed)")
    page_size: int = Field(ge=1, serialization_alias="pageSize", description="Requested page size")
    total: int = Field(ge=0, description="Total results for the task")
    data: list[ResultRead] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "page": 1,
                "pageSize": 20,
                "total": 1,
                "data": [
                    {
                        "id": 1,
                        "taskId": 7,
                        "result": '{"title":"Hello"}',
                        "createdAt": "2024-01-01T00:00:00Z",
                    }
                ],
            }
        },
    )
