"""Tests for the export HTTP endpoints."""

from __future__ import annotations

import io
from pathlib import Path
import re
import tarfile

from httpx import AsyncClient
import pytest


@pytest.mark.asyncio
async def test_export_streams_archive_and_removes_it(
    client: AsyncClient, seed_task, export_dir: Path
) -> None:
    task = await seed_task([{"b": "2", "a": "1"}, {"a": "3", "b": "4"}], project_name="Proj")

    response = await client.get(
        "/api/v1/results/export", params={"taskId": task.id, "format": "csv"}
    )

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/gzip"
    assert re.fullmatch(
        rf'attachment; filename="proj-{task.id}-\d{{13}}\.csv\.tar\.gz"',
        response.headers["content-disposition"],
    )
    assert int(response.headers["content-length"]) == len(response.content)
    assert "last-modified" in response.headers
    assert "etag" in response.headers

    with tarfile.open(fileobj=io.BytesIO(response.content), mode="r:gz") as tar:
        (member,) = tar.getmembers()
        handle = tar.extractfile(member)
        assert handle is not None
        assert handle.read().decode("utf-8") == "\ufeffa,b\n1,2\n3,4\n"

    assert list(export_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_export_defaults_to_sql(client: AsyncClient, seed_task) -> None:
    task = await seed_task([{"title": "it's"}], project_name="News")

    response = await client.get("/api/v1/results/export", params={"taskId": task.id})

    assert response.status_code == 200
    assert ".sql.tar.gz" in response.headers["content-disposition"]
    with tarfile.open(fileobj=io.BytesIO(response.content), mode="r:gz") as tar:
        (member,) = tar.getmembers()
        assert member.name.startswith(f"t_news-{task.id}-")
        handle = tar.extractfile(member)
        assert handle is not None
        assert handle.read() == b"insert into t_news(title) values ('it''s');\n"


@pytest.mark.asyncio
async def test_unsupported_format_returns_error_envelope(
    client: AsyncClient, seed_task, export_dir: Path
) -> None:
    task = await seed_task([{"a": "1"}])

    response = await client.get(
        "/api/v1/results/export", params={"taskId": task.id, "format": "xml"}
    )

    assert response.status_code == 400
    body = response.json()
    assert body["status"] == 400
    assert "xml" in body["message"]
    assert body["type"] == "unsupported-format"
    assert not export_dir.exists() or list(export_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_oversized_format_still_returns_error_envelope(
    client: AsyncClient, seed_task
) -> None:
    task = await seed_task([{"a": "1"}])

    response = await client.get(
        "/api/v1/results/export", params={"taskId": task.id, "format": "x" * 600}
    )

    assert response.status_code == 400
    body = response.json()
    assert body["status"] == 400
    assert body["type"] == "unsupported-format"
    assert body["instance"] == "/api/v1/results/export"
    assert len(body["detail"]) <= 2000


@pytest.mark.asyncio
async def test_unknown_task_returns_not_found(client: AsyncClient, seed_task) -> None:
    await seed_task([])

    response = await client.get("/api/v1/results/export", params={"taskId": 9999})

    assert response.status_code == 404
    body = response.json()
    assert body["status"] == 404
    assert body["type"] == "task-not-found"
    assert body["message"] == "Task 9999 does not exist"


@pytest.mark.asyncio
async def test_malformed_result_returns_envelope_and_leaves_no_files(
    client: AsyncClient, seed_task, export_dir: Path
) -> None:
    task = await seed_task([{"a": "1"}, '{"a": 2}'])

    response = await client.get(
        "/api/v1/results/export", params={"taskId": task.id, "format": "json"}
    )

    assert response.status_code == 422
    body = response.json()
    assert body["type"] == "malformed-record"
    assert body["status"] == 422
    assert list(export_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_missing_task_id_is_a_validation_error(client: AsyncClient) -> None:
    response = await client.get("/api/v1/results/export", params={"format": "csv"})

    assert response.status_code == 422
    body = response.json()
    assert body["status"] == 422
    assert body["type"] == "validation-error"
    assert body["errors"][0]["field"] == "query.taskId"


@pytest.mark.asyncio
async def test_supported_formats(client: AsyncClient) -> None:
    response = await client.get("/api/v1/formats")

    assert response.status_code == 200
    assert response.json() == {"export_formats": ["sql", "csv", "json"]}


@pytest.mark.asyncio
async def test_metrics_endpoint_exposes_export_counters(
    client: AsyncClient, seed_task
) -> None:
    task = await seed_task([{"a": "1"}])
    await client.get("/api/v1/results/export", params={"taskId": task.id, "format": "json"})

    response = await client.get("/metrics")

    assert response.status_code == 200
    assert 'export_requests_total{format="json",status="success"}' in response.text
