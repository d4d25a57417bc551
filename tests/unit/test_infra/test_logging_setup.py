"""Tests for logging context propagation and formatting."""

from __future__ import annotations

import asyncio
import json
import logging
from logging.handlers import QueueHandler

import pytest

from result_service.infra.logging import (
    ContextInjectingFilter,
    JSONFormatter,
    clear_log_context,
    configure_logging,
    get_lazy_logger,
    get_log_context,
    log_context,
    remove_from_log_context,
    set_log_context,
    shutdown,
)


def _record(msg: str = "Exporting page %d", *args: object, **extra: object) -> logging.LogRecord:
    record = logging.LogRecord("result_service.test", logging.INFO, __file__, 1, msg, args, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture(autouse=True)
def _clean_context():
    clear_log_context()
    yield
    clear_log_context()


def test_log_context_is_scoped() -> None:
    set_log_context(request_id="abc")

    with log_context(task_id=7, export_format="csv"):
        assert get_log_context() == {"request_id": "abc", "task_id": 7, "export_format": "csv"}

    assert get_log_context() == {"request_id": "abc"}
    remove_from_log_context("request_id")
    assert get_log_context() == {}


@pytest.mark.asyncio
async def test_concurrent_tasks_keep_separate_context() -> None:
    async def bound(task_id: int) -> dict:
        with log_context(task_id=task_id):
            await asyncio.sleep(0)
            return get_log_context()

    first, second = await asyncio.gather(bound(1), bound(2))

    assert first == {"task_id": 1}
    assert second == {"task_id": 2}


def test_filter_injects_context_without_overwriting() -> None:
    record = _record(task_id=99)

    with log_context(task_id=7, export_format="json"):
        assert ContextInjectingFilter().filter(record) is True

    assert record.task_id == 99
    assert record.export_format == "json"


def test_json_formatter_emits_one_line_with_extras() -> None:
    formatter = JSONFormatter(static={"service": "result-service"})

    line = formatter.format(_record("Exporting page %d", 3, task_id=7))

    assert "\n" not in line
    data = json.loads(line)
    assert data["message"] == "Exporting page 3"
    assert data["level"] == "INFO"
    assert data["service"] == "result-service"
    assert data["task_id"] == 7
    assert data["timestamp"].endswith("Z")


def test_json_formatter_keeps_tracebacks_on_one_line() -> None:
    try:
        raise ValueError("bad payload")
    except ValueError:
        import sys

        record = logging.LogRecord(
            "result_service.test", logging.ERROR, __file__, 1, "failed", (), sys.exc_info()
        )

    line = JSONFormatter().format(record)

    assert "\n" not in line
    assert "ValueError: bad payload" in json.loads(line)["exception"]


def test_configure_logging_installs_single_queue_handler(tmp_path) -> None:
    root = logging.getLogger()
    log_file = tmp_path / "logs" / "service.jsonl"
    try:
        configure_logging(log_level="debug", file_path=log_file, console_enabled=False)
        configure_logging(log_level="debug", file_path=log_file, console_enabled=False)

        queue_handlers = [h for h in root.handlers if isinstance(h, QueueHandler)]
        assert len(queue_handlers) == 1
        assert any(isinstance(f, ContextInjectingFilter) for f in queue_handlers[0].filters)
        assert root.level == logging.DEBUG

        with log_context(task_id=5):
            logging.getLogger("result_service.features").info("Export finished")
    finally:
        shutdown()

    assert not any(isinstance(h, QueueHandler) for h in root.handlers)
    lines = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    finished = [line for line in lines if line["message"] == "Export finished"]
    assert finished[0]["task_id"] == 5
    assert finished[0]["logger"] == "result_service.features"


def test_lazy_logger_skips_disabled_levels() -> None:
    calls: list[int] = []
    lazy = get_lazy_logger("result_service.lazy_test")
    lazy.logger.setLevel(logging.INFO)

    lazy.debug(lambda: calls.append(1) or "expensive")

    assert calls == []
