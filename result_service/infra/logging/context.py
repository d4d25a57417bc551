"""Context management for structured logging.

Provides automatic context injection into log records using contextvars,
so request ids and export identifiers are attached to every log message
without explicit passing.

Each asyncio task gets its own copy of the context, which keeps concurrent
exports from leaking fields into each other's logs.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
import logging
from typing import Any

# Each async task gets its own copy automatically
_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})


def set_log_context(**kwargs: Any) -> None:
    """Set logging context for current async task/thread.

    All subsequent log calls in this context will automatically include
    these fields in the log record.

    Args:
        **kwargs: Key-value pairs to add to logging context.
            Common examples: request_id, task_id, export_format

    Example:
        ```python
        set_log_context(request_id="abc-123", task_id=42)
        logger.info("Exporting page 1")  # Includes request_id and task_id
        ```
    """
    current = _log_context.get().copy()
    current.update(kwargs)
    _log_context.set(current)


def get_log_context() -> dict[str, Any]:
    """Get a copy of the current logging context."""
    return _log_context.get().copy()


def clear_log_context() -> None:
    """Clear all logging context for current async task/thread."""
    _log_context.set({})


def remove_from_log_context(*keys: str) -> None:
    """Remove specific keys from logging context.

    Args:
        *keys: Keys to remove from context.
    """
    current = _log_context.get().copy()
    for key in keys:
        current.pop(key, None)
    _log_context.set(current)


@contextmanager
def log_context(**kwargs: Any) -> Iterator[None]:
    """Temporarily bind fields to the logging context.

    Restores the previous context on exit, including on error.

    Example:
        ```python
        with log_context(task_id=7, export_format="csv"):
            logger.info("Export started")
        ```
    """
    token = _log_context.set({**_log_context.get(), **kwargs})
    try:
        yield
    finally:
        _log_context.reset(token)


class ContextInjectingFilter(logging.Filter):
    """Logging filter that automatically injects context into LogRecord.

    Reads from the contextvars-based log context and adds all context
    fields to the LogRecord, making them available to formatters
    (especially JSONFormatter).
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Inject context into log record.

        Args:
            record: The log record to enhance with context.

        Returns:
            True (always allow the record to be logged).
        """
        for key, value in _log_context.get().items():
            # Don't overwrite existing attributes
            if not hasattr(record, key):
                setattr(record, key, value)

        return True
