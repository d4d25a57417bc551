"""Logging infrastructure.

Provides structured logging with:
- JSONL format for log aggregation
- Automatic context injection (request_id, task_id, ...)
- QueueHandler + QueueListener for non-blocking I/O
- Lazy evaluation for expensive debug messages

Basic usage:
    from result_service.infra.logging import log_context
    import logging

    logger = logging.getLogger(__name__)

    with log_context(task_id=7, export_format="csv"):
        logger.info("Exporting page 1")  # Includes task_id and export_format
"""

from result_service.infra.logging.config import configure_logging, setup_logging, shutdown
from result_service.infra.logging.context import (
    ContextInjectingFilter,
    clear_log_context,
    get_log_context,
    log_context,
    remove_from_log_context,
    set_log_context,
)
from result_service.infra.logging.formatters import JSONFormatter
from result_service.infra.logging.lazy import LazyLoggerAdapter, get_lazy_logger

__all__ = [
    "ContextInjectingFilter",
    "JSONFormatter",
    "LazyLoggerAdapter",
    "clear_log_context",
    "configure_logging",
    "get_lazy_logger",
    "get_log_context",
    "log_context",
    "remove_from_log_context",
    "set_log_context",
    "setup_logging",
    "shutdown",
]
