"""Modular Pydantic Settings v2 configuration.

Settings are split by domain (app/db/logging/datatransfer), read from
environment variables (and a local .env file), frozen after validation and
served through LRU-cached loaders:

    from result_service.core.settings import get_datatransfer_settings

    settings = get_datatransfer_settings()
    print(settings.default_page_size)
"""

from __future__ import annotations

from .app import AppSettings
from .database import DatabaseSettings
from .datatransfer import DataTransferSettings
from .loader import (
    clear_all_caches,
    get_app_settings,
    get_datatransfer_settings,
    get_db_settings,
    get_logging_settings,
)
from .logs import LoggingSettings

__all__ = [
    "AppSettings",
    "DataTransferSettings",
    "DatabaseSettings",
    "LoggingSettings",
    "clear_all_caches",
    "get_app_settings",
    "get_datatransfer_settings",
    "get_db_settings",
    "get_logging_settings",
]
