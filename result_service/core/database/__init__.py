"""Database models base classes and repository helpers."""

from result_service.core.database.base import (
    Base,
    CreatedAtMixin,
    IntegerPKMixin,
    TimestampMixin,
)
from result_service.core.database.repository import BaseRepository, SearchResult

__all__ = [
    "Base",
    "BaseRepository",
    "CreatedAtMixin",
    "IntegerPKMixin",
    "SearchResult",
    "TimestampMixin",
]
