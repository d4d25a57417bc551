"""Stored task results: model, browse and cursor queries, listing endpoint."""

from __future__ import annotations

from .models import Result
from .repository import ResultRepository, get_result_repository
from .schemas import ResultPage, ResultRead

__all__ = [
    "Result",
    "ResultPage",
    "ResultRead",
    "ResultRepository",
    "get_result_repository",
]
