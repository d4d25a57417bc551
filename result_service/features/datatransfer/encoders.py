"""Record encoders for result exports.

Provides encoders for SQL, CSV, and JSON-lines. An encoder is chosen once
per export and then fed records page by page; it writes into the page buffer
owned by the ``StreamWriter`` and keeps any format-local state (such as the
CSV header flag) for the whole export.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import csv
import json
import logging
from typing import TYPE_CHECKING, Protocol

from .exceptions import MalformedRecordError
from .schemas import ExportFormat

if TYPE_CHECKING:
    import io

logger = logging.getLogger(__name__)

UTF8_BOM = "\ufeff"


class ResultRecord(Protocol):
    """Anything carrying a result id and its stored payload."""

    id: int
    result: str


def decode_payload(record: ResultRecord) -> list[tuple[str, str]]:
    """Decode a stored payload into field pairs sorted by field name.

    A JSON ``null`` value reads as an empty string.

    Args:
        record: Record whose payload is decoded.

    Returns:
        ``(name, value)`` pairs in ascending name order.

    Raises:
        MalformedRecordError: If the payload is not a JSON object of strings.
    """
    try:
        decoded = json.loads(record.result)
    except (TypeError, ValueError) as e:
        raise MalformedRecordError(record.id, f"invalid JSON ({e})") from e

    if not isinstance(decoded, dict):
        raise MalformedRecordError(record.id, f"expected an object, got {type(decoded).__name__}")

    fields: list[tuple[str, str]] = []
    for name, value in decoded.items():
        if value is None:
            value = ""
        elif not isinstance(value, str):
            raise MalformedRecordError(
                record.id, f"field {name!r} is {type(value).__name__}, expected string"
            )
        fields.append((name, value))

    return sorted(fields)


def escape_sql_value(value: str) -> str:
    """Quote a value as a SQL string literal."""
    escaped = value.replace("'", "''").replace("\\", "\\\\")
    return f"'{escaped}'"


class BaseEncoder(ABC):
    """Base class for record encoders."""

    format: ExportFormat

    def preamble(self) -> str:
        """Text written once at the very start of the export file."""
        return ""

    @abstractmethod
    def encode(self, record: ResultRecord, buffer: io.StringIO) -> bool:
        """Encode one record into the page buffer.

        Args:
            record: Record to encode.
            buffer: Page buffer to append to.

        Returns:
            True if a row was written, False if the record produced no output.
        """
        ...

    @property
    def file_extension(self) -> str:
        """File extension for this format."""
        return self.format.value


class SQLEncoder(BaseEncoder):
    """Encode records as ``insert`` statements into ``t_<project>``."""

    format = ExportFormat.SQL

    def __init__(self, project_name: str) -> None:
        self.table_name = f"t_{project_name.lower()}"

    def encode(self, record: ResultRecord, buffer: io.StringIO) -> bool:
        fields = decode_payload(record)
        if not fields:
            return False

        columns = ",".join(name for name, _ in fields)
        values = ",".join(escape_sql_value(value) for _, value in fields)
        buffer.write(f"insert into {self.table_name}({columns}) values ({values});\n")
        return True


class CSVEncoder(BaseEncoder):
    """Encode records as CSV rows.

    The header row is taken from the first record with at least one field.
    Later records write only their own values in their own sorted field
    order, so rows of a task with varying fields do not line up with the
    header.
    """

    format = ExportFormat.CSV

    def __init__(self) -> None:
        self.header_written = False

    def preamble(self) -> str:
        return UTF8_BOM

    def encode(self, record: ResultRecord, buffer: io.StringIO) -> bool:
        fields = decode_payload(record)
        if not fields:
            return False

        writer = csv.writer(buffer, lineterminator="\n")
        if not self.header_written:
            writer.writerow([name for name, _ in fields])
            self.header_written = True
        writer.writerow([value for _, value in fields])
        return True


class JSONLinesEncoder(BaseEncoder):
    """Emit each stored payload verbatim, one per line."""

    format = ExportFormat.JSON

    def encode(self, record: ResultRecord, buffer: io.StringIO) -> bool:
        decode_payload(record)
        buffer.write(record.result)
        buffer.write("\n")
        return True


def get_encoder(export_format: ExportFormat, project_name: str) -> BaseEncoder:
    """Get the encoder for an export format.

    Args:
        export_format: Parsed export format.
        project_name: Owning project's name (used for the SQL table name).

    Returns:
        A fresh encoder instance for one export.
    """
    if export_format == ExportFormat.SQL:
        return SQLEncoder(project_name)
    if export_format == ExportFormat.CSV:
        return CSVEncoder()
    if export_format == ExportFormat.JSON:
        return JSONLinesEncoder()
    msg = f"No encoder for format: {export_format}"
    raise ValueError(msg)


__all__ = [
    "UTF8_BOM",
    "BaseEncoder",
    "CSVEncoder",
    "JSONLinesEncoder",
    "ResultRecord",
    "SQLEncoder",
    "decode_payload",
    "escape_sql_value",
    "get_encoder",
]
