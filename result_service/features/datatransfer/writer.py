"""Page-buffered writer for export files."""

from __future__ import annotations

import io
import logging
from typing import TYPE_CHECKING, Self

from .exceptions import ExportIOError

if TYPE_CHECKING:
    from pathlib import Path
    from types import TracebackType

logger = logging.getLogger(__name__)


class StreamWriter:
    """Accumulate one page of encoded text and flush it as a single write.

    The in-memory buffer is reused for every page of the export; ``flush``
    writes its contents to the file and resets it in place.

    Example:
        with StreamWriter(path) as writer:
            writer.write_preamble(encoder.preamble())
            for record in page:
                encoder.encode(record, writer.buffer)
            writer.flush()
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self.buffer = io.StringIO()
        try:
            self._file = path.open("w", encoding="utf-8", newline="")
        except OSError as e:
            raise ExportIOError(
                f"Cannot open export file {path.name}", extra={"file": str(path)}
            ) from e

    @property
    def closed(self) -> bool:
        return self._file.closed

    def _write(self, text: str) -> int:
        try:
            written = self._file.write(text)
        except OSError as e:
            raise ExportIOError(
                f"Failed writing export file {self.path.name}", extra={"file": str(self.path)}
            ) from e
        return written

    def write_preamble(self, text: str) -> None:
        """Write text straight to the file, bypassing the page buffer."""
        if text:
            self._write(text)

    def flush(self) -> int:
        """Write the buffered page to the file and reset the buffer.

        Returns:
            Number of characters written.
        """
        text = self.buffer.getvalue()
        written = self._write(text) if text else 0
        self.buffer.seek(0)
        self.buffer.truncate(0)
        return written

    def close(self) -> None:
        """Close the file handle; safe to call more than once."""
        if self._file.closed:
            return
        try:
            self._file.close()
        except OSError as e:
            raise ExportIOError(
                f"Failed closing export file {self.path.name}", extra={"file": str(self.path)}
            ) from e

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
