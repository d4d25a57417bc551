"""Transient export files and their guaranteed removal."""

from __future__ import annotations

import logging
from pathlib import Path
import re
import secrets
from typing import TYPE_CHECKING, Self

from .exceptions import ExportIOError

if TYPE_CHECKING:
    from types import TracebackType

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^a-z0-9_.-]+")


def safe_name(name: str) -> str:
    """Lowercase ``name`` and replace characters unsafe in file names."""
    cleaned = _UNSAFE_CHARS.sub("_", name.lower()).strip("._")
    return cleaned or "project"


class TransientFileManager:
    """Allocate uniquely named files and delete all of them on cleanup.

    Every allocated path is tracked until it is released or cleaned up.
    Creation is exclusive, so two exports never share a file.

    Example:
        with TransientFileManager(export_dir) as files:
            path = files.allocate("acme-7-1700000000000-ab12cd34.csv")
            ...
        # every allocated file is gone here
    """

    def __init__(self, directory: Path) -> None:
        self.directory = directory
        self._tracked: list[Path] = []

    @property
    def tracked(self) -> tuple[Path, ...]:
        return tuple(self._tracked)

    @staticmethod
    def new_token() -> str:
        """Return a random per-export component for file names."""
        return secrets.token_hex(4)

    def allocate(self, filename: str) -> Path:
        """Create an empty file named ``filename`` and track it.

        Raises:
            ExportIOError: If the directory is unusable or the name is taken.
        """
        path = self.directory / filename
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            path.touch(exist_ok=False)
        except OSError as e:
            raise ExportIOError(
                f"Cannot create export file {filename}", extra={"file": str(path)}
            ) from e

        self._tracked.append(path)
        logger.debug("Allocated export file", extra={"file": str(path)})
        return path

    def release(self, path: Path) -> None:
        """Delete one tracked file early and stop tracking it."""
        self._remove(path)
        if path in self._tracked:
            self._tracked.remove(path)

    def cleanup(self) -> None:
        """Delete every tracked file; missing files are ignored.

        A file that cannot be deleted does not stop the rest from being
        removed. The first such error is raised once every file was tried.
        """
        first_error: OSError | None = None
        while self._tracked:
            try:
                self._remove(self._tracked.pop())
            except OSError as e:
                if first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error

    @staticmethod
    def _remove(path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError:
            logger.exception("Failed to delete export file", extra={"file": str(path)})
            raise

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.cleanup()


__all__ = ["TransientFileManager", "safe_name"]
