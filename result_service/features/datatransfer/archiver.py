"""Single-entry tar.gz archiving of finished export files."""

from __future__ import annotations

import asyncio
import logging
import tarfile
from typing import TYPE_CHECKING
import zlib

from .exceptions import CompressionError

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


class Archiver:
    """Compress one closed file into a gzip-compressed tar archive."""

    def __init__(self, compression_level: int = 6) -> None:
        self.compression_level = compression_level

    def archive_sync(self, source: Path, destination: Path, arcname: str) -> int:
        """Write ``source`` into ``destination`` as its only member.

        Args:
            source: Finished, closed export file.
            destination: Archive path; an existing file is overwritten.
            arcname: Name of the member inside the archive.

        Returns:
            Size of the archive in bytes.

        Raises:
            CompressionError: If reading the source or writing the archive fails.
        """
        try:
            with tarfile.open(
                destination, "w:gz", compresslevel=self.compression_level
            ) as tar:
                tar.add(source, arcname=arcname, recursive=False)
            size = destination.stat().st_size
        except (OSError, tarfile.TarError, zlib.error) as e:
            logger.exception(
                "Export compression failed",
                extra={"source": str(source), "destination": str(destination)},
            )
            raise CompressionError(
                f"Failed to compress {arcname}", extra={"file": str(destination)}
            ) from e

        logger.debug(
            "Export archived",
            extra={"source": str(source), "destination": str(destination), "size_bytes": size},
        )
        return size

    async def archive(self, source: Path, destination: Path, arcname: str) -> int:
        """Archive in a worker thread so the event loop keeps serving."""
        return await asyncio.to_thread(self.archive_sync, source, destination, arcname)


__all__ = ["Archiver"]
