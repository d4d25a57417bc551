"""Data transfer configuration settings.

Environment variables use DATATRANSFER_ prefix.
Example: DATATRANSFER_EXPORT_DIR="/data/exports"
         DATATRANSFER_DEFAULT_PAGE_SIZE=500
"""

from __future__ import annotations

from pathlib import Path
from tempfile import gettempdir

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_EXPORT_DIR = Path(gettempdir()) / "result_service_exports"


class DataTransferSettings(BaseSettings):
    """Result export settings.

    Environment variables use DATATRANSFER_ prefix.
    Example: DATATRANSFER_EXPORT_DIR=/data/exports

    This module provides configuration for:
    - Location of transient export artifacts
    - Page size used when draining results
    - Archive compression level
    """

    # ──────────────────────────────────────────────────────────────
    # Export Configuration
    # ──────────────────────────────────────────────────────────────

    export_dir: str = Field(
        default=str(DEFAULT_EXPORT_DIR),
        description="Directory for transient export files (deleted after serving)",
    )

    default_page_size: int = Field(
        default=1000,
        ge=1,
        le=100_000,
        description="Records fetched per page when a project does not configure one",
    )

    max_page_size: int = Field(
        default=100_000,
        ge=1,
        description="Upper bound applied to project-configured page sizes",
    )

    page_size_setting_key: str = Field(
        default="export_page_size",
        min_length=1,
        description="Project settings key holding the export page size",
    )

    compression_level: int = Field(
        default=6,
        ge=1,
        le=9,
        description="Gzip compression level (1=fastest, 9=best compression)",
    )

    # ──────────────────────────────────────────────────────────────
    # Computed Properties
    # ──────────────────────────────────────────────────────────────

    @computed_field  # type: ignore[prop-decorator]
    @property
    def export_path(self) -> Path:
        """Get export directory as Path object."""
        return Path(self.export_dir)

    # ──────────────────────────────────────────────────────────────
    # Helper Methods
    # ──────────────────────────────────────────────────────────────

    def ensure_export_dir(self) -> Path:
        """Ensure export directory exists and return it.

        Returns:
            Path to the export directory.
        """
        path = self.export_path
        path.mkdir(parents=True, exist_ok=True)
        return path

    def clamp_page_size(self, page_size: int) -> int:
        """Clamp a configured page size into the accepted range."""
        if page_size < 1:
            return self.default_page_size
        return min(page_size, self.max_page_size)

    # ──────────────────────────────────────────────────────────────
    # Model Configuration
    # ──────────────────────────────────────────────────────────────

    model_config = SettingsConfigDict(
        env_prefix="DATATRANSFER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        populate_by_name=True,
        extra="ignore",
        env_ignore_empty=True,
    )
