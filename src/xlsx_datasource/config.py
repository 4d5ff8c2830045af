"""Configuration management for the xlsx data source.

This module provides centralized configuration using pydantic-settings.
All configuration options can be set via environment variables with the
XDS_ prefix, or via a .env file in the project root.

Environment Variables:
    XDS_RESOURCES_DIR: Root directory for generated SQLite stores
    XDS_DATABASE: Store path override; ":memory:" keeps the store in RAM
    XDS_DESTROY: Remove the store on disconnect (default: false)
    XDS_MODIFIED_FORMAT: strftime pattern used by modified()
    XDS_STRING_COLUMN_TYPE: DDL type for string columns (default: VARCHAR(255))
    XDS_LOG_LEVEL: Logging level (default: INFO)
    XDS_DEBUG: Enable debug mode (default: false)
"""

import logging
import tempfile
from pathlib import Path
from typing import Any
from uuid import uuid4

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MEMORY_DATABASE = ":memory:"


class Settings(BaseSettings):
    """Data source settings loaded from environment variables.

    Example .env file:
        XDS_DATABASE=:memory:
        XDS_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="XDS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # =========================================================================
    # Store Settings
    # =========================================================================

    resources_dir: str = str(Path(tempfile.gettempdir()) / "xlsx_datasource")
    """Root directory under which generated SQLite stores are placed."""

    database: str | None = None
    """Explicit store path. When unset a fresh file is generated per adapter."""

    destroy: bool = False
    """Remove the store from disk when the adapter disconnects."""

    string_column_type: str = "VARCHAR(255)"
    """Declared SQLite type for columns inferred as strings."""

    # =========================================================================
    # Formatting Settings
    # =========================================================================

    modified_format: str = "%B %d, %Y - %I:%M %p"
    """strftime pattern used when reporting workbook modification times."""

    # =========================================================================
    # Logging Settings
    # =========================================================================

    log_level: str = "INFO"
    """Logging level: DEBUG, INFO, WARNING, ERROR, or CRITICAL."""

    debug: bool = False
    """Enable debug mode with additional logging."""

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(
                f"Invalid log level: {v}. Must be one of: {', '.join(valid_levels)}"
            )
        return upper_v

    @field_validator("resources_dir")
    @classmethod
    def validate_resources_dir(cls, v: str) -> str:
        """Validate the resources directory is a non-empty path."""
        if not v.strip():
            raise ValueError("resources_dir must be a non-empty path")
        return v.strip()

    @field_validator("database")
    @classmethod
    def validate_database(cls, v: str | None) -> str | None:
        """Treat a blank database override as unset."""
        if v is not None and not v.strip():
            return None
        return v

    @field_validator("string_column_type")
    @classmethod
    def validate_string_column_type(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("string_column_type must be a non-empty string")
        return v.strip()

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def data_dir(self) -> Path:
        """Directory holding generated store files."""
        return Path(self.resources_dir) / "data"

    @property
    def log_level_int(self) -> int:
        """Get log level as integer for logging module."""
        level: int = getattr(logging, self.log_level)
        return level

    def generate_database_path(self) -> str:
        """Return a fresh store path under the data directory."""
        return str(self.data_dir / f"{uuid4().hex}.sqlite")

    def resolve_database(self, database: str | None = None) -> str:
        """Pick the store path for a new adapter.

        Args:
            database: Explicit path passed by the caller, if any.

        Returns:
            The caller's path, else the configured override, else a
            generated path.
        """
        return database or self.database or self.generate_database_path()

    def to_safe_dict(self) -> dict[str, Any]:
        """Convert settings to a plain dictionary for logging."""
        return {
            "resources_dir": self.resources_dir,
            "database": self.database,
            "destroy": self.destroy,
            "string_column_type": self.string_column_type,
            "modified_format": self.modified_format,
            "log_level": self.log_level,
            "debug": self.debug,
        }


def validate_settings_on_startup(s: Settings) -> None:
    """Log a configuration summary and warn about risky combinations.

    Args:
        s: Settings instance to validate.
    """
    logger = logging.getLogger(__name__)

    if s.destroy and s.database and s.database != MEMORY_DATABASE:
        logger.warning(
            "XDS_DESTROY is enabled with a fixed XDS_DATABASE path. "
            "Every adapter using the default will delete %s on disconnect.",
            s.database,
        )

    logger.info(
        f"Configuration loaded: log_level={s.log_level}, debug={s.debug}, "
        f"resources_dir={s.resources_dir}, destroy={s.destroy}"
    )


# Create the global settings instance
settings = Settings()
