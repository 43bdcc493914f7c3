"""Configuration management for the Excel CSV adapter.

This module provides centralized configuration using pydantic-settings.
All configuration options can be set via environment variables with the
EXCEL_CSV_ prefix, or via a .env file in the project root.

Environment Variables:
    EXCEL_CSV_DEFAULT_SHEET_NAME: Sheet created by serializers (default: Export)
    EXCEL_CSV_DATA_ONLY: Read cached formula results (default: true)
    EXCEL_CSV_LOG_LEVEL: Logging level (default: INFO)
    EXCEL_CSV_DEBUG: Force DEBUG logging (default: false)
"""

import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Excel rejects these in sheet titles.
INVALID_SHEET_TITLE_CHARS = frozenset("[]:*?/\\")
MAX_SHEET_TITLE_LENGTH = 31


class Settings(BaseSettings):
    """Adapter settings loaded from environment variables.

    Example .env file:
        EXCEL_CSV_DEFAULT_SHEET_NAME=Data
        EXCEL_CSV_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="EXCEL_CSV_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # =========================================================================
    # Workbook Settings
    # =========================================================================

    default_sheet_name: str = "Export"
    """Sheet name used by serializers when none is given."""

    data_only: bool = True
    """Load cached formula results instead of formula text when opening paths."""

    # =========================================================================
    # Logging Settings
    # =========================================================================

    log_level: str = "INFO"
    """Logging level: DEBUG, INFO, WARNING, ERROR, or CRITICAL."""

    debug: bool = False
    """Force DEBUG logging regardless of log_level."""

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("default_sheet_name")
    @classmethod
    def validate_sheet_name(cls, v: str) -> str:
        """Validate the sheet name is one Excel will accept."""
        if not v.strip():
            raise ValueError("default_sheet_name must be a non-empty string")
        if len(v) > MAX_SHEET_TITLE_LENGTH:
            raise ValueError(
                f"default_sheet_name must be at most {MAX_SHEET_TITLE_LENGTH} "
                f"characters, got {len(v)}"
            )
        bad = sorted(INVALID_SHEET_TITLE_CHARS.intersection(v))
        if bad:
            raise ValueError(
                f"default_sheet_name contains invalid characters: {''.join(bad)}"
            )
        return v

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

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def effective_log_level(self) -> int:
        """Level for the root logger; ``debug`` overrides ``log_level``."""
        if self.debug:
            return logging.DEBUG
        level: int = getattr(logging, self.log_level)
        return level


settings = Settings()
