"""
Configuration — typed, validated settings loaded from environment/.env.

Uses pydantic-settings to:
  - Load from environment variables
  - Fall back to a .env file at the project root
  - Validate types and bounds before anything is decoded

Only AppSettings is a BaseSettings instance. DownloadSettings is a plain
BaseModel populated via env_nested_delimiter="__", so DOWNLOAD__URL maps
to download.url and DOWNLOAD__TIMEOUT_SECONDS to download.timeout_seconds.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Project root .env, independent of the working directory.
_ENV_FILE = Path(__file__).parent.parent.parent / ".env"

_DEFAULT_MAX_INPUT_BYTES = 16 * 1024 * 1024


class DownloadSettings(BaseModel):
    """Remote VICAL provider used when no input file is given."""

    url: str | None = Field(default=None, description="VICAL download URL")
    timeout_seconds: int = Field(default=60, ge=1, description="HTTP timeout in seconds")


class AppSettings(BaseSettings):
    """
    Root application settings.

    Load order (highest priority first):
      1. Environment variables
      2. .env file
      3. Default values
    """

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE,
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    download: DownloadSettings = Field(default_factory=lambda: DownloadSettings())

    max_input_bytes: int = Field(default=_DEFAULT_MAX_INPUT_BYTES, ge=1)
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Reject names the logging module does not know."""
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value!r}")
        return level
