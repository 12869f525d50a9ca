"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from aerobic_player.domain.shared.constants import LogLevels, MediaDefaults, PlaybackDefaults
from aerobic_player.domain.shared.messages import ErrorMessages


class DatabaseSettings(BaseModel):
    """Database configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    url: str = Field(
        default="sqlite:///data/aerobic_player.db",
        validation_alias=AliasChoices("url", "database_url", "db_url"),
    )
    busy_timeout_ms: int = Field(
        default=5000,
        ge=1000,
        le=30000,
        validation_alias=AliasChoices("busy_timeout_ms", "busy_timeout"),
    )
    connection_timeout_s: int = Field(
        default=10,
        ge=1,
        le=60,
        validation_alias=AliasChoices("connection_timeout_s", "connection_timeout"),
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate database URL format."""
        if not v.startswith("sqlite://"):
            raise ValueError(ErrorMessages.INVALID_DATABASE_URL)
        return v


class PlaybackSettings(BaseModel):
    """Sequencer and library timing configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    completion_epsilon: float = Field(
        default=PlaybackDefaults.COMPLETION_EPSILON,
        ge=0.0,
        le=1.0,
        validation_alias=AliasChoices("completion_epsilon", "epsilon"),
    )
    seek_step_seconds: float = Field(default=PlaybackDefaults.SEEK_STEP_SECONDS, gt=0.0, le=600.0)
    settings_save_delay_seconds: float = Field(
        default=PlaybackDefaults.SETTINGS_SAVE_DELAY_SECONDS,
        ge=0.0,
        le=60.0,
        validation_alias=AliasChoices("settings_save_delay_seconds", "save_delay"),
    )


class MediaSettings(BaseModel):
    """ffmpeg tool configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    ffplay_path: str = Field(default=MediaDefaults.FFPLAY_PATH, min_length=1)
    ffprobe_path: str = Field(default=MediaDefaults.FFPROBE_PATH, min_length=1)
    probe_timeout_seconds: float = Field(
        default=MediaDefaults.PROBE_TIMEOUT_SECONDS,
        gt=0.0,
        le=300.0,
        validation_alias=AliasChoices("probe_timeout_seconds", "probe_timeout"),
    )
    tick_interval_seconds: float = Field(
        default=MediaDefaults.TICK_INTERVAL_SECONDS,
        gt=0.0,
        le=5.0,
        validation_alias=AliasChoices("tick_interval_seconds", "tick_interval"),
    )
    temp_dir: Path | None = None


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - DATABASE__URL, DATABASE__BUSY_TIMEOUT_MS, etc. (nested with prefix)
    - PLAYBACK__COMPLETION_EPSILON, PLAYBACK__SEEK_STEP_SECONDS, etc.
    - MEDIA__FFPLAY_PATH, MEDIA__FFPROBE_PATH, MEDIA__TEMP_DIR, etc.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    playback: PlaybackSettings = Field(default_factory=PlaybackSettings)
    media: MediaSettings = Field(default_factory=MediaSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        v_upper = v.upper()
        if v_upper not in LogLevels.ALL:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=sorted(LogLevels.ALL))
            )
        return v_upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
