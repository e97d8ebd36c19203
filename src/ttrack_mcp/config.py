"""Configuration management for the ttrack MCP server."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TrackerSettings(BaseSettings):
    """Runtime configuration sourced from environment variables and optional .env file."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    data_dir: Path = Field(default=Path("~/.tt-data"), validation_alias="TTRACK_DATA_DIR")
    log_level: str = Field(default="INFO", validation_alias="TTRACK_LOG_LEVEL")
    streak_window: int = Field(default=30, validation_alias="TTRACK_STREAK_WINDOW")
    top_tasks: int = Field(default=5, validation_alias="TTRACK_TOP_TASKS")

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(
                "TTRACK_LOG_LEVEL must be one of CRITICAL, ERROR, WARNING, INFO, DEBUG"
            )
        return normalized

    @field_validator("streak_window")
    @classmethod
    def _validate_streak_window(cls, value: int) -> int:
        if value < 1:
            raise ValueError("TTRACK_STREAK_WINDOW must be >= 1")
        return value

    @field_validator("top_tasks")
    @classmethod
    def _validate_top_tasks(cls, value: int) -> int:
        if value < 1:
            raise ValueError("TTRACK_TOP_TASKS must be >= 1")
        return value


@lru_cache(maxsize=1)
def get_settings() -> TrackerSettings:
    """Return cached settings instance."""

    settings = TrackerSettings()
    settings.data_dir = settings.data_dir.expanduser().resolve()
    return settings


__all__ = ["TrackerSettings", "get_settings"]
