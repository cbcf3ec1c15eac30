"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.constants import TimeConstants
from ..domain.shared.messages import ErrorMessages
from ..domain.shared.types import BusyTimeoutMs, ConnectionTimeoutS


class DatabaseSettings(BaseModel):
    """Database configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    url: str = Field(
        default="sqlite:///data/voting.db",
        validation_alias=AliasChoices("url", "database_url", "db_url"),
    )
    busy_timeout_ms: BusyTimeoutMs = Field(
        default=5000,
        validation_alias=AliasChoices("busy_timeout_ms", "busy_timeout"),
    )
    connection_timeout_s: ConnectionTimeoutS = Field(
        default=10,
        validation_alias=AliasChoices("connection_timeout_s", "connection_timeout"),
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate database URL format."""
        if not v.startswith("sqlite://"):
            raise ValueError(ErrorMessages.INVALID_DATABASE_URL)
        return v


class VotingSettings(BaseModel):
    """Voting session configuration."""

    model_config = SettingsConfigDict(frozen=True)

    default_session_minutes: int = Field(
        default=TimeConstants.DEFAULT_SESSION_MINUTES, ge=1, le=TimeConstants.MAX_SESSION_MINUTES
    )
    max_session_minutes: int = Field(
        default=TimeConstants.MAX_SESSION_MINUTES, ge=1, le=TimeConstants.MAX_SESSION_MINUTES
    )
    auto_start_on_vote: bool = True

    @model_validator(mode="after")
    def validate_default_within_max(self) -> VotingSettings:
        if self.default_session_minutes > self.max_session_minutes:
            raise ValueError(ErrorMessages.DEFAULT_EXCEEDS_MAXIMUM)
        return self


class SweeperSettings(BaseModel):
    """Expired session sweeper configuration."""

    model_config = SettingsConfigDict(frozen=True)

    enabled: bool = True
    interval_seconds: int = Field(default=TimeConstants.DEFAULT_SWEEP_INTERVAL_SECONDS, ge=1)


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - DATABASE__URL, DATABASE__BUSY_TIMEOUT_MS, ... (nested with "__")
    - VOTING__DEFAULT_SESSION_MINUTES, VOTING__AUTO_START_ON_VOTE, ...
    - SWEEPER__ENABLED, SWEEPER__INTERVAL_SECONDS
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    voting: VotingSettings = Field(default_factory=VotingSettings)
    sweeper: SweeperSettings = Field(default_factory=SweeperSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels)
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
