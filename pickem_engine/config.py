"""Configuration management using Pydantic Settings.

This module provides centralized configuration for the scoring engine,
supporting environment variables and .env file loading.

Example:
    >>> from pickem_engine.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.db_path)
    'data/pickem.db'
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    Environment variables take precedence over .env file values.

    Attributes:
        db_path: Path to SQLite database file.
        store_timeout: Timeout in seconds for a single store call.
        fetch_attempts: Total attempts for the game/pick fetch phase.
        retry_delay: Fixed delay between fetch attempts in seconds.
        default_season: Season used when a command does not specify one.
        max_locks_per_week: Lock limit per user and week (enforced upstream).
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_dir: Directory for log files.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    db_path: str = Field(
        default="data/pickem.db",
        alias="PICKEM_DB_PATH",
        description="Path to SQLite database file",
    )
    store_timeout: float = Field(
        default=5.0,
        alias="PICKEM_STORE_TIMEOUT",
        gt=0.0,
        description="Timeout for a single fetch or persist call in seconds",
    )

    # Recomputation retry policy
    fetch_attempts: int = Field(
        default=3,
        alias="PICKEM_FETCH_ATTEMPTS",
        ge=1,
        le=10,
        description="Total attempts for fetching a game and its picks",
    )
    retry_delay: float = Field(
        default=1.0,
        alias="PICKEM_RETRY_DELAY",
        ge=0.0,
        description="Fixed delay between fetch attempts in seconds",
    )

    # League rules
    default_season: int = Field(
        default=2025,
        alias="PICKEM_DEFAULT_SEASON",
        ge=2000,
        description="Season used when none is given",
    )
    max_locks_per_week: int = Field(
        default=3,
        alias="PICKEM_MAX_LOCKS_PER_WEEK",
        ge=0,
        description="Maximum lock picks per user per week",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        alias="LOG_LEVEL",
        description="Logging level",
    )
    log_dir: str = Field(
        default="logs",
        alias="LOG_DIR",
        description="Directory for log files",
    )

    @field_validator("db_path", "log_dir")
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Ensure path strings are valid."""
        if not v or v.isspace():
            raise ValueError("Path cannot be empty or whitespace")
        return v

    @property
    def db_path_obj(self) -> Path:
        """Return database path as Path object."""
        return Path(self.db_path)

    @property
    def log_dir_obj(self) -> Path:
        """Return log directory as Path object."""
        return Path(self.log_dir)

    def ensure_directories(self) -> None:
        """Create required directories if they don't exist."""
        self.db_path_obj.parent.mkdir(parents=True, exist_ok=True)
        self.log_dir_obj.mkdir(parents=True, exist_ok=True)


# Singleton pattern for settings
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        Settings instance loaded from environment.

    Example:
        >>> settings = get_settings()
        >>> print(settings.fetch_attempts)
        3
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset the settings singleton (useful for testing)."""
    global _settings
    _settings = None
