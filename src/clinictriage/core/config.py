"""
Configuration management for the triage service.

This module provides centralized configuration using Pydantic Settings
for environment-based configuration management.
"""

import os
from pathlib import Path
from typing import Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


class TriageSettings(BaseSettings):
    """Triage workflow settings."""

    model_config = SettingsConfigDict(env_prefix="TRIAGE_")

    high_priority_queue: str = Field(
        default="triage_high_priority",
        description="Queue receiving doctor alerts",
    )
    critical_priority_threshold: int = Field(
        default=2, description="Effective priorities at or below this are critical"
    )
    serialize_doctor_assignment: bool = Field(
        default=True,
        description="Hold a per-doctor lock while checking and taking capacity",
    )

    @field_validator("critical_priority_threshold")
    @classmethod
    def validate_threshold(cls, v: int) -> int:
        """Validate the critical band upper bound."""
        if v < 1 or v > 5:
            raise ValueError("Critical priority threshold must be between 1 and 5")
        return v

    @field_validator("high_priority_queue")
    @classmethod
    def validate_queue_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("High priority queue name is required")
        return v.strip()


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO", description="Logging level")
    format: str = Field(default="json", description="Log format (json or text)")

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate logging level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        if v.lower() not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v.lower()


class MessagingSettings(BaseSettings):
    """Outbound messaging settings."""

    model_config = SettingsConfigDict(env_prefix="MESSAGING_")

    max_queue_size: int = Field(
        default=1000, description="Messages held per queue before publishes fail"
    )

    @field_validator("max_queue_size")
    @classmethod
    def validate_max_queue_size(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Max queue size must be positive")
        return v


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    app_name: str = Field(default="Clinic-Triage", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    app_env: str = Field(default="development", description="Application environment")
    debug: bool = Field(default=False, description="Debug mode")

    # Sub-settings
    triage: TriageSettings = Field(default_factory=TriageSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    messaging: MessagingSettings = Field(default_factory=MessagingSettings)

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"


_settings: Optional[Settings] = None


def _load_env_file_if_available() -> None:
    """Best-effort load of .env by searching current and parent directories.

    Already-set environment variables are never overridden.
    """
    from dotenv import load_dotenv

    cwd = Path(os.getcwd()).resolve()
    for parent in [cwd, *cwd.parents]:
        candidate = parent / ".env"
        if candidate.exists():
            load_dotenv(dotenv_path=str(candidate), override=False)
            break


def get_settings() -> Settings:
    """Get application settings instance (lazy-init with .env discovery)."""
    global _settings
    if _settings is None:
        _load_env_file_if_available()
        try:
            _settings = Settings()
        except ValidationError as exc:
            raise ConfigurationError(
                "Invalid configuration", {"errors": exc.errors(include_url=False)}
            ) from exc
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
