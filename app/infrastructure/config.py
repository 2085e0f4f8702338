"""
Centralized configuration management for the check-in application.

Provides environment-specific configuration with validation, type safety,
and comprehensive settings management using Pydantic.
"""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings


class FeedbackConfig(BaseSettings):
    """
    Feedback storage settings.

    Feedback is appended to a single JSON file; the parent directory is
    created on demand.

    Example:
        >>> cfg = FeedbackConfig(data_file="./data/feedback.json")
        >>> cfg.get_data_path().name
        'feedback.json'
    """

    data_file: str = Field("./feedback-data.json", description="Feedback JSON file path")
    max_suggestion_length: int = Field(2000, ge=50, description="Maximum suggestion length")
    indent: int = Field(2, ge=0, le=8, description="JSON indent used when writing the file")

    model_config = {"env_prefix": "FEEDBACK_", "case_sensitive": False}

    @field_validator("data_file")
    def validate_data_file(cls, v):
        """Ensure the file has a .json suffix and its directory exists."""
        path = Path(v)
        if not path.suffix:
            path = path.with_suffix(".json")
        path.parent.mkdir(parents=True, exist_ok=True)
        return str(path)

    def get_data_path(self) -> Path:
        return Path(self.data_file)


class LoggingConfig(BaseSettings):
    """
    Logging configuration settings.

    Manages logging levels, output formats, and file destinations
    with environment-specific defaults.

    Example:
        >>> log_config = LoggingConfig(level="DEBUG", file_path="./logs/app.log")
        >>> log_config.get_file_handler_config()["maxBytes"]
        10485760
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        "INFO", description="Minimum logging level"
    )
    file_path: str | None = Field("./logs/app.log", description="Log file path")
    max_bytes: int = Field(10 * 1024 * 1024, ge=1024, description="Max log file size in bytes")
    backup_count: int = Field(5, ge=1, description="Number of backup log files")
    structured: bool = Field(True, description="Use structured JSON logging")
    console_enabled: bool = Field(True, description="Enable console output")

    model_config = {"env_prefix": "LOG_", "case_sensitive": False}

    @field_validator("file_path")
    def validate_log_path(cls, v):
        """Ensure log directory exists."""
        if v:
            log_path = Path(v)
            log_path.parent.mkdir(parents=True, exist_ok=True)
        return v

    def get_file_handler_config(self) -> dict[str, Any] | None:
        """Get file handler configuration if file logging is enabled."""
        if not self.file_path:
            return None

        return {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": self.file_path,
            "maxBytes": self.max_bytes,
            "backupCount": self.backup_count,
            "encoding": "utf-8",
        }


class SecurityConfig(BaseSettings):
    """
    Security configuration settings.

    Example:
        >>> SecurityConfig().max_input_length
        10000
    """

    max_input_length: int = Field(10000, ge=100, description="Maximum input string length")
    max_token_length: int = Field(512, ge=64, description="Maximum shared token length")

    cors_origins: list[str] = Field(["*"], description="Allowed CORS origins")
    cors_methods: list[str] = Field(["GET", "POST"], description="Allowed CORS methods")

    model_config = {"env_prefix": "SECURITY_", "case_sensitive": False}


class ApplicationConfig(BaseSettings):
    """
    Main application configuration.

    Example:
        >>> config = get_settings()
        >>> config.app.environment
        'development'
    """

    environment: Literal["development", "testing", "production"] = Field(
        "development", description="Application environment"
    )
    debug: bool = Field(False, description="Enable debug mode")
    version: str = Field("0.1.0", description="Application version")
    title: str = Field("Weekly Check-In", description="Application title")

    # Overrides the request origin when building partner links (e.g. behind a proxy)
    public_base_url: str | None = Field(None, description="Public URL of the check-in page")

    # Feature flags
    enable_partner_compare: bool = Field(True, description="Enable partner comparison")
    enable_feedback: bool = Field(True, description="Enable feedback collection")
    enable_feedback_export: bool = Field(True, description="Enable feedback export downloads")

    model_config = {"env_prefix": "APP_", "case_sensitive": False}

    @field_validator("public_base_url")
    def validate_public_base_url(cls, v):
        if v is None:
            return v
        v = v.strip()
        if not v:
            return None
        if not v.startswith(("http://", "https://")):
            raise ValueError("public_base_url must start with http:// or https://")
        return v

    @model_validator(mode="after")
    def debug_implies_development(self):
        """Ensure debug mode is only enabled in development."""
        if self.debug and self.environment == "production":
            raise ValueError("Debug mode cannot be enabled in production")
        return self


class Settings:
    """
    Complete application settings container.

    Provides structured access to all configuration sections
    with lazy loading and caching.

    Example:
        >>> settings = get_settings()
        >>> settings.feedback.get_data_path()
        >>> settings.logging.level
    """

    def __init__(self):
        self._app: ApplicationConfig | None = None
        self._feedback: FeedbackConfig | None = None
        self._logging: LoggingConfig | None = None
        self._security: SecurityConfig | None = None

    @property
    def app(self) -> ApplicationConfig:
        """Get application configuration."""
        if self._app is None:
            self._app = ApplicationConfig()
        return self._app

    @property
    def feedback(self) -> FeedbackConfig:
        """Get feedback storage configuration."""
        if self._feedback is None:
            self._feedback = FeedbackConfig()
        return self._feedback

    @property
    def logging(self) -> LoggingConfig:
        """Get logging configuration."""
        if self._logging is None:
            if os.getenv("LOG_LEVEL"):
                self._logging = LoggingConfig()
            else:
                level = "DEBUG" if self.app.debug else "INFO"
                if self.app.environment == "production":
                    level = "WARNING"
                self._logging = LoggingConfig(level=level)
        return self._logging

    @property
    def security(self) -> SecurityConfig:
        """Get security configuration."""
        if self._security is None:
            self._security = SecurityConfig()
        return self._security

    def is_development(self) -> bool:
        return self.app.environment == "development"

    def is_production(self) -> bool:
        return self.app.environment == "production"

    def is_testing(self) -> bool:
        return self.app.environment == "testing"

    def get_environment_info(self) -> dict[str, Any]:
        """Get summary of current environment configuration."""
        return {
            "environment": self.app.environment,
            "version": self.app.version,
            "debug": self.app.debug,
            "feedback_file": self.feedback.data_file,
            "logging_level": self.logging.level,
            "features": {
                "partner_compare": self.app.enable_partner_compare,
                "feedback": self.app.enable_feedback,
                "feedback_export": self.app.enable_feedback_export,
            },
        }


# Section names in settings files mapped to the env prefix each config class reads.
SECTION_PREFIXES = {
    "app": "APP_",
    "feedback": "FEEDBACK_",
    "logging": "LOG_",
    "security": "SECURITY_",
}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get application settings instance (cached).

    Returns:
        Settings instance with all configuration loaded
    """
    return Settings()


def load_settings_from_file(file_path: str) -> Settings:
    """
    Load settings from a JSON configuration file.

    Each top-level section maps onto an environment prefix, so
    ``{"feedback": {"data_file": "x.json"}}`` sets ``FEEDBACK_DATA_FILE`` and
    ``{"logging": {"level": "DEBUG"}}`` sets ``LOG_LEVEL``.

    Raises:
        FileNotFoundError: If configuration file doesn't exist
        ValueError: If file format is unsupported
    """
    config_path = Path(file_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")

    if config_path.suffix.lower() != ".json":
        raise ValueError(f"Unsupported configuration file format: {config_path.suffix}")

    with open(config_path, encoding="utf-8") as f:
        config_data = json.load(f)

    for section, values in config_data.items():
        if isinstance(values, dict):
            for key, value in values.items():
                prefix = SECTION_PREFIXES.get(section.lower(), f"{section.upper()}_")
                env_key = f"{prefix}{key.upper()}"
                os.environ[env_key] = str(value)

    get_settings.cache_clear()
    return get_settings()


def override_settings(**kwargs) -> Settings:
    """
    Override specific settings for testing or development.

    Keys are environment variable names without regard to case, e.g.
    ``override_settings(app_environment="testing", feedback_data_file="/tmp/f.json")``.
    """
    for key, value in kwargs.items():
        os.environ[key.upper()] = str(value)

    get_settings.cache_clear()
    return get_settings()


def reset_settings() -> None:
    """Reset settings cache to reload from environment."""
    get_settings.cache_clear()
