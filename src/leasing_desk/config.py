"""Centralized configuration management using pydantic-settings.

Configuration is loaded from environment variables with sensible defaults.
All settings can be overridden via environment variables or a .env file.
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    """Log level options."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings have sensible defaults for development. Override via
    environment variables (prefixed with LD_) or .env file.

    Examples:
        LD_SQLITE_PATH=/var/lib/leasing-desk/desk.db
        LD_LOG_LEVEL=DEBUG
        LD_STALE_THRESHOLD_DAYS=45
        LD_REMOTE_PROPERTIES_URL=https://example.supabase.co
    """

    model_config = SettingsConfigDict(
        env_prefix="LD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Leasing Desk"
    app_version: str = "0.1.0"
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = Field(default=False, description="Enable debug mode")

    # Storage
    sqlite_path: Path = Field(
        default=Path("leasing_desk.db"),
        description="SQLite database file path",
    )
    seed_on_empty: bool = Field(
        default=True,
        description="Load the demo properties the first time the store is empty",
    )

    # Logging
    log_level: LogLevel = LogLevel.INFO
    log_format: Literal["json", "console"] = Field(
        default="console",
        description="Log output format: 'json' for production, 'console' for development",
    )
    log_file: Path | None = Field(default=None, description="Optional log file path")

    # API Server
    api_host: str = "127.0.0.1"
    api_port: int = 8000
    api_reload: bool = Field(
        default=False, description="Enable auto-reload (development only)"
    )

    # Alert thresholds
    stale_threshold_days: int = Field(
        default=30,
        ge=1,
        description="A property is stale when its inactivity exceeds this many days",
    )
    alert_warning_days: int = Field(
        default=10,
        ge=0,
        description="Commitments due within this many days raise a WARNING",
    )

    # External Services
    uf_api_url: str = Field(
        default="https://mindicador.cl/api/uf",
        description="Endpoint returning the daily UF series",
    )
    remote_properties_url: str | None = Field(
        default=None,
        description="Base URL of the remote row store (PostgREST style)",
    )
    remote_properties_api_key: str | None = Field(
        default=None, description="API key sent to the remote row store"
    )
    http_timeout_seconds: float = Field(default=10.0, gt=0)

    @field_validator("debug", mode="before")
    @classmethod
    def set_debug_from_environment(cls, v: bool, info) -> bool:
        """Auto-enable debug in development environment."""
        if info.data.get("environment") == Environment.DEVELOPMENT:
            return True
        return v

    @field_validator("log_format", mode="before")
    @classmethod
    def set_log_format_from_environment(cls, v: str, info) -> str:
        """Default to JSON logging in production."""
        if v is None:
            env = info.data.get("environment")
            if env == Environment.PRODUCTION:
                return "json"
        return v or "console"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == Environment.PRODUCTION

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == Environment.TESTING


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload settings.

    Returns:
        Configured Settings instance.
    """
    return Settings()
