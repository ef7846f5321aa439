"""Configuration management for ProviderHub.

This module uses Pydantic Settings to load and validate configuration from
environment variables and .env files. Configuration is loaded at application
startup and is immutable during runtime.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration settings.

    Settings are loaded from environment variables and .env files.
    All configuration values are validated at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PROVIDERHUB_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    app_name: str = "ProviderHub"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "testing"] = "development"
    debug: bool = False
    api_prefix: str = "/api/v1"

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 1

    # Database Settings
    database_url: str = "sqlite+aiosqlite:///./ph_data/providerhub.db"
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 3600
    db_echo: bool = False

    # Security Settings
    encryption_key: str = Field(
        default="change-me-in-production-use-openssl-rand-hex-32",
        description="Secret key for provider credential encryption at rest",
    )

    # CORS Settings
    cors_origins: list[str] = Field(default=["http://localhost:3000", "http://localhost:5173"])
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = Field(default=["*"])
    cors_allow_headers: list[str] = Field(default=["*"])

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    # Status Cache Settings
    status_cache_ttl_seconds: int = 30
    status_cache_ttl_overrides: dict[str, int] = Field(
        default_factory=dict,
        description="Per-family TTL overrides, e.g. {'backup_storage': 300}",
    )

    # Connectivity Test Settings
    connection_test_timeout_seconds: float = 15.0

    # Secret Masking Settings
    mask_visible_chars: int = 4

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Parse CORS origins from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v

    @field_validator("connection_test_timeout_seconds")
    @classmethod
    def validate_test_timeout(cls, v: float) -> float:
        """Keep connectivity tests bounded to a sane interactive window."""
        if v < 1 or v > 60:
            raise ValueError("connection_test_timeout_seconds must be between 1 and 60")
        return v

    @field_validator("mask_visible_chars")
    @classmethod
    def validate_mask_visible_chars(cls, v: int) -> int:
        if v < 0:
            raise ValueError("mask_visible_chars cannot be negative")
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == "testing"

    @model_validator(mode="after")
    def validate_sqlite_workers(self) -> "Settings":
        """Validate that SQLite is not used with multiple workers."""
        if self.workers > 1 and self.database_url.startswith("sqlite"):
            raise ValueError(
                "SQLite does not support multiple worker processes. "
                f"Requested {self.workers} workers, but SQLite requires workers=1. "
                "Either use --workers 1 or switch to PostgreSQL."
            )
        return self

    def status_cache_ttl_for(self, family: str) -> int:
        """Get the status cache TTL for a provider family.

        Args:
            family: Provider family value.

        Returns:
            TTL in seconds.
        """
        return self.status_cache_ttl_overrides.get(family, self.status_cache_ttl_seconds)

    @property
    def database_url_sync(self) -> str:
        """Get synchronous database URL for migrations."""
        url = self.database_url
        if url.startswith("sqlite+aiosqlite"):
            return url.replace("sqlite+aiosqlite", "sqlite")
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql")
        return url


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    This function caches the settings instance to avoid reloading
    configuration on every call. Settings are loaded once at startup.

    Returns:
        Settings: Cached application settings instance.
    """
    return Settings()
