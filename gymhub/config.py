"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./gymhub.db",
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    secret_key: str = Field(
        default="change-me",
        description="Secret key used to verify JWT bearer tokens",
        min_length=1,
    )
    access_token_expire_minutes: int = Field(
        default=60,
        description="Number of minutes before access tokens expire",
        gt=0,
    )
    app_timezone: str = Field(
        default="UTC",
        description="IANA timezone (or UTC+HH:MM offset) used for stored timestamps",
    )
    log_level: str = Field(default="INFO", description="Root logging level")
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Origins allowed to call the API from a browser",
    )

    notification_ttl_days: int = Field(
        default=30,
        description="Days before a notification expires and leaves the feed",
        gt=0,
    )
    collaboration_request_ttl_days: int = Field(
        default=30,
        description="Days an instructor has to answer a collaboration request",
        gt=0,
    )
    membership_cycle_days: int = Field(
        default=30,
        description="Length of a paid membership period",
        gt=0,
    )
    notification_retry_max_attempts: int = Field(
        default=5,
        description="Redelivery attempts for a notification that failed to persist",
        ge=1,
    )
    notification_retry_base_delay_seconds: float = Field(
        default=2.0,
        description="Initial backoff delay between notification redelivery attempts",
        gt=0,
    )
    default_page_size: int = Field(default=20, gt=0)
    max_page_size: int = Field(default=100, gt=0)

    @model_validator(mode="after")
    def _validate_page_sizes(self) -> "Settings":
        if self.default_page_size > self.max_page_size:
            raise ValueError("DEFAULT_PAGE_SIZE cannot exceed MAX_PAGE_SIZE")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


__all__ = ["Settings", "get_settings"]
