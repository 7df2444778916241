"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    db_pool_size: int = Field(
        default=10,
        description="Maximum number of pooled database connections",
        gt=0,
    )
    db_pool_timeout: int = Field(
        default=30,
        description="Seconds a caller waits for a pooled connection before failing",
        gt=0,
    )
    secret_key: str = Field(
        description="Secret key used to verify JWT tokens issued by the user service",
        min_length=1,
    )
    jwt_algorithm: str = Field(default="HS256")
    access_token_expire_minutes: int = Field(
        default=60,
        description="Number of minutes before access tokens expire",
        gt=0,
    )
    app_timezone: str = Field(
        default="UTC",
        description="Timezone used to decide which calendar day it is",
    )
    frontend_url: str = Field(
        default="http://localhost:8080",
        description="Base URL of the single-page application, used in links",
    )
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:8080"])

    email_backend: Literal["smtp", "sendgrid"] = "smtp"
    email_service_host: str | None = None
    email_service_port: int = 587
    email_service_secure: bool = Field(
        default=False,
        description="Use implicit TLS (port 465) instead of STARTTLS",
    )
    email_service_user: str | None = None
    email_service_pass: str | None = None
    email_from_address: str | None = None
    sendgrid_api_key: str | None = Field(
        default=None,
        description="SendGrid API key used for sending transactional emails via the REST API",
    )
    sendgrid_sender: str | None = Field(
        default=None,
        description="Email address that will appear as the sender of transactional messages",
        min_length=3,
    )

    slack_timeout_seconds: float = Field(default=10.0, gt=0)

    scheduler_enabled: bool = True
    notification_hour: int = Field(default=9, ge=0, le=23)
    notification_minute: int = Field(default=0, ge=0, le=59)
    default_notification_offsets: list[int] = Field(default_factory=lambda: [7, 3, 0])
    log_in_app_on_failure: bool = Field(
        default=True,
        description=(
            "Record in-app reminders in the notification log even when no stream "
            "accepted the frame"
        ),
    )

    sse_keepalive_seconds: float = Field(default=15.0, gt=0)
    sse_queue_size: int = Field(default=100, gt=0)

    @field_validator("default_notification_offsets")
    @classmethod
    def _validate_default_offsets(cls, value: list[int]) -> list[int]:
        if any(offset < 0 for offset in value):
            raise ValueError("DEFAULT_NOTIFICATION_OFFSETS must not contain negative values")
        return sorted(set(value))

    @model_validator(mode="after")
    def _validate_sendgrid_pair(self) -> "Settings":
        if bool(self.sendgrid_api_key) ^ bool(self.sendgrid_sender):
            raise ValueError(
                "SENDGRID_API_KEY and SENDGRID_SENDER must both be provided to enable email"
            )
        if self.sendgrid_sender and "@" not in self.sendgrid_sender:
            raise ValueError("SENDGRID_SENDER must be a valid email address")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
