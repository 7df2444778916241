"""Pydantic models describing notification settings payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, field_validator

from billtracker.domain.entities import NotificationPreferences


class NotificationSettingsRead(BaseModel):
    """Notification preferences as shown on the settings page."""

    is_email_notification_enabled: bool
    is_slack_notification_enabled: bool
    slack_webhook_url: str | None = None
    in_app_alerts_enabled: bool
    notification_time_offsets: list[int] = Field(default_factory=list)

    @classmethod
    def from_preferences(cls, preferences: NotificationPreferences) -> "NotificationSettingsRead":
        return cls(
            is_email_notification_enabled=preferences.email_enabled,
            is_slack_notification_enabled=preferences.slack_enabled,
            slack_webhook_url=preferences.slack_webhook_url,
            in_app_alerts_enabled=preferences.in_app_enabled,
            notification_time_offsets=list(preferences.offsets),
        )


class NotificationSettingsUpdate(BaseModel):
    """Payload used to replace the notification preferences."""

    model_config = ConfigDict(extra="forbid")

    is_email_notification_enabled: bool = False
    is_slack_notification_enabled: bool = False
    slack_webhook_url: str | None = Field(default=None, max_length=512)
    in_app_alerts_enabled: bool = False
    notification_time_offsets: list[NonNegativeInt] = Field(
        default_factory=list,
        description="Days before the due date on which reminders are sent",
    )

    @field_validator("slack_webhook_url")
    @classmethod
    def _validate_webhook(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        if not value:
            return None
        if not value.startswith(("http://", "https://")):
            raise ValueError("slack_webhook_url must start with http:// or https://")
        return value


class MessageResponse(BaseModel):
    message: str


class InAppTestResponse(BaseModel):
    delivered: bool


__all__ = [
    "InAppTestResponse",
    "MessageResponse",
    "NotificationSettingsRead",
    "NotificationSettingsUpdate",
]
