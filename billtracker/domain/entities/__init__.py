"""Domain entities exposed by the application."""

from .bill import Bill
from .delivery import (
    DeliveryResult,
    DeliveryStatus,
    NotificationChannel,
    ReminderRunSummary,
)
from .user import (
    DEFAULT_NOTIFICATION_OFFSETS,
    NotificationPreferences,
    User,
    format_offsets,
    normalize_offsets,
    parse_offsets,
)

__all__ = [
    "Bill",
    "DEFAULT_NOTIFICATION_OFFSETS",
    "DeliveryResult",
    "DeliveryStatus",
    "NotificationChannel",
    "NotificationPreferences",
    "ReminderRunSummary",
    "User",
    "format_offsets",
    "normalize_offsets",
    "parse_offsets",
]
