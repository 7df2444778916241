from .notification import (
    InAppTestResponse,
    MessageResponse,
    NotificationSettingsRead,
    NotificationSettingsUpdate,
)

__all__ = [
    "InAppTestResponse",
    "MessageResponse",
    "NotificationSettingsRead",
    "NotificationSettingsUpdate",
]
