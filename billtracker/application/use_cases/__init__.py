"""Aggregate application use cases."""

from .notifications import (
    get_notification_preferences,
    run_bill_reminders,
    update_notification_preferences,
)

__all__ = [
    "get_notification_preferences",
    "run_bill_reminders",
    "update_notification_preferences",
]
