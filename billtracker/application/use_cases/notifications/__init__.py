"""Public helpers for bill reminders and notification settings."""

from .diagnostics import SlackWebhookNotConfigured, send_in_app_test, send_slack_test
from .messages import reminder_message
from .preferences import get_notification_preferences, update_notification_preferences
from .reminders import run_bill_reminders

__all__ = [
    "SlackWebhookNotConfigured",
    "get_notification_preferences",
    "reminder_message",
    "run_bill_reminders",
    "send_in_app_test",
    "send_slack_test",
    "update_notification_preferences",
]
