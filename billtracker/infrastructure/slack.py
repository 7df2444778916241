"""Slack incoming-webhook delivery for bill reminders."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from billtracker.config import get_settings
from billtracker.domain.entities import Bill, DeliveryResult, NotificationChannel, User

logger = logging.getLogger(__name__)

CHANNEL = NotificationChannel.SLACK


class SlackDeliveryError(Exception):
    """Raised when a webhook post does not succeed."""

    def __init__(self, message: str, *, status_code: int | None = None, reason: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason


def build_bill_reminder_message(
    user: User, bill: Bill, message: str, frontend_url: str
) -> dict[str, Any]:
    """Return the webhook payload: a text fallback plus Block Kit sections."""

    amount = bill.formatted_amount()
    due_date = bill.formatted_due_date()
    return {
        "text": (
            f'*Bill Reminder for {user.email}:* Your bill "{bill.name}" for *{amount}* '
            f"is due on *{due_date}*. {message}"
        ),
        "blocks": [
            {
                "type": "section",
                "text": {"type": "mrkdwn", "text": "Hey! Just a friendly reminder:"},
            },
            {
                "type": "section",
                "fields": [
                    {"type": "mrkdwn", "text": f"*Bill Name:*\n{bill.name}"},
                    {"type": "mrkdwn", "text": f"*Amount:*\n{amount}"},
                    {"type": "mrkdwn", "text": f"*Due Date:*\n{due_date}"},
                    {"type": "mrkdwn", "text": f"*Status:*\n{message}"},
                ],
            },
            {
                "type": "actions",
                "elements": [
                    {
                        "type": "button",
                        "text": {"type": "plain_text", "text": "View Bill"},
                        "style": "primary",
                        "url": f"{frontend_url.rstrip('/')}/bills/{bill.id}",
                    }
                ],
            },
        ],
    }


def post_to_webhook(
    webhook_url: str,
    payload: dict[str, Any],
    *,
    client: httpx.Client | None = None,
) -> None:
    """POST ``payload`` to ``webhook_url`` or raise :class:`SlackDeliveryError`."""

    timeout = get_settings().slack_timeout_seconds
    owns_client = client is None
    http = client or httpx.Client(timeout=timeout)
    try:
        response = http.post(webhook_url, json=payload)
    except httpx.HTTPError as exc:
        raise SlackDeliveryError(f"Could not reach Slack webhook: {exc}") from exc
    finally:
        if owns_client:
            http.close()

    if not response.is_success:
        raise SlackDeliveryError(
            f"Slack responded with status {response.status_code} - {response.reason_phrase}",
            status_code=response.status_code,
            reason=response.reason_phrase,
        )


def send_bill_reminder_slack(
    user: User,
    bill: Bill,
    message: str,
    *,
    client: httpx.Client | None = None,
) -> DeliveryResult:
    """Post a reminder for ``bill`` to the user's webhook."""

    preferences = user.preferences
    if not preferences.slack_enabled or not preferences.slack_webhook_url:
        logger.info("Slack notifications disabled or no webhook for user %s", user.id)
        return DeliveryResult.skipped(CHANNEL, "slack disabled or missing webhook")

    payload = build_bill_reminder_message(user, bill, message, get_settings().frontend_url)
    try:
        post_to_webhook(preferences.slack_webhook_url, payload, client=client)
    except SlackDeliveryError as exc:
        logger.error("Failed to send Slack message to user %s: %s", user.id, exc)
        return DeliveryResult.failed(CHANNEL, str(exc))

    logger.info("Slack message sent to user %s for bill %s", user.id, bill.name)
    return DeliveryResult.ok(CHANNEL)


def send_test_slack_message(
    webhook_url: str,
    username: str | None,
    *,
    client: httpx.Client | None = None,
) -> None:
    """Post a one-off message confirming the webhook works."""

    payload = {
        "text": (
            f"BillTracker test message from {username or 'your account'}. "
            "Your Slack webhook is working!"
        )
    }
    post_to_webhook(webhook_url, payload, client=client)


__all__ = [
    "SlackDeliveryError",
    "build_bill_reminder_message",
    "post_to_webhook",
    "send_bill_reminder_slack",
    "send_test_slack_message",
]
