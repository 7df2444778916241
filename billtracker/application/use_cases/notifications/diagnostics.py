"""One-off messages users send themselves to check a channel."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from billtracker.domain.entities import DeliveryResult
from billtracker.infrastructure.notifications import (
    InAppAlertSender,
    SseConnectionRegistry,
    build_test_alert,
)
from billtracker.infrastructure.repositories import UserRepository
from billtracker.infrastructure.slack import send_test_slack_message

logger = logging.getLogger(__name__)


class SlackWebhookNotConfigured(Exception):
    """The user has no Slack webhook to test."""


def send_slack_test(session: Session, user_id: int) -> None:
    """Post a test message to the user's webhook.

    Raises :class:`ValueError` for unknown users, :class:`SlackWebhookNotConfigured`
    when no webhook is stored and lets :class:`SlackDeliveryError` through.
    """

    user = UserRepository(session).get(user_id)
    if user is None:
        raise ValueError("User not found")
    webhook_url = user.preferences.slack_webhook_url
    if not webhook_url:
        raise SlackWebhookNotConfigured("Slack webhook URL not configured for this user.")

    send_test_slack_message(webhook_url, user.username)
    logger.info("Test Slack message sent for user %s", user_id)


def send_in_app_test(
    registry: SseConnectionRegistry, user_id: int, username: str | None = None
) -> DeliveryResult:
    """Push a test alert to the user's streams, ignoring the in-app preference."""

    sender = InAppAlertSender(registry)
    return sender.send(user_id, build_test_alert(username), enabled=False, force=True)


__all__ = ["SlackWebhookNotConfigured", "send_in_app_test", "send_slack_test"]
