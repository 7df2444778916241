"""In-app reminder delivery over Server-Sent Events."""

from __future__ import annotations

import logging
from typing import Any

from billtracker.domain.entities import Bill, DeliveryResult, NotificationChannel
from billtracker.utils import now_in_app_timezone

from .manager import SseConnectionRegistry

logger = logging.getLogger(__name__)

IN_APP_TEST_EVENT = "in-app-test"
CONNECTION_ESTABLISHED_EVENT = "connection_established"


def build_bill_alert(bill: Bill, message: str) -> dict[str, Any]:
    """Return the event pushed to the browser for a bill reminder."""

    return {
        "type": "newNotification",
        "data": {
            "message": message,
            "billId": bill.id,
            "billName": bill.name,
            "amount": bill.formatted_amount(),
            "dueDate": bill.due_date.isoformat(),
            "timestamp": now_in_app_timezone().isoformat(),
        },
    }


def build_connection_greeting() -> dict[str, Any]:
    return {
        "type": CONNECTION_ESTABLISHED_EVENT,
        "message": "Connected to BillTracker notifications.",
    }


def build_test_alert(username: str | None = None) -> dict[str, Any]:
    return {
        "type": IN_APP_TEST_EVENT,
        "message": f"BillTracker test alert for {username or 'your account'}. In-app alerts are working!",
        "timestamp": now_in_app_timezone().isoformat(),
    }


class InAppAlertSender:
    """Push events to the open streams of a user."""

    channel = NotificationChannel.IN_APP

    def __init__(self, registry: SseConnectionRegistry) -> None:
        self._registry = registry

    def send(
        self,
        user_id: int,
        payload: dict[str, Any],
        *,
        enabled: bool,
        force: bool = False,
    ) -> DeliveryResult:
        """Deliver ``payload`` unless the user turned in-app alerts off.

        ``force`` bypasses the preference for diagnostic messages. Users without
        an open stream simply miss the event.
        """

        if not (enabled or force):
            logger.info("In-app alerts disabled for user %s", user_id)
            return DeliveryResult.skipped(self.channel, "in-app alerts disabled")

        if self._registry.send(user_id, payload):
            logger.info("In-app alert sent to user %s: %s", user_id, payload.get("type"))
            return DeliveryResult.ok(self.channel)

        logger.warning("Attempted to send SSE to disconnected client: %s", user_id)
        return DeliveryResult.skipped(self.channel, "no open stream")


__all__ = [
    "CONNECTION_ESTABLISHED_EVENT",
    "IN_APP_TEST_EVENT",
    "InAppAlertSender",
    "build_bill_alert",
    "build_connection_greeting",
    "build_test_alert",
]
