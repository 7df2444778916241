"""Outcome values returned by the notification channels."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from enum import Enum


class NotificationChannel(str, Enum):
    """Delivery mechanisms, in the order they are attempted for a bill."""

    EMAIL = "email"
    SLACK = "slack"
    IN_APP = "in-app"


class DeliveryStatus(str, Enum):
    DELIVERED = "delivered"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class DeliveryResult:
    """Result of a single delivery attempt on one channel."""

    channel: NotificationChannel
    status: DeliveryStatus
    error: str | None = None

    @property
    def delivered(self) -> bool:
        return self.status is DeliveryStatus.DELIVERED

    @classmethod
    def ok(cls, channel: NotificationChannel) -> "DeliveryResult":
        return cls(channel=channel, status=DeliveryStatus.DELIVERED)

    @classmethod
    def skipped(cls, channel: NotificationChannel, reason: str) -> "DeliveryResult":
        return cls(channel=channel, status=DeliveryStatus.SKIPPED, error=reason)

    @classmethod
    def failed(cls, channel: NotificationChannel, error: str) -> "DeliveryResult":
        return cls(channel=channel, status=DeliveryStatus.FAILED, error=error)


@dataclass
class ReminderRunSummary:
    """Counters collected while processing one reminder run."""

    run_date: date
    users: int = 0
    bills: int = 0
    delivered: Counter = field(default_factory=Counter)
    skipped: Counter = field(default_factory=Counter)
    failed: Counter = field(default_factory=Counter)
    suppressed: Counter = field(default_factory=Counter)
    errors: list[str] = field(default_factory=list)
    aborted: bool = False

    def record(self, result: DeliveryResult) -> None:
        key = result.channel.value
        if result.status is DeliveryStatus.DELIVERED:
            self.delivered[key] += 1
        elif result.status is DeliveryStatus.SKIPPED:
            self.skipped[key] += 1
        else:
            self.failed[key] += 1
            if result.error:
                self.errors.append(f"{key}: {result.error}")

    def attempts(self) -> int:
        """Return how many sender calls were made during the run."""

        return (
            sum(self.delivered.values())
            + sum(self.skipped.values())
            + sum(self.failed.values())
        )


__all__ = [
    "DeliveryResult",
    "DeliveryStatus",
    "NotificationChannel",
    "ReminderRunSummary",
]
