"""Domain entity representing a user and their reminder preferences."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

DEFAULT_NOTIFICATION_OFFSETS: tuple[int, ...] = (0, 3, 7)


def normalize_offsets(offsets: Iterable[int]) -> tuple[int, ...]:
    """Return ``offsets`` deduplicated and sorted ascending.

    Raises :class:`ValueError` when a negative value is present.
    """

    values = {int(offset) for offset in offsets}
    if any(value < 0 for value in values):
        raise ValueError("Notification offsets must be non-negative")
    return tuple(sorted(values))


def parse_offsets(raw: str | None) -> tuple[int, ...]:
    """Parse the comma-separated storage form of the reminder offsets.

    Blank, non-numeric and negative tokens are ignored.
    """

    if not raw:
        return ()
    values: set[int] = set()
    for token in raw.split(","):
        token = token.strip()
        if not token:
            continue
        try:
            value = int(token)
        except ValueError:
            continue
        if value >= 0:
            values.add(value)
    return tuple(sorted(values))


def format_offsets(offsets: Iterable[int]) -> str:
    """Return the comma-separated storage form of ``offsets``."""

    return ",".join(str(offset) for offset in normalize_offsets(offsets))


@dataclass(frozen=True)
class NotificationPreferences:
    """Channel toggles and reminder offsets chosen by a user."""

    email_enabled: bool = False
    slack_enabled: bool = False
    in_app_enabled: bool = False
    slack_webhook_url: str | None = None
    offsets: tuple[int, ...] = ()

    def any_channel_enabled(self) -> bool:
        return self.email_enabled or self.slack_enabled or self.in_app_enabled

    def effective_offsets(
        self, default: Iterable[int] = DEFAULT_NOTIFICATION_OFFSETS
    ) -> tuple[int, ...]:
        """Return the configured offsets, or ``default`` when none are stored."""

        if self.offsets:
            return self.offsets
        return normalize_offsets(default)


@dataclass
class User:
    """Read-only view of a user owned by the user service."""

    id: int
    email: str | None
    username: str | None = None
    preferences: NotificationPreferences = field(default_factory=NotificationPreferences)


__all__ = [
    "DEFAULT_NOTIFICATION_OFFSETS",
    "NotificationPreferences",
    "User",
    "format_offsets",
    "normalize_offsets",
    "parse_offsets",
]
