"""Use cases for reading and changing notification preferences."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy.orm import Session

from billtracker.domain.entities import NotificationPreferences, normalize_offsets
from billtracker.infrastructure.repositories import UserRepository


def get_notification_preferences(session: Session, user_id: int) -> NotificationPreferences:
    """Return the stored preferences of ``user_id``."""

    user = UserRepository(session).get(user_id)
    if user is None:
        raise ValueError("User not found")
    return user.preferences


def update_notification_preferences(
    session: Session,
    user_id: int,
    *,
    email_enabled: bool,
    slack_enabled: bool,
    slack_webhook_url: str | None,
    in_app_enabled: bool,
    offsets: Iterable[int],
) -> NotificationPreferences:
    """Replace the preferences of ``user_id``.

    Offsets are stored sorted and without duplicates.
    """

    preferences = NotificationPreferences(
        email_enabled=email_enabled,
        slack_enabled=slack_enabled,
        in_app_enabled=in_app_enabled,
        slack_webhook_url=(slack_webhook_url or "").strip() or None,
        offsets=normalize_offsets(offsets),
    )
    repository = UserRepository(session)
    if repository.get(user_id) is None:
        raise ValueError("User not found")
    return repository.update_preferences(user_id, preferences).preferences


__all__ = ["get_notification_preferences", "update_notification_preferences"]
