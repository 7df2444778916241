"""Persistence layer for user notification preferences."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import or_
from sqlalchemy.orm import Session

from billtracker.domain.entities import (
    NotificationPreferences,
    User,
    format_offsets,
    parse_offsets,
)
from billtracker.infrastructure.models import UserModel


class UserRepository:
    """Read users and update their notification settings."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> User | None:
        model = self.session.get(UserModel, user_id)
        return self._to_entity(model) if model else None

    def list_with_any_channel_enabled(self) -> Sequence[User]:
        query = (
            self.session.query(UserModel)
            .filter(
                or_(
                    UserModel.is_email_notification_enabled.is_(True),
                    UserModel.is_slack_notification_enabled.is_(True),
                    UserModel.in_app_alerts_enabled.is_(True),
                )
            )
            .order_by(UserModel.id)
        )
        return [self._to_entity(model) for model in query.all()]

    def update_preferences(
        self, user_id: int, preferences: NotificationPreferences
    ) -> User:
        model = self.session.get(UserModel, user_id)
        if model is None:
            msg = f"User with id {user_id} not found"
            raise ValueError(msg)
        model.is_email_notification_enabled = preferences.email_enabled
        model.is_slack_notification_enabled = preferences.slack_enabled
        model.slack_webhook_url = preferences.slack_webhook_url
        model.in_app_alerts_enabled = preferences.in_app_enabled
        model.notification_time_offsets = format_offsets(preferences.offsets)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            email=model.email,
            username=model.username,
            preferences=NotificationPreferences(
                email_enabled=bool(model.is_email_notification_enabled),
                slack_enabled=bool(model.is_slack_notification_enabled),
                in_app_enabled=bool(model.in_app_alerts_enabled),
                slack_webhook_url=model.slack_webhook_url or None,
                offsets=parse_offsets(model.notification_time_offsets),
            ),
        )


__all__ = ["UserRepository"]
