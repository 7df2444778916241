"""Persistence helpers for the reminder delivery log."""

from __future__ import annotations

import logging
from datetime import date, datetime

from sqlalchemy import func
from sqlalchemy.dialects.mysql import insert as mysql_insert
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from billtracker.domain.entities import NotificationChannel
from billtracker.infrastructure.models import NotificationLogModel
from billtracker.utils import ensure_app_naive_datetime, ensure_app_timezone, now_in_app_timezone

logger = logging.getLogger(__name__)


class NotificationLogRepository:
    """Record reminders and answer whether one was already sent."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def has_sent(
        self,
        user_id: int,
        bill_id: int,
        channel: NotificationChannel,
        day: date,
    ) -> bool:
        count = (
            self.session.query(func.count(NotificationLogModel.id))
            .filter(NotificationLogModel.user_id == user_id)
            .filter(NotificationLogModel.bill_id == bill_id)
            .filter(NotificationLogModel.notification_type == NotificationChannel(channel).value)
            .filter(NotificationLogModel.sent_on == day)
            .scalar()
        )
        return bool(count)

    def log_sent(
        self,
        user_id: int,
        bill_id: int,
        channel: NotificationChannel,
        message: str,
        *,
        sent_at: datetime | None = None,
    ) -> None:
        """Insert a log row, ignoring it when the day already has one."""

        localized = ensure_app_timezone(sent_at) or now_in_app_timezone()
        values = {
            "user_id": user_id,
            "bill_id": bill_id,
            "notification_type": NotificationChannel(channel).value,
            "message_content": message,
            "sent_at": ensure_app_naive_datetime(localized),
            "sent_on": localized.date(),
        }

        dialect = self.session.get_bind().dialect.name
        if dialect == "mysql":
            statement = mysql_insert(NotificationLogModel).values(**values)
            statement = statement.on_duplicate_key_update(id=NotificationLogModel.id)
        elif dialect == "sqlite":
            statement = sqlite_insert(NotificationLogModel).values(**values)
            statement = statement.on_conflict_do_nothing()
        elif dialect == "postgresql":
            statement = postgresql_insert(NotificationLogModel).values(**values)
            statement = statement.on_conflict_do_nothing(constraint="unique_notification_per_day")
        else:
            self._insert_ignoring_duplicates(values)
            return

        self.session.execute(statement)
        self.session.commit()

    def _insert_ignoring_duplicates(self, values: dict[str, object]) -> None:
        self.session.add(NotificationLogModel(**values))
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            logger.debug(
                "Notification log already present for user %s bill %s on %s",
                values["user_id"],
                values["bill_id"],
                values["sent_on"],
            )


__all__ = ["NotificationLogRepository"]
