"""Daily bill reminder run."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta

from sqlalchemy.orm import Session

from billtracker.config import Settings, get_settings
from billtracker.domain.entities import (
    Bill,
    DeliveryResult,
    NotificationChannel,
    ReminderRunSummary,
    User,
)
from billtracker.infrastructure.email import send_bill_reminder_email
from billtracker.infrastructure.notifications import (
    InAppAlertSender,
    SseConnectionRegistry,
    build_bill_alert,
)
from billtracker.infrastructure.repositories import (
    BillRepository,
    NotificationLogRepository,
    UserRepository,
)
from billtracker.infrastructure.slack import send_bill_reminder_slack
from billtracker.utils import now_in_app_timezone

from .messages import reminder_message

logger = logging.getLogger(__name__)


class _ReminderRun:
    """State shared while one run walks users, offsets, bills and channels."""

    def __init__(
        self,
        session: Session,
        *,
        registry: SseConnectionRegistry,
        settings: Settings,
        today: date,
        sent_at: datetime,
    ) -> None:
        self.session = session
        self.settings = settings
        self.today = today
        self.sent_at = sent_at
        self.users = UserRepository(session)
        self.bills = BillRepository(session)
        self.log = NotificationLogRepository(session)
        self.in_app = InAppAlertSender(registry)
        self.summary = ReminderRunSummary(run_date=today)

    def process_user(self, user: User) -> None:
        offsets = user.preferences.effective_offsets(
            self.settings.default_notification_offsets
        )
        for offset in offsets:
            target = self.today + timedelta(days=offset)
            for bill in self.bills.list_unpaid_due_on(user.id, target):
                self.summary.bills += 1
                message = reminder_message((target - self.today).days)
                for channel in NotificationChannel:
                    self.dispatch(user, bill, channel, message)

    def dispatch(
        self, user: User, bill: Bill, channel: NotificationChannel, message: str
    ) -> None:
        if not self._channel_enabled(user, channel):
            return

        try:
            if self.log.has_sent(user.id, bill.id, channel, self.today):
                self.summary.suppressed[channel.value] += 1
                return

            result = self._send(user, bill, channel, message)
            self.summary.record(result)

            if result.delivered or (
                channel is NotificationChannel.IN_APP and self.settings.log_in_app_on_failure
            ):
                self.log.log_sent(user.id, bill.id, channel, message, sent_at=self.sent_at)
        except Exception as exc:
            self.session.rollback()
            logger.exception(
                "Reminder for bill %s on channel %s failed for user %s",
                bill.id,
                channel.value,
                user.id,
            )
            self.summary.record(DeliveryResult.failed(channel, str(exc)))

    def _send(
        self, user: User, bill: Bill, channel: NotificationChannel, message: str
    ) -> DeliveryResult:
        if channel is NotificationChannel.EMAIL:
            return send_bill_reminder_email(user, bill, message)
        if channel is NotificationChannel.SLACK:
            return send_bill_reminder_slack(user, bill, message)
        return self.in_app.send(
            user.id,
            build_bill_alert(bill, message),
            enabled=user.preferences.in_app_enabled,
        )

    @staticmethod
    def _channel_enabled(user: User, channel: NotificationChannel) -> bool:
        preferences = user.preferences
        if channel is NotificationChannel.EMAIL:
            return preferences.email_enabled
        if channel is NotificationChannel.SLACK:
            return preferences.slack_enabled
        return preferences.in_app_enabled


def run_bill_reminders(
    session: Session,
    *,
    registry: SseConnectionRegistry,
    today: date | None = None,
    settings: Settings | None = None,
) -> ReminderRunSummary:
    """Send the reminders due on ``today`` (the current day by default).

    Every (bill, channel) pair is isolated: a failing sender or database write
    is logged and counted, and the run moves on. The notification log is checked
    before each send, so repeated runs on the same day do not send twice.
    """

    settings = settings or get_settings()
    started_at = now_in_app_timezone()
    if today is None:
        today = started_at.date()
    sent_at = (
        started_at
        if started_at.date() == today
        else datetime.combine(today, started_at.timetz())
    )

    run = _ReminderRun(
        session, registry=registry, settings=settings, today=today, sent_at=sent_at
    )
    logger.info("Running daily bill notification check for %s", today)

    try:
        users = run.users.list_with_any_channel_enabled()
    except Exception as exc:
        session.rollback()
        logger.exception("Could not load users for the reminder run")
        run.summary.aborted = True
        run.summary.errors.append(f"users: {exc}")
        return run.summary

    for user in users:
        run.summary.users += 1
        try:
            run.process_user(user)
        except Exception as exc:
            session.rollback()
            logger.exception("Error processing reminders for user %s", user.id)
            run.summary.errors.append(f"user {user.id}: {exc}")

    summary = run.summary
    logger.info(
        "Reminder run for %s finished: %s users, %s bills, delivered=%s skipped=%s "
        "failed=%s suppressed=%s",
        today,
        summary.users,
        summary.bills,
        dict(summary.delivered),
        dict(summary.skipped),
        dict(summary.failed),
        dict(summary.suppressed),
    )
    return summary


__all__ = ["run_bill_reminders"]
