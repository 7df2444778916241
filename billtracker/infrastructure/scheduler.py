"""Daily timer driving the bill reminder run."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from sqlalchemy.orm import Session

from billtracker.application.use_cases.notifications import run_bill_reminders
from billtracker.config import Settings, get_settings
from billtracker.domain.entities import ReminderRunSummary
from billtracker.infrastructure.database import SessionLocal
from billtracker.infrastructure.notifications import SseConnectionRegistry
from billtracker.utils import get_app_timezone

logger = logging.getLogger(__name__)

JOB_ID = "daily-bill-reminders"


class ReminderScheduler:
    """Run the reminder job once a day at a fixed wall-clock time.

    The job runs on a worker thread with its own database session. Overlapping
    fires are skipped (``max_instances=1``) and missed fires are coalesced into a
    single run; the notification log keeps individual sends idempotent anyway.
    """

    def __init__(
        self,
        registry: SseConnectionRegistry,
        *,
        session_factory: Callable[[], Session] | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._registry = registry
        self._session_factory = session_factory or SessionLocal
        self._settings = settings or get_settings()
        self._scheduler = BackgroundScheduler(timezone=get_app_timezone())

    @property
    def running(self) -> bool:
        return self._scheduler.running

    def start(self) -> None:
        trigger = CronTrigger(
            hour=self._settings.notification_hour,
            minute=self._settings.notification_minute,
            timezone=get_app_timezone(),
        )
        self._scheduler.add_job(
            self._run_job,
            trigger,
            id=JOB_ID,
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        self._scheduler.start()
        logger.info(
            "Bill reminder job scheduled daily at %02d:%02d",
            self._settings.notification_hour,
            self._settings.notification_minute,
        )

    def shutdown(self) -> None:
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)

    def run_now(self, today: date | None = None) -> ReminderRunSummary:
        """Run one pass synchronously on the calling thread."""

        with self._session_factory() as session:
            return run_bill_reminders(
                session, registry=self._registry, today=today, settings=self._settings
            )

    def _run_job(self) -> None:
        try:
            self.run_now()
        except Exception:
            logger.exception("Error in notification scheduler")


def run_detached(
    today: date | None = None,
    *,
    session_factory: Callable[[], Session] | None = None,
    settings: Settings | None = None,
) -> ReminderRunSummary:
    """Run one pass outside the web server, as the command line script does.

    No browser is attached to such a run, so in-app reminders that find no
    stream are left unlogged for the server's own run to deliver.
    """

    settings = (settings or get_settings()).model_copy(update={"log_in_app_on_failure": False})
    scheduler = ReminderScheduler(
        SseConnectionRegistry(), session_factory=session_factory, settings=settings
    )
    return scheduler.run_now(today)


__all__ = ["JOB_ID", "ReminderScheduler", "run_detached"]
