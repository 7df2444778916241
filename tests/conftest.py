"""Shared fixtures: a throwaway SQLite database and row factories."""

from __future__ import annotations

import os
import pathlib
import sys
import tempfile
from datetime import date
from decimal import Decimal

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

TEST_DB_PATH = pathlib.Path(tempfile.mkdtemp(prefix="billtracker-tests-")) / "test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["APP_TIMEZONE"] = "UTC"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["EMAIL_BACKEND"] = "smtp"
os.environ["FRONTEND_URL"] = "http://bills.example.com"

import pytest

from billtracker.config import get_settings

get_settings.cache_clear()

from billtracker.infrastructure import database, models


@pytest.fixture()
def db_session():
    """Yield a session bound to freshly created tables."""

    database.Base.metadata.drop_all(bind=database.engine, checkfirst=True)
    database.Base.metadata.create_all(bind=database.engine)
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def make_user(db_session):
    def _make_user(
        *,
        email: str | None = "user@example.com",
        username: str | None = "tester",
        email_enabled: bool = False,
        slack_enabled: bool = False,
        in_app_enabled: bool = False,
        slack_webhook_url: str | None = None,
        offsets: str | None = "7,3,0",
    ) -> models.UserModel:
        user = models.UserModel(
            email=email,
            username=username,
            is_email_notification_enabled=email_enabled,
            is_slack_notification_enabled=slack_enabled,
            in_app_alerts_enabled=in_app_enabled,
            slack_webhook_url=slack_webhook_url,
            notification_time_offsets=offsets,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def make_bill(db_session):
    def _make_bill(
        user_id: int,
        due_date: date,
        *,
        name: str = "Electricity",
        amount: str = "120.50",
        is_paid: bool = False,
    ) -> models.BillModel:
        bill = models.BillModel(
            user_id=user_id,
            name=name,
            amount=Decimal(amount),
            due_date=due_date,
            is_paid=is_paid,
        )
        db_session.add(bill)
        db_session.commit()
        db_session.refresh(bill)
        return bill

    return _make_bill
