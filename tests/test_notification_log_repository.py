"""Tests for the duplicate-suppressing reminder log."""

from datetime import date, datetime, timezone

from billtracker.domain.entities import NotificationChannel
from billtracker.infrastructure.models import NotificationLogModel
from billtracker.infrastructure.repositories import NotificationLogRepository


def test_has_sent_is_false_until_logged(db_session, make_user, make_bill):
    user = make_user()
    bill = make_bill(user.id, date(2026, 6, 4))
    repository = NotificationLogRepository(db_session)
    sent_at = datetime(2026, 6, 1, 9, 0, tzinfo=timezone.utc)

    assert not repository.has_sent(user.id, bill.id, NotificationChannel.EMAIL, date(2026, 6, 1))

    repository.log_sent(user.id, bill.id, NotificationChannel.EMAIL, "It's due in 3 day(s).", sent_at=sent_at)

    assert repository.has_sent(user.id, bill.id, NotificationChannel.EMAIL, date(2026, 6, 1))
    assert not repository.has_sent(user.id, bill.id, NotificationChannel.SLACK, date(2026, 6, 1))
    assert not repository.has_sent(user.id, bill.id, NotificationChannel.EMAIL, date(2026, 6, 2))


def test_logging_twice_on_the_same_day_keeps_one_row(db_session, make_user, make_bill):
    user = make_user()
    bill = make_bill(user.id, date(2026, 6, 1))
    repository = NotificationLogRepository(db_session)

    morning = datetime(2026, 6, 1, 9, 0, tzinfo=timezone.utc)
    evening = datetime(2026, 6, 1, 21, 0, tzinfo=timezone.utc)
    repository.log_sent(user.id, bill.id, NotificationChannel.IN_APP, "first", sent_at=morning)
    repository.log_sent(user.id, bill.id, NotificationChannel.IN_APP, "second", sent_at=evening)

    rows = db_session.query(NotificationLogModel).all()
    assert len(rows) == 1
    assert rows[0].message_content == "first"
    assert rows[0].sent_on == date(2026, 6, 1)


def test_next_day_gets_a_new_row(db_session, make_user, make_bill):
    user = make_user()
    bill = make_bill(user.id, date(2026, 6, 3))
    repository = NotificationLogRepository(db_session)

    repository.log_sent(
        user.id, bill.id, "slack", "day one", sent_at=datetime(2026, 6, 1, 9, tzinfo=timezone.utc)
    )
    repository.log_sent(
        user.id, bill.id, "slack", "day two", sent_at=datetime(2026, 6, 2, 9, tzinfo=timezone.utc)
    )

    rows = db_session.query(NotificationLogModel).order_by(NotificationLogModel.sent_on).all()
    assert [row.message_content for row in rows] == ["day one", "day two"]
    assert [row.sent_on for row in rows] == [date(2026, 6, 1), date(2026, 6, 2)]
    assert all(row.notification_type == "slack" for row in rows)
