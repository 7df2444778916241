"""Tests for the notification preference use cases."""

import pytest

from billtracker.application.use_cases.notifications import (
    get_notification_preferences,
    update_notification_preferences,
)
from billtracker.infrastructure.models import UserModel


def test_update_stores_sorted_offsets_and_blank_webhook_as_none(db_session, make_user):
    user = make_user(slack_webhook_url="https://hooks.slack.com/old")

    preferences = update_notification_preferences(
        db_session,
        user.id,
        email_enabled=True,
        slack_enabled=False,
        slack_webhook_url="   ",
        in_app_enabled=True,
        offsets=[10, 1, 5, 1],
    )

    assert preferences.offsets == (1, 5, 10)
    assert preferences.slack_webhook_url is None
    stored = db_session.get(UserModel, user.id)
    assert stored.notification_time_offsets == "1,5,10"
    assert get_notification_preferences(db_session, user.id) == preferences


def test_unknown_user_raises(db_session):
    with pytest.raises(ValueError):
        get_notification_preferences(db_session, 123)
    with pytest.raises(ValueError):
        update_notification_preferences(
            db_session,
            123,
            email_enabled=False,
            slack_enabled=False,
            slack_webhook_url=None,
            in_app_enabled=False,
            offsets=[],
        )


def test_negative_offsets_are_rejected(db_session, make_user):
    user = make_user()

    with pytest.raises(ValueError):
        update_notification_preferences(
            db_session,
            user.id,
            email_enabled=False,
            slack_enabled=False,
            slack_webhook_url=None,
            in_app_enabled=False,
            offsets=[-3],
        )
