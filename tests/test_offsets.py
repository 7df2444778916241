"""Tests for reminder offset parsing and normalization."""

import pytest

from billtracker.domain.entities import (
    NotificationPreferences,
    format_offsets,
    normalize_offsets,
    parse_offsets,
)
from billtracker.application.use_cases.notifications import reminder_message


def test_normalize_offsets_sorts_and_deduplicates():
    assert normalize_offsets([5, 1, 10, 5]) == (1, 5, 10)


def test_normalize_offsets_rejects_negative_values():
    with pytest.raises(ValueError):
        normalize_offsets([3, -1])


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, ()),
        ("", ()),
        ("7,3,0", (0, 3, 7)),
        (" 10, 1 ,5,,5 ", (1, 5, 10)),
        ("3,abc,-2,1", (1, 3)),
    ],
)
def test_parse_offsets(raw, expected):
    assert parse_offsets(raw) == expected


def test_storage_form_is_lossless():
    stored = format_offsets([5, 1, 10])

    assert stored == "1,5,10"
    assert parse_offsets(stored) == (1, 5, 10)


def test_effective_offsets_fall_back_to_default():
    assert NotificationPreferences().effective_offsets([7, 3, 0]) == (0, 3, 7)
    assert NotificationPreferences(offsets=(2,)).effective_offsets([7, 3, 0]) == (2,)


def test_any_channel_enabled():
    assert not NotificationPreferences().any_channel_enabled()
    assert NotificationPreferences(slack_enabled=True).any_channel_enabled()


@pytest.mark.parametrize(
    ("days", "expected"),
    [
        (0, "It's due today!"),
        (3, "It's due in 3 day(s)."),
        (-2, "It was due 2 day(s) ago."),
    ],
)
def test_reminder_message(days, expected):
    assert reminder_message(days) == expected
