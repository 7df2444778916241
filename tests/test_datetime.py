"""Tests for the application timezone helpers."""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from billtracker.utils import ensure_app_naive_datetime
from billtracker.utils.datetime import resolve_timezone


def test_resolve_timezone_accepts_iana_names():
    assert resolve_timezone("Europe/Dublin") == ZoneInfo("Europe/Dublin")


@pytest.mark.parametrize("name", [None, "", "  ", "Mars/Olympus_Mons", "UTC+05:30"])
def test_resolve_timezone_falls_back_to_utc(name):
    assert resolve_timezone(name) == ZoneInfo("UTC")


def test_aware_values_are_stored_as_local_wall_clock():
    value = datetime(2026, 6, 1, 23, 30, tzinfo=timezone.utc)

    assert ensure_app_naive_datetime(value) == datetime(2026, 6, 1, 23, 30)
    assert ensure_app_naive_datetime(None) is None
