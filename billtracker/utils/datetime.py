"""Calendar helpers bound to the configured ``APP_TIMEZONE``."""

from __future__ import annotations

import logging
from datetime import date, datetime, tzinfo
from functools import lru_cache

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from billtracker.config import get_settings

logger = logging.getLogger(__name__)

FALLBACK_TIMEZONE = "UTC"


def resolve_timezone(name: str | None) -> tzinfo:
    """Return the IANA zone called ``name``, or UTC when it is unknown."""

    name = (name or "").strip() or FALLBACK_TIMEZONE
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown APP_TIMEZONE %r; reminders will use UTC", name)
        return ZoneInfo(FALLBACK_TIMEZONE)


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    """Return the zone that decides which calendar day counts as "today"."""

    return resolve_timezone(get_settings().app_timezone)


def now_in_app_timezone() -> datetime:
    return datetime.now(tz=get_app_timezone())


def today_in_app_timezone() -> date:
    return now_in_app_timezone().date()


def ensure_app_timezone(value: datetime | None) -> datetime | None:
    """Express ``value`` in the app zone; naive values are taken as local."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=get_app_timezone())
    return value.astimezone(get_app_timezone())


def ensure_app_naive_datetime(value: datetime | None) -> datetime | None:
    """Return ``value`` as local wall-clock time for ``DATETIME`` columns."""

    localized = ensure_app_timezone(value)
    return localized.replace(tzinfo=None) if localized is not None else None


def now_in_app_naive_datetime() -> datetime:
    return now_in_app_timezone().replace(tzinfo=None)
