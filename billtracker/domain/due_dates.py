"""Next due date calculation for recurring bill templates."""

from __future__ import annotations

import calendar
from datetime import date

from dateutil.relativedelta import relativedelta

from billtracker.utils import today_in_app_timezone

_FREQUENCY_MONTHS = {
    "monthly": 1,
    "quarterly": 3,
    "annually": 12,
}


def _clamp_day(year: int, month: int, day: int) -> date:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day, last_day))


def next_due_date(due_day: int, frequency: str, *, today: date | None = None) -> date:
    """Return the next calendar date a bill due on ``due_day`` falls on.

    The current month is tried first. When that day has already passed the date
    moves forward by the frequency period; frequencies without a month period
    (``weekly``, ``one-time`` and anything unknown) move one month. Days beyond
    the end of a shorter month are clamped to its last day, so ``due_day=31``
    resolves to February 28th or 29th.
    """

    if not 1 <= due_day <= 31:
        raise ValueError("due_day must be between 1 and 31")

    if today is None:
        today = today_in_app_timezone()

    candidate = _clamp_day(today.year, today.month, due_day)
    if candidate >= today:
        return candidate

    months = _FREQUENCY_MONTHS.get((frequency or "").lower(), 1)
    advanced = candidate.replace(day=1) + relativedelta(months=months)
    return _clamp_day(advanced.year, advanced.month, due_day)


__all__ = ["next_due_date"]
