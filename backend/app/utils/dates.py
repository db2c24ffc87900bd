"""UTC date helpers.

Timestamps are stored as naive UTC.  Anything timezone-aware coming in
from a request is converted once, at the edge, with `to_naive_utc()`.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def utc_day_start(value: datetime | date) -> datetime:
    """Midnight UTC of the day containing `value`."""
    return datetime(value.year, value.month, value.day)


def utc_day_bounds(value: datetime) -> tuple[datetime, datetime]:
    """[start, end) of the UTC calendar day containing `value`."""
    start = utc_day_start(value)
    return start, start + timedelta(days=1)


def months_ago(value: datetime, months: int) -> datetime:
    """Same wall-clock time `months` calendar months earlier.

    The day is clamped to the end of the target month (31 May → 28/29 Feb).
    """
    month_index = value.year * 12 + (value.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)
