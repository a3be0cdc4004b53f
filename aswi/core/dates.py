"""
Calendar-date policy.

Every code path that needs "now" or "today" goes through this module so
check-in, check-out, leave submission and the dashboards agree on which
calendar day a physical moment belongs to. The day boundary is the one of
``settings.TIMEZONE``; stored timestamps are UTC.
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

from aswi.core.config import settings


def local_zone() -> ZoneInfo:
    return ZoneInfo(settings.TIMEZONE)


def local_now() -> datetime:
    """Current moment as an aware datetime in the business timezone."""
    return datetime.now(timezone.utc).astimezone(local_zone())


def today() -> date:
    return local_now().date()


def to_local(dt: datetime) -> datetime:
    """Convert a stored timestamp (naive values are treated as UTC)."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(local_zone())


def ensure_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar date in ``[start, end]`` inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    first = date(year, month, 1)
    if month == 12:
        last = date(year, 12, 31)
    else:
        last = date(year, month + 1, 1) - timedelta(days=1)
    return first, last


def late_cutoff(day: date, check_in_time: time, tolerance_minutes: int) -> datetime:
    """Latest local moment on ``day`` that still counts as on time."""
    start = datetime.combine(day, check_in_time, tzinfo=local_zone())
    return start + timedelta(minutes=tolerance_minutes)
