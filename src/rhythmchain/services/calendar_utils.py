"""Calendar boundary helpers shared by every chain and tier computation.

All functions are pure: they take immutable ``date``/``datetime`` values and
return new ones. Timezones are always passed explicitly; nothing here reads
the wall clock or the host timezone.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Iterator
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..errors import RhythmConfigError

MONDAY = 0
SUNDAY = 6


def resolve_timezone(name: str | None) -> ZoneInfo:
    """Return the ``ZoneInfo`` for an IANA name, defaulting to UTC."""

    try:
        return ZoneInfo(name or "UTC")
    except (ZoneInfoNotFoundError, ValueError, OSError):
        # tzdata directories such as "America" surface as IsADirectoryError
        raise RhythmConfigError(f"Unknown timezone: {name!r}", field="timezone") from None


def week_start(day: date, week_start_day: int = MONDAY) -> date:
    """Return the first day of the week containing ``day``.

    With the default Monday start a Sunday steps back six days.
    """

    offset = (day.weekday() - week_start_day) % 7
    return day - timedelta(days=offset)


def week_end(day: date, week_start_day: int = MONDAY) -> date:
    """Return the last day of the week containing ``day``."""

    return week_start(day, week_start_day) + timedelta(days=6)


def month_start(day: date) -> date:
    return day.replace(day=1)


def month_end(day: date) -> date:
    """Return the last calendar day of the month (day 0 of the next month)."""

    first_of_next = (day.replace(day=28) + timedelta(days=4)).replace(day=1)
    return first_of_next - timedelta(days=1)


def start_of_day(day: date, tz: ZoneInfo) -> datetime:
    """Return 00:00:00 of ``day`` in ``tz``."""

    return datetime.combine(day, time.min, tzinfo=tz)


def end_of_day(day: date, tz: ZoneInfo) -> datetime:
    """Return 23:59:59.999999 of ``day`` in ``tz``."""

    return datetime.combine(day, time.max, tzinfo=tz)


def period_bounds(start: date, end: date, tz: ZoneInfo) -> tuple[datetime, datetime]:
    """Aware datetimes spanning whole days ``start``..``end`` in ``tz``."""

    return start_of_day(start, tz), end_of_day(end, tz)


def local_date(timestamp: datetime, tz: ZoneInfo) -> date:
    """Return the logical day of ``timestamp`` in ``tz``.

    Naive timestamps are treated as UTC.
    """

    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(tz).date()


def format_date(day: date) -> str:
    """Canonical ``YYYY-MM-DD`` key for a logical day."""

    return day.isoformat()


def format_month(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


def parse_date(value: str | date) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every day from ``start`` to ``end`` inclusive."""

    cursor = start
    while cursor <= end:
        yield cursor
        cursor += timedelta(days=1)


def days_remaining_in_period(today: date, period_end: date, completed_today: bool) -> int:
    """Inclusive count of days left in a period.

    Today is counted only when it has not been completed yet. Once the period
    is over nothing remains.
    """

    if today > period_end:
        return 0
    remaining = (period_end - today).days
    return remaining if completed_today else remaining + 1


def days_remaining_in_week(
    today: date, completed_today: bool, week_start_day: int = MONDAY
) -> int:
    return days_remaining_in_period(today, week_end(today, week_start_day), completed_today)


__all__ = [
    "MONDAY",
    "SUNDAY",
    "days_remaining_in_period",
    "days_remaining_in_week",
    "end_of_day",
    "format_date",
    "format_month",
    "iter_days",
    "local_date",
    "month_end",
    "month_start",
    "parse_date",
    "period_bounds",
    "resolve_timezone",
    "start_of_day",
    "week_end",
    "week_start",
]
