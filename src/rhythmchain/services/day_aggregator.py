"""Collapse activity records into per-day completion facts."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Iterable, Optional, Union
from zoneinfo import ZoneInfo

from ..logging_config import get_logger
from ..models.rhythm import Rhythm
from .calendar_utils import iter_days, local_date, parse_date, resolve_timezone

logger = get_logger("services.day_aggregator")

TimestampLike = Union[datetime, str, None]


@dataclass(frozen=True, slots=True)
class RecordView:
    """Read-only projection of an activity record handed over by the entry store."""

    timestamp: TimestampLike
    timezone: Optional[str] = None
    metric_value: int = 0


@dataclass(frozen=True, slots=True)
class DayStatus:
    """Derived completion fact for one logical day of a rhythm."""

    date: date
    total_seconds: int
    entry_count: int
    is_complete: bool

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "total_seconds": self.total_seconds,
            "entry_count": self.entry_count,
            "is_complete": self.is_complete,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DayStatus":
        return cls(
            date=parse_date(data["date"]),
            total_seconds=int(data["total_seconds"]),
            entry_count=int(data["entry_count"]),
            is_complete=bool(data["is_complete"]),
        )


def _parse_timestamp(value: TimestampLike, record_tz: Optional[str]) -> Optional[datetime]:
    """Return an aware datetime, or None when the value is unusable.

    Naive values are read in the record's own capture timezone (UTC when it
    has none); the rhythm's timezone is applied afterwards by the caller.
    """

    if value is None:
        return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(text)
        except ValueError:
            return None
    if not isinstance(value, datetime):
        return None
    if value.tzinfo is None:
        zone: ZoneInfo | timezone = timezone.utc
        if record_tz:
            try:
                zone = resolve_timezone(record_tz)
            except ValueError:
                return None
        value = value.replace(tzinfo=zone)
    return value


def is_day_complete(rhythm: Rhythm, total_seconds: int, entry_count: int) -> bool:
    """Apply the rhythm's per-day goal to a day's totals."""

    if rhythm.goal_type == "count":
        return entry_count >= max(rhythm.goal_value, 1)
    if rhythm.goal_type == "boolean":
        return entry_count >= 1
    if entry_count == 0:
        return False
    return total_seconds >= rhythm.duration_threshold_seconds


def bucket_records(
    records: Iterable[RecordView], tz: ZoneInfo
) -> dict[date, tuple[int, int]]:
    """Group records by logical day in ``tz`` as ``{day: (seconds, count)}``."""

    buckets: dict[date, tuple[int, int]] = {}
    skipped = 0
    for record in records:
        moment = _parse_timestamp(record.timestamp, record.timezone)
        if moment is None:
            skipped += 1
            continue
        day = local_date(moment, tz)
        seconds, count = buckets.get(day, (0, 0))
        buckets[day] = (seconds + max(int(record.metric_value or 0), 0), count + 1)

    if skipped:
        logger.debug("Skipped records with unusable timestamps", extra={"skipped": skipped})
    return buckets


def aggregate_day_statuses(
    records: Iterable[RecordView],
    rhythm: Rhythm,
    *,
    start: date,
    end: date,
) -> list[DayStatus]:
    """Return one DayStatus per day in ``[start, end]``, with no gaps.

    Days without matching records are present and incomplete. Records falling
    outside the range are ignored.
    """

    tz = resolve_timezone(rhythm.timezone)
    buckets = bucket_records(records, tz)

    statuses: list[DayStatus] = []
    for day in iter_days(start, end):
        seconds, count = buckets.get(day, (0, 0))
        statuses.append(
            DayStatus(
                date=day,
                total_seconds=seconds,
                entry_count=count,
                is_complete=is_day_complete(rhythm, seconds, count),
            )
        )
    return statuses


def first_activity_date(records: Iterable[RecordView], rhythm: Rhythm) -> Optional[date]:
    """Earliest logical day with a usable record, if any."""

    days = bucket_records(records, resolve_timezone(rhythm.timezone))
    return min(days) if days else None


__all__ = [
    "DayStatus",
    "RecordView",
    "aggregate_day_statuses",
    "bucket_records",
    "first_activity_date",
    "is_day_complete",
]
