"""Aggregate totals, period stats and journey stage for a rhythm."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable, Optional, Sequence

from .calendar_utils import MONDAY, month_start, parse_date, week_start
from .day_aggregator import DayStatus


class JourneyStage(str, Enum):
    STARTING = "starting"
    BUILDING = "building"
    BECOMING = "becoming"


ENCOURAGEMENTS: dict[JourneyStage, str] = {
    JourneyStage.STARTING: "Every journey begins with a single step",
    JourneyStage.BUILDING: "A practice is forming",
    JourneyStage.BECOMING: "This is who you are now",
}


@dataclass(frozen=True, slots=True)
class RhythmTotals:
    total_sessions: int
    total_seconds: int
    total_hours: float
    first_entry_date: Optional[date]
    weeks_active: int
    months_active: int

    def to_dict(self) -> dict:
        return {
            "total_sessions": self.total_sessions,
            "total_seconds": self.total_seconds,
            "total_hours": self.total_hours,
            "first_entry_date": self.first_entry_date.isoformat() if self.first_entry_date else None,
            "weeks_active": self.weeks_active,
            "months_active": self.months_active,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RhythmTotals":
        first = data.get("first_entry_date")
        return cls(
            total_sessions=int(data["total_sessions"]),
            total_seconds=int(data["total_seconds"]),
            total_hours=float(data["total_hours"]),
            first_entry_date=parse_date(first) if first else None,
            weeks_active=int(data["weeks_active"]),
            months_active=int(data["months_active"]),
        )


@dataclass(frozen=True, slots=True)
class PeriodStats:
    """Sessions and time logged over one stretch of days."""

    sessions: int
    total_seconds: int
    average_seconds: float

    def to_dict(self) -> dict:
        return {
            "sessions": self.sessions,
            "total_seconds": self.total_seconds,
            "average_seconds": self.average_seconds,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PeriodStats":
        return cls(
            sessions=int(data["sessions"]),
            total_seconds=int(data["total_seconds"]),
            average_seconds=float(data["average_seconds"]),
        )


@dataclass(frozen=True, slots=True)
class PeriodSummary:
    today: PeriodStats
    this_week: PeriodStats
    this_month: PeriodStats
    all_time: PeriodStats

    def to_dict(self) -> dict:
        return {
            "today": self.today.to_dict(),
            "this_week": self.this_week.to_dict(),
            "this_month": self.this_month.to_dict(),
            "all_time": self.all_time.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PeriodSummary":
        return cls(
            today=PeriodStats.from_dict(data["today"]),
            this_week=PeriodStats.from_dict(data["this_week"]),
            this_month=PeriodStats.from_dict(data["this_month"]),
            all_time=PeriodStats.from_dict(data["all_time"]),
        )


def calculate_totals(
    day_statuses: Sequence[DayStatus],
    *,
    week_start_day: int = MONDAY,
) -> RhythmTotals:
    """Sum sessions and time across all days; count weeks/months with a complete day."""

    total_sessions = 0
    total_seconds = 0
    first_entry: Optional[date] = None
    active_weeks: set[date] = set()
    active_months: set[date] = set()

    for status in day_statuses:
        total_sessions += status.entry_count
        total_seconds += status.total_seconds
        if status.entry_count and (first_entry is None or status.date < first_entry):
            first_entry = status.date
        if status.is_complete:
            active_weeks.add(week_start(status.date, week_start_day))
            active_months.add(month_start(status.date))

    return RhythmTotals(
        total_sessions=total_sessions,
        total_seconds=total_seconds,
        total_hours=round(total_seconds / 3600, 2),
        first_entry_date=first_entry,
        weeks_active=len(active_weeks),
        months_active=len(active_months),
    )


def calculate_period_stats(
    day_statuses: Iterable[DayStatus],
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> PeriodStats:
    """Sessions, seconds and average session length for days in ``[start, end]``.

    Either bound may be omitted to leave that side open.
    """

    sessions = 0
    total_seconds = 0
    for status in day_statuses:
        if start is not None and status.date < start:
            continue
        if end is not None and status.date > end:
            continue
        sessions += status.entry_count
        total_seconds += status.total_seconds

    average = round(total_seconds / sessions, 1) if sessions else 0.0
    return PeriodStats(sessions=sessions, total_seconds=total_seconds, average_seconds=average)


def summarize_periods(
    day_statuses: Sequence[DayStatus],
    today: date,
    *,
    week_start_day: int = MONDAY,
) -> PeriodSummary:
    """Period stats for today, this calendar week and month so far, and all time."""

    return PeriodSummary(
        today=calculate_period_stats(day_statuses, today, today),
        this_week=calculate_period_stats(day_statuses, week_start(today, week_start_day), today),
        this_month=calculate_period_stats(day_statuses, month_start(today), today),
        all_time=calculate_period_stats(day_statuses, end=today),
    )


def last_completed_date(
    day_statuses: Iterable[DayStatus], *, today: Optional[date] = None
) -> Optional[date]:
    """Most recent complete day, ignoring anything after ``today``."""

    latest: Optional[date] = None
    for status in day_statuses:
        if not status.is_complete or (today is not None and status.date > today):
            continue
        if latest is None or status.date > latest:
            latest = status.date
    return latest


def journey_stage(weeks_active: int) -> JourneyStage:
    if weeks_active >= 4:
        return JourneyStage.BECOMING
    if weeks_active >= 2:
        return JourneyStage.BUILDING
    return JourneyStage.STARTING


def encouragement_for(stage: JourneyStage | str) -> str:
    return ENCOURAGEMENTS[JourneyStage(stage)]


__all__ = [
    "ENCOURAGEMENTS",
    "JourneyStage",
    "PeriodStats",
    "PeriodSummary",
    "RhythmTotals",
    "calculate_period_stats",
    "calculate_totals",
    "encouragement_for",
    "journey_stage",
    "last_completed_date",
    "summarize_periods",
]
