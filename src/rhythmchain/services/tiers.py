"""Frequency tiers: describe a week's consistency without an all-or-nothing streak.

Tiers bend rather than break. Missing a day drops a week from "Every Day"
to "Most Days", never to nothing.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable

from .calendar_utils import MONDAY, days_remaining_in_period, parse_date, week_end, week_start
from .day_aggregator import DayStatus


class TierName(str, Enum):
    DAILY = "daily"
    MOST_DAYS = "most_days"
    FEW_TIMES = "few_times"
    WEEKLY = "weekly"
    STARTING = "starting"


@dataclass(frozen=True, slots=True)
class FrequencyTier:
    name: TierName
    label: str
    short_label: str
    description: str
    min_days: int
    max_days: int


TIERS: dict[TierName, FrequencyTier] = {
    TierName.DAILY: FrequencyTier(TierName.DAILY, "Every Day", "Daily", "7 days per week", 7, 7),
    TierName.MOST_DAYS: FrequencyTier(TierName.MOST_DAYS, "Most Days", "5-6×", "5-6 days per week", 5, 6),
    TierName.FEW_TIMES: FrequencyTier(
        TierName.FEW_TIMES, "Several Times", "3-4×", "3-4 days per week", 3, 4
    ),
    TierName.WEEKLY: FrequencyTier(TierName.WEEKLY, "At Least Once", "1-2×", "1-2 days per week", 1, 2),
    TierName.STARTING: FrequencyTier(TierName.STARTING, "Starting", "—", "No activity yet", 0, 0),
}

# Most demanding first
TIER_ORDER: tuple[TierName, ...] = tuple(TIERS)


@dataclass(frozen=True, slots=True)
class WeeklyProgress:
    """Where a rhythm stands within one week."""

    start_date: date
    end_date: date
    days_completed: int
    achieved_tier: TierName
    best_possible_tier: TierName
    days_remaining: int

    def to_dict(self) -> dict:
        return {
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "days_completed": self.days_completed,
            "achieved_tier": self.achieved_tier.value,
            "best_possible_tier": self.best_possible_tier.value,
            "days_remaining": self.days_remaining,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WeeklyProgress":
        return cls(
            start_date=parse_date(data["start_date"]),
            end_date=parse_date(data["end_date"]),
            days_completed=int(data["days_completed"]),
            achieved_tier=TierName(data["achieved_tier"]),
            best_possible_tier=TierName(data["best_possible_tier"]),
            days_remaining=int(data["days_remaining"]),
        )


def tier_for_days_completed(days_completed: int) -> TierName:
    """Tier implied by a count of qualifying days in a week."""

    if days_completed >= 7:
        return TierName.DAILY
    if days_completed >= 5:
        return TierName.MOST_DAYS
    if days_completed >= 3:
        return TierName.FEW_TIMES
    if days_completed >= 1:
        return TierName.WEEKLY
    return TierName.STARTING


def best_possible_tier(days_completed: int, days_remaining: int) -> TierName:
    """Optimistic ceiling: the tier reached if every remaining day qualifies."""

    return tier_for_days_completed(days_completed + max(days_remaining, 0))


def tier_info(tier: TierName | str) -> FrequencyTier:
    return TIERS[TierName(tier)]


def tier_label(tier: TierName | str) -> str:
    return tier_info(tier).label


def tier_rank(tier: TierName | str) -> int:
    """Position in TIER_ORDER; 0 is the most demanding tier."""

    return TIER_ORDER.index(TierName(tier))


def is_at_least(tier: TierName | str, other: TierName | str) -> bool:
    """True when ``tier`` is as demanding as ``other`` or more."""

    return tier_rank(tier) <= tier_rank(other)


def calculate_weekly_progress(
    day_statuses: Iterable[DayStatus],
    week_of: date,
    *,
    today: date,
    week_start_day: int = MONDAY,
) -> WeeklyProgress:
    """Summarise the week containing ``week_of`` as seen on ``today``.

    Whether today is already complete comes from today's DayStatus; a
    completed today is no longer counted as remaining.
    """

    start = week_start(week_of, week_start_day)
    end = week_end(week_of, week_start_day)

    days_completed = 0
    completed_today = False
    for status in day_statuses:
        if start <= status.date <= end and status.is_complete:
            days_completed += 1
            if status.date == today:
                completed_today = True

    if today < start:
        days_remaining = 7
    else:
        days_remaining = days_remaining_in_period(today, end, completed_today)

    return WeeklyProgress(
        start_date=start,
        end_date=end,
        days_completed=days_completed,
        achieved_tier=tier_for_days_completed(days_completed),
        best_possible_tier=best_possible_tier(days_completed, days_remaining),
        days_remaining=days_remaining,
    )


__all__ = [
    "FrequencyTier",
    "TIERS",
    "TIER_ORDER",
    "TierName",
    "WeeklyProgress",
    "best_possible_tier",
    "calculate_weekly_progress",
    "is_at_least",
    "tier_for_days_completed",
    "tier_info",
    "tier_label",
    "tier_rank",
]
