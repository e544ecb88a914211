"""Chain (streak) calculations over per-day completion facts.

Every chain type reduces to the same shape: an ordered sequence of periods
(days, weeks or months), each either qualifying or not, with the last one
possibly still in progress. ``current`` is the trailing run of qualifying
periods and ``longest`` the best run anywhere in history.

An in-progress period that already meets its threshold extends ``current``;
one that does not is skipped rather than treated as a break, since it can
still be completed. It is never assumed to complete favorably.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Callable, Iterable, Optional, Sequence

from ..errors import RhythmConfigError
from ..models.rhythm import Rhythm
from .calendar_utils import MONDAY, iter_days, month_end, month_start, resolve_timezone, week_start
from .day_aggregator import DayStatus

MAX_THRESHOLD_SECONDS = 24 * 60 * 60
GOAL_TYPES = frozenset({"duration", "count", "boolean"})


class ChainType(str, Enum):
    DAILY = "daily"
    WEEKLY_HIGH = "weekly_high"
    WEEKLY_LOW = "weekly_low"
    WEEKLY_TARGET = "weekly_target"
    MONTHLY_TARGET = "monthly_target"


class ChainUnit(str, Enum):
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"


@dataclass(frozen=True, slots=True)
class ChainConfig:
    type: ChainType
    label: str
    short_label: str
    description: str
    unit: ChainUnit
    min_days_per_period: Optional[int] = None
    requires_target: bool = False


CHAIN_CONFIGS: dict[ChainType, ChainConfig] = {
    ChainType.DAILY: ChainConfig(
        ChainType.DAILY, "Daily Chain", "Daily", "Every day", ChainUnit.DAYS, min_days_per_period=1
    ),
    ChainType.WEEKLY_HIGH: ChainConfig(
        ChainType.WEEKLY_HIGH, "Weekly (High)", "5×/wk", "5+ days per week", ChainUnit.WEEKS,
        min_days_per_period=5,
    ),
    ChainType.WEEKLY_LOW: ChainConfig(
        ChainType.WEEKLY_LOW, "Weekly (Regular)", "3×/wk", "3+ days per week", ChainUnit.WEEKS,
        min_days_per_period=3,
    ),
    ChainType.WEEKLY_TARGET: ChainConfig(
        ChainType.WEEKLY_TARGET, "Weekly Target", "Wk Goal", "Minutes per week", ChainUnit.WEEKS,
        requires_target=True,
    ),
    ChainType.MONTHLY_TARGET: ChainConfig(
        ChainType.MONTHLY_TARGET, "Monthly Target", "Mo Goal", "Minutes per month", ChainUnit.MONTHS,
        requires_target=True,
    ),
}

# Most demanding first
CHAIN_TYPE_ORDER: tuple[ChainType, ...] = tuple(CHAIN_CONFIGS)


@dataclass(frozen=True, slots=True)
class ChainStat:
    """Current and best chain for one chain type, in that type's unit."""

    type: ChainType
    current: int
    longest: int
    unit: ChainUnit

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "current": self.current,
            "longest": self.longest,
            "unit": self.unit.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ChainStat":
        return cls(
            type=ChainType(data["type"]),
            current=int(data["current"]),
            longest=int(data["longest"]),
            unit=ChainUnit(data["unit"]),
        )


def get_chain_config(chain_type: ChainType | str) -> ChainConfig:
    """Return the config for a chain type; unknown names raise RhythmConfigError."""

    try:
        return CHAIN_CONFIGS[ChainType(chain_type)]
    except ValueError:
        raise RhythmConfigError(f"Unknown chain type: {chain_type!r}", field="chain_types") from None


def format_chain_value(value: int, unit: ChainUnit | str) -> str:
    """Format a chain length with its unit, e.g. "1 day" or "3 weeks"."""

    unit_name = ChainUnit(unit).value
    if value == 0:
        return "—"
    return f"1 {unit_name[:-1]}" if value == 1 else f"{value} {unit_name}"


def validate_rhythm_config(rhythm: Rhythm) -> list[ChainType]:
    """Check the fields chain computation depends on and return the chain types.

    Required per chain type:
      - weekly_target: ``weekly_target_minutes`` > 0
      - monthly_target: ``monthly_target_minutes`` > 0
    """

    if rhythm.goal_type not in GOAL_TYPES:
        raise RhythmConfigError(
            f"Unsupported goal type: {rhythm.goal_type!r}", rhythm_id=rhythm.id, field="goal_type"
        )
    if not 0 <= rhythm.duration_threshold_seconds <= MAX_THRESHOLD_SECONDS:
        raise RhythmConfigError(
            "Duration threshold must be between 0 and 24 hours",
            rhythm_id=rhythm.id,
            field="duration_threshold_seconds",
        )
    try:
        resolve_timezone(rhythm.timezone)
    except RhythmConfigError as exc:
        exc.rhythm_id = rhythm.id
        raise

    chain_types: list[ChainType] = []
    for name in rhythm.configured_chain_types:
        try:
            config = get_chain_config(name)
        except RhythmConfigError as exc:
            exc.rhythm_id = rhythm.id
            raise
        if config.requires_target:
            target = rhythm.target_minutes_for(config.type.value)
            if target is None or target <= 0:
                raise RhythmConfigError(
                    f"{config.type.value} requires a positive target in minutes",
                    rhythm_id=rhythm.id,
                    field=f"{config.type.value}_minutes",
                )
        chain_types.append(config.type)
    return chain_types


def run_lengths(flags: Sequence[bool], *, last_in_progress: bool = False) -> tuple[int, int]:
    """Return (current, longest) consecutive-True runs for an ordered sequence.

    When ``last_in_progress`` is set, a False final element is skipped for
    ``current`` instead of ending the run.
    """

    longest = 0
    run = 0
    for flag in flags:
        if flag:
            run += 1
            longest = max(longest, run)
        else:
            run = 0

    # Current run: walk backwards until a gap.
    end = len(flags)
    if last_in_progress and end and not flags[-1]:
        end -= 1
    current = 0
    for index in range(end - 1, -1, -1):
        if not flags[index]:
            break
        current += 1

    return current, longest


def _next_week(key: date) -> date:
    return key + timedelta(days=7)


def _next_month(key: date) -> date:
    return month_end(key) + timedelta(days=1)


def _period_flags(
    day_statuses: Iterable[DayStatus],
    *,
    period_key: Callable[[date], date],
    next_period: Callable[[date], date],
    qualifies: Callable[[int, int], bool],
    today: date,
) -> list[bool]:
    """Partition days into periods and evaluate each, oldest first.

    The sequence runs from the first period with any day up to the period
    containing ``today``, so the last flag always belongs to the in-progress
    period. Periods with no days at all count as not qualifying.
    """

    totals: dict[date, list[int]] = {}
    for status in day_statuses:
        if status.date > today:
            continue
        bucket = totals.setdefault(period_key(status.date), [0, 0])
        if status.is_complete:
            bucket[0] += 1
        bucket[1] += status.total_seconds

    if not totals:
        return []

    flags: list[bool] = []
    cursor = min(totals)
    current_key = period_key(today)
    while cursor <= current_key:
        complete_days, seconds = totals.get(cursor, (0, 0))
        flags.append(qualifies(complete_days, seconds))
        cursor = next_period(cursor)
    return flags


def calculate_chain_stat(
    day_statuses: Sequence[DayStatus],
    chain_type: ChainType | str,
    *,
    today: date,
    target_minutes: Optional[int] = None,
    week_start_day: int = MONDAY,
) -> ChainStat:
    """Compute one ChainStat from a day sequence ending at (or before) ``today``."""

    config = get_chain_config(chain_type)

    if config.type is ChainType.DAILY:
        by_day = {status.date: status.is_complete for status in day_statuses if status.date <= today}
        if not by_day:
            return ChainStat(config.type, 0, 0, config.unit)
        flags = [by_day.get(day, False) for day in iter_days(min(by_day), today)]
        current, longest = run_lengths(flags, last_in_progress=True)
        return ChainStat(config.type, current, longest, config.unit)

    if config.requires_target:
        if target_minutes is None or target_minutes <= 0:
            raise RhythmConfigError(
                f"{config.type.value} requires a positive target in minutes", field="target_minutes"
            )
        target_seconds = target_minutes * 60

        def qualifies(_complete_days: int, seconds: int) -> bool:
            return seconds >= target_seconds

    else:
        min_days = config.min_days_per_period or 1

        def qualifies(complete_days: int, _seconds: int) -> bool:
            return complete_days >= min_days

    if config.unit is ChainUnit.MONTHS:
        flags = _period_flags(
            day_statuses,
            period_key=month_start,
            next_period=_next_month,
            qualifies=qualifies,
            today=today,
        )
    else:
        flags = _period_flags(
            day_statuses,
            period_key=lambda day: week_start(day, week_start_day),
            next_period=_next_week,
            qualifies=qualifies,
            today=today,
        )

    current, longest = run_lengths(flags, last_in_progress=True)
    return ChainStat(config.type, current, longest, config.unit)


def calculate_chain_stats(
    day_statuses: Sequence[DayStatus],
    rhythm: Rhythm,
    *,
    today: date,
    week_start_day: int = MONDAY,
) -> list[ChainStat]:
    """One ChainStat per chain type configured on the rhythm."""

    return [
        calculate_chain_stat(
            day_statuses,
            chain_type,
            today=today,
            target_minutes=rhythm.target_minutes_for(chain_type.value),
            week_start_day=week_start_day,
        )
        for chain_type in validate_rhythm_config(rhythm)
    ]


__all__ = [
    "CHAIN_CONFIGS",
    "CHAIN_TYPE_ORDER",
    "ChainConfig",
    "ChainStat",
    "ChainType",
    "ChainUnit",
    "calculate_chain_stat",
    "calculate_chain_stats",
    "format_chain_value",
    "get_chain_config",
    "run_lengths",
    "validate_rhythm_config",
]
