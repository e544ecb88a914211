"""Rhythm progress orchestration: records in, cached chain/tier snapshot out.

The service owns the read/invalidate cycle around the pure engine. A read
returns the cached snapshot only when it was computed for the same logical
day; anything else recomputes from the full record history. Writes never
patch a snapshot, they delete it.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Callable, Optional

from ..config import BaseConfig
from ..domain.repositories import EntryStore, ProgressCache, RhythmRepository
from ..errors import RhythmNotFoundError
from ..logging_config import get_logger
from ..models.rhythm import Rhythm
from .calendar_utils import local_date, parse_date, period_bounds, resolve_timezone
from .chains import ChainStat, ChainType, calculate_chain_stats
from .day_aggregator import DayStatus, aggregate_day_statuses, first_activity_date
from .nudges import default_target_tier, generate_nudge_message
from .tiers import TierName, WeeklyProgress, calculate_weekly_progress
from .totals import (
    JourneyStage,
    PeriodSummary,
    RhythmTotals,
    calculate_totals,
    encouragement_for,
    journey_stage,
    last_completed_date,
    summarize_periods,
)

logger = get_logger("services.progress")

Clock = Callable[[], datetime]

# Trailing window of day statuses kept on a snapshot, today included
VISIBLE_DAYS = 365


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class ProgressSnapshot:
    """Everything computed for a rhythm as of one logical day."""

    rhythm_id: str
    as_of: date
    chains: tuple[ChainStat, ...]
    weekly_progress: WeeklyProgress
    totals: RhythmTotals
    periods: PeriodSummary
    days: tuple[DayStatus, ...] = ()
    last_completed: Optional[date] = None
    computed_at: datetime = field(default_factory=_utcnow)

    @property
    def journey_stage(self) -> JourneyStage:
        return journey_stage(self.totals.weeks_active)

    @property
    def encouragement(self) -> str:
        return encouragement_for(self.journey_stage)

    def chain(self, chain_type: ChainType | str) -> Optional[ChainStat]:
        wanted = ChainType(chain_type)
        return next((stat for stat in self.chains if stat.type is wanted), None)

    def to_dict(self) -> dict:
        return {
            "rhythm_id": self.rhythm_id,
            "as_of": self.as_of.isoformat(),
            "chains": [stat.to_dict() for stat in self.chains],
            "weekly_progress": self.weekly_progress.to_dict(),
            "totals": self.totals.to_dict(),
            "periods": self.periods.to_dict(),
            "days": [status.to_dict() for status in self.days],
            "last_completed": self.last_completed.isoformat() if self.last_completed else None,
            "computed_at": self.computed_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ProgressSnapshot":
        last_completed = data.get("last_completed")
        return cls(
            rhythm_id=str(data["rhythm_id"]),
            as_of=parse_date(data["as_of"]),
            chains=tuple(ChainStat.from_dict(item) for item in data["chains"]),
            weekly_progress=WeeklyProgress.from_dict(data["weekly_progress"]),
            totals=RhythmTotals.from_dict(data["totals"]),
            periods=PeriodSummary.from_dict(data["periods"]),
            days=tuple(DayStatus.from_dict(item) for item in data["days"]),
            last_completed=parse_date(last_completed) if last_completed else None,
            computed_at=datetime.fromisoformat(data["computed_at"]),
        )


class RecordChangeKind(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


@dataclass(frozen=True, slots=True)
class RecordChange:
    """Notification from the entry store that records affecting some rhythms changed."""

    kind: RecordChangeKind
    rhythm_ids: tuple[str, ...]


class RhythmProgressService:
    """Computes and caches chain stats, weekly progress and nudges per rhythm."""

    def __init__(
        self,
        entry_store: EntryStore,
        rhythms: RhythmRepository,
        cache: Optional[ProgressCache] = None,
        *,
        config: Optional[BaseConfig] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        if cache is None:
            from ..infra.cache import InMemoryProgressCache

            cache = InMemoryProgressCache()
        self.entry_store = entry_store
        self.rhythms = rhythms
        self.cache = cache
        self.config = config or BaseConfig()
        self.clock = clock or _utcnow
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    # -- read path ---------------------------------------------------------

    def get_progress(self, rhythm_id: str, *, today: Optional[date] = None) -> ProgressSnapshot:
        """Return the snapshot for ``today`` (the rhythm's local day when omitted)."""

        _, snapshot = self._load(rhythm_id, today)
        return snapshot

    def get_chain_stats(self, rhythm_id: str, *, today: Optional[date] = None) -> list[ChainStat]:
        return list(self.get_progress(rhythm_id, today=today).chains)

    def get_weekly_progress(self, rhythm_id: str, *, today: Optional[date] = None) -> WeeklyProgress:
        return self.get_progress(rhythm_id, today=today).weekly_progress

    def get_nudge(
        self,
        rhythm_id: str,
        target_tier: TierName | str | None = None,
        *,
        today: Optional[date] = None,
    ) -> Optional[str]:
        """Nudge toward ``target_tier`` (the rhythm's default target when omitted)."""

        rhythm, snapshot = self._load(rhythm_id, today)
        target = target_tier if target_tier is not None else default_target_tier(rhythm)
        return generate_nudge_message(snapshot.weekly_progress, target)

    # -- write path --------------------------------------------------------

    def invalidate(self, rhythm_id: str) -> None:
        """Drop the cached snapshot so the next read recomputes."""

        with self._lock_for(rhythm_id):
            self.cache.invalidate(rhythm_id)
        logger.debug("Invalidated progress cache", extra={"rhythm_id": rhythm_id})

    def on_record_changed(self, change: RecordChange) -> None:
        """Invalidate every rhythm a created, edited or deleted record touches."""

        for rhythm_id in dict.fromkeys(change.rhythm_ids):
            self.invalidate(rhythm_id)

    def on_rhythm_updated(self, rhythm_id: str) -> None:
        self.invalidate(rhythm_id)

    # -- internals ---------------------------------------------------------

    def _lock_for(self, rhythm_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(rhythm_id)
            if lock is None:
                lock = self._locks[rhythm_id] = threading.Lock()
            return lock

    def _forget_lock(self, rhythm_id: str) -> None:
        with self._locks_guard:
            self._locks.pop(rhythm_id, None)

    def _today_for(self, rhythm: Rhythm) -> date:
        return local_date(self.clock(), resolve_timezone(rhythm.timezone))

    def _load(self, rhythm_id: str, today: Optional[date]) -> tuple[Rhythm, ProgressSnapshot]:
        # Lookup, cache read and recompute hold the same lock as invalidate().
        with self._lock_for(rhythm_id):
            rhythm = self.rhythms.get_by_id(rhythm_id)
            if rhythm is None:
                self._forget_lock(rhythm_id)
                raise RhythmNotFoundError(rhythm_id)

            as_of = today or self._today_for(rhythm)
            cached = self.cache.get(rhythm_id)
            if cached is not None and cached.as_of == as_of:
                logger.debug("Using cached progress", extra={"rhythm_id": rhythm_id, "as_of": as_of})
                return rhythm, cached

            snapshot = self.compute(rhythm, as_of)
            self.cache.set(snapshot)
            return rhythm, snapshot

    def compute(self, rhythm: Rhythm, today: date) -> ProgressSnapshot:
        """Full recomputation from the entry store, bypassing the cache."""

        week_start_day = self.config.WEEK_START_DAY
        history_start = self.config.HISTORY_START
        tz = resolve_timezone(rhythm.timezone)

        range_start, range_end = period_bounds(history_start, today, tz)
        records = self.entry_store.list_records(rhythm, range_start, range_end)

        first_day = first_activity_date(records, rhythm)
        start = min(max(first_day, history_start), today) if first_day else today
        days = aggregate_day_statuses(records, rhythm, start=start, end=today)

        chains = calculate_chain_stats(days, rhythm, today=today, week_start_day=week_start_day)
        weekly = calculate_weekly_progress(days, today, today=today, week_start_day=week_start_day)
        totals = calculate_totals(days, week_start_day=week_start_day)
        periods = summarize_periods(days, today, week_start_day=week_start_day)
        visible_from = today - timedelta(days=VISIBLE_DAYS - 1)

        logger.info(
            "Computed rhythm progress",
            extra={
                "rhythm_id": rhythm.id,
                "as_of": today,
                "record_count": len(records),
                "day_count": len(days),
            },
        )
        return ProgressSnapshot(
            rhythm_id=rhythm.id,
            as_of=today,
            chains=tuple(chains),
            weekly_progress=weekly,
            totals=totals,
            periods=periods,
            days=tuple(status for status in days if status.date >= visible_from),
            last_completed=last_completed_date(days, today=today),
            computed_at=self.clock(),
        )


__all__ = [
    "ProgressSnapshot",
    "RecordChange",
    "RecordChangeKind",
    "RhythmProgressService",
]
