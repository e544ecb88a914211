"""Mid-week nudge messages derived from weekly progress."""

from __future__ import annotations

from typing import Optional

from ..models.rhythm import Rhythm
from .tiers import TierName, WeeklyProgress, tier_info


def _times(count: int) -> str:
    return "time" if count == 1 else "times"


def _message(days_needed: int, label: str) -> str:
    return f"{days_needed} more {_times(days_needed)} to hit '{label}'"


def default_target_tier(rhythm: Rhythm) -> TierName:
    """Daily rhythms aim for every day; everything else for at least once a week."""

    return TierName.DAILY if rhythm.frequency == "daily" else TierName.WEEKLY


def generate_nudge_message(progress: WeeklyProgress, target_tier: TierName | str) -> Optional[str]:
    """Return an encouragement for the rest of the week, or None.

    None means either the target is already met or nothing meaningful is
    still reachable; the message never tells the user they have failed.
    """

    target = tier_info(target_tier)
    days_needed = target.min_days - progress.days_completed

    if days_needed <= 0:
        return None

    if days_needed <= progress.days_remaining:
        return _message(days_needed, target.label)

    # Target out of reach: point at the best tier that still is.
    if progress.best_possible_tier is TierName.STARTING:
        return None
    best = tier_info(progress.best_possible_tier)
    best_needed = best.min_days - progress.days_completed
    if 0 < best_needed <= progress.days_remaining:
        return _message(best_needed, best.label)
    return None


__all__ = ["default_target_tier", "generate_nudge_message"]
