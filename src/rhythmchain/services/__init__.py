"""Service module exports."""

from . import (
    calendar_utils,
    chains,
    day_aggregator,
    nudges,
    progress,
    tiers,
    totals,
)

__all__ = [
    "calendar_utils",
    "chains",
    "day_aggregator",
    "nudges",
    "progress",
    "tiers",
    "totals",
]
