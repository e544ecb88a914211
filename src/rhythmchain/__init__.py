"""Rhythm chain engine: streaks, frequency tiers and nudges from activity records."""

from __future__ import annotations

from .config import BaseConfig, DevConfig
from .context import EngineContext, create_engine_context
from .errors import RhythmConfigError, RhythmEngineError, RhythmNotFoundError
from .services.progress import ProgressSnapshot, RecordChange, RecordChangeKind, RhythmProgressService

__all__ = [
    "BaseConfig",
    "DevConfig",
    "EngineContext",
    "ProgressSnapshot",
    "RecordChange",
    "RecordChangeKind",
    "RhythmConfigError",
    "RhythmEngineError",
    "RhythmNotFoundError",
    "RhythmProgressService",
    "create_engine_context",
]
