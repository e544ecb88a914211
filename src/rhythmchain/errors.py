"""Exception types raised by the rhythm chain engine."""

from __future__ import annotations


class RhythmEngineError(Exception):
    """Base class for engine errors."""


class RhythmConfigError(RhythmEngineError, ValueError):
    """A rhythm's configuration cannot be used to compute chains."""

    def __init__(self, message: str, *, rhythm_id: str | None = None, field: str | None = None):
        super().__init__(message)
        self.rhythm_id = rhythm_id
        self.field = field


class RhythmNotFoundError(RhythmEngineError, LookupError):
    """No rhythm exists for the requested id."""

    def __init__(self, rhythm_id: str):
        super().__init__(f"Rhythm not found: {rhythm_id}")
        self.rhythm_id = rhythm_id


__all__ = ["RhythmConfigError", "RhythmEngineError", "RhythmNotFoundError"]
