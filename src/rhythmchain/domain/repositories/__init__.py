"""Repository protocol definitions for domain layer."""

from .cache import ProgressCache
from .entry_store import EntryStore
from .rhythm import RhythmRepository

__all__ = [
    "EntryStore",
    "ProgressCache",
    "RhythmRepository",
]
