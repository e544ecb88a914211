"""Concrete repository implementations using SQLModel."""

from .activity import SQLModelEntryStore
from .rhythm import SQLModelRhythmRepository

__all__ = [
    "SQLModelEntryStore",
    "SQLModelRhythmRepository",
]
