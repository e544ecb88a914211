"""SQLModel table exports."""

from .activity import ActivityRecord
from .progress import ProgressSnapshotRow
from .rhythm import Rhythm

__all__ = [
    "ActivityRecord",
    "ProgressSnapshotRow",
    "Rhythm",
]
