"""Progress cache protocol."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol

if TYPE_CHECKING:  # pragma: no cover
    from ...services.progress import ProgressSnapshot


class ProgressCache(Protocol):
    """Keeps the most recent snapshot per rhythm.

    Entries are replaced or deleted, never patched in place.
    """

    def get(self, rhythm_id: str) -> Optional["ProgressSnapshot"]:
        """Return the stored snapshot, or None."""
        ...

    def set(self, snapshot: "ProgressSnapshot") -> None:
        """Store a snapshot, replacing any previous one for the same rhythm."""
        ...

    def invalidate(self, rhythm_id: str) -> None:
        """Drop the snapshot for a rhythm (no-op when absent)."""
        ...

    def clear(self) -> None:
        """Drop every snapshot."""
        ...
