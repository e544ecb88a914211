"""Rhythm repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.rhythm import Rhythm


class RhythmRepository(Protocol):
    """Read access to rhythm configurations."""

    def get_by_id(self, rhythm_id: str) -> Optional[Rhythm]:
        """Retrieve a rhythm by ID."""
        ...

    def list_for_user(self, user_id: str) -> list[Rhythm]:
        """List a user's rhythms, newest first."""
        ...
