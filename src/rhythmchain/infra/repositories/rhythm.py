"""SQLModel implementation of Rhythm repository."""

from __future__ import annotations

from typing import Callable, Optional

from sqlmodel import Session, select

from ...models.rhythm import Rhythm


class SQLModelRhythmRepository:
    """SQLModel-based rhythm repository implementation (read-only)."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, rhythm_id: str) -> Optional[Rhythm]:
        """Retrieve a rhythm by ID."""
        with self.session_factory() as session:
            obj = session.get(Rhythm, rhythm_id)
            if obj:
                session.expunge(obj)
            return obj

    def list_for_user(self, user_id: str) -> list[Rhythm]:
        """List a user's rhythms, newest first."""
        with self.session_factory() as session:
            statement = (
                select(Rhythm)
                .where(Rhythm.user_id == user_id)
                .order_by(Rhythm.created_at.desc())  # type: ignore[attr-defined]
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows
