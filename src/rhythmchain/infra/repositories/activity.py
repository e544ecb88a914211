"""SQLModel implementation of the read-only entry store."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

from sqlmodel import Session, select

from ...models.activity import ActivityRecord
from ...models.rhythm import Rhythm
from ...services.day_aggregator import RecordView


def _as_utc(value: datetime) -> datetime:
    """Aware UTC datetime; naive values are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class SQLModelEntryStore:
    """Lists activity records matching a rhythm's criteria."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def _matching(self, rhythm: Rhythm):
        statement = select(ActivityRecord).where(ActivityRecord.user_id == rhythm.user_id)
        if rhythm.match_type:
            statement = statement.where(ActivityRecord.type == rhythm.match_type)
        if rhythm.match_category:
            statement = statement.where(ActivityRecord.category == rhythm.match_category)
        if rhythm.match_subcategory:
            statement = statement.where(ActivityRecord.subcategory == rhythm.match_subcategory)
        if rhythm.match_name:
            statement = statement.where(ActivityRecord.name == rhythm.match_name)
        return statement

    def list_records(self, rhythm: Rhythm, start: datetime, end: datetime) -> list[RecordView]:
        """Return matching records within ``[start, end]``, oldest first."""
        statement = (
            self._matching(rhythm)
            .where(ActivityRecord.occurred_at >= _as_utc(start))  # type: ignore[operator]
            .where(ActivityRecord.occurred_at <= _as_utc(end))  # type: ignore[operator]
            .order_by(ActivityRecord.occurred_at)  # type: ignore[arg-type]
        )
        with self.session_factory() as session:
            rows = session.exec(statement).all()
            return [
                RecordView(
                    timestamp=_as_utc(row.occurred_at) if row.occurred_at else None,
                    timezone=row.timezone,
                    metric_value=row.duration_seconds or 0,
                )
                for row in rows
            ]

