"""Pytest configuration and shared fixtures for rhythm engine tests.

Provides database fixtures, rhythm/record factories and in-memory fakes for
the engine's collaborators, so services can be tested with or without
SQLite.
"""

from __future__ import annotations

import tempfile
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Iterable, Optional

import pytest
from sqlmodel import Session, SQLModel, create_engine

# Import all models to ensure they're registered with SQLModel metadata
from rhythmchain.config import TestConfig
from rhythmchain.models import ActivityRecord, ProgressSnapshotRow, Rhythm  # noqa: F401
from rhythmchain.services.day_aggregator import DayStatus, RecordView

# Monday 2026-01-12 .. Sunday 2026-01-18 is the reference week.
WEEK_MONDAY = date(2026, 1, 12)
SATURDAY = date(2026, 1, 17)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Create a database session for a single test."""
    session = Session(db_engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Create a session factory for repositories that expect Callable[[], Session]."""

    def factory():
        return Session(db_engine, expire_on_commit=False)

    return factory


@pytest.fixture
def config():
    """Engine configuration backed by in-memory SQLite."""
    return TestConfig()


# =============================================================================
# Test Data Factories
# =============================================================================


def build_rhythm(**overrides) -> Rhythm:
    """Unsaved Rhythm with sensible defaults (6 minute duration goal, UTC)."""
    values = {
        "id": "rhythm-1",
        "user_id": "user-1",
        "name": "Meditation",
        "match_category": "mindfulness",
        "goal_type": "duration",
        "goal_value": 6,
        "duration_threshold_seconds": 360,
        "frequency": "weekly",
        "chain_types": "daily,weekly_high,weekly_low",
        "timezone": "UTC",
    }
    values.update(overrides)
    return Rhythm(**values)


def statuses_for(
    start: date,
    end: date,
    complete: Iterable[date] = (),
    *,
    seconds: Optional[dict[date, int]] = None,
) -> list[DayStatus]:
    """Gap-free DayStatus list; listed days are complete with 10 minutes each."""
    complete_days = set(complete)
    seconds = seconds or {}
    result = []
    cursor = start
    while cursor <= end:
        total = seconds.get(cursor, 600 if cursor in complete_days else 0)
        result.append(
            DayStatus(
                date=cursor,
                total_seconds=total,
                entry_count=1 if total else 0,
                is_complete=cursor in complete_days or (cursor in seconds and total >= 360),
            )
        )
        cursor += timedelta(days=1)
    return result


def consecutive(end: date, count: int) -> list[date]:
    """``count`` consecutive days ending at ``end``."""
    return [end - timedelta(days=offset) for offset in range(count)]


def noon_utc(day: date) -> datetime:
    return datetime(day.year, day.month, day.day, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def rhythm_factory(db_session):
    """Factory for creating persisted rhythms."""

    def _create_rhythm(**overrides) -> Rhythm:
        rhythm = build_rhythm(**overrides)
        db_session.add(rhythm)
        db_session.commit()
        db_session.refresh(rhythm)
        return rhythm

    return _create_rhythm


@pytest.fixture
def record_factory(db_session):
    """Factory for creating persisted activity records."""

    def _create_record(
        occurred_at: Optional[datetime],
        *,
        duration_seconds: int = 600,
        category: str = "mindfulness",
        user_id: str = "user-1",
        tz: Optional[str] = "UTC",
        name: Optional[str] = None,
    ) -> ActivityRecord:
        stored = occurred_at
        if stored is not None:
            stored = (
                stored.replace(tzinfo=timezone.utc)
                if stored.tzinfo is None
                else stored.astimezone(timezone.utc)
            )
        record = ActivityRecord(
            user_id=user_id,
            occurred_at=stored,
            timezone=tz,
            duration_seconds=duration_seconds,
            category=category,
            name=name,
        )
        db_session.add(record)
        db_session.commit()
        db_session.refresh(record)
        return record

    return _create_record


# =============================================================================
# In-memory collaborators
# =============================================================================


class FakeEntryStore:
    """EntryStore holding RecordViews in a list; counts calls."""

    def __init__(self, records: Iterable[RecordView] = ()):
        self.records = list(records)
        self.calls = 0

    def add(self, timestamp, metric_value: int = 600, tz: Optional[str] = None) -> None:
        self.records.append(RecordView(timestamp=timestamp, timezone=tz, metric_value=metric_value))

    def list_records(self, rhythm, start, end) -> list[RecordView]:
        self.calls += 1
        return list(self.records)


class FakeRhythmRepository:
    """RhythmRepository backed by a dict."""

    def __init__(self, *rhythms: Rhythm):
        self.rhythms = {rhythm.id: rhythm for rhythm in rhythms}

    def get_by_id(self, rhythm_id: str) -> Optional[Rhythm]:
        return self.rhythms.get(rhythm_id)

    def list_for_user(self, user_id: str) -> list[Rhythm]:
        return [r for r in self.rhythms.values() if r.user_id == user_id]


class FixedClock:
    """Callable clock returning a settable instant."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)
