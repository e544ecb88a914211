"""Progress cache implementations."""

from __future__ import annotations

import threading
from typing import Callable, Optional

from sqlmodel import Session, select

from ..logging_config import get_logger
from ..models.progress import ProgressSnapshotRow
from ..services.progress import ProgressSnapshot

logger = get_logger("infra.cache")


class InMemoryProgressCache:
    """Process-local cache keyed by rhythm id."""

    def __init__(self) -> None:
        self._entries: dict[str, ProgressSnapshot] = {}
        self._lock = threading.Lock()

    def get(self, rhythm_id: str) -> Optional[ProgressSnapshot]:
        with self._lock:
            return self._entries.get(rhythm_id)

    def set(self, snapshot: ProgressSnapshot) -> None:
        with self._lock:
            self._entries[snapshot.rhythm_id] = snapshot

    def invalidate(self, rhythm_id: str) -> None:
        with self._lock:
            self._entries.pop(rhythm_id, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, rhythm_id: object) -> bool:
        return rhythm_id in self._entries


class NullProgressCache:
    """Cache that never stores anything; every read recomputes."""

    def get(self, rhythm_id: str) -> Optional[ProgressSnapshot]:
        return None

    def set(self, snapshot: ProgressSnapshot) -> None:
        return None

    def invalidate(self, rhythm_id: str) -> None:
        return None

    def clear(self) -> None:
        return None


class SQLModelProgressCache:
    """Snapshots persisted as JSON, one ``progress_snapshot`` row per rhythm."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get(self, rhythm_id: str) -> Optional[ProgressSnapshot]:
        """Return the stored snapshot; unreadable rows are dropped and treated as a miss."""
        with self.session_factory() as session:
            row = session.get(ProgressSnapshotRow, rhythm_id)
            if row is None:
                return None
            try:
                snapshot = ProgressSnapshot.from_dict(row.payload)
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                logger.warning(
                    "Discarding unreadable progress snapshot",
                    extra={"rhythm_id": rhythm_id, "error": str(exc)},
                )
                session.delete(row)
                session.commit()
                return None
            if snapshot.rhythm_id != rhythm_id or snapshot.as_of != row.as_of:
                logger.warning("Discarding mismatched progress snapshot", extra={"rhythm_id": rhythm_id})
                session.delete(row)
                session.commit()
                return None
            return snapshot

    def set(self, snapshot: ProgressSnapshot) -> None:
        """Insert or replace the snapshot row for the rhythm."""
        with self.session_factory() as session:
            row = session.get(ProgressSnapshotRow, snapshot.rhythm_id)
            if row is None:
                row = ProgressSnapshotRow(rhythm_id=snapshot.rhythm_id)
            row.as_of = snapshot.as_of
            row.computed_at = snapshot.computed_at
            row.payload = snapshot.to_dict()
            session.add(row)
            session.commit()

    def invalidate(self, rhythm_id: str) -> None:
        """Delete the snapshot row if present."""
        with self.session_factory() as session:
            row = session.get(ProgressSnapshotRow, rhythm_id)
            if row is not None:
                session.delete(row)
                session.commit()

    def clear(self) -> None:
        with self.session_factory() as session:
            for row in session.exec(select(ProgressSnapshotRow)).all():
                session.delete(row)
            session.commit()


__all__ = ["InMemoryProgressCache", "NullProgressCache", "SQLModelProgressCache"]
