"""Entry store protocol."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from ...models.rhythm import Rhythm
from ...services.day_aggregator import RecordView


class EntryStore(Protocol):
    """Read-only source of activity records.

    Matching a record against a rhythm (type, category, subcategory, name) is
    the store's job; everything returned is assumed to count toward it.
    """

    def list_records(self, rhythm: Rhythm, start: datetime, end: datetime) -> list[RecordView]:
        """Return matching records with ``start <= timestamp <= end``, oldest first."""
        ...
