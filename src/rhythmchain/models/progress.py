"""Persisted progress snapshots (one row per rhythm)."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, ClassVar

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class ProgressSnapshotRow(SQLModel, table=True):
    """Most recent computed snapshot for a rhythm, keyed by rhythm id."""

    __tablename__: ClassVar[str] = "progress_snapshot"

    rhythm_id: str = Field(primary_key=True, max_length=64)
    as_of: date = Field(nullable=False)
    computed_at: datetime = Field(nullable=False)
    payload: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
