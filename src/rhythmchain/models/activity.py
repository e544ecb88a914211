"""Activity records as stored by the entry store."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class ActivityRecord(SQLModel, table=True):
    """A single timestamped activity (timer session, quick add, import row).

    ``occurred_at`` is an aware UTC datetime; ``timezone`` is the zone the record was
    captured in. Rows without a timestamp are tolerated and never aggregated.
    """

    __tablename__: ClassVar[str] = "activity_record"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(nullable=False, index=True, max_length=64)
    occurred_at: Optional[datetime] = Field(default=None, index=True)
    timezone: Optional[str] = Field(default=None, max_length=64)
    duration_seconds: int = Field(default=0, nullable=False)

    type: Optional[str] = Field(default=None, max_length=64, index=True)
    category: Optional[str] = Field(default=None, max_length=64, index=True)
    subcategory: Optional[str] = Field(default=None, max_length=64)
    name: Optional[str] = Field(default=None, max_length=120)
