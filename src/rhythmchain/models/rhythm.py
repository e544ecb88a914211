"""Rhythm configuration table."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import ClassVar, Optional
from uuid import uuid4

from sqlmodel import Field, SQLModel

DEFAULT_CHAIN_TYPE = "weekly_low"
DEFAULT_DURATION_THRESHOLD_SECONDS = 360


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Rhythm(SQLModel, table=True):
    """A user-defined recurring pattern the engine derives chains for.

    The engine only reads rhythms. Matching fields are interpreted by the
    entry store; a ``None`` field matches anything.
    """

    __tablename__: ClassVar[str] = "rhythm"

    id: str = Field(default_factory=lambda: uuid4().hex, primary_key=True, max_length=64)
    user_id: str = Field(nullable=False, index=True, max_length=64)
    name: str = Field(nullable=False, max_length=120)
    description: Optional[str] = Field(default=None, max_length=255)

    match_type: Optional[str] = Field(default=None, max_length=64)
    match_category: Optional[str] = Field(default=None, max_length=64)
    match_subcategory: Optional[str] = Field(default=None, max_length=64)
    match_name: Optional[str] = Field(default=None, max_length=120)

    # 'duration' | 'count' | 'boolean'
    goal_type: str = Field(default="duration", max_length=16)
    goal_value: int = Field(default=6, nullable=False)
    goal_unit: Optional[str] = Field(default="minutes", max_length=16)
    duration_threshold_seconds: int = Field(default=DEFAULT_DURATION_THRESHOLD_SECONDS, nullable=False)

    # 'daily' | 'weekly' | 'monthly'
    frequency: str = Field(default="weekly", max_length=16)

    # comma-separated ChainType values
    chain_types: str = Field(default=DEFAULT_CHAIN_TYPE, max_length=128)
    weekly_target_minutes: Optional[int] = Field(default=None)
    monthly_target_minutes: Optional[int] = Field(default=None)

    timezone: str = Field(default="UTC", max_length=64)

    created_at: datetime = Field(default_factory=_utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=_utcnow, nullable=False)

    @property
    def configured_chain_types(self) -> list[str]:
        """Chain type names in configured order, duplicates dropped."""

        seen: list[str] = []
        for raw in (self.chain_types or "").split(","):
            name = raw.strip()
            if name and name not in seen:
                seen.append(name)
        return seen or [DEFAULT_CHAIN_TYPE]

    def target_minutes_for(self, chain_type: str) -> Optional[int]:
        """Return the cumulative-minutes target for target-based chain types."""

        if chain_type == "weekly_target":
            return self.weekly_target_minutes
        if chain_type == "monthly_target":
            return self.monthly_target_minutes
        return None
