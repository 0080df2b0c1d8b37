"""
Player Record
=============

Schema-only representation of a player:
- Identity (wallet address or user id as PK, display name)
- Wallet balance (SPIDER tokens, feeders)
- Webtrap state
- Last activity, used for online/offline classification

All behavior and game rules live in the domain model and services.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Index
from sqlmodel import Field

from src.core.database.base import TimestampMixin


class PlayerRecord(TimestampMixin, table=True):
    """Persisted player row."""

    __tablename__ = "players"
    __table_args__ = (Index("ix_players_last_activity", "last_activity"),)

    id: str = Field(primary_key=True, max_length=128)
    name: str = Field(default="Unknown", max_length=100, nullable=False)

    spider: float = Field(default=0.0, nullable=False)
    feeders: int = Field(default=0, nullable=False)

    webtrap_unlocked: bool = Field(default=False, nullable=False)
    webtrap_level: int = Field(default=1, nullable=False)
    webtrap_last_collection: Optional[datetime] = Field(
        default=None, sa_type=DateTime(timezone=True), nullable=True
    )

    last_activity: Optional[datetime] = Field(
        default=None, sa_type=DateTime(timezone=True), nullable=True
    )

    def __repr__(self) -> str:
        return f"<PlayerRecord(id={self.id!r}, spider={self.spider}, feeders={self.feeders})>"
