"""
Creature Record
===============

Schema-only representation of a spider creature:
- Identity and ownership (opaque string id, owner_id)
- Rarity, genetics code and gender as plain strings
- Progression (level, experience, power, combat stats)
- Condition gauges and the timestamps decay and accrual anchor on
- Parent lookup ids and equipped dresses (JSON)

All behavior and game rules live in the domain model and services.
Conversion goes through `Creature.from_db()` / `Creature.to_db_updates()`.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, Column, DateTime, Index
from sqlmodel import Field

from src.core.database.base import TimestampMixin, utc_now


class CreatureRecord(TimestampMixin, table=True):
    """Persisted creature row."""

    # ========================================================================
    # TABLE CONFIGURATION
    # ========================================================================

    __tablename__ = "creatures"
    __table_args__ = (
        Index("ix_creatures_owner", "owner_id"),
        Index("ix_creatures_owner_hibernating", "owner_id", "is_hibernating"),
    )

    # ========================================================================
    # IDENTITY
    # ========================================================================

    id: str = Field(primary_key=True, max_length=64)
    owner_id: str = Field(max_length=128, nullable=False)
    name: str = Field(max_length=100, nullable=False)
    rarity: str = Field(max_length=20, nullable=False)
    genetics: str = Field(max_length=8, nullable=False)
    gender: str = Field(max_length=10, nullable=False)

    # ========================================================================
    # PROGRESSION
    # ========================================================================

    level: int = Field(default=1, nullable=False)
    experience: int = Field(default=0, nullable=False)
    power: int = Field(default=0, nullable=False)
    attack: int = Field(default=0, nullable=False)
    defense: int = Field(default=0, nullable=False)
    agility: int = Field(default=0, nullable=False)
    luck: int = Field(default=0, nullable=False)
    generation: int = Field(default=1, nullable=False)

    # ========================================================================
    # CONDITION
    # ========================================================================

    health: float = Field(default=100.0, nullable=False)
    hunger: float = Field(default=100.0, nullable=False)
    hydration: float = Field(default=100.0, nullable=False)

    # ========================================================================
    # LINEAGE / STATE
    # ========================================================================

    father_id: Optional[str] = Field(default=None, max_length=64)
    mother_id: Optional[str] = Field(default=None, max_length=64)
    is_hibernating: bool = Field(default=False, nullable=False)
    is_listed: bool = Field(default=False, nullable=False)
    dresses: List[Dict[str, Any]] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )

    # ========================================================================
    # CLOCKS
    # ========================================================================

    last_fed: datetime = Field(
        default_factory=utc_now, sa_type=DateTime(timezone=True), nullable=False
    )
    last_hydrated: datetime = Field(
        default_factory=utc_now, sa_type=DateTime(timezone=True), nullable=False
    )
    last_token_generation: datetime = Field(
        default_factory=utc_now, sa_type=DateTime(timezone=True), nullable=False
    )
    condition_updated_at: datetime = Field(
        default_factory=utc_now, sa_type=DateTime(timezone=True), nullable=False
    )

    def __repr__(self) -> str:
        return f"<CreatureRecord(id={self.id!r}, owner={self.owner_id!r}, rarity={self.rarity!r}, level={self.level})>"
