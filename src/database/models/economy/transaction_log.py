"""
TransactionLog: economy ledger (immutable).
Pure schema only.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Column, DateTime, Index, Text
from sqlmodel import Field, SQLModel

from src.core.database.base import utc_now


class TransactionLog(SQLModel, table=True):
    """
    Ledger entry for every currency movement.

    Schema-only:
    - player_id
    - transaction_type (see enums.TransactionType)
    - amount / currency
    - description
    - details (JSON)
    - created_at
    """

    __tablename__ = "transaction_logs"
    __table_args__ = (
        Index("ix_transaction_logs_player_time", "player_id", "created_at"),
        Index("ix_transaction_logs_type", "transaction_type"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    player_id: str = Field(max_length=128, nullable=False, index=True)

    transaction_type: str = Field(max_length=50, nullable=False)

    amount: float = Field(default=0.0, nullable=False)

    currency: str = Field(max_length=20, nullable=False)

    description: str = Field(default="", sa_column=Column(Text, nullable=False))

    details: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_type=DateTime(timezone=True),
        nullable=False,
        index=True,
    )
