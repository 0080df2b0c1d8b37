"""
Player Domain Model for Brood.

Purpose
-------
Immutable domain model of a player: identity, wallet balance (SPIDER
tokens and feeders), webtrap state and the last-activity timestamp used to
classify the player online or offline for batch token generation.

Responsibilities
----------------
- Keep balances non-negative: every debit validates before it applies
- Provide credit/debit helpers returning new instances
- Map to and from the PlayerRecord row

Non-Responsibilities
--------------------
- Pricing (handled by the module services)
- Persistence (handled by the game store)

Usage Example
-------------
>>> player = Player.new("player-1", "Weaver", now=now)
>>> player = player.with_balance(player.balance.debit_spider(200))
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import ROUND_DOWN, Decimal
from typing import TYPE_CHECKING, Any, Dict, Optional

from src.domain.models.base import (
    DomainValidationError,
    ensure_utc,
    validate_non_negative,
    validate_not_empty,
    validate_positive,
)

if TYPE_CHECKING:
    from src.database.models.core.player import PlayerRecord


def _money(value: float) -> float:
    """Truncate a SPIDER amount to 2 decimals."""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_DOWN))


# ============================================================================
# VALUE OBJECTS
# ============================================================================


@dataclass(frozen=True)
class PlayerBalance:
    """
    Immutable wallet.

    Attributes
    ----------
    spider : float
        SPIDER token balance, kept to 2 decimals
    feeders : int
        Consumable feeder count spent on feed/hydrate
    """

    spider: float = 0.0
    feeders: int = 0

    def __post_init__(self) -> None:
        if self.spider < 0:
            raise DomainValidationError("SPIDER balance cannot be negative", field="spider")
        if self.feeders < 0:
            raise DomainValidationError("feeders cannot be negative", field="feeders")

    def credit_spider(self, amount: float) -> PlayerBalance:
        validate_non_negative(amount, "amount")
        return PlayerBalance(spider=_money(self.spider + amount), feeders=self.feeders)

    def debit_spider(self, amount: float) -> PlayerBalance:
        """
        Return a new balance with SPIDER removed.

        Raises
        ------
        DomainValidationError
            If the balance does not cover the amount
        """
        validate_non_negative(amount, "amount")
        if self.spider < amount:
            raise DomainValidationError(
                f"Insufficient SPIDER: have {self.spider}, need {amount}",
                field="spider",
            )
        return PlayerBalance(spider=_money(self.spider - amount), feeders=self.feeders)

    def credit_feeders(self, amount: int) -> PlayerBalance:
        validate_non_negative(amount, "amount")
        return PlayerBalance(spider=self.spider, feeders=self.feeders + amount)

    def debit_feeders(self, amount: int) -> PlayerBalance:
        validate_non_negative(amount, "amount")
        if self.feeders < amount:
            raise DomainValidationError(
                f"Insufficient feeders: have {self.feeders}, need {amount}",
                field="feeders",
            )
        return PlayerBalance(spider=self.spider, feeders=self.feeders - amount)


@dataclass(frozen=True)
class Webtrap:
    """Passive feeder trap; collectable once per cooldown window."""

    is_unlocked: bool = False
    level: int = 1
    last_collection: Optional[datetime] = None

    def __post_init__(self) -> None:
        validate_positive(self.level, "webtrap.level")


# ============================================================================
# PLAYER
# ============================================================================


@dataclass(frozen=True)
class Player:
    id: str
    name: str
    balance: PlayerBalance = field(default_factory=PlayerBalance)
    webtrap: Webtrap = field(default_factory=Webtrap)
    last_activity: Optional[datetime] = None
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        validate_not_empty(self.id, "id")
        validate_not_empty(self.name, "name")

    @classmethod
    def new(
        cls,
        player_id: str,
        name: str,
        now: datetime,
        spider: float = 0.0,
        feeders: int = 0,
    ) -> "Player":
        return cls(
            id=player_id,
            name=name,
            balance=PlayerBalance(spider=spider, feeders=feeders),
            last_activity=now,
            created_at=now,
        )

    def with_balance(self, balance: PlayerBalance) -> "Player":
        return replace(self, balance=balance)

    def with_webtrap(self, webtrap: Webtrap) -> "Player":
        return replace(self, webtrap=webtrap)

    def touch(self, now: datetime) -> "Player":
        """Record player activity at `now`."""
        return replace(self, last_activity=now)

    # ========================================================================
    # PERSISTENCE MAPPING
    # ========================================================================

    @classmethod
    def from_db(cls, record: "PlayerRecord") -> "Player":
        return cls(
            id=record.id,
            name=record.name,
            balance=PlayerBalance(spider=float(record.spider), feeders=record.feeders),
            webtrap=Webtrap(
                is_unlocked=record.webtrap_unlocked,
                level=record.webtrap_level,
                last_collection=ensure_utc(record.webtrap_last_collection),
            ),
            last_activity=ensure_utc(record.last_activity),
            created_at=ensure_utc(record.created_at),
        )

    def to_db_updates(self) -> Dict[str, Any]:
        updates: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "spider": self.balance.spider,
            "feeders": self.balance.feeders,
            "webtrap_unlocked": self.webtrap.is_unlocked,
            "webtrap_level": self.webtrap.level,
            "webtrap_last_collection": self.webtrap.last_collection,
            "last_activity": self.last_activity,
        }
        if self.created_at is not None:
            updates["created_at"] = self.created_at
        return updates
