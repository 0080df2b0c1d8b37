"""
Game storage contract.

Purpose
-------
`GameService` talks to persistence only through these protocols, so the
same orchestration runs against SQLAlchemy in production and an in-memory
store in tests.

Design Notes
------------
- `GameStore.transaction()` yields a `GameUnitOfWork`. Everything done
  through it commits together or not at all.
- `for_update=True` asks the store for a row lock where it has one
  (SELECT ... FOR UPDATE in the SQL store).
- The store maps rows to domain models; callers never see ORM objects.
"""

from __future__ import annotations

from typing import AsyncContextManager, List, Optional, Protocol, Sequence

from src.domain.models.creature import Creature
from src.domain.models.player import Player
from src.modules.economy.transaction_log_service import TransactionRecord


class GameUnitOfWork(Protocol):
    """Operations available inside one store transaction."""

    async def get_player(self, player_id: str, for_update: bool = False) -> Optional[Player]: ...

    async def save_player(self, player: Player) -> None: ...

    async def list_players(self, for_update: bool = False) -> List[Player]: ...

    async def get_creature(
        self, creature_id: str, for_update: bool = False
    ) -> Optional[Creature]: ...

    async def save_creature(self, creature: Creature) -> None: ...

    async def save_creatures(self, creatures: Sequence[Creature]) -> None: ...

    async def list_creatures(
        self, owner_id: Optional[str] = None, for_update: bool = False
    ) -> List[Creature]:
        """Creatures of one owner, or every creature when `owner_id` is None."""
        ...

    async def record_transaction(self, record: TransactionRecord) -> None: ...


class GameStore(Protocol):
    def transaction(self) -> AsyncContextManager[GameUnitOfWork]: ...
