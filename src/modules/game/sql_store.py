"""
SQLAlchemy implementation of the game store.

Each `transaction()` opens one `DatabaseService.get_transaction()` session:
commit on success, rollback on any exception. Rows are loaded through
`BaseRepository` and mapped with `Creature.from_db` / `Player.from_db`.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database.service import DatabaseService
from src.core.logging.logger import get_logger
from src.database.models.core.creature import CreatureRecord
from src.database.models.core.player import PlayerRecord
from src.database.models.economy.transaction_log import TransactionLog
from src.domain.models.creature import Creature
from src.domain.models.player import Player
from src.modules.economy.transaction_log_service import TransactionRecord
from src.modules.shared.base_repository import BaseRepository

logger = get_logger(__name__)


def _apply(record: Any, values: Dict[str, Any]) -> None:
    for key, value in values.items():
        setattr(record, key, value)


class SqlGameSession:
    """`GameUnitOfWork` bound to one AsyncSession."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self._players = BaseRepository[PlayerRecord](PlayerRecord, logger)
        self._creatures = BaseRepository[CreatureRecord](CreatureRecord, logger)
        self._ledger = BaseRepository[TransactionLog](TransactionLog, logger)

    # ------------------------------------------------------------------
    # Players
    # ------------------------------------------------------------------

    async def get_player(self, player_id: str, for_update: bool = False) -> Optional[Player]:
        record = await self._players.get(self.session, player_id, for_update=for_update)
        return Player.from_db(record) if record else None

    async def save_player(self, player: Player) -> None:
        values = player.to_db_updates()
        record = await self._players.get(self.session, player.id)
        if record is None:
            self._players.add(self.session, PlayerRecord(**values))
        else:
            _apply(record, values)
        await self._players.flush(self.session)

    async def list_players(self, for_update: bool = False) -> List[Player]:
        records = await self._players.find_many_where(
            self.session, for_update=for_update, order_by=PlayerRecord.id
        )
        return [Player.from_db(record) for record in records]

    # ------------------------------------------------------------------
    # Creatures
    # ------------------------------------------------------------------

    async def get_creature(self, creature_id: str, for_update: bool = False) -> Optional[Creature]:
        record = await self._creatures.get(self.session, creature_id, for_update=for_update)
        return Creature.from_db(record) if record else None

    async def save_creature(self, creature: Creature) -> None:
        await self._upsert_creature(creature)
        await self._creatures.flush(self.session)

    async def save_creatures(self, creatures: Sequence[Creature]) -> None:
        for creature in creatures:
            await self._upsert_creature(creature)
        await self._creatures.flush(self.session)

    async def _upsert_creature(self, creature: Creature) -> None:
        values = creature.to_db_updates()
        record = await self._creatures.get(self.session, creature.id)
        if record is None:
            self._creatures.add(self.session, CreatureRecord(**values))
        else:
            _apply(record, values)

    async def list_creatures(
        self, owner_id: Optional[str] = None, for_update: bool = False
    ) -> List[Creature]:
        conditions = []
        if owner_id is not None:
            conditions.append(CreatureRecord.owner_id == owner_id)
        records = await self._creatures.find_many_where(
            self.session,
            *conditions,
            for_update=for_update,
            order_by=CreatureRecord.created_at,
        )
        return [Creature.from_db(record) for record in records]

    # ------------------------------------------------------------------
    # Ledger
    # ------------------------------------------------------------------

    async def record_transaction(self, record: TransactionRecord) -> None:
        self._ledger.add(self.session, TransactionLog(**record.to_db_values()))
        await self._ledger.flush(self.session)

    async def count_transactions(self, player_id: str) -> int:
        return await self._ledger.count(self.session, TransactionLog.player_id == player_id)


class SqlGameStore:
    """
    Game store backed by `DatabaseService`.

    DatabaseService must be initialized before the first transaction.
    """

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[SqlGameSession]:
        async with DatabaseService.get_transaction() as session:
            yield SqlGameSession(session)
