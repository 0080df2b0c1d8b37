"""
Test doubles shared across the Brood test suite.

- SequenceRandom: scripted random source for exact roll assertions
- FixedClock: frozen, manually advanced clock
- InMemoryGameStore: transactional in-memory `GameStore`
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import AsyncIterator, Dict, Iterable, List, Optional, Sequence, Tuple, TypeVar

from src.domain.models.creature import Creature
from src.domain.models.player import Player
from src.modules.economy.transaction_log_service import TransactionRecord

T = TypeVar("T")

NOW = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


def ago(**kwargs: float) -> datetime:
    """NOW minus a timedelta, e.g. ago(hours=2)."""
    return NOW - timedelta(**kwargs)


class SequenceRandom:
    """
    Random source that replays scripted values.

    `random()` pops from `floats`, `randint()` from `ints` and `choice()`
    pops an index from `choices`. Running out of script fails the test,
    so unexpected draws are caught.
    """

    def __init__(
        self,
        floats: Iterable[float] = (),
        ints: Iterable[int] = (),
        choices: Iterable[int] = (),
    ) -> None:
        self.floats = list(floats)
        self.ints = list(ints)
        self.choices = list(choices)

    def random(self) -> float:
        assert self.floats, "unexpected random() draw"
        return self.floats.pop(0)

    def randint(self, a: int, b: int) -> int:
        assert self.ints, f"unexpected randint({a}, {b}) draw"
        value = self.ints.pop(0)
        assert a <= value <= b, f"scripted {value} outside [{a}, {b}]"
        return value

    def choice(self, seq: Sequence[T]) -> T:
        assert self.choices, "unexpected choice() draw"
        return seq[self.choices.pop(0)]

    @property
    def exhausted(self) -> bool:
        return not (self.floats or self.ints or self.choices)


class FixedClock:
    def __init__(self, now: datetime) -> None:
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current


@dataclass
class _State:
    players: Dict[str, Player] = field(default_factory=dict)
    creatures: Dict[str, Creature] = field(default_factory=dict)
    transactions: List[TransactionRecord] = field(default_factory=list)

    def copy(self) -> "_State":
        return _State(dict(self.players), dict(self.creatures), list(self.transactions))


class InMemoryUnitOfWork:
    """Records every row-lock request in `locks` as (table, key) pairs."""

    def __init__(self, state: _State, locks: List[Tuple[str, Optional[str]]]) -> None:
        self.state = state
        self.locks = locks

    async def get_player(self, player_id: str, for_update: bool = False) -> Optional[Player]:
        if for_update:
            self.locks.append(("players", player_id))
        return self.state.players.get(player_id)

    async def save_player(self, player: Player) -> None:
        self.state.players[player.id] = player

    async def list_players(self, for_update: bool = False) -> List[Player]:
        if for_update:
            self.locks.append(("players", None))
        return [self.state.players[key] for key in sorted(self.state.players)]

    async def get_creature(self, creature_id: str, for_update: bool = False) -> Optional[Creature]:
        if for_update:
            self.locks.append(("creatures", creature_id))
        return self.state.creatures.get(creature_id)

    async def save_creature(self, creature: Creature) -> None:
        self.state.creatures[creature.id] = creature

    async def save_creatures(self, creatures: Sequence[Creature]) -> None:
        for creature in creatures:
            self.state.creatures[creature.id] = creature

    async def list_creatures(
        self, owner_id: Optional[str] = None, for_update: bool = False
    ) -> List[Creature]:
        if for_update:
            self.locks.append(("creatures", owner_id))
        return [
            creature
            for creature in self.state.creatures.values()
            if owner_id is None or creature.owner_id == owner_id
        ]

    async def record_transaction(self, record: TransactionRecord) -> None:
        self.state.transactions.append(record)


class InMemoryGameStore:
    """
    `GameStore` over plain dicts.

    Each transaction works on a copy that replaces the committed state only
    when the block exits without an exception.
    """

    def __init__(self) -> None:
        self.state = _State()
        self.commits = 0
        self.locks: List[Tuple[str, Optional[str]]] = []

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[InMemoryUnitOfWork]:
        staged = self.state.copy()
        yield InMemoryUnitOfWork(staged, self.locks)
        self.state = staged
        self.commits += 1

    # Seeding / inspection shortcuts for tests

    def add_player(self, player: Player) -> Player:
        self.state.players[player.id] = player
        return player

    def add_creatures(self, *creatures: Creature) -> None:
        for creature in creatures:
            self.state.creatures[creature.id] = creature

    def player(self, player_id: str) -> Player:
        return self.state.players[player_id]

    def creature(self, creature_id: str) -> Creature:
        return self.state.creatures[creature_id]

    @property
    def transactions(self) -> List[TransactionRecord]:
        return self.state.transactions
