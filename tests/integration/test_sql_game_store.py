"""
Integration Tests for the SQL Game Store
========================================

Purpose
-------
Run the store and GameService against a real SQLite database file through
DatabaseService and aiosqlite.

Test Coverage
-------------
- Schema creation and health check
- Player and creature round trips through the ORM rows
- Commit on success, rollback on exception
- Ledger rows written by GameService commands
"""

import pytest

from src.core.database.service import DatabaseService
from src.database.models.core.player import PlayerRecord
from src.domain.models import CombatStats, Dress, DressType, Gender, Parentage, Rarity
from src.modules.game import GameService, SqlGameStore
from src.modules.shared.base_repository import BaseRepository
from tests.helpers import NOW, FixedClock, SequenceRandom, ago


@pytest.fixture
async def store(tmp_path):
    await DatabaseService.initialize(f"sqlite+aiosqlite:///{tmp_path / 'brood.db'}")
    await DatabaseService.create_all()
    yield SqlGameStore()
    await DatabaseService.shutdown()


# ============================================================================
# DATABASE SERVICE
# ============================================================================


@pytest.mark.integration
@pytest.mark.database
class TestDatabaseService:
    async def test_health_check(self, store):
        assert await DatabaseService.health_check()

    async def test_health_check_without_engine(self):
        assert not DatabaseService.is_initialized()
        assert await DatabaseService.health_check() is False


# ============================================================================
# STORE ROUND TRIPS
# ============================================================================


@pytest.mark.integration
@pytest.mark.database
class TestSqlGameStore:
    async def test_player_round_trip(self, store, make_player):
        player = make_player(spider=12.5, feeders=8, last_activity=ago(minutes=3))

        async with store.transaction() as uow:
            await uow.save_player(player)

        async with store.transaction() as uow:
            loaded = await uow.get_player("player-1")

        assert loaded.balance == player.balance
        assert loaded.last_activity == ago(minutes=3)
        assert loaded.webtrap.last_collection is None

    async def test_creature_round_trip(self, store, make_creature):
        creature = make_creature(
            creature_id="c1",
            rarity=Rarity.LEGENDARY,
            genetics="AJ",
            gender=Gender.FEMALE,
            level=12,
            power=900,
            stats=CombatStats(attack=5, defense=6, agility=7, luck=8),
            hunger=33.25,
            generation=2,
            parents=Parentage(father_id="f", mother_id="m"),
            dresses=(
                Dress(id="d1", name="Veil", rarity=Rarity.RARE, dress_type=DressType.SHINY, power_bonus=55),
            ),
        )

        async with store.transaction() as uow:
            await uow.save_creature(creature)

        async with store.transaction() as uow:
            loaded = await uow.get_creature("c1")

        assert loaded == creature

    async def test_save_updates_existing_rows(self, store, make_player):
        async with store.transaction() as uow:
            await uow.save_player(make_player(spider=100))
        async with store.transaction() as uow:
            player = await uow.get_player("player-1", for_update=True)
            await uow.save_player(player.with_balance(player.balance.debit_spider(40)))

        async with store.transaction() as uow:
            players = await uow.list_players()

        assert [p.balance.spider for p in players] == [60]

    async def test_list_creatures_filters_by_owner(self, store, make_creature):
        async with store.transaction() as uow:
            await uow.save_creatures(
                [
                    make_creature(creature_id="a", owner_id="player-1"),
                    make_creature(creature_id="b", owner_id="player-2"),
                ]
            )

        async with store.transaction() as uow:
            mine = await uow.list_creatures("player-1")
            everything = await uow.list_creatures()

        assert [c.id for c in mine] == ["a"]
        assert {c.id for c in everything} == {"a", "b"}

    async def test_exception_rolls_back(self, store, make_player):
        with pytest.raises(RuntimeError):
            async with store.transaction() as uow:
                await uow.save_player(make_player())
                raise RuntimeError("boom")

        async with store.transaction() as uow:
            assert await uow.get_player("player-1") is None


# ============================================================================
# GAME SERVICE OVER SQL
# ============================================================================


@pytest.mark.integration
@pytest.mark.database
class TestGameServiceOverSql:
    async def test_breeding_persists_everything(self, store, make_creature):
        service = GameService(store, clock=FixedClock(NOW), rng=SequenceRandom(floats=[0.95, 0.2]))
        await service.register_player("player-1", "Weaver")
        async with store.transaction() as uow:
            await uow.save_creatures(
                [
                    make_creature(creature_id="m", gender=Gender.MALE, rarity=Rarity.RARE, genetics="S"),
                    make_creature(creature_id="f", gender=Gender.FEMALE, genetics="A"),
                ]
            )

        outcome = await service.breed_creatures("player-1", "m", "f", name="Itsy")

        assert outcome.ok
        async with store.transaction() as uow:
            player = await uow.get_player("player-1")
            offspring = await uow.get_creature(outcome.value.offspring.id)
            father = await uow.get_creature("m")
            ledger_rows = await uow.count_transactions("player-1")

        assert player.balance.spider == 250
        assert offspring.rarity is Rarity.EPIC
        assert offspring.gender is Gender.MALE
        assert offspring.genetics.code == "AS"
        assert offspring.parents == Parentage(father_id="m", mother_id="f")
        assert father.condition.health == 80
        assert ledger_rows == 1

    async def test_rejected_command_writes_no_ledger_row(self, store):
        service = GameService(store, clock=FixedClock(NOW))
        await service.register_player("player-1", "Weaver")

        outcome = await service.collect_webtrap("player-1")

        assert not outcome.ok
        async with store.transaction() as uow:
            assert await uow.count_transactions("player-1") == 0

    async def test_token_sweep_locks_player_rows(self, store, make_creature, mocker):
        service = GameService(store, clock=FixedClock(NOW))
        registered = await service.register_player("player-1", "Weaver")
        async with store.transaction() as uow:
            await uow.save_creature(make_creature(last_token_generation=ago(hours=1)))
        scans = mocker.spy(BaseRepository, "find_many_where")

        credits = await service.sweep_token_generation(include_offline=True)

        player_scans = [c for c in scans.call_args_list if c.args[0].model_class is PlayerRecord]
        assert player_scans and all(c.kwargs["for_update"] for c in player_scans)
        async with store.transaction() as uow:
            player = await uow.get_player("player-1")
            ledger_rows = await uow.count_transactions("player-1")
        assert len(credits) == 1
        assert player.balance.spider == registered.balance.spider + credits[0].amount
        assert ledger_rows == 1
