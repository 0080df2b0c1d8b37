"""
Unit tests for GameService.

Runs every command against the in-memory store: loads, engine calls,
persistence and ledger entries, and that rejections leave the store
untouched.
"""

import random

import pytest

from src.database.models.enums import Currency, TransactionType
from src.domain.models.creature import Gender, Rarity
from src.domain.models.player import Webtrap
from src.modules.game.service import GameService
from src.modules.shared.exceptions import CreatureNotFoundError, NotFoundError
from src.modules.shared.results import RejectionReason
from tests.helpers import NOW, FixedClock, InMemoryGameStore, SequenceRandom, ago


@pytest.fixture
def store():
    return InMemoryGameStore()


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def service(store, clock):
    return GameService(store, clock=clock, rng=random.Random(11))


@pytest.mark.unit
class TestRegistration:
    async def test_register_uses_starting_balance(self, service, store):
        player = await service.register_player("player-1", "Weaver")

        assert player.balance.spider == 1000
        assert player.balance.feeders == 10
        assert store.player("player-1") == player

    async def test_register_is_idempotent(self, service, store):
        first = await service.register_player("player-1", "Weaver")
        second = await service.register_player("player-1", "Someone else")

        assert second == first


@pytest.mark.unit
class TestCreatureCommands:
    async def test_feed_persists_creature_and_debits_feeders(self, service, store, make_player, make_creature):
        store.add_player(make_player(feeders=20, last_activity=ago(hours=1)))
        store.add_creatures(make_creature(creature_id="c1", hunger=40))

        outcome = await service.feed_creature("player-1", "c1")

        assert outcome.ok
        assert store.creature("c1").condition.hunger == pytest.approx(60, abs=0.1)
        assert store.player("player-1").balance.feeders == 13
        assert store.player("player-1").last_activity == NOW
        [entry] = store.transactions
        assert entry.transaction_type is TransactionType.FEED
        assert entry.amount == -7
        assert entry.currency is Currency.FEEDERS

    async def test_hydrate(self, service, store, make_player, make_creature):
        store.add_player(make_player())
        store.add_creatures(make_creature(creature_id="c1", hydration=10))

        await service.hydrate_creature("player-1", "c1")

        assert store.creature("c1").condition.hydration == 30
        assert store.transactions[0].transaction_type is TransactionType.HYDRATE

    async def test_rejection_leaves_store_untouched(self, service, store, make_player, make_creature):
        player = store.add_player(make_player(feeders=3, last_activity=ago(hours=1)))
        creature = make_creature(creature_id="c1", checkpoint=ago(hours=1))
        store.add_creatures(creature)

        outcome = await service.feed_creature("player-1", "c1")

        assert outcome.rejection.reason is RejectionReason.INSUFFICIENT_RESOURCES
        assert store.player("player-1") == player
        assert store.creature("c1") == creature
        assert store.transactions == []

    async def test_unknown_player(self, service):
        with pytest.raises(NotFoundError):
            await service.feed_creature("ghost", "c1")

    async def test_foreign_creature_is_not_found(self, service, store, make_player, make_creature):
        store.add_player(make_player())
        store.add_creatures(make_creature(creature_id="c1", owner_id="player-2"))

        with pytest.raises(CreatureNotFoundError):
            await service.feed_creature("player-1", "c1")

    async def test_heal(self, service, store, make_player, make_creature):
        store.add_player(make_player(spider=100))
        store.add_creatures(make_creature(creature_id="c1", health=30))

        outcome = await service.heal_creature("player-1", "c1")

        assert outcome.ok
        assert store.creature("c1").condition.health == 50
        assert store.player("player-1").balance.spider == 50
        assert store.transactions[0].amount == -50

    async def test_hibernating_credits_pending_tokens(self, service, store, make_player, make_creature):
        store.add_player(make_player(spider=0))
        store.add_creatures(make_creature(creature_id="c1", power=100, last_token_generation=ago(hours=2)))

        outcome = await service.set_hibernation("player-1", "c1", True)

        assert outcome.value.creature.is_hibernating
        assert store.player("player-1").balance.spider == 20.0
        assert store.creature("c1").last_token_generation == NOW
        assert store.transactions[0].transaction_type is TransactionType.ACCRUAL

    async def test_wake(self, service, store, make_player, make_creature):
        store.add_player(make_player())
        store.add_creatures(make_creature(creature_id="c1", is_hibernating=True, checkpoint=ago(hours=4)))

        await service.set_hibernation("player-1", "c1", False)

        assert not store.creature("c1").is_hibernating
        assert store.creature("c1").last_token_generation == NOW
        assert store.transactions == []


@pytest.mark.unit
class TestBreedingCommands:
    async def test_check_compatibility_reports_cost(self, service, store, make_player, make_creature):
        store.add_player(make_player())
        store.add_creatures(
            make_creature(creature_id="m", gender=Gender.MALE),
            make_creature(creature_id="f", gender=Gender.FEMALE, rarity=Rarity.MYTHICAL, health=40),
        )

        check = await service.check_breeding_compatibility("player-1", "m", "f")

        assert not check.compatible
        assert check.reasons == ("Spider(s) unhealthy",)
        assert check.cost == 1500

    async def test_breed_persists_offspring(self, store, clock, make_player, make_creature):
        service = GameService(store, clock=clock, rng=SequenceRandom(floats=[0.1, 0.9]))
        store.add_player(make_player(spider=800))
        store.add_creatures(
            make_creature(creature_id="m", gender=Gender.MALE),
            make_creature(creature_id="f", gender=Gender.FEMALE),
        )

        outcome = await service.breed_creatures("player-1", "m", "f", name="Itsy")

        offspring = outcome.value.offspring
        assert store.creature(offspring.id).name == "Itsy"
        assert store.creature("m").condition.health == 80
        assert store.creature("f").condition.hunger == 70
        assert store.player("player-1").balance.spider == 300
        [entry] = store.transactions
        assert entry.transaction_type is TransactionType.BREEDING
        assert entry.details["offspring_id"] == offspring.id

    async def test_breed_rejection_writes_nothing(self, service, store, make_player, make_creature):
        store.add_player(make_player(spider=800))
        store.add_creatures(
            make_creature(creature_id="a", gender=Gender.MALE),
            make_creature(creature_id="b", gender=Gender.MALE),
        )

        outcome = await service.breed_creatures("player-1", "a", "b")

        assert outcome.rejection.reason is RejectionReason.INCOMPATIBLE_BREEDING_PAIR
        assert len(store.state.creatures) == 2
        assert store.player("player-1").balance.spider == 800


@pytest.mark.unit
class TestEconomyCommands:
    async def test_summon(self, service, store, make_player):
        store.add_player(make_player(spider=2000))

        outcome = await service.summon("player-1", multi=True)

        assert len(outcome.value.creatures) == 10
        assert len(store.state.creatures) == 10
        assert store.player("player-1").balance.spider == 200
        assert store.transactions[0].amount == -1800

    async def test_claim_tokens(self, service, store, make_player, make_creature):
        store.add_player(make_player(spider=0))
        store.add_creatures(make_creature(creature_id="c1", power=100, last_token_generation=ago(hours=2)))

        result = await service.claim_tokens("player-1")

        assert result.amount == 20.0
        assert store.player("player-1").balance.spider == 20.0
        assert store.creature("c1").last_token_generation == NOW

    async def test_claim_with_nothing_accrued_records_nothing(self, service, store, make_player, make_creature):
        store.add_player(make_player())
        store.add_creatures(make_creature(creature_id="c1", power=100))

        result = await service.claim_tokens("player-1")

        assert result.amount == 0
        assert store.transactions == []

    async def test_webtrap_unlock_then_collect(self, service, store, clock, make_player):
        store.add_player(make_player(spider=1000, feeders=0))

        unlocked = await service.upgrade_webtrap("player-1")
        collected = await service.collect_webtrap("player-1")
        again = await service.collect_webtrap("player-1")

        assert unlocked.ok and collected.ok
        assert again.rejection.reason is RejectionReason.COOLDOWN_ACTIVE
        player = store.player("player-1")
        assert player.balance.spider == 10
        assert player.balance.feeders == 5
        assert [entry.transaction_type for entry in store.transactions] == [
            TransactionType.WEBTRAP_UNLOCK,
            TransactionType.WEBTRAP_COLLECT,
            TransactionType.WEBTRAP_COLLECT,
        ]

    async def test_webtrap_upgrade_recorded_as_upgrade(self, service, store, make_player):
        store.add_player(make_player(spider=1000, webtrap=Webtrap(is_unlocked=True)))

        await service.upgrade_webtrap("player-1")

        assert store.player("player-1").webtrap.level == 2
        assert store.transactions[0].transaction_type is TransactionType.WEBTRAP_UPGRADE


@pytest.mark.unit
class TestSweeps:
    async def test_decay_sweep_counts_deaths(self, service, store, make_creature, mock_config):
        mock_config("decay.health_rate_per_minute", 10.0)
        store.add_creatures(
            make_creature(creature_id="dying", health=5, hunger=0, hydration=0, checkpoint=ago(minutes=5)),
            make_creature(creature_id="fine", checkpoint=ago(minutes=5)),
            make_creature(creature_id="dead", health=0, hunger=0, hydration=0, checkpoint=ago(minutes=5)),
        )

        report = await service.sweep_condition_decay()

        assert report.creatures_processed == 3
        assert report.creatures_died == 1
        assert not store.creature("dying").is_alive
        assert store.creature("fine").condition_updated_at == NOW

    async def test_token_sweep_credits_and_records(self, service, store, make_player, make_creature):
        store.add_player(make_player("player-1", spider=0))
        store.add_player(make_player("player-2", spider=0, last_activity=ago(hours=6)))
        store.add_creatures(
            make_creature(creature_id="c1", owner_id="player-1", rarity=Rarity.RARE, last_token_generation=ago(hours=1)),
            make_creature(creature_id="c2", owner_id="player-2", last_token_generation=ago(hours=1)),
        )

        credits = await service.sweep_token_generation(include_offline=True)

        assert {credit.player_id: credit.amount for credit in credits} == {"player-1": 15, "player-2": 10}
        assert store.player("player-1").balance.spider == 15
        assert store.player("player-2").balance.spider == 10
        assert store.creature("c1").last_token_generation == NOW
        assert {entry.transaction_type for entry in store.transactions} == {TransactionType.GENERATION}

    async def test_token_sweep_locks_players_and_creatures(self, service, store, make_player, make_creature):
        store.add_player(make_player("player-1", spider=0))
        store.add_creatures(make_creature(owner_id="player-1", last_token_generation=ago(hours=1)))

        await service.sweep_token_generation(include_offline=False)

        assert store.locks == [("players", None), ("creatures", None)]

    async def test_hourly_sweep_skips_offline_owners(self, service, store, make_player, make_creature):
        store.add_player(make_player("player-2", spider=0, last_activity=ago(hours=6)))
        store.add_creatures(make_creature(owner_id="player-2"))

        credits = await service.sweep_token_generation(include_offline=False)

        assert credits == []
        assert store.player("player-2").balance.spider == 0
