"""
Unit tests for TokenGenerationService.

Tests the continuous accrual model and the batch model (active and
offline sweeps).
"""

import pytest

from src.domain.models.creature import DressType, Rarity
from src.modules.creature.service import CreatureService
from src.modules.generation.service import GenerationMode, TokenGenerationService
from tests.helpers import NOW, ago


@pytest.mark.unit
class TestContinuousGeneration:
    def test_two_hours_at_power_100(self, make_creature):
        creature = make_creature(power=100, last_token_generation=ago(hours=2))
        assert TokenGenerationService.tokens_generated(creature, NOW) == 20.0

    def test_hibernating_creature_generates_nothing(self, make_creature):
        creature = make_creature(power=100, last_token_generation=ago(hours=2), is_hibernating=True)
        assert TokenGenerationService.tokens_generated(creature, NOW) == 0

    def test_dead_creature_generates_nothing(self, make_creature):
        creature = make_creature(power=100, health=0, last_token_generation=ago(hours=2))
        assert TokenGenerationService.tokens_generated(creature, NOW) == 0

    def test_checkpoint_in_future_generates_nothing(self, make_creature):
        creature = make_creature(power=100, checkpoint=NOW)
        assert TokenGenerationService.tokens_generated(creature, ago(hours=1)) == 0

    def test_truncated_to_cents(self, make_creature):
        creature = make_creature(power=1, last_token_generation=ago(minutes=20))
        # 1 * 0.1 * 1/3 = 0.0333...
        assert TokenGenerationService.tokens_generated(creature, NOW) == 0.03

    def test_dresses_count_toward_power(self, make_creature):
        dress = CreatureService.create_dress("Cap", Rarity.COMMON, DressType.BASIC, dress_id="d1")
        creature = make_creature(power=75, last_token_generation=ago(hours=1), dresses=(dress,))
        assert TokenGenerationService.tokens_generated(creature, NOW) == 10.0

    def test_accrue_credits_player_and_moves_checkpoints(self, make_creature, make_player):
        player = make_player(spider=0)
        first = make_creature(power=100, last_token_generation=ago(hours=2))
        second = make_creature(power=50, last_token_generation=ago(hours=1))

        result = TokenGenerationService.accrue_for_player(player, [first, second], NOW)

        assert result.amount == 25.0
        assert result.player.balance.spider == 25.0
        assert all(creature.last_token_generation == NOW for creature in result.creatures)

    def test_accrue_twice_pays_once(self, make_creature, make_player):
        creature = make_creature(power=100, last_token_generation=ago(hours=2))
        first = TokenGenerationService.accrue_for_player(make_player(spider=0), [creature], NOW)

        second = TokenGenerationService.accrue_for_player(first.player, list(first.creatures), NOW)

        assert second.amount == 0
        assert second.player.balance.spider == 20.0

    def test_accrue_skips_foreign_creatures(self, make_creature, make_player):
        foreign = make_creature(owner_id="player-2", power=100, last_token_generation=ago(hours=2))

        result = TokenGenerationService.accrue_for_player(make_player(spider=0), [foreign], NOW)

        assert result.amount == 0
        assert result.creatures == (foreign,)


@pytest.mark.unit
class TestOnlineStatus:
    def test_recent_activity_is_online(self, make_player):
        assert not TokenGenerationService.is_offline(make_player(last_activity=ago(minutes=15)), NOW)

    def test_stale_activity_is_offline(self, make_player):
        assert TokenGenerationService.is_offline(make_player(last_activity=ago(minutes=16)), NOW)

    def test_never_seen_is_offline_for_max_hours(self, make_player):
        player = make_player(last_activity=None)
        assert TokenGenerationService.is_offline(player, NOW)
        assert TokenGenerationService.hours_offline(player, NOW) == 24

    def test_hours_offline_capped(self, make_player):
        assert TokenGenerationService.hours_offline(make_player(last_activity=ago(hours=48)), NOW) == 24


@pytest.mark.unit
class TestBatchGeneration:
    def test_active_owner_earns_base_times_multiplier(self, make_creature, make_player):
        creatures = [make_creature(rarity=Rarity.COMMON), make_creature(rarity=Rarity.RARE)]

        credit = TokenGenerationService.batch_generation_for_owner(
            make_player(), creatures, NOW, include_offline=False
        )

        assert credit.amount == 25
        assert credit.mode is GenerationMode.ACTIVE
        assert credit.contributing_count == 2
        assert credit.description == "Token generation from 2 spiders (active)"

    def test_hibernating_and_dead_excluded(self, make_creature, make_player):
        creatures = [
            make_creature(rarity=Rarity.EPIC),
            make_creature(rarity=Rarity.EPIC, is_hibernating=True),
            make_creature(rarity=Rarity.EPIC, health=0),
        ]

        credit = TokenGenerationService.batch_generation_for_owner(make_player(), creatures, NOW, False)

        assert credit.amount == 25
        assert credit.creature_ids == (creatures[0].id,)

    def test_offline_owner_skipped_in_active_sweep(self, make_creature, make_player):
        player = make_player(last_activity=ago(hours=6))
        assert TokenGenerationService.batch_generation_for_owner(player, [make_creature()], NOW, False) is None

    def test_offline_owner_pays_penalty_scaled_by_hours(self, make_creature, make_player):
        player = make_player(last_activity=ago(hours=6))
        creatures = [make_creature(), make_creature()]

        credit = TokenGenerationService.batch_generation_for_owner(player, creatures, NOW, True)

        # 20 * 0.5 * 6h / 3h
        assert credit.amount == 20
        assert credit.mode is GenerationMode.OFFLINE

    def test_rounds_half_up(self, make_creature, make_player, mock_config):
        mock_config("tokens.batch.base_rate_per_hour", 5)

        credit = TokenGenerationService.batch_generation_for_owner(
            make_player(), [make_creature(rarity=Rarity.RARE)], NOW, False
        )

        assert credit.amount == 8

    def test_owner_without_creatures_earns_nothing(self, make_player):
        assert TokenGenerationService.batch_generation_for_owner(make_player(), [], NOW, True) is None

    def test_sweep_handles_owners_independently(self, make_creature, make_player):
        active = make_player("player-1")
        offline = make_player("player-2", last_activity=ago(hours=3))
        creatures_by_owner = {
            "player-1": [make_creature(owner_id="player-1")],
            "player-2": [make_creature(owner_id="player-2")],
        }

        hourly = TokenGenerationService.sweep([active, offline], creatures_by_owner, NOW, False)
        three_hourly = TokenGenerationService.sweep([active, offline], creatures_by_owner, NOW, True)

        assert [credit.player_id for credit in hourly] == ["player-1"]
        assert {credit.player_id: credit.amount for credit in three_hourly} == {
            "player-1": 10,
            "player-2": 5,
        }

    def test_apply_credit_touches_only_contributors(self, make_creature, make_player):
        player = make_player(spider=0)
        awake = make_creature(last_token_generation=ago(hours=1))
        asleep = make_creature(is_hibernating=True, last_token_generation=ago(hours=1))
        credit = TokenGenerationService.batch_generation_for_owner(player, [awake, asleep], NOW, False)

        credited, touched = TokenGenerationService.apply_credit(player, [awake, asleep], credit)

        assert credited.balance.spider == 10
        assert set(touched) == {awake.id}
        assert touched[awake.id].last_token_generation == NOW
