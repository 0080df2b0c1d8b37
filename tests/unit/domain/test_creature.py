"""
Unit Tests for Creature Domain Model
====================================

Test Coverage
-------------
- Genetics normalization and merging
- Condition gauge ranges and liveness
- Creature invariants (dress limits, positive level)
- Row mapping
"""

import pytest

from src.database.models.core.creature import CreatureRecord
from src.domain.models import (
    CombatStats,
    Creature,
    CreatureCondition,
    Dress,
    DressType,
    Gender,
    Genetics,
    Parentage,
    Rarity,
)
from src.domain.models.base import DomainValidationError
from tests.helpers import NOW


@pytest.mark.unit
@pytest.mark.domain
class TestGenetics:
    def test_of_sorts_and_deduplicates(self):
        assert Genetics.of("ASA").code == "AS"
        assert Genetics.of(["J", "S"]).code == "JS"

    def test_merge_is_sorted_union(self):
        assert Genetics("S").merge(Genetics("A")).code == "AS"
        assert Genetics("AS").merge(Genetics("JS")).code == "AJS"

    def test_merge_is_commutative_and_idempotent(self):
        a, b = Genetics("AJ"), Genetics("S")
        assert a.merge(b) == b.merge(a)
        assert a.merge(a) == a

    def test_unknown_symbol_rejected(self):
        with pytest.raises(DomainValidationError):
            Genetics("SX")

    def test_unnormalized_code_rejected(self):
        with pytest.raises(DomainValidationError):
            Genetics("SA")


@pytest.mark.unit
@pytest.mark.domain
class TestCondition:
    def test_gauges_bounded(self):
        with pytest.raises(DomainValidationError):
            CreatureCondition(hunger=101)
        with pytest.raises(DomainValidationError):
            CreatureCondition(health=-0.5)

    def test_with_methods_clamp(self):
        condition = CreatureCondition().with_hunger(150).with_hydration(-20)
        assert condition.hunger == 100
        assert condition.hydration == 0

    def test_alive_while_health_positive(self):
        assert CreatureCondition(health=0.01).is_alive
        assert not CreatureCondition(health=0).is_alive


@pytest.mark.unit
@pytest.mark.domain
class TestCreature:
    def test_new_creature_defaults(self):
        creature = Creature.new("player-1", "Itsy", Rarity.RARE, Genetics("S"), Gender.FEMALE, NOW)

        assert creature.level == 1
        assert creature.condition == CreatureCondition()
        assert creature.last_token_generation == NOW
        assert creature.condition_updated_at == NOW
        assert not creature.is_hibernating

    def test_level_must_be_positive(self, make_creature):
        with pytest.raises(DomainValidationError):
            make_creature(level=0)

    def test_duplicate_dress_types_rejected(self, make_creature):
        dresses = (
            Dress(id="d1", name="Cap", rarity=Rarity.COMMON, dress_type=DressType.BASIC),
            Dress(id="d2", name="Hat", rarity=Rarity.COMMON, dress_type=DressType.BASIC),
        )
        with pytest.raises(DomainValidationError):
            make_creature(dresses=dresses)

    def test_effective_stats_include_dresses(self, make_creature):
        dress = Dress(
            id="d1",
            name="Cap",
            rarity=Rarity.EPIC,
            dress_type=DressType.SHINY,
            power_bonus=70,
            stats=CombatStats(attack=3),
        )
        creature = make_creature(power=30, stats=CombatStats(attack=1, luck=2), dresses=(dress,))

        assert creature.effective_power == 100
        assert creature.effective_stats == CombatStats(attack=4, luck=2)

    def test_rarity_parsing(self):
        assert Rarity.from_string("mythical") is Rarity.MYTHICAL
        assert Rarity.from_string("SPECIAL") is Rarity.SPECIAL
        with pytest.raises(DomainValidationError):
            Rarity.from_string("Shiny")

    def test_row_mapping(self, make_creature):
        dress = Dress(id="d1", name="Cap", rarity=Rarity.COMMON, dress_type=DressType.MEME, power_bonus=25)
        creature = make_creature(
            rarity=Rarity.EPIC,
            genetics="AS",
            gender=Gender.FEMALE,
            level=7,
            experience=30,
            power=400,
            stats=CombatStats(attack=1, defense=2, agility=3, luck=4),
            hunger=42.5,
            generation=3,
            parents=Parentage(father_id="f", mother_id="m"),
            dresses=(dress,),
        )

        restored = Creature.from_db(CreatureRecord(**creature.to_db_updates()))

        assert restored == creature
