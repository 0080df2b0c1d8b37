"""
Breeding resolver.

Purpose
-------
Decide whether two creatures can breed, what it costs, and what offspring
they produce.

Design Notes
------------
- Rarity rolls use a five-rung ladder: Common, Rare, Epic, Legendary,
  Mythical. Off-ladder rarities sit on the highest rung at or below them
  (Excellent on Common, SPECIAL on Mythical).
- Offspring rarity: 60% the parents' highest rung, 30% one rung lower,
  10% one rung higher, clamped to the ladder.
- Random draws happen in a fixed order (rarity, then gender) so scripted
  random sources give exact outcomes.
- Genetics merge is a sorted set union, so parent order never matters.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import List, Optional, Tuple

from src.core.config.manager import ConfigManager
from src.core.logging.logger import get_logger
from src.domain.models.creature import (
    CombatStats,
    Creature,
    Gender,
    Parentage,
    Rarity,
)
from src.domain.models.player import PlayerBalance
from src.modules.condition.service import ConditionService
from src.modules.shared.randomness import RandomSource, default_random
from src.modules.shared.results import Outcome, Rejection

logger = get_logger(__name__)

BREEDING_LADDER: Tuple[Rarity, ...] = (
    Rarity.COMMON,
    Rarity.RARE,
    Rarity.EPIC,
    Rarity.LEGENDARY,
    Rarity.MYTHICAL,
)

REASON_SAME_GENDER = "Same gender"
REASON_LISTED = "Spider(s) listed on market"
REASON_UNHEALTHY = "Spider(s) unhealthy"
REASON_HUNGRY = "Spider(s) hungry"


@dataclass(frozen=True)
class Compatibility:
    compatible: bool
    reasons: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class BreedingResult:
    """
    Successful breeding.

    `father` and `mother` carry the breeding strain; `balance` has the cost
    debited.
    """

    offspring: Creature
    father: Creature
    mother: Creature
    cost: float
    balance: PlayerBalance


class BreedingService:
    """
    Breeding compatibility, cost and offspring resolution.

    Usage:
        >>> BreedingService.check_compatibility(a, b).reasons
        ('Spider(s) unhealthy',)
        >>> BreedingService.breeding_cost(common, mythical)
        1500.0
    """

    # ========================================================================
    # LADDER
    # ========================================================================

    @staticmethod
    def ladder_index(rarity: Rarity) -> int:
        """Index of the highest ladder rung at or below `rarity`."""
        index = 0
        for position, rung in enumerate(BREEDING_LADDER):
            if rung.rank <= rarity.rank:
                index = position
        return index

    @staticmethod
    def rarity_weight(rarity: Rarity) -> int:
        """1..5 ladder weight used by the cost formula."""
        return BreedingService.ladder_index(rarity) + 1

    # ========================================================================
    # COMPATIBILITY / COST
    # ========================================================================

    @staticmethod
    def check_compatibility(a: Creature, b: Creature) -> Compatibility:
        """
        Every violated breeding condition, in a fixed order.

        Compatible iff genders differ, neither is listed, and both have
        health and hunger above the configured minimums (50).
        """
        min_health = ConfigManager.get("breeding.min_health", 50)
        min_hunger = ConfigManager.get("breeding.min_hunger", 50)

        reasons: List[str] = []
        if a.gender == b.gender:
            reasons.append(REASON_SAME_GENDER)
        if a.is_listed or b.is_listed:
            reasons.append(REASON_LISTED)
        if a.condition.health <= min_health or b.condition.health <= min_health:
            reasons.append(REASON_UNHEALTHY)
        if a.condition.hunger <= min_hunger or b.condition.hunger <= min_hunger:
            reasons.append(REASON_HUNGRY)

        return Compatibility(compatible=not reasons, reasons=tuple(reasons))

    @staticmethod
    def breeding_cost(a: Creature, b: Creature) -> float:
        """
        SPIDER cost: `base_cost * (w(a) + w(b)) / 2`.

        Example:
            >>> BreedingService.breeding_cost(common, common)
            500.0
        """
        base_cost = ConfigManager.get("breeding.base_cost", 500)
        weights = BreedingService.rarity_weight(a.rarity) + BreedingService.rarity_weight(b.rarity)
        return base_cost * weights / 2

    # ========================================================================
    # OFFSPRING
    # ========================================================================

    @staticmethod
    def roll_offspring_rarity(father: Creature, mother: Creature, rng: RandomSource) -> Rarity:
        keep = ConfigManager.get("breeding.rarity_roll.keep", 0.6)
        downgrade = ConfigManager.get("breeding.rarity_roll.downgrade", 0.3)

        top = max(
            BreedingService.ladder_index(father.rarity),
            BreedingService.ladder_index(mother.rarity),
        )
        roll = rng.random()
        if roll < keep:
            index = top
        elif roll < keep + downgrade:
            index = max(0, top - 1)
        else:
            index = min(len(BREEDING_LADDER) - 1, top + 1)
        return BREEDING_LADDER[index]

    @staticmethod
    def default_offspring_name(now: datetime) -> str:
        return f"Baby Spider #{int(now.timestamp() * 1000)}"

    @staticmethod
    def resolve_offspring(
        father: Creature,
        mother: Creature,
        requested_name: Optional[str],
        now: datetime,
        rng: Optional[RandomSource] = None,
    ) -> Creature:
        """
        Build the offspring of two parents.

        Args:
            father: Male parent
            mother: Female parent
            requested_name: Offspring name; a timestamped default when blank
            now: Birth instant
            rng: Random source (rarity roll first, then gender)

        Returns:
            New level-1 creature with full condition and zero power
        """
        rng = rng or default_random()
        inheritance = ConfigManager.get("breeding.stat_inheritance", 0.6)

        rarity = BreedingService.roll_offspring_rarity(father, mother, rng)
        gender = Gender.MALE if rng.random() < 0.5 else Gender.FEMALE

        def inherit(stat: str) -> int:
            return math.floor((getattr(father.stats, stat) + getattr(mother.stats, stat)) * inheritance)

        stats = CombatStats(
            attack=inherit("attack"),
            defense=inherit("defense"),
            agility=inherit("agility"),
            luck=inherit("luck"),
        )
        name = (requested_name or "").strip() or BreedingService.default_offspring_name(now)

        return Creature.new(
            owner_id=father.owner_id,
            name=name,
            rarity=rarity,
            genetics=father.genetics.merge(mother.genetics),
            gender=gender,
            now=now,
            power=0,
            stats=stats,
            generation=max(father.generation, mother.generation) + 1,
            parents=Parentage(father_id=father.id, mother_id=mother.id),
        )

    @staticmethod
    def apply_parent_strain(creature: Creature) -> Creature:
        """Health -20 and hunger -30, floored at zero."""
        health_cost = ConfigManager.get("breeding.parent_health_cost", 20)
        hunger_cost = ConfigManager.get("breeding.parent_hunger_cost", 30)
        condition = creature.condition.with_health(creature.condition.health - health_cost)
        condition = condition.with_hunger(condition.hunger - hunger_cost)
        return replace(creature, condition=condition)

    # ========================================================================
    # BREED
    # ========================================================================

    @staticmethod
    def breed(
        a: Creature,
        b: Creature,
        requested_name: Optional[str],
        balance: PlayerBalance,
        now: datetime,
        rng: Optional[RandomSource] = None,
    ) -> Outcome[BreedingResult]:
        """
        Breed two creatures.

        Both parents are caught up to `now` first, so compatibility is
        judged on current condition.

        Returns:
            Outcome with BreedingResult, or an INCOMPATIBLE_BREEDING_PAIR /
            INSUFFICIENT_RESOURCES rejection
        """
        a = ConditionService.apply_decay(a, now)
        b = ConditionService.apply_decay(b, now)

        compatibility = BreedingService.check_compatibility(a, b)
        if not compatibility.compatible:
            return Outcome.reject(Rejection.incompatible(compatibility.reasons))

        cost = BreedingService.breeding_cost(a, b)
        if balance.spider < cost:
            return Outcome.reject(Rejection.insufficient("SPIDER", cost, balance.spider))

        father, mother = (a, b) if a.gender == Gender.MALE else (b, a)
        offspring = BreedingService.resolve_offspring(father, mother, requested_name, now, rng)

        logger.info(
            "Creatures bred",
            extra={
                "father_id": father.id,
                "mother_id": mother.id,
                "offspring_id": offspring.id,
                "offspring_rarity": offspring.rarity.value,
                "cost": cost,
            },
        )

        return Outcome.success(
            BreedingResult(
                offspring=offspring,
                father=BreedingService.apply_parent_strain(father),
                mother=BreedingService.apply_parent_strain(mother),
                cost=cost,
                balance=balance.debit_spider(cost),
            )
        )
