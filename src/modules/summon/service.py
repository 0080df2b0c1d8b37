"""
SummonService - Business logic for creature summoning
=====================================================

Handles:
- Single and multi summon pricing
- Weighted rarity rolls against the configured rate tables
- Rolling a new level-1 creature with basic genetics

Rates, costs and stat rolls come from the `summon` config section. All
randomness flows through the injected random source.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Mapping, Optional, Tuple

from src.core.config.manager import ConfigManager
from src.core.logging.logger import get_logger
from src.domain.models.creature import (
    BASE_GENETIC_SYMBOLS,
    CombatStats,
    Creature,
    Gender,
    Genetics,
    Rarity,
)
from src.domain.models.player import PlayerBalance
from src.modules.creature.constants import RarityTable
from src.modules.shared.formulas import pick_weighted
from src.modules.shared.randomness import RandomSource, default_random
from src.modules.shared.results import Outcome, Rejection

logger = get_logger(__name__)


@dataclass(frozen=True)
class SummonResult:
    creatures: Tuple[Creature, ...]
    cost: float
    balance: PlayerBalance


class SummonService:
    """
    Summon wheel for new creatures.

    Usage:
        >>> outcome = SummonService.summon("player-1", balance, now, multi=True, rng=rng)
        >>> len(outcome.value.creatures)
        10
    """

    @staticmethod
    def summon_cost(multi: bool) -> float:
        if multi:
            return ConfigManager.get("summon.multi_cost", 1800)
        return ConfigManager.get("summon.single_cost", 200)

    @staticmethod
    def rate_table(multi: bool) -> List[Tuple[Rarity, float]]:
        """Rarity rates in rarity order, lowest first."""
        key = "summon.multi_rates" if multi else "summon.single_rates"
        rates: Mapping[str, float] = ConfigManager.get(key, {})
        return [(rarity, float(rates.get(rarity.value, 0.0))) for rarity in Rarity]

    @staticmethod
    def roll_rarity(rng: RandomSource, multi: bool = False) -> Rarity:
        """Cumulative-rate roll; a roll past every band falls back to Common."""
        return pick_weighted(SummonService.rate_table(multi), rng.random(), Rarity.COMMON)

    @staticmethod
    def roll_creature(
        owner_id: str, rarity: Rarity, now: datetime, rng: RandomSource
    ) -> Creature:
        """
        New creature of `rarity` with one basic genetic symbol.

        Power is a roll in the rarity's range plus the symbol's bonus; each
        combat stat is `base_stat + randint(0, stat_variance)`.
        """
        bonuses: Mapping[str, int] = ConfigManager.get("summon.genetic_power_bonus", {})
        base_stat = ConfigManager.get("summon.base_stat", 10)
        variance = ConfigManager.get("summon.stat_variance", 4)

        symbol = rng.choice(BASE_GENETIC_SYMBOLS)
        low, high = RarityTable.power_range(rarity)
        power = rng.randint(low, high) + int(bonuses.get(symbol, 0))
        gender = Gender.MALE if rng.random() < 0.5 else Gender.FEMALE
        stats = CombatStats(
            attack=base_stat + rng.randint(0, variance),
            defense=base_stat + rng.randint(0, variance),
            agility=base_stat + rng.randint(0, variance),
            luck=base_stat + rng.randint(0, variance),
        )

        return Creature.new(
            owner_id=owner_id,
            name=f"{rarity.value} Spider ({symbol})",
            rarity=rarity,
            genetics=Genetics(symbol),
            gender=gender,
            now=now,
            power=power,
            stats=stats,
        )

    @staticmethod
    def summon(
        owner_id: str,
        balance: PlayerBalance,
        now: datetime,
        multi: bool = False,
        rng: Optional[RandomSource] = None,
    ) -> Outcome[SummonResult]:
        """
        Summon one creature, or `summon.multi_count` creatures for the multi price.

        Returns:
            Outcome with SummonResult, or an INSUFFICIENT_RESOURCES rejection
        """
        rng = rng or default_random()
        cost = SummonService.summon_cost(multi)
        if balance.spider < cost:
            return Outcome.reject(Rejection.insufficient("SPIDER", cost, balance.spider))

        count = ConfigManager.get("summon.multi_count", 10) if multi else 1
        creatures = []
        for _ in range(count):
            rarity = SummonService.roll_rarity(rng, multi)
            creatures.append(SummonService.roll_creature(owner_id, rarity, now, rng))

        logger.info(
            "Creatures summoned",
            extra={
                "player_id": owner_id,
                "multi": multi,
                "cost": cost,
                "rarities": [creature.rarity.value for creature in creatures],
            },
        )
        return Outcome.success(
            SummonResult(
                creatures=tuple(creatures),
                cost=cost,
                balance=balance.debit_spider(cost),
            )
        )
