"""
Creature progression rules.

Purpose
-------
Experience curve, feeder costs and level-up rolls. Everything here is a pure
function of its arguments plus the injected random source; no I/O, no
clock.

Design Notes
------------
- Level is a function of experience (banded cost table), capped by rarity.
- Each level gained rolls power once, then splits that power across the
  four combat stats so the increases sum exactly to the power gained.
- A creature at its rarity cap gains no experience, power or stats.
- A stored level above the cap is data corruption and raises
  `InvalidRarityOrLevelStateError`.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from src.core.logging.logger import get_logger
from src.domain.models.creature import CombatStats, Creature, Rarity
from src.modules.creature.constants import (
    EXPERIENCE_BANDS,
    FEEDER_BANDS,
    MAX_LEVEL,
    RarityTable,
)
from src.modules.shared.exceptions import InvalidRarityOrLevelStateError
from src.modules.shared.formulas import (
    band_value,
    cumulative_experience,
    level_from_experience,
    split_proportionally,
)
from src.modules.shared.randomness import RandomSource

logger = get_logger(__name__)


@dataclass(frozen=True)
class LevelUpResult:
    """Creature after an experience grant, with what the grant produced."""

    creature: Creature
    experience_gained: int
    levels_gained: int
    power_gained: int
    stats_gained: CombatStats


class ProgressionService:
    """
    Experience, level and level-up roll calculations.

    Usage:
        >>> ProgressionService.level_from_experience(3)
        2
        >>> ProgressionService.feeding_cost(12)
        10
        >>> result = ProgressionService.apply_experience(creature, 1, rng)
    """

    # ========================================================================
    # EXPERIENCE CURVE
    # ========================================================================

    @staticmethod
    def experience_required_for_level(level: int) -> int:
        """
        Experience needed to advance from `level` to `level + 1`.

        Example:
            >>> ProgressionService.experience_required_for_level(4)
            3
            >>> ProgressionService.experience_required_for_level(5)
            5
        """
        return band_value(EXPERIENCE_BANDS, level)

    @staticmethod
    def cumulative_experience_for_level(level: int) -> int:
        """
        Total experience needed to reach `level`; 0 for level <= 1.

        Example:
            >>> ProgressionService.cumulative_experience_for_level(5)
            12
        """
        return cumulative_experience(level, EXPERIENCE_BANDS)

    @staticmethod
    def level_from_experience(experience: int) -> int:
        """
        Level reached with `experience` total points, capped at 100.

        Example:
            >>> ProgressionService.level_from_experience(2)
            1
            >>> ProgressionService.level_from_experience(3)
            2
        """
        return level_from_experience(experience, EXPERIENCE_BANDS, MAX_LEVEL)

    # ========================================================================
    # COSTS
    # ========================================================================

    @staticmethod
    def feeding_cost(level: int) -> int:
        """Feeders spent per feed at `level`."""
        return band_value(FEEDER_BANDS, level)

    @staticmethod
    def hydration_cost(level: int) -> int:
        """Feeders spent per hydrate at `level`. Same table as feeding today."""
        return band_value(FEEDER_BANDS, level)

    # ========================================================================
    # CAP
    # ========================================================================

    @staticmethod
    def max_level_for(rarity: Rarity) -> int:
        return RarityTable.max_level(rarity)

    @staticmethod
    def can_level_up(creature: Creature) -> bool:
        return creature.level < RarityTable.max_level(creature.rarity)

    @staticmethod
    def ensure_level_within_cap(creature: Creature) -> None:
        """
        Raises:
            InvalidRarityOrLevelStateError: If the level exceeds the rarity cap
        """
        max_level = RarityTable.max_level(creature.rarity)
        if creature.level > max_level:
            logger.critical(
                "Creature level above rarity cap",
                extra={
                    "creature_id": creature.id,
                    "rarity": creature.rarity.value,
                    "level": creature.level,
                    "max_level": max_level,
                },
            )
            raise InvalidRarityOrLevelStateError(
                creature.id, creature.rarity.value, creature.level, max_level
            )

    # ========================================================================
    # ROLLS
    # ========================================================================

    @staticmethod
    def roll_power_increase(rarity: Rarity, rng: RandomSource) -> int:
        """
        Uniform inclusive roll within the rarity's power range.

        Example:
            >>> ProgressionService.roll_power_increase(Rarity.COMMON, rng)
            27
        """
        low, high = RarityTable.power_range(rarity)
        return rng.randint(low, high)

    @staticmethod
    def roll_combat_stat_increase(power_increase: int, rng: RandomSource) -> CombatStats:
        """
        Split `power_increase` across attack, defense, agility and luck.

        Draws four uniform weights, floors each proportional share, and
        gives any flooring remainder to one randomly chosen stat. The four
        increases always sum to `power_increase`.
        """
        weights = [rng.random() for _ in range(4)]
        shares, remainder = split_proportionally(power_increase, weights)
        if remainder > 0:
            shares[rng.randint(0, 3)] += remainder
        attack, defense, agility, luck = shares
        return CombatStats(attack=attack, defense=defense, agility=agility, luck=luck)

    # ========================================================================
    # EXPERIENCE GRANT
    # ========================================================================

    @staticmethod
    def apply_experience(creature: Creature, amount: int, rng: RandomSource) -> LevelUpResult:
        """
        Grant experience and resolve any level-ups it causes.

        The new level is recomputed from total experience and capped at the
        rarity's max level. Every level gained rolls power once and splits
        it into stats; gains accumulate across all levels of the grant. A
        creature already at its cap is returned unchanged.

        Args:
            creature: Creature receiving experience
            amount: Experience points to grant (non-negative)
            rng: Random source for power and stat rolls

        Returns:
            LevelUpResult with the updated creature and the gains
        """
        if amount <= 0 or not ProgressionService.can_level_up(creature):
            return LevelUpResult(creature, 0, 0, 0, CombatStats())

        experience = creature.experience + amount
        max_level = RarityTable.max_level(creature.rarity)
        new_level = min(ProgressionService.level_from_experience(experience), max_level)
        new_level = max(new_level, creature.level)
        levels_gained = new_level - creature.level

        power_gained = 0
        stats_gained = CombatStats()
        for _ in range(levels_gained):
            power_increase = ProgressionService.roll_power_increase(creature.rarity, rng)
            power_gained += power_increase
            stats_gained = stats_gained.plus(
                ProgressionService.roll_combat_stat_increase(power_increase, rng)
            )

        updated = replace(
            creature,
            experience=experience,
            level=new_level,
            power=creature.power + power_gained,
            stats=creature.stats.plus(stats_gained),
        )

        if levels_gained:
            logger.debug(
                "Creature leveled up",
                extra={
                    "creature_id": creature.id,
                    "from_level": creature.level,
                    "to_level": new_level,
                    "power_gained": power_gained,
                },
            )

        return LevelUpResult(updated, amount, levels_gained, power_gained, stats_gained)
