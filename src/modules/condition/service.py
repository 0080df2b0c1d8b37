"""
Condition decay engine.

Purpose
-------
Catch a creature's hunger, hydration and health up to a given instant.

Health policy
-------------
Hunger and hydration fall linearly from the decay anchor. Health falls at
its own rate only for the minutes during which hunger AND hydration are both
at zero. The instant both gauges reach zero is computed exactly, so decaying
to t1 and then to t2 gives the same state as decaying straight to t2.

Invariants
----------
- Pure function of (creature, now): no I/O, no randomness
- Idempotent at equal `now`: the checkpoint moves to `now`
- Monotone: gauges never rise from decay alone
- A `now` earlier than the anchor is a no-op
- Decay runs while hibernating; hibernation only stops token accrual
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Iterable, List, Optional

from src.core.config.manager import ConfigManager
from src.core.logging.logger import get_logger
from src.domain.models.creature import Creature, CreatureCondition
from src.modules.shared.clock import minutes_between

logger = get_logger(__name__)

_DEFAULT_RATE = 0.0231  # per minute: 100 points over ~72 hours


@dataclass(frozen=True)
class DecayRates:
    """Per-minute decay rates."""

    hunger: float
    hydration: float
    health: float

    @classmethod
    def from_config(cls) -> "DecayRates":
        return cls(
            hunger=float(ConfigManager.get("decay.hunger_rate_per_minute", _DEFAULT_RATE)),
            hydration=float(ConfigManager.get("decay.hydration_rate_per_minute", _DEFAULT_RATE)),
            health=float(ConfigManager.get("decay.health_rate_per_minute", _DEFAULT_RATE)),
        )


def _minutes_to_empty(value: float, rate: float) -> float:
    if value <= 0:
        return 0.0
    if rate <= 0:
        return math.inf
    return value / rate


class ConditionService:
    """
    Condition catch-up calculations.

    Usage:
        >>> creature = ConditionService.apply_decay(creature, now)
        >>> swept = ConditionService.apply_decay_batch(creatures, now)
    """

    @staticmethod
    def decay_anchor(creature: Creature) -> datetime:
        """Latest of last feed, last hydrate and the decay checkpoint."""
        return max(creature.last_fed, creature.last_hydrated, creature.condition_updated_at)

    @staticmethod
    def decayed_condition(
        condition: CreatureCondition, minutes: float, rates: DecayRates
    ) -> CreatureCondition:
        """
        Condition after `minutes` of decay.

        Example:
            >>> ConditionService.decayed_condition(
            ...     CreatureCondition(100, 10, 50), 1000, rates
            ... ).hunger
            0.0
        """
        if minutes <= 0:
            return condition

        hunger = max(0.0, condition.hunger - rates.hunger * minutes)
        hydration = max(0.0, condition.hydration - rates.hydration * minutes)

        starving_from = max(
            _minutes_to_empty(condition.hunger, rates.hunger),
            _minutes_to_empty(condition.hydration, rates.hydration),
        )
        starving_minutes = max(0.0, minutes - starving_from)
        health = max(0.0, condition.health - rates.health * starving_minutes)

        return CreatureCondition(health=health, hunger=hunger, hydration=hydration)

    @staticmethod
    def apply_decay(
        creature: Creature, now: datetime, rates: Optional[DecayRates] = None
    ) -> Creature:
        """
        Catch the creature's condition up to `now`.

        Args:
            creature: Creature to decay
            now: Instant to decay to (UTC)
            rates: Decay rates; read from config when omitted

        Returns:
            Creature with decayed condition and the checkpoint at `now`, or
            the same creature if `now` is not after the anchor
        """
        minutes = minutes_between(ConditionService.decay_anchor(creature), now)
        if minutes <= 0:
            return creature

        rates = rates or DecayRates.from_config()
        condition = ConditionService.decayed_condition(creature.condition, minutes, rates)

        if creature.is_alive and not condition.is_alive:
            logger.info(
                "Creature died from starvation",
                extra={"creature_id": creature.id, "owner_id": creature.owner_id},
            )

        return replace(creature, condition=condition, condition_updated_at=now)

    @staticmethod
    def apply_decay_batch(creatures: Iterable[Creature], now: datetime) -> List[Creature]:
        """
        Decay every creature to `now`, preserving order.

        Each creature is processed independently; rates are read once.
        """
        rates = DecayRates.from_config()
        return [ConditionService.apply_decay(creature, now, rates) for creature in creatures]

    @staticmethod
    def minutes_until_starvation(
        creature: Creature, rates: Optional[DecayRates] = None
    ) -> Optional[float]:
        """
        Minutes from the creature's checkpointed condition until health hits 0.

        Returns None when the configured rates never reach zero.
        """
        rates = rates or DecayRates.from_config()
        condition = creature.condition
        starving_from = max(
            _minutes_to_empty(condition.hunger, rates.hunger),
            _minutes_to_empty(condition.hydration, rates.hydration),
        )
        remaining = starving_from + _minutes_to_empty(condition.health, rates.health)
        if math.isinf(remaining):
            return None
        return remaining
