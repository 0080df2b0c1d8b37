"""
Creature actions: feed, hydrate, heal, hibernation and dress equipment.

Purpose
-------
Combine the decay engine and progression rules into the player-facing
actions. Every action first catches the creature's condition up to `now`,
then validates, then applies its effect.

Design Notes
------------
- Expected refusals (deceased creature, not enough feeders or SPIDER,
  invalid equipment change) come back as `Outcome.reject(...)`.
- The only raised error is `InvalidRarityOrLevelStateError`, which marks a
  stored level above the rarity cap.
- Actions never touch balances. They report what they spent in
  `ActionResult.resource_spent`; the caller debits the player.
- Feed and hydrate grant a flat experience unit while below the level cap.
  At the cap they still restore the gauge but change nothing else.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional, Tuple

from src.core.config.manager import ConfigManager
from src.core.logging.logger import get_logger
from src.domain.models.base import DomainEvent
from src.domain.models.creature import (
    MAX_DRESSES,
    Creature,
    Dress,
    DressType,
    Rarity,
    new_creature_id,
)
from src.modules.condition.service import ConditionService
from src.modules.creature.constants import DRESS_POWER_BONUS
from src.modules.progression.service import ProgressionService
from src.modules.shared.randomness import RandomSource, default_random
from src.modules.shared.results import Outcome, Rejection

logger = get_logger(__name__)

CURRENCY_FEEDERS = "feeders"
CURRENCY_SPIDER = "SPIDER"


@dataclass(frozen=True)
class ActionResult:
    """
    Result of a successful creature action.

    Attributes
    ----------
    creature : Creature
        Creature after the action
    resource_spent : float
        Amount the caller must debit from the player
    currency : str
        "feeders" or "SPIDER"
    levels_gained : int
        Levels gained by the action (feed/hydrate only)
    events : tuple of DomainEvent
        What happened, for logging and ledger collaborators
    """

    creature: Creature
    resource_spent: float = 0
    currency: str = CURRENCY_FEEDERS
    levels_gained: int = 0
    events: Tuple[DomainEvent, ...] = ()


class CreatureService:
    """
    Player-facing creature actions.

    Usage:
        >>> outcome = CreatureService.feed(creature, available_feeders=50, now=now, rng=rng)
        >>> if outcome.ok:
        ...     creature = outcome.value.creature
    """

    # ========================================================================
    # FEED / HYDRATE
    # ========================================================================

    @staticmethod
    def feed(
        creature: Creature,
        available_feeders: int,
        now: datetime,
        rng: Optional[RandomSource] = None,
    ) -> Outcome[ActionResult]:
        """
        Feed a creature: hunger +20 (capped), +1 experience below the cap.

        Args:
            creature: Creature to feed
            available_feeders: Player's current feeder balance
            now: Action instant (UTC)
            rng: Random source for level-up rolls

        Returns:
            Outcome with ActionResult, or a CREATURE_NOT_ALIVE /
            INSUFFICIENT_RESOURCES rejection

        Raises:
            InvalidRarityOrLevelStateError: Stored level is above the rarity cap
        """
        restore = ConfigManager.get("actions.feed_restore", 20)
        return CreatureService._tend(
            creature, available_feeders, now, rng, gauge="hunger", restore=restore
        )

    @staticmethod
    def hydrate(
        creature: Creature,
        available_feeders: int,
        now: datetime,
        rng: Optional[RandomSource] = None,
    ) -> Outcome[ActionResult]:
        """Hydrate a creature. Symmetric to `feed` on the hydration gauge."""
        restore = ConfigManager.get("actions.hydrate_restore", 20)
        return CreatureService._tend(
            creature, available_feeders, now, rng, gauge="hydration", restore=restore
        )

    @staticmethod
    def _tend(
        creature: Creature,
        available_feeders: int,
        now: datetime,
        rng: Optional[RandomSource],
        gauge: str,
        restore: float,
    ) -> Outcome[ActionResult]:
        ProgressionService.ensure_level_within_cap(creature)
        creature = ConditionService.apply_decay(creature, now)

        if not creature.is_alive:
            return Outcome.reject(Rejection.not_alive(creature.id))

        if gauge == "hunger":
            cost = ProgressionService.feeding_cost(creature.level)
        else:
            cost = ProgressionService.hydration_cost(creature.level)
        if available_feeders < cost:
            return Outcome.reject(Rejection.insufficient(CURRENCY_FEEDERS, cost, available_feeders))

        if gauge == "hunger":
            condition = creature.condition.with_hunger(creature.condition.hunger + restore)
            creature = replace(creature, condition=condition, last_fed=now)
        else:
            condition = creature.condition.with_hydration(creature.condition.hydration + restore)
            creature = replace(creature, condition=condition, last_hydrated=now)

        events = [
            DomainEvent(
                f"creature.{'fed' if gauge == 'hunger' else 'hydrated'}",
                {"creature_id": creature.id, "feeders_spent": cost},
                occurred_at=now,
            )
        ]
        levels_gained = 0
        if ProgressionService.can_level_up(creature):
            experience = ConfigManager.get("actions.experience_per_action", 1)
            progress = ProgressionService.apply_experience(
                creature, experience, rng or default_random()
            )
            creature = progress.creature
            levels_gained = progress.levels_gained
            if levels_gained:
                events.append(
                    DomainEvent(
                        "creature.leveled_up",
                        {
                            "creature_id": creature.id,
                            "level": creature.level,
                            "levels_gained": levels_gained,
                            "power_gained": progress.power_gained,
                        },
                        occurred_at=now,
                    )
                )

        return Outcome.success(
            ActionResult(
                creature=creature,
                resource_spent=cost,
                currency=CURRENCY_FEEDERS,
                levels_gained=levels_gained,
                events=tuple(events),
            )
        )

    # ========================================================================
    # HEAL
    # ========================================================================

    @staticmethod
    def heal(
        creature: Creature,
        cost: Optional[float],
        available_balance: float,
        now: Optional[datetime] = None,
    ) -> Outcome[ActionResult]:
        """
        Heal a creature: health +20 (capped) for a flat SPIDER cost. No experience.

        Args:
            creature: Creature to heal
            cost: SPIDER cost; `actions.heal_cost` when None
            available_balance: Player's SPIDER balance
            now: When given, condition is caught up to this instant first

        Returns:
            Outcome with ActionResult, or a rejection
        """
        if cost is None:
            cost = ConfigManager.get("actions.heal_cost", 50)
        if now is not None:
            creature = ConditionService.apply_decay(creature, now)

        if not creature.is_alive:
            return Outcome.reject(Rejection.not_alive(creature.id))
        if available_balance < cost:
            return Outcome.reject(Rejection.insufficient(CURRENCY_SPIDER, cost, available_balance))

        amount = ConfigManager.get("actions.heal_amount", 20)
        condition = creature.condition.with_health(creature.condition.health + amount)
        healed = replace(creature, condition=condition)

        return Outcome.success(
            ActionResult(
                creature=healed,
                resource_spent=cost,
                currency=CURRENCY_SPIDER,
                events=(
                    DomainEvent(
                        "creature.healed",
                        {"creature_id": creature.id, "health": condition.health},
                        occurred_at=now or datetime.now(timezone.utc),
                    ),
                ),
            )
        )

    # ========================================================================
    # HIBERNATION
    # ========================================================================

    @staticmethod
    def set_hibernation(
        creature: Creature, hibernating: bool, now: datetime
    ) -> Outcome[ActionResult]:
        """
        Put a creature into hibernation or wake it.

        Hibernating creatures accrue no tokens. Waking resets
        `last_token_generation` to `now`, so the hibernation window never
        accrues. Decay keeps running either way.
        """
        creature = ConditionService.apply_decay(creature, now)

        if not creature.is_alive:
            return Outcome.reject(Rejection.not_alive(creature.id))
        if creature.is_listed:
            return Outcome.reject(
                Rejection.invalid("hibernate", "Listed creatures cannot change hibernation")
            )
        if creature.is_hibernating == hibernating:
            state = "hibernating" if hibernating else "awake"
            return Outcome.reject(Rejection.invalid("hibernate", f"Creature is already {state}"))

        if hibernating:
            updated = replace(creature, is_hibernating=True)
        else:
            updated = replace(creature, is_hibernating=False, last_token_generation=now)

        return Outcome.success(
            ActionResult(
                creature=updated,
                events=(
                    DomainEvent(
                        "creature.hibernation_changed",
                        {"creature_id": creature.id, "is_hibernating": hibernating},
                        occurred_at=now,
                    ),
                ),
            )
        )

    # ========================================================================
    # DRESSES
    # ========================================================================

    @staticmethod
    def create_dress(
        name: str,
        rarity: Rarity,
        dress_type: DressType,
        dress_id: Optional[str] = None,
    ) -> Dress:
        """New dress carrying the power bonus of its rarity."""
        return Dress(
            id=dress_id or new_creature_id(),
            name=name,
            rarity=rarity,
            dress_type=dress_type,
            power_bonus=DRESS_POWER_BONUS[rarity],
        )

    @staticmethod
    def equip_dress(creature: Creature, dress: Dress) -> Outcome[ActionResult]:
        """
        Equip a dress. At most three dresses, one per dress type.

        Base power is untouched; `Creature.effective_power` adds the bonus.
        """
        if creature.is_listed:
            return Outcome.reject(Rejection.invalid("equip_dress", "Listed creatures cannot change dresses"))
        if any(equipped.id == dress.id for equipped in creature.dresses):
            return Outcome.reject(Rejection.invalid("equip_dress", "Dress is already equipped"))
        if len(creature.dresses) >= MAX_DRESSES:
            return Outcome.reject(
                Rejection.invalid("equip_dress", f"A creature can wear at most {MAX_DRESSES} dresses")
            )
        if any(equipped.dress_type == dress.dress_type for equipped in creature.dresses):
            return Outcome.reject(
                Rejection.invalid(
                    "equip_dress", f"A {dress.dress_type.value} dress is already equipped"
                )
            )

        updated = replace(creature, dresses=creature.dresses + (dress,))
        return Outcome.success(ActionResult(creature=updated))

    @staticmethod
    def unequip_dress(creature: Creature, dress_id: str) -> Outcome[ActionResult]:
        if creature.is_listed:
            return Outcome.reject(Rejection.invalid("unequip_dress", "Listed creatures cannot change dresses"))
        remaining = tuple(dress for dress in creature.dresses if dress.id != dress_id)
        if len(remaining) == len(creature.dresses):
            return Outcome.reject(Rejection.invalid("unequip_dress", "Dress is not equipped"))

        return Outcome.success(ActionResult(creature=replace(creature, dresses=remaining)))
