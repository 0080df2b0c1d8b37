"""
Passive SPIDER token generation.

Two accrual models coexist and are deliberately kept apart:

Continuous (on demand)
    Each creature accrues `effective_power * rate * hours` since its
    `last_token_generation`, truncated to 2 decimals. Claimed when the
    player checks their balance.

Batch (scheduled sweep)
    Each owner earns `base_rate * rarity_multiplier` per alive,
    non-hibernating creature. Offline owners (no activity in 15 minutes)
    are skipped by the hourly sweep. The include-offline sweep pays them
    50%, scaled by `min(24, hours_offline) / offline_sweep_interval_hours`.
    The divisor is the cadence of that sweep; both values live in the
    `tokens.batch` config section and must change together.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from src.core.config.manager import ConfigManager
from src.core.logging.logger import get_logger
from src.domain.models.creature import Creature, Rarity
from src.domain.models.player import Player
from src.modules.condition.service import ConditionService
from src.modules.shared.clock import hours_between, minutes_between
from src.modules.shared.formulas import round_half_up, truncate_money

logger = get_logger(__name__)


class GenerationMode(str, Enum):
    ACTIVE = "active"
    OFFLINE = "offline"


@dataclass(frozen=True)
class GenerationCredit:
    """One owner's credit from a batch sweep."""

    player_id: str
    amount: int
    contributing_count: int
    mode: GenerationMode
    generated_at: datetime
    creature_ids: Tuple[str, ...] = ()

    @property
    def description(self) -> str:
        return f"Token generation from {self.contributing_count} spiders ({self.mode.value})"


@dataclass(frozen=True)
class AccrualResult:
    """Player and creatures after a continuous accrual claim."""

    player: Player
    creatures: Tuple[Creature, ...]
    amount: float


class TokenGenerationService:
    """
    Continuous and batch token accrual.

    Usage:
        >>> TokenGenerationService.tokens_generated(creature, now)
        20.0
        >>> credit = TokenGenerationService.batch_generation_for_owner(
        ...     player, creatures, now, include_offline=True
        ... )
    """

    # ========================================================================
    # CONTINUOUS MODEL
    # ========================================================================

    @staticmethod
    def tokens_generated(
        creature: Creature, now: datetime, rate: Optional[float] = None
    ) -> float:
        """
        Tokens a creature accrued since its last generation checkpoint.

        Hibernating and deceased creatures accrue nothing. Elapsed time
        before the checkpoint (clock skew) counts as zero.

        Example:
            >>> # power 100, checkpoint 2 hours ago, rate 0.1
            >>> TokenGenerationService.tokens_generated(creature, now)
            20.0
        """
        if creature.is_hibernating or not creature.is_alive:
            return 0.0

        hours = hours_between(creature.last_token_generation, now)
        if hours <= 0:
            return 0.0

        if rate is None:
            rate = float(ConfigManager.get("tokens.continuous.rate_per_power_hour", 0.1))
        return truncate_money(creature.effective_power * rate * hours)

    @staticmethod
    def accrue_for_player(
        player: Player, creatures: Sequence[Creature], now: datetime
    ) -> AccrualResult:
        """
        Credit the continuous accrual of every creature to the player.

        Each creature's checkpoint moves to `now` and its condition is
        caught up. Creatures owned by someone else are left untouched.
        """
        rate = float(ConfigManager.get("tokens.continuous.rate_per_power_hour", 0.1))

        total = 0.0
        updated: List[Creature] = []
        for creature in creatures:
            if creature.owner_id != player.id:
                logger.warning(
                    "Skipping creature owned by another player during accrual",
                    extra={"creature_id": creature.id, "player_id": player.id},
                )
                updated.append(creature)
                continue

            total += TokenGenerationService.tokens_generated(creature, now, rate)
            caught_up = ConditionService.apply_decay(creature, now)
            updated.append(
                replace(
                    caught_up,
                    last_token_generation=max(caught_up.last_token_generation, now),
                )
            )

        amount = truncate_money(total)
        credited = player.with_balance(player.balance.credit_spider(amount))
        return AccrualResult(player=credited, creatures=tuple(updated), amount=amount)

    # ========================================================================
    # BATCH MODEL
    # ========================================================================

    @staticmethod
    def rarity_multiplier(rarity: Rarity) -> float:
        multipliers: Mapping[str, float] = ConfigManager.get(
            "tokens.batch.rarity_multipliers", {}
        )
        return float(multipliers.get(rarity.value, 1))

    @staticmethod
    def is_offline(player: Player, now: datetime) -> bool:
        """No recorded activity within `tokens.batch.offline_after_minutes`."""
        if player.last_activity is None:
            return True
        threshold = ConfigManager.get("tokens.batch.offline_after_minutes", 15)
        return minutes_between(player.last_activity, now) > threshold

    @staticmethod
    def hours_offline(player: Player, now: datetime) -> float:
        """Hours since last activity, capped at `tokens.batch.max_offline_hours`."""
        max_hours = float(ConfigManager.get("tokens.batch.max_offline_hours", 24))
        if player.last_activity is None:
            return max_hours
        return max(0.0, min(max_hours, hours_between(player.last_activity, now)))

    @staticmethod
    def batch_generation_for_owner(
        player: Player,
        creatures: Iterable[Creature],
        now: datetime,
        include_offline: bool,
    ) -> Optional[GenerationCredit]:
        """
        Batch credit for one owner.

        Args:
            player: Owner of the creatures
            creatures: The owner's creatures
            now: Sweep instant
            include_offline: True for the offline sweep

        Returns:
            GenerationCredit, or None when the owner is skipped (offline in
            the active sweep) or the rounded total is zero
        """
        offline = TokenGenerationService.is_offline(player, now)
        if offline and not include_offline:
            return None

        base_rate = float(ConfigManager.get("tokens.batch.base_rate_per_hour", 10))
        contributing = [
            creature
            for creature in creatures
            if creature.owner_id == player.id
            and creature.is_alive
            and not creature.is_hibernating
        ]
        total = sum(
            base_rate * TokenGenerationService.rarity_multiplier(creature.rarity)
            for creature in contributing
        )

        if offline:
            penalty = float(ConfigManager.get("tokens.batch.offline_penalty", 0.5))
            interval = float(ConfigManager.get("tokens.batch.offline_sweep_interval_hours", 3))
            total *= penalty * TokenGenerationService.hours_offline(player, now) / interval

        amount = round_half_up(total)
        if amount <= 0:
            return None

        return GenerationCredit(
            player_id=player.id,
            amount=amount,
            contributing_count=len(contributing),
            mode=GenerationMode.OFFLINE if offline else GenerationMode.ACTIVE,
            generated_at=now,
            creature_ids=tuple(creature.id for creature in contributing),
        )

    @staticmethod
    def sweep(
        owners: Iterable[Player],
        creatures_by_owner: Mapping[str, Sequence[Creature]],
        now: datetime,
        include_offline: bool,
    ) -> List[GenerationCredit]:
        """
        Batch credits for every owner, in owner order.

        Owners are independent; an owner with no creatures earns nothing.
        """
        credits: List[GenerationCredit] = []
        for player in owners:
            credit = TokenGenerationService.batch_generation_for_owner(
                player, creatures_by_owner.get(player.id, ()), now, include_offline
            )
            if credit is not None:
                credits.append(credit)

        logger.info(
            "Batch token sweep computed",
            extra={
                "include_offline": include_offline,
                "players_credited": len(credits),
                "tokens_total": sum(credit.amount for credit in credits),
            },
        )
        return credits

    @staticmethod
    def apply_credit(
        player: Player, creatures: Sequence[Creature], credit: GenerationCredit
    ) -> Tuple[Player, Dict[str, Creature]]:
        """
        Apply a batch credit: SPIDER to the player, checkpoint to contributors.

        Returns:
            (credited player, contributing creatures by id with the
            generation checkpoint moved to the sweep instant)
        """
        credited = player.with_balance(player.balance.credit_spider(credit.amount))
        contributing = set(credit.creature_ids)
        touched = {
            creature.id: replace(
                creature,
                last_token_generation=max(creature.last_token_generation, credit.generated_at),
            )
            for creature in creatures
            if creature.id in contributing
        }
        return credited, touched
