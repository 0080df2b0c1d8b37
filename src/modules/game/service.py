"""
GameService - Command surface for Brood
=======================================

Handles:
- Player commands: feed, hydrate, heal, breed, summon, claim tokens,
  hibernation, webtrap upgrade and collection
- Scheduled sweeps: condition decay and batch token generation

Each command runs inside one store transaction: load records, run the pure
engine, persist what it returns, record ledger entries. Engine rejections
are returned unchanged as `Outcome`s and leave the store untouched.
Missing or foreign records raise `NotFoundError` (a caller error, not a
rejection).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from src.core.config.manager import ConfigManager
from src.core.logging.logger import LogContext, get_logger
from src.database.models.enums import Currency, TransactionType
from src.domain.models.creature import Creature
from src.domain.models.player import Player
from src.modules.breeding.service import BreedingResult, BreedingService, Compatibility
from src.modules.condition.service import ConditionService
from src.modules.creature.service import ActionResult, CreatureService
from src.modules.economy.transaction_log_service import TransactionLogService
from src.modules.generation.service import (
    AccrualResult,
    GenerationCredit,
    TokenGenerationService,
)
from src.modules.shared.base_service import BaseService
from src.modules.shared.clock import Clock, SystemClock
from src.modules.shared.exceptions import CreatureNotFoundError, NotFoundError
from src.modules.shared.randomness import RandomSource, default_random
from src.modules.shared.results import Outcome
from src.modules.summon.service import SummonResult, SummonService
from src.modules.webtrap.service import WebtrapResult, WebtrapService

if TYPE_CHECKING:
    from logging import Logger

    from src.modules.game.store import GameStore, GameUnitOfWork


@dataclass(frozen=True)
class BreedingCheck:
    compatibility: Compatibility
    cost: float

    @property
    def compatible(self) -> bool:
        return self.compatibility.compatible

    @property
    def reasons(self) -> Tuple[str, ...]:
        return self.compatibility.reasons


@dataclass(frozen=True)
class DecaySweepReport:
    creatures_processed: int
    creatures_died: int


class GameService(BaseService):
    """
    Async orchestration of Brood commands over a `GameStore`.

    Usage:
        >>> service = GameService(SqlGameStore())
        >>> outcome = await service.feed_creature("player-1", "creature-1")
        >>> credits = await service.sweep_token_generation(include_offline=True)
    """

    def __init__(
        self,
        store: GameStore,
        clock: Optional[Clock] = None,
        rng: Optional[RandomSource] = None,
        config_manager: type[ConfigManager] = ConfigManager,
        logger: Optional[Logger] = None,
    ) -> None:
        super().__init__(config_manager, logger or get_logger(__name__))
        self.store = store
        self.clock = clock or SystemClock()
        self.rng = rng or default_random()
        self.ledger = TransactionLogService(config_manager, self.log)

    # ========================================================================
    # LOADING HELPERS
    # ========================================================================

    async def _load_player(self, uow: GameUnitOfWork, player_id: str) -> Player:
        player = await uow.get_player(player_id, for_update=True)
        if player is None:
            raise NotFoundError("Player", player_id)
        return player

    async def _load_owned_creature(
        self, uow: GameUnitOfWork, player_id: str, creature_id: str
    ) -> Creature:
        creature = await uow.get_creature(creature_id, for_update=True)
        if creature is None or creature.owner_id != player_id:
            raise CreatureNotFoundError(creature_id, owner_id=player_id)
        return creature

    # ========================================================================
    # PLAYERS
    # ========================================================================

    async def register_player(self, player_id: str, name: str) -> Player:
        """Create a player with the configured starting balance, or return the existing one."""
        self.validate_not_blank(player_id, "player_id")
        async with LogContext(player_id=player_id, command="register_player"):
            async with self.store.transaction() as uow:
                existing = await uow.get_player(player_id)
                if existing is not None:
                    return existing

                player = Player.new(
                    player_id,
                    name,
                    now=self.clock.now(),
                    spider=self.get_config("player.starting_spider", 0),
                    feeders=self.get_config("player.starting_feeders", 0),
                )
                await uow.save_player(player)
                self.log_operation("register_player", player_id=player_id)
                return player

    # ========================================================================
    # CREATURE ACTIONS
    # ========================================================================

    async def feed_creature(self, player_id: str, creature_id: str) -> Outcome[ActionResult]:
        return await self._tend_creature(player_id, creature_id, "feed_creature")

    async def hydrate_creature(self, player_id: str, creature_id: str) -> Outcome[ActionResult]:
        return await self._tend_creature(player_id, creature_id, "hydrate_creature")

    async def _tend_creature(
        self, player_id: str, creature_id: str, command: str
    ) -> Outcome[ActionResult]:
        async with LogContext(player_id=player_id, creature_id=creature_id, command=command):
            async with self.store.transaction() as uow:
                now = self.clock.now()
                player = await self._load_player(uow, player_id)
                creature = await self._load_owned_creature(uow, player_id, creature_id)

                if command == "feed_creature":
                    outcome = CreatureService.feed(creature, player.balance.feeders, now, self.rng)
                    tx_type = TransactionType.FEED
                else:
                    outcome = CreatureService.hydrate(creature, player.balance.feeders, now, self.rng)
                    tx_type = TransactionType.HYDRATE

                if not outcome.ok:
                    self.log.info(
                        "Action rejected",
                        extra={"reason": outcome.rejection.reason.value},
                    )
                    return outcome

                result = outcome.value
                spent = int(result.resource_spent)
                player = player.with_balance(player.balance.debit_feeders(spent)).touch(now)
                await uow.save_creature(result.creature)
                await uow.save_player(player)
                await uow.record_transaction(
                    self.ledger.record_spend(
                        player_id,
                        tx_type,
                        spent,
                        Currency.FEEDERS,
                        f"{command} {creature_id}",
                        now,
                        {"creature_id": creature_id, "levels_gained": result.levels_gained},
                    )
                )
                self.log_operation(
                    command,
                    feeders_spent=spent,
                    level=result.creature.level,
                    levels_gained=result.levels_gained,
                )
                return outcome

    async def heal_creature(self, player_id: str, creature_id: str) -> Outcome[ActionResult]:
        async with LogContext(player_id=player_id, creature_id=creature_id, command="heal_creature"):
            async with self.store.transaction() as uow:
                now = self.clock.now()
                player = await self._load_player(uow, player_id)
                creature = await self._load_owned_creature(uow, player_id, creature_id)

                outcome = CreatureService.heal(creature, None, player.balance.spider, now)
                if not outcome.ok:
                    return outcome

                result = outcome.value
                player = player.with_balance(
                    player.balance.debit_spider(result.resource_spent)
                ).touch(now)
                await uow.save_creature(result.creature)
                await uow.save_player(player)
                await uow.record_transaction(
                    self.ledger.record_spend(
                        player_id,
                        TransactionType.HEAL,
                        result.resource_spent,
                        Currency.SPIDER,
                        f"Heal {creature_id}",
                        now,
                        {"creature_id": creature_id},
                    )
                )
                self.log_operation("heal_creature", cost=result.resource_spent)
                return outcome

    async def set_hibernation(
        self, player_id: str, creature_id: str, hibernating: bool
    ) -> Outcome[ActionResult]:
        """
        Hibernate or wake a creature.

        Tokens accrued up to the moment of hibernation are credited first,
        so entering hibernation never forfeits earned SPIDER.
        """
        async with LogContext(player_id=player_id, creature_id=creature_id, command="set_hibernation"):
            async with self.store.transaction() as uow:
                now = self.clock.now()
                player = await self._load_player(uow, player_id)
                creature = await self._load_owned_creature(uow, player_id, creature_id)

                outcome = CreatureService.set_hibernation(creature, hibernating, now)
                if not outcome.ok:
                    return outcome

                updated = outcome.value.creature
                if hibernating:
                    accrual = TokenGenerationService.accrue_for_player(player, [creature], now)
                    player = accrual.player
                    updated = replace(
                        updated, last_token_generation=accrual.creatures[0].last_token_generation
                    )
                    if accrual.amount > 0:
                        await uow.record_transaction(
                            self.ledger.record_earn(
                                player_id,
                                TransactionType.ACCRUAL,
                                accrual.amount,
                                Currency.SPIDER,
                                "Accrual before hibernation",
                                now,
                                {"creature_id": creature_id},
                            )
                        )

                await uow.save_creature(updated)
                await uow.save_player(player.touch(now))
                self.log_operation("set_hibernation", hibernating=hibernating)
                return Outcome.success(replace(outcome.value, creature=updated))

    # ========================================================================
    # BREEDING
    # ========================================================================

    async def check_breeding_compatibility(
        self, player_id: str, creature_a_id: str, creature_b_id: str
    ) -> BreedingCheck:
        """Compatibility (on condition caught up to now) and cost, read-only."""
        async with LogContext(player_id=player_id, command="check_breeding_compatibility"):
            async with self.store.transaction() as uow:
                now = self.clock.now()
                a = await self._load_owned_creature(uow, player_id, creature_a_id)
                b = await self._load_owned_creature(uow, player_id, creature_b_id)
                a, b = ConditionService.apply_decay_batch([a, b], now)
                return BreedingCheck(
                    compatibility=BreedingService.check_compatibility(a, b),
                    cost=BreedingService.breeding_cost(a, b),
                )

    async def breed_creatures(
        self,
        player_id: str,
        creature_a_id: str,
        creature_b_id: str,
        name: Optional[str] = None,
    ) -> Outcome[BreedingResult]:
        async with LogContext(player_id=player_id, command="breed_creatures"):
            async with self.store.transaction() as uow:
                now = self.clock.now()
                player = await self._load_player(uow, player_id)
                a = await self._load_owned_creature(uow, player_id, creature_a_id)
                b = await self._load_owned_creature(uow, player_id, creature_b_id)

                outcome = BreedingService.breed(a, b, name, player.balance, now, self.rng)
                if not outcome.ok:
                    self.log.info(
                        "Breeding rejected",
                        extra={"details": outcome.rejection.details},
                    )
                    return outcome

                result = outcome.value
                await uow.save_creatures([result.father, result.mother, result.offspring])
                await uow.save_player(player.with_balance(result.balance).touch(now))
                await uow.record_transaction(
                    self.ledger.record_spend(
                        player_id,
                        TransactionType.BREEDING,
                        result.cost,
                        Currency.SPIDER,
                        "Breeding",
                        now,
                        {
                            "father_id": result.father.id,
                            "mother_id": result.mother.id,
                            "offspring_id": result.offspring.id,
                        },
                    )
                )
                self.log_operation(
                    "breed_creatures",
                    offspring_id=result.offspring.id,
                    rarity=result.offspring.rarity.value,
                    cost=result.cost,
                )
                return outcome

    # ========================================================================
    # SUMMON / TOKENS / WEBTRAP
    # ========================================================================

    async def summon(self, player_id: str, multi: bool = False) -> Outcome[SummonResult]:
        async with LogContext(player_id=player_id, command="summon"):
            async with self.store.transaction() as uow:
                now = self.clock.now()
                player = await self._load_player(uow, player_id)

                outcome = SummonService.summon(player_id, player.balance, now, multi, self.rng)
                if not outcome.ok:
                    return outcome

                result = outcome.value
                await uow.save_creatures(result.creatures)
                await uow.save_player(player.with_balance(result.balance).touch(now))
                await uow.record_transaction(
                    self.ledger.record_spend(
                        player_id,
                        TransactionType.SUMMON,
                        result.cost,
                        Currency.SPIDER,
                        "Multi summon" if multi else "Single summon",
                        now,
                        {"creature_ids": [creature.id for creature in result.creatures]},
                    )
                )
                return outcome

    async def claim_tokens(self, player_id: str) -> AccrualResult:
        """Credit the continuous accrual of all the player's creatures."""
        async with LogContext(player_id=player_id, command="claim_tokens"):
            async with self.store.transaction() as uow:
                now = self.clock.now()
                player = await self._load_player(uow, player_id)
                creatures = await uow.list_creatures(player_id, for_update=True)

                result = TokenGenerationService.accrue_for_player(player, creatures, now)
                await uow.save_creatures(result.creatures)
                await uow.save_player(result.player.touch(now))
                if result.amount > 0:
                    await uow.record_transaction(
                        self.ledger.record_earn(
                            player_id,
                            TransactionType.ACCRUAL,
                            result.amount,
                            Currency.SPIDER,
                            f"Token accrual from {len(creatures)} spiders",
                            now,
                        )
                    )
                self.log_operation("claim_tokens", amount=result.amount)
                return result

    async def upgrade_webtrap(self, player_id: str) -> Outcome[WebtrapResult]:
        """Unlock the webtrap, or upgrade it when already unlocked."""
        async with LogContext(player_id=player_id, command="upgrade_webtrap"):
            async with self.store.transaction() as uow:
                now = self.clock.now()
                player = await self._load_player(uow, player_id)
                was_unlocked = player.webtrap.is_unlocked

                outcome = WebtrapService.unlock_or_upgrade(player)
                if not outcome.ok:
                    return outcome

                result = outcome.value
                await uow.save_player(result.player.touch(now))
                await uow.record_transaction(
                    self.ledger.record_spend(
                        player_id,
                        TransactionType.WEBTRAP_UPGRADE if was_unlocked else TransactionType.WEBTRAP_UNLOCK,
                        result.spider_spent,
                        Currency.SPIDER,
                        "Webtrap upgrade" if was_unlocked else "Webtrap unlock",
                        now,
                        {"level": result.player.webtrap.level},
                    )
                )
                return outcome

    async def collect_webtrap(self, player_id: str) -> Outcome[WebtrapResult]:
        async with LogContext(player_id=player_id, command="collect_webtrap"):
            async with self.store.transaction() as uow:
                now = self.clock.now()
                player = await self._load_player(uow, player_id)

                outcome = WebtrapService.collect(player, now)
                if not outcome.ok:
                    return outcome

                result = outcome.value
                await uow.save_player(result.player.touch(now))
                for amount, currency in (
                    (result.feeders_gained, Currency.FEEDERS),
                    (result.spider_gained, Currency.SPIDER),
                ):
                    await uow.record_transaction(
                        self.ledger.record_earn(
                            player_id,
                            TransactionType.WEBTRAP_COLLECT,
                            amount,
                            currency,
                            "Webtrap collection",
                            now,
                            {"level": result.player.webtrap.level},
                        )
                    )
                return outcome

    # ========================================================================
    # SCHEDULED SWEEPS
    # ========================================================================

    async def sweep_condition_decay(self) -> DecaySweepReport:
        """Catch every creature's condition up to now."""
        async with LogContext(command="sweep_condition_decay"):
            async with self.store.transaction() as uow:
                now = self.clock.now()
                creatures = await uow.list_creatures(for_update=True)
                swept = ConditionService.apply_decay_batch(creatures, now)
                await uow.save_creatures(swept)

                died = sum(
                    1
                    for before, after in zip(creatures, swept)
                    if before.is_alive and not after.is_alive
                )
                self.log_operation(
                    "sweep_condition_decay",
                    creatures_processed=len(swept),
                    creatures_died=died,
                )
                return DecaySweepReport(creatures_processed=len(swept), creatures_died=died)

    async def sweep_token_generation(self, include_offline: bool) -> List[GenerationCredit]:
        """
        Batch generation for every owner.

        The hourly sweep passes include_offline=False; the three-hourly one
        passes True.
        """
        async with LogContext(command="sweep_token_generation"):
            async with self.store.transaction() as uow:
                now = self.clock.now()
                # Balances are written back whole
                players = await uow.list_players(for_update=True)
                creatures = await uow.list_creatures(for_update=True)

                by_owner: Dict[str, List[Creature]] = {}
                for creature in creatures:
                    by_owner.setdefault(creature.owner_id, []).append(creature)

                credits = TokenGenerationService.sweep(players, by_owner, now, include_offline)
                players_by_id = {player.id: player for player in players}
                for credit in credits:
                    player, touched = TokenGenerationService.apply_credit(
                        players_by_id[credit.player_id], by_owner[credit.player_id], credit
                    )
                    await uow.save_player(player)
                    await uow.save_creatures(list(touched.values()))
                    await uow.record_transaction(self.ledger.record_generation(credit))

                self.log_operation(
                    "sweep_token_generation",
                    include_offline=include_offline,
                    players_credited=len(credits),
                    tokens_total=sum(credit.amount for credit in credits),
                )
                return credits


__all__ = ["GameService", "BreedingCheck", "DecaySweepReport"]
