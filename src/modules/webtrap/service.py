"""
WebtrapService - Business logic for the webtrap passive collector
=================================================================

Handles:
- Unlocking the webtrap (flat SPIDER cost)
- Upgrading it (cost grows with the current level)
- Collecting feeders and SPIDER once per cooldown window

A webtrap that has never been collected is ready immediately.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta

from src.core.config.manager import ConfigManager
from src.core.logging.logger import get_logger
from src.domain.models.player import Player
from src.modules.shared.results import Outcome, Rejection, RejectionReason

logger = get_logger(__name__)


@dataclass(frozen=True)
class WebtrapResult:
    player: Player
    spider_spent: float = 0
    spider_gained: float = 0
    feeders_gained: int = 0


class WebtrapService:
    """
    Webtrap unlock, upgrade and collection.

    Usage:
        >>> outcome = WebtrapService.unlock_or_upgrade(player)
        >>> outcome = WebtrapService.collect(outcome.value.player, now)
    """

    @staticmethod
    def upgrade_cost(level: int) -> float:
        """
        Example:
            >>> WebtrapService.upgrade_cost(2)
            1000
        """
        return ConfigManager.get("webtrap.upgrade_cost_per_level", 500) * level

    @staticmethod
    def unlock_or_upgrade(player: Player) -> Outcome[WebtrapResult]:
        """
        Unlock a locked webtrap, or upgrade an unlocked one by one level.

        Returns:
            Outcome with the debited player, or INSUFFICIENT_RESOURCES
        """
        webtrap = player.webtrap
        if webtrap.is_unlocked:
            cost = WebtrapService.upgrade_cost(webtrap.level)
            new_webtrap = replace(webtrap, level=webtrap.level + 1)
        else:
            cost = ConfigManager.get("webtrap.unlock_cost", 1000)
            new_webtrap = replace(webtrap, is_unlocked=True)

        if player.balance.spider < cost:
            return Outcome.reject(Rejection.insufficient("SPIDER", cost, player.balance.spider))

        updated = player.with_balance(player.balance.debit_spider(cost)).with_webtrap(new_webtrap)
        logger.info(
            "Webtrap upgraded" if webtrap.is_unlocked else "Webtrap unlocked",
            extra={"player_id": player.id, "level": new_webtrap.level, "cost": cost},
        )
        return Outcome.success(WebtrapResult(player=updated, spider_spent=cost))

    @staticmethod
    def seconds_until_ready(player: Player, now: datetime) -> float:
        """Seconds left on the collection cooldown; 0 when ready."""
        last = player.webtrap.last_collection
        if last is None:
            return 0.0
        cooldown = timedelta(hours=ConfigManager.get("webtrap.cooldown_hours", 24))
        return max(0.0, (last + cooldown - now).total_seconds())

    @staticmethod
    def collect(player: Player, now: datetime) -> Outcome[WebtrapResult]:
        """
        Collect webtrap rewards: feeders 5 x level and SPIDER 10 x level.

        Returns:
            Outcome with the credited player, or a WEBTRAP_LOCKED /
            COOLDOWN_ACTIVE rejection
        """
        webtrap = player.webtrap
        if not webtrap.is_unlocked:
            return Outcome.reject(
                Rejection(RejectionReason.WEBTRAP_LOCKED, "Webtrap is locked", {"player_id": player.id})
            )

        remaining = WebtrapService.seconds_until_ready(player, now)
        if remaining > 0:
            return Outcome.reject(Rejection.cooldown("collect_webtrap", remaining))

        feeders = ConfigManager.get("webtrap.feeders_per_level", 5) * webtrap.level
        spider = ConfigManager.get("webtrap.spider_per_level", 10) * webtrap.level
        balance = player.balance.credit_feeders(feeders).credit_spider(spider)
        updated = player.with_balance(balance).with_webtrap(replace(webtrap, last_collection=now))

        logger.info(
            "Webtrap collected",
            extra={"player_id": player.id, "feeders": feeders, "spider": spider},
        )
        return Outcome.success(
            WebtrapResult(player=updated, spider_gained=spider, feeders_gained=feeders)
        )
