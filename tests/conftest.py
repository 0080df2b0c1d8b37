"""
Pytest Configuration and Fixtures for Brood Tests
=================================================

Purpose
-------
Centralized fixtures for the Brood test suite: configuration lifecycle,
frozen time, and domain model factories.

Architecture Notes
------------------
- Unit tests run the pure engines against the YAML balance defaults
- Orchestration tests use the in-memory store from `tests.helpers`
- Integration tests use a temporary SQLite file (no external services)
- Every test starts from freshly loaded configuration
"""

from __future__ import annotations

import os

# Must be set before src.core.config.config is imported
os.environ["ENVIRONMENT"] = "testing"
os.environ["LOG_TO_FILE"] = "false"

from datetime import datetime
from typing import Any, Callable, Generator

import pytest

from src.core.config.config import Config
from src.core.config.manager import ConfigManager
from src.core.logging.logger import clear_log_context, get_logger
from src.domain.models.creature import (
    CombatStats,
    Creature,
    CreatureCondition,
    Gender,
    Genetics,
    Rarity,
)
from src.domain.models.player import Player, PlayerBalance, Webtrap
from tests.helpers import NOW

logger = get_logger(__name__)


# ============================================================================
# CONFIGURATION FIXTURES
# ============================================================================


@pytest.fixture(autouse=True)
def balance_config() -> Generator[type[ConfigManager], None, None]:
    """
    Load the shipped YAML balance tables for every test.

    Scope: function (overrides never leak between tests)
    """
    ConfigManager.reset()
    ConfigManager.initialize(Config.PROJECT_ROOT / "config")
    yield ConfigManager
    ConfigManager.reset()
    clear_log_context()


@pytest.fixture
def mock_config() -> Callable[[str, Any], None]:
    """
    Override balance values for one test.

    Usage:
        mock_config("breeding.base_cost", 750)
    """

    def _override(key: str, value: Any) -> None:
        ConfigManager.set(key, value)

    return _override


# ============================================================================
# TIME FIXTURES
# ============================================================================


@pytest.fixture
def now() -> datetime:
    return NOW


# ============================================================================
# DOMAIN MODEL FACTORIES
# ============================================================================


@pytest.fixture
def make_creature() -> Callable[..., Creature]:
    """
    Factory for creatures with sensible defaults.

    Usage:
        creature = make_creature(rarity=Rarity.RARE, power=100)
        starving = make_creature(hunger=0, hydration=0, health=5)
    """
    counter = {"value": 0}

    def _make(
        creature_id: str | None = None,
        owner_id: str = "player-1",
        rarity: Rarity = Rarity.COMMON,
        gender: Gender = Gender.MALE,
        genetics: str = "S",
        level: int = 1,
        experience: int = 0,
        power: int = 0,
        stats: CombatStats | None = None,
        health: float = 100.0,
        hunger: float = 100.0,
        hydration: float = 100.0,
        checkpoint: datetime = NOW,
        last_token_generation: datetime | None = None,
        **overrides: Any,
    ) -> Creature:
        counter["value"] += 1
        return Creature(
            id=creature_id or f"creature-{counter['value']}",
            owner_id=owner_id,
            name=overrides.pop("name", f"Spider {counter['value']}"),
            rarity=rarity,
            genetics=Genetics(genetics),
            gender=gender,
            created_at=checkpoint,
            last_fed=checkpoint,
            last_hydrated=checkpoint,
            last_token_generation=last_token_generation or checkpoint,
            condition_updated_at=checkpoint,
            level=level,
            experience=experience,
            power=power,
            stats=stats or CombatStats(),
            condition=CreatureCondition(health=health, hunger=hunger, hydration=hydration),
            **overrides,
        )

    return _make


@pytest.fixture
def make_player() -> Callable[..., Player]:
    """
    Factory for players; active (last seen at NOW) unless told otherwise.

    Usage:
        player = make_player(spider=5000, feeders=100)
        offline = make_player(last_activity=ago(hours=6))
    """

    def _make(
        player_id: str = "player-1",
        name: str = "Weaver",
        spider: float = 1000.0,
        feeders: int = 50,
        last_activity: datetime | None = NOW,
        webtrap: Webtrap | None = None,
    ) -> Player:
        return Player(
            id=player_id,
            name=name,
            balance=PlayerBalance(spider=spider, feeders=feeders),
            webtrap=webtrap or Webtrap(),
            last_activity=last_activity,
            created_at=NOW,
        )

    return _make
