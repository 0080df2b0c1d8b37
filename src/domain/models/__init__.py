"""
Domain models package for Brood.

Design Notes
------------
Domain models are separate from database models:
- Database models (src/database/models/): Anemic SQLAlchemy schemas
- Domain models (src/domain/models/): Immutable frozen dataclasses

The game store converts between database models and domain models.
"""

from .base import (
    DomainEvent,
    DomainValidationError,
    ensure_utc,
    validate_non_negative,
    validate_not_empty,
    validate_positive,
    validate_range,
)
from .creature import (
    BASE_GENETIC_SYMBOLS,
    MAX_CONDITION,
    MAX_DRESSES,
    CombatStats,
    Creature,
    CreatureCondition,
    Dress,
    DressType,
    Gender,
    Genetics,
    Parentage,
    Rarity,
    new_creature_id,
)
from .player import Player, PlayerBalance, Webtrap

__all__ = [
    "DomainEvent",
    "DomainValidationError",
    "ensure_utc",
    "validate_positive",
    "validate_non_negative",
    "validate_range",
    "validate_not_empty",
    "BASE_GENETIC_SYMBOLS",
    "MAX_CONDITION",
    "MAX_DRESSES",
    "CombatStats",
    "Creature",
    "CreatureCondition",
    "Dress",
    "DressType",
    "Gender",
    "Genetics",
    "Parentage",
    "Rarity",
    "new_creature_id",
    "Player",
    "PlayerBalance",
    "Webtrap",
]
