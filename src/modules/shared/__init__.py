"""
Brood Shared Module

Purpose
-------
Provides domain-level foundations for all game modules:
- Domain exceptions and typed rejections
- Base service and repository patterns
- Clock and random source abstractions
- Pure formulas for game mechanics

Architecture
------------
- BaseService: Foundation for orchestration services (logging, config)
- BaseRepository: Type-safe database access patterns
- Domain exceptions: Game-facing errors and invariant violations
- Results: `Outcome` / `Rejection` returned by the engines
- Formulas: Pure calculation functions for game mechanics

Usage
-----
    from src.modules.shared import (
        Outcome,
        Rejection,
        InsufficientResourcesError,
        band_value,
    )
"""

from __future__ import annotations

# Base patterns
from .base_repository import BaseRepository
from .base_service import BaseService

# Time and randomness
from .clock import Clock, SystemClock, hours_between, minutes_between
from .randomness import RandomSource, default_random

# Domain exceptions
from .exceptions import (
    BroodDomainException,
    CooldownActiveError,
    CreatureNotAliveError,
    CreatureNotFoundError,
    ErrorSeverity,
    IncompatibleBreedingPairError,
    InsufficientResourcesError,
    InvalidOperationError,
    InvalidRarityOrLevelStateError,
    NotFoundError,
    should_alert,
)

# Results
from .results import Outcome, Rejection, RejectionReason

# Formulas
from .formulas import (
    band_value,
    cumulative_experience,
    level_from_experience,
    pick_weighted,
    round_half_up,
    split_proportionally,
    truncate_money,
)

__all__ = [
    # Base patterns
    "BaseService",
    "BaseRepository",
    # Time and randomness
    "Clock",
    "SystemClock",
    "hours_between",
    "minutes_between",
    "RandomSource",
    "default_random",
    # Exceptions
    "BroodDomainException",
    "ErrorSeverity",
    "InsufficientResourcesError",
    "CreatureNotAliveError",
    "IncompatibleBreedingPairError",
    "NotFoundError",
    "CreatureNotFoundError",
    "CooldownActiveError",
    "InvalidOperationError",
    "InvalidRarityOrLevelStateError",
    "should_alert",
    # Results
    "Outcome",
    "Rejection",
    "RejectionReason",
    # Formulas
    "band_value",
    "cumulative_experience",
    "level_from_experience",
    "split_proportionally",
    "pick_weighted",
    "truncate_money",
    "round_half_up",
]
