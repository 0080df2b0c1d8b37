"""
Typed results for Brood game engines.

Purpose
-------
Engines never raise for expected outcomes such as a player lacking feeders
or a creature being deceased. They return an `Outcome`, which is either a
success payload or a `Rejection` naming the reason. Callers pattern-match on
`outcome.ok`, or call `outcome.unwrap()` to turn a rejection into the
matching domain exception from `exceptions.py`.

Usage
-----
    outcome = CreatureService.feed(creature, feeders, now, rng)
    if not outcome.ok:
        return render_rejection(outcome.rejection)
    result = outcome.value
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, Optional, Sequence, TypeVar

from src.modules.shared.exceptions import (
    BroodDomainException,
    CooldownActiveError,
    CreatureNotAliveError,
    IncompatibleBreedingPairError,
    InsufficientResourcesError,
    InvalidOperationError,
)

T = TypeVar("T")


class RejectionReason(str, Enum):
    INSUFFICIENT_RESOURCES = "insufficient_resources"
    CREATURE_NOT_ALIVE = "creature_not_alive"
    INCOMPATIBLE_BREEDING_PAIR = "incompatible_breeding_pair"
    WEBTRAP_LOCKED = "webtrap_locked"
    COOLDOWN_ACTIVE = "cooldown_active"
    INVALID_OPERATION = "invalid_operation"


@dataclass(frozen=True)
class Rejection:
    """
    Named, expected refusal of a game action.

    Attributes
    ----------
    reason : RejectionReason
        Machine-readable reason
    message : str
        Player-facing description
    details : dict
        Structured context (resource amounts, breeding reasons, ...)
    """

    reason: RejectionReason
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def insufficient(cls, resource: str, required: float, current: float) -> "Rejection":
        return cls(
            RejectionReason.INSUFFICIENT_RESOURCES,
            f"Not enough {resource}: need {required:,}, have {current:,}",
            {"resource": resource, "required": required, "current": current},
        )

    @classmethod
    def not_alive(cls, creature_id: str) -> "Rejection":
        return cls(
            RejectionReason.CREATURE_NOT_ALIVE,
            "Creature is deceased",
            {"creature_id": creature_id},
        )

    @classmethod
    def incompatible(cls, reasons: Sequence[str]) -> "Rejection":
        return cls(
            RejectionReason.INCOMPATIBLE_BREEDING_PAIR,
            f"Creatures cannot breed: {', '.join(reasons)}",
            {"reasons": list(reasons)},
        )

    @classmethod
    def cooldown(cls, action: str, remaining_seconds: float) -> "Rejection":
        return cls(
            RejectionReason.COOLDOWN_ACTIVE,
            f"{action} is on cooldown for {remaining_seconds:.0f}s",
            {"action": action, "remaining_seconds": remaining_seconds},
        )

    @classmethod
    def invalid(cls, action: str, message: str) -> "Rejection":
        return cls(RejectionReason.INVALID_OPERATION, message, {"action": action})

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def to_exception(self) -> BroodDomainException:
        """Build the domain exception matching this rejection."""
        details = self.details
        if self.reason is RejectionReason.INSUFFICIENT_RESOURCES:
            return InsufficientResourcesError(
                details["resource"], details["required"], details["current"]
            )
        if self.reason is RejectionReason.CREATURE_NOT_ALIVE:
            return CreatureNotAliveError(details["creature_id"])
        if self.reason is RejectionReason.INCOMPATIBLE_BREEDING_PAIR:
            return IncompatibleBreedingPairError(details["reasons"])
        if self.reason is RejectionReason.COOLDOWN_ACTIVE:
            return CooldownActiveError(details["action"], details["remaining_seconds"])
        if self.reason is RejectionReason.WEBTRAP_LOCKED:
            return InvalidOperationError("webtrap", self.message)
        return InvalidOperationError(details.get("action", "operation"), self.message)


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Either a success `value` or a `rejection`, never both."""

    value: Optional[T] = None
    rejection: Optional[Rejection] = None

    @property
    def ok(self) -> bool:
        return self.rejection is None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def reject(cls, rejection: Rejection) -> "Outcome[T]":
        return cls(rejection=rejection)

    def unwrap(self) -> T:
        """
        Return the success value.

        Raises:
            BroodDomainException: The exception matching the rejection
        """
        if self.rejection is not None:
            raise self.rejection.to_exception()
        return self.value  # type: ignore[return-value]
