"""
Domain exceptions for Brood.

Purpose
-------
Define the structured, domain-specific exception hierarchy for Brood game
logic. Core engines never raise these for expected outcomes: they return a
`Rejection` (see `results.py`) which callers may convert with
`Outcome.unwrap()`. The exceptions are raised directly only for caller
errors (missing records) and for data corruption (a level above its
rarity cap).

Design Notes
------------
- All domain exceptions inherit from `BroodDomainException`.
- Each exception carries:
  - `message`: human-readable description
  - `details`: additional structured context (dict-like)
  - `severity`: `ErrorSeverity` value for logging/alerting
  - `is_retryable`: whether the operation can be retried
  - `error_code`: short, stable identifier for programmatic use
- `should_alert` decides whether a failure is logged as critical or as a
  plain warning (the CLI uses it for failed jobs).
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional, Sequence


class ErrorSeverity(Enum):
    """Error severity levels for logging and alerting."""

    DEBUG = "debug"  # Expected, not concerning (e.g., cooldowns)
    INFO = "info"  # Normal operation (e.g., not enough feeders)
    WARNING = "warning"  # Concerning but handled
    ERROR = "error"  # Unexpected errors requiring attention
    CRITICAL = "critical"  # Corrupted state requiring immediate action


class BroodDomainException(Exception):
    """Root of the domain error tree; carries severity, retryability and a stable code."""

    DEFAULT_SEVERITY: ErrorSeverity = ErrorSeverity.ERROR
    DEFAULT_RETRYABLE: bool = False

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        severity: Optional[ErrorSeverity] = None,
        is_retryable: Optional[bool] = None,
        error_code: Optional[str] = None,
    ) -> None:
        self.message: str = message
        self.details: Dict[str, Any] = details or {}
        self.severity: ErrorSeverity = severity or self.DEFAULT_SEVERITY
        self.is_retryable: bool = (
            is_retryable if is_retryable is not None else self.DEFAULT_RETRYABLE
        )
        self.error_code: str = error_code or self.__class__.__name__
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "severity": self.severity.value,
            "is_retryable": self.is_retryable,
        }

    def __str__(self) -> str:
        details_str = f" | Details: {self.details}" if self.details else ""
        return f"[{self.error_code}] {self.message}{details_str}"


class InsufficientResourcesError(BroodDomainException):
    """
    Raised when a player lacks the SPIDER or feeders an action costs.

    Args:
        resource: Name of the resource ("SPIDER", "feeders")
        required: Amount required for the action
        current: Amount the player currently has
    """

    DEFAULT_SEVERITY = ErrorSeverity.INFO
    DEFAULT_RETRYABLE = False

    def __init__(self, resource: str, required: float, current: float) -> None:
        self.resource = resource
        self.required = required
        self.current = current
        message = f"Insufficient {resource}: need {required:,}, have {current:,}"
        super().__init__(
            message,
            details={
                "resource": resource,
                "required": required,
                "current": current,
                "deficit": required - current,
            },
            error_code=f"INSUFFICIENT_{resource.upper()}",
        )


class CreatureNotAliveError(BroodDomainException):
    """Raised when an action targets a creature whose health reached zero."""

    DEFAULT_SEVERITY = ErrorSeverity.INFO
    DEFAULT_RETRYABLE = False

    def __init__(self, creature_id: str) -> None:
        self.creature_id = creature_id
        super().__init__(
            f"Creature {creature_id} is deceased",
            details={"creature_id": creature_id},
            error_code="CREATURE_NOT_ALIVE",
        )


class IncompatibleBreedingPairError(BroodDomainException):
    """
    Raised when two creatures cannot breed.

    Carries every violated condition so callers can render all of them.
    """

    DEFAULT_SEVERITY = ErrorSeverity.INFO
    DEFAULT_RETRYABLE = False

    def __init__(self, reasons: Sequence[str]) -> None:
        self.reasons: List[str] = list(reasons)
        super().__init__(
            f"Creatures cannot breed: {', '.join(self.reasons)}",
            details={"reasons": self.reasons},
            error_code="INCOMPATIBLE_BREEDING_PAIR",
        )


class NotFoundError(BroodDomainException):
    """A player or creature id that the store does not know."""

    DEFAULT_SEVERITY = ErrorSeverity.INFO
    DEFAULT_RETRYABLE = False

    def __init__(self, resource_type: str, identifier: Optional[Any] = None) -> None:
        self.resource_type = resource_type
        self.identifier = identifier

        if identifier is not None:
            message = f"{resource_type} not found: {identifier}"
        else:
            message = f"{resource_type} not found"

        super().__init__(
            message,
            details={
                "resource_type": resource_type,
                "identifier": identifier,
            },
            error_code=f"{resource_type.upper()}_NOT_FOUND",
        )


class CreatureNotFoundError(NotFoundError):
    """Raised when a creature does not exist or is not owned by the player."""

    def __init__(self, creature_id: str, owner_id: Optional[str] = None) -> None:
        super().__init__("Creature", creature_id)
        self.owner_id = owner_id
        if owner_id is not None:
            self.details["owner_id"] = owner_id


class CooldownActiveError(BroodDomainException):
    """The webtrap (or another timed action) is not ready yet."""

    DEFAULT_SEVERITY = ErrorSeverity.DEBUG
    DEFAULT_RETRYABLE = True

    def __init__(self, action: str, remaining_seconds: float) -> None:
        self.action = action
        self.remaining_seconds = remaining_seconds
        message = f"{action} is on cooldown: {remaining_seconds:.1f}s remaining"
        super().__init__(
            message,
            details={
                "action": action,
                "remaining": remaining_seconds,
                "retry_after": remaining_seconds,
            },
            error_code="COOLDOWN_ACTIVE",
            is_retryable=True,
        )


class InvalidOperationError(BroodDomainException):
    """A command that breaks a game rule, e.g. collecting from a locked webtrap."""

    DEFAULT_SEVERITY = ErrorSeverity.INFO
    DEFAULT_RETRYABLE = False

    def __init__(self, action: str, reason: str) -> None:
        self.action = action
        self.reason = reason
        message = f"Invalid operation '{action}': {reason}"
        super().__init__(
            message,
            details={
                "action": action,
                "reason": reason,
            },
            error_code=f"INVALID_{action.upper()}",
        )


class InvalidRarityOrLevelStateError(BroodDomainException):
    """
    Raised when a stored creature's level exceeds its rarity cap.

    Never a player error: the record was corrupted upstream.
    """

    DEFAULT_SEVERITY = ErrorSeverity.CRITICAL
    DEFAULT_RETRYABLE = False

    def __init__(self, creature_id: str, rarity: str, level: int, max_level: int) -> None:
        self.creature_id = creature_id
        self.rarity = rarity
        self.level = level
        self.max_level = max_level
        super().__init__(
            f"Creature {creature_id} is level {level}, above the {rarity} cap of {max_level}",
            details={
                "creature_id": creature_id,
                "rarity": rarity,
                "level": level,
                "max_level": max_level,
            },
            error_code="INVALID_RARITY_OR_LEVEL_STATE",
        )


def should_alert(exc: Exception) -> bool:
    """True for unknown exceptions and for domain errors at ERROR or above."""
    if isinstance(exc, BroodDomainException):
        return exc.severity in (ErrorSeverity.ERROR, ErrorSeverity.CRITICAL)
    return True
