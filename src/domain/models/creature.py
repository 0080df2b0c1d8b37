"""
Creature Domain Model for Brood.

Purpose
-------
Immutable domain model of a spider creature: identity, rarity, genetics,
progression (level / experience / power / combat stats), vital condition
and the timestamps the decay and token engines anchor on.

This is separate from the database model (CreatureRecord), which is an
anemic row schema. The game store converts between the two via
`Creature.from_db()` and `Creature.to_db_updates()`.

Responsibilities
----------------
- Define the closed types: Rarity, Gender, DressType, Genetics
- Validate value objects on construction (gauges in range, non-negative stats)
- Expose derived state (`is_alive`, `effective_power`)

Non-Responsibilities
--------------------
- Progression, decay, breeding or token rules (handled by module services)
- Level cap enforcement (ProgressionService raises on corrupted levels)
- Persistence (handled by the game store)

Usage Example
-------------
>>> creature = Creature.new(
...     owner_id="player-1",
...     name="Common Spider (S)",
...     rarity=Rarity.COMMON,
...     genetics=Genetics.of("S"),
...     gender=Gender.MALE,
...     now=now,
... )
>>> creature.is_alive
True
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Tuple

from src.domain.models.base import (
    DomainValidationError,
    ensure_utc,
    validate_non_negative,
    validate_not_empty,
    validate_positive,
    validate_range,
)

if TYPE_CHECKING:
    from src.database.models.core.creature import CreatureRecord


MAX_CONDITION = 100.0
MAX_DRESSES = 3
BASE_GENETIC_SYMBOLS: Tuple[str, ...] = ("S", "A", "J")


def new_creature_id() -> str:
    return uuid.uuid4().hex


# ============================================================================
# CLOSED TYPES
# ============================================================================


class Rarity(str, Enum):
    """Ordered rarity tiers, lowest first."""

    COMMON = "Common"
    EXCELLENT = "Excellent"
    RARE = "Rare"
    EPIC = "Epic"
    LEGENDARY = "Legendary"
    MYTHICAL = "Mythical"
    SPECIAL = "SPECIAL"

    @property
    def rank(self) -> int:
        """Zero-based position in the rarity order."""
        return _RARITY_ORDER.index(self)

    @classmethod
    def from_string(cls, value: str) -> "Rarity":
        for member in cls:
            if member.value.lower() == value.strip().lower():
                return member
        raise DomainValidationError(f"Unknown rarity '{value}'", field="rarity")


_RARITY_ORDER: List[Rarity] = list(Rarity)


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"

    @classmethod
    def from_string(cls, value: str) -> "Gender":
        for member in cls:
            if member.value.lower() == value.strip().lower():
                return member
        raise DomainValidationError(f"Unknown gender '{value}'", field="gender")


class DressType(str, Enum):
    MEME = "Meme"
    SHINY = "Shiny"
    BASIC = "Basic"
    EFFECTS = "Effects"


# ============================================================================
# VALUE OBJECTS
# ============================================================================


@dataclass(frozen=True)
class Genetics:
    """
    Genetic code over the base symbols S, A and J.

    The code is always the sorted, de-duplicated set of its symbols, so
    "SA", "AS" and "ASA" all normalize to "AS" via `Genetics.of`.

    Examples
    --------
    >>> Genetics.of("S").merge(Genetics.of("A")).code
    'AS'
    """

    code: str

    def __post_init__(self) -> None:
        validate_not_empty(self.code, "genetics")
        unknown = set(self.code) - set(BASE_GENETIC_SYMBOLS)
        if unknown:
            raise DomainValidationError(
                f"Unknown genetic symbols {sorted(unknown)} in '{self.code}'",
                field="genetics",
            )
        if self.code != "".join(sorted(set(self.code))):
            raise DomainValidationError(
                f"Genetic code '{self.code}' is not normalized",
                field="genetics",
            )

    @classmethod
    def of(cls, symbols: Iterable[str]) -> "Genetics":
        return cls("".join(sorted(set("".join(symbols).upper()))))

    @property
    def symbols(self) -> Tuple[str, ...]:
        return tuple(self.code)

    def merge(self, other: "Genetics") -> "Genetics":
        """Sorted unique union; commutative and idempotent."""
        return Genetics.of(self.code + other.code)

    def __str__(self) -> str:
        return self.code


@dataclass(frozen=True)
class CombatStats:
    """Non-negative combat stat block."""

    attack: int = 0
    defense: int = 0
    agility: int = 0
    luck: int = 0

    def __post_init__(self) -> None:
        validate_non_negative(self.attack, "attack")
        validate_non_negative(self.defense, "defense")
        validate_non_negative(self.agility, "agility")
        validate_non_negative(self.luck, "luck")

    @property
    def total(self) -> int:
        return self.attack + self.defense + self.agility + self.luck

    def plus(self, other: "CombatStats") -> "CombatStats":
        return CombatStats(
            attack=self.attack + other.attack,
            defense=self.defense + other.defense,
            agility=self.agility + other.agility,
            luck=self.luck + other.luck,
        )

    def as_dict(self) -> Dict[str, int]:
        return {
            "attack": self.attack,
            "defense": self.defense,
            "agility": self.agility,
            "luck": self.luck,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CombatStats":
        return cls(
            attack=int(data.get("attack", 0)),
            defense=int(data.get("defense", 0)),
            agility=int(data.get("agility", 0)),
            luck=int(data.get("luck", 0)),
        )


@dataclass(frozen=True)
class CreatureCondition:
    """
    Vital gauges, each a float in [0, 100].

    A creature is alive exactly while health is above zero.
    """

    health: float = MAX_CONDITION
    hunger: float = MAX_CONDITION
    hydration: float = MAX_CONDITION

    def __post_init__(self) -> None:
        validate_range(self.health, 0.0, MAX_CONDITION, "health")
        validate_range(self.hunger, 0.0, MAX_CONDITION, "hunger")
        validate_range(self.hydration, 0.0, MAX_CONDITION, "hydration")

    @property
    def is_alive(self) -> bool:
        return self.health > 0

    def with_hunger(self, hunger: float) -> "CreatureCondition":
        return replace(self, hunger=_clamp(hunger))

    def with_hydration(self, hydration: float) -> "CreatureCondition":
        return replace(self, hydration=_clamp(hydration))

    def with_health(self, health: float) -> "CreatureCondition":
        return replace(self, health=_clamp(health))


def _clamp(value: float) -> float:
    return max(0.0, min(MAX_CONDITION, float(value)))


@dataclass(frozen=True)
class Dress:
    """Cosmetic equipment granting a power and stat bonus while equipped."""

    id: str
    name: str
    rarity: Rarity
    dress_type: DressType
    power_bonus: int = 0
    stats: CombatStats = field(default_factory=CombatStats)

    def __post_init__(self) -> None:
        validate_not_empty(self.id, "dress.id")
        validate_non_negative(self.power_bonus, "power_bonus")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "rarity": self.rarity.value,
            "dress_type": self.dress_type.value,
            "power_bonus": self.power_bonus,
            "stats": self.stats.as_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Dress":
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            rarity=Rarity.from_string(data["rarity"]),
            dress_type=DressType(data["dress_type"]),
            power_bonus=int(data.get("power_bonus", 0)),
            stats=CombatStats.from_dict(data.get("stats") or {}),
        )


@dataclass(frozen=True)
class Parentage:
    father_id: str
    mother_id: str


# ============================================================================
# CREATURE
# ============================================================================


@dataclass(frozen=True)
class Creature:
    """
    Immutable creature state.

    Timestamps are timezone-aware UTC. `condition_updated_at` is the decay
    checkpoint: the instant the stored condition values were last
    materialised.
    """

    id: str
    owner_id: str
    name: str
    rarity: Rarity
    genetics: Genetics
    gender: Gender
    created_at: datetime
    last_fed: datetime
    last_hydrated: datetime
    last_token_generation: datetime
    condition_updated_at: datetime
    level: int = 1
    experience: int = 0
    power: int = 0
    stats: CombatStats = field(default_factory=CombatStats)
    condition: CreatureCondition = field(default_factory=CreatureCondition)
    generation: int = 1
    parents: Optional[Parentage] = None
    is_hibernating: bool = False
    is_listed: bool = False
    dresses: Tuple[Dress, ...] = ()

    def __post_init__(self) -> None:
        validate_not_empty(self.id, "id")
        validate_not_empty(self.owner_id, "owner_id")
        validate_not_empty(self.name, "name")
        validate_positive(self.level, "level")
        validate_non_negative(self.experience, "experience")
        validate_non_negative(self.power, "power")
        validate_positive(self.generation, "generation")

        if len(self.dresses) > MAX_DRESSES:
            raise DomainValidationError(
                f"Cannot equip more than {MAX_DRESSES} dresses",
                field="dresses",
            )
        dress_types = [dress.dress_type for dress in self.dresses]
        if len(dress_types) != len(set(dress_types)):
            raise DomainValidationError(
                "Only one dress per dress type may be equipped",
                field="dresses",
            )

    # ========================================================================
    # FACTORIES
    # ========================================================================

    @classmethod
    def new(
        cls,
        owner_id: str,
        name: str,
        rarity: Rarity,
        genetics: Genetics,
        gender: Gender,
        now: datetime,
        power: int = 0,
        stats: Optional[CombatStats] = None,
        generation: int = 1,
        parents: Optional[Parentage] = None,
        creature_id: Optional[str] = None,
    ) -> "Creature":
        """Fresh level-1 creature with full condition, all clocks at `now`."""
        return cls(
            id=creature_id or new_creature_id(),
            owner_id=owner_id,
            name=name,
            rarity=rarity,
            genetics=genetics,
            gender=gender,
            created_at=now,
            last_fed=now,
            last_hydrated=now,
            last_token_generation=now,
            condition_updated_at=now,
            power=power,
            stats=stats or CombatStats(),
            generation=generation,
            parents=parents,
        )

    # ========================================================================
    # DERIVED STATE
    # ========================================================================

    @property
    def is_alive(self) -> bool:
        return self.condition.is_alive

    @property
    def effective_power(self) -> int:
        """Base power plus the bonus of every equipped dress."""
        return self.power + sum(dress.power_bonus for dress in self.dresses)

    @property
    def effective_stats(self) -> CombatStats:
        total = self.stats
        for dress in self.dresses:
            total = total.plus(dress.stats)
        return total

    # ========================================================================
    # PERSISTENCE MAPPING
    # ========================================================================

    @classmethod
    def from_db(cls, record: "CreatureRecord") -> "Creature":
        parents = None
        if record.father_id and record.mother_id:
            parents = Parentage(father_id=record.father_id, mother_id=record.mother_id)

        return cls(
            id=record.id,
            owner_id=record.owner_id,
            name=record.name,
            rarity=Rarity.from_string(record.rarity),
            genetics=Genetics(record.genetics),
            gender=Gender.from_string(record.gender),
            created_at=ensure_utc(record.created_at),
            last_fed=ensure_utc(record.last_fed),
            last_hydrated=ensure_utc(record.last_hydrated),
            last_token_generation=ensure_utc(record.last_token_generation),
            condition_updated_at=ensure_utc(record.condition_updated_at),
            level=record.level,
            experience=record.experience,
            power=record.power,
            stats=CombatStats(
                attack=record.attack,
                defense=record.defense,
                agility=record.agility,
                luck=record.luck,
            ),
            condition=CreatureCondition(
                health=record.health,
                hunger=record.hunger,
                hydration=record.hydration,
            ),
            generation=record.generation,
            parents=parents,
            is_hibernating=record.is_hibernating,
            is_listed=record.is_listed,
            dresses=tuple(Dress.from_dict(item) for item in (record.dresses or [])),
        )

    def to_db_updates(self) -> Dict[str, Any]:
        """Column values for inserting or updating a CreatureRecord."""
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "name": self.name,
            "rarity": self.rarity.value,
            "genetics": self.genetics.code,
            "gender": self.gender.value,
            "level": self.level,
            "experience": self.experience,
            "power": self.power,
            "attack": self.stats.attack,
            "defense": self.stats.defense,
            "agility": self.stats.agility,
            "luck": self.stats.luck,
            "health": self.condition.health,
            "hunger": self.condition.hunger,
            "hydration": self.condition.hydration,
            "generation": self.generation,
            "father_id": self.parents.father_id if self.parents else None,
            "mother_id": self.parents.mother_id if self.parents else None,
            "is_hibernating": self.is_hibernating,
            "is_listed": self.is_listed,
            "dresses": [dress.to_dict() for dress in self.dresses],
            "last_fed": self.last_fed,
            "last_hydrated": self.last_hydrated,
            "last_token_generation": self.last_token_generation,
            "condition_updated_at": self.condition_updated_at,
            "created_at": self.created_at,
        }
