"""
Creature system constants for Brood.

Single source of truth for:
- Per-rarity data (level cap, power roll range, stat increase range)
- Experience cost bands (cost to advance from a level to the next)
- Feeder cost bands (feeders spent per feed or hydrate)
- Dress power bonuses by rarity

Pure data only. Rules that consume these tables live in the services
(ProgressionService, CreatureService, BreedingService). Tunable balance
values (decay rates, restore amounts, costs) stay in ConfigManager.
"""

from dataclasses import dataclass
from typing import Dict, Tuple

from src.domain.models.creature import Rarity


# ============================================================================
# RARITY TABLE
# ============================================================================

@dataclass(frozen=True)
class RarityData:
    """
    Static progression data for one rarity.

    power_range: inclusive (min, max) power gained per level-up
    stat_increase_range: inclusive (min, max) combat stat increase per level
    """
    rarity: Rarity
    max_level: int
    power_range: Tuple[int, int]
    stat_increase_range: Tuple[int, int]


class RarityTable:
    """Lookup of static per-rarity data."""

    _RARITY_DATA: Dict[Rarity, RarityData] = {
        Rarity.COMMON: RarityData(Rarity.COMMON, 25, (18, 33), (1, 2)),
        Rarity.EXCELLENT: RarityData(Rarity.EXCELLENT, 35, (34, 45), (2, 3)),
        Rarity.RARE: RarityData(Rarity.RARE, 55, (46, 60), (3, 4)),
        Rarity.EPIC: RarityData(Rarity.EPIC, 70, (61, 90), (4, 6)),
        Rarity.LEGENDARY: RarityData(Rarity.LEGENDARY, 80, (91, 150), (6, 8)),
        Rarity.MYTHICAL: RarityData(Rarity.MYTHICAL, 100, (151, 300), (8, 12)),
        Rarity.SPECIAL: RarityData(Rarity.SPECIAL, 100, (600, 1000), (12, 18)),
    }

    @classmethod
    def get(cls, rarity: Rarity) -> RarityData:
        return cls._RARITY_DATA[rarity]

    @classmethod
    def max_level(cls, rarity: Rarity) -> int:
        return cls._RARITY_DATA[rarity].max_level

    @classmethod
    def power_range(cls, rarity: Rarity) -> Tuple[int, int]:
        return cls._RARITY_DATA[rarity].power_range

    @classmethod
    def stat_increase_range(cls, rarity: Rarity) -> Tuple[int, int]:
        return cls._RARITY_DATA[rarity].stat_increase_range

    @classmethod
    def get_all(cls) -> Dict[Rarity, RarityData]:
        return cls._RARITY_DATA.copy()


# ============================================================================
# LEVEL BANDS
# ============================================================================

# Absolute level ceiling regardless of rarity
MAX_LEVEL = 100

# (inclusive upper level, experience needed to advance from that level)
EXPERIENCE_BANDS: Tuple[Tuple[int, int], ...] = (
    (4, 3),
    (10, 5),
    (20, 6),
    (30, 8),
    (40, 10),
    (50, 12),
    (60, 14),
    (70, 17),
    (80, 21),
    (90, 26),
    (100, 35),
)

# (inclusive upper level, feeders per feed or hydrate)
FEEDER_BANDS: Tuple[Tuple[int, int], ...] = (
    (10, 7),
    (20, 10),
    (25, 12),
    (30, 15),
    (45, 20),
    (60, 25),
    (80, 30),
    (100, 40),
)


# ============================================================================
# DRESSES
# ============================================================================

DRESS_POWER_BONUS: Dict[Rarity, int] = {
    Rarity.COMMON: 25,
    Rarity.EXCELLENT: 35,
    Rarity.RARE: 55,
    Rarity.EPIC: 70,
    Rarity.LEGENDARY: 80,
    Rarity.MYTHICAL: 100,
    Rarity.SPECIAL: 500,
}
