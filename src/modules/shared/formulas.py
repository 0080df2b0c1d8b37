"""
Brood Game Formulas

Purpose
-------
Pure calculation functions for game mechanics: banded cost tables, the
experience curve, proportional stat splits, weighted table rolls and money
truncation.

Design Notes
------------
All formulas:
- Accept parameters explicitly (tables, weights, rolls)
- Have no config access and no randomness of their own
- Are deterministic and testable

Usage
-----
    from src.modules.shared.formulas import band_value, level_from_experience

    cost = band_value(FEEDER_BANDS, level=12)
    level = level_from_experience(3, EXPERIENCE_BANDS)
"""

from __future__ import annotations

import math
from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal
from typing import List, Sequence, Tuple, TypeVar

K = TypeVar("K")

# (inclusive upper level bound, value), ascending by bound
Bands = Sequence[Tuple[int, int]]


def band_value(bands: Bands, level: int) -> int:
    """
    Look up the value of the band containing `level`.

    Levels below the first band use the first band; levels above the last
    band use the last band.

    Args:
        bands: (upper_bound, value) pairs in ascending bound order
        level: Level to look up

    Returns:
        Value of the matching band

    Example:
        >>> band_value([(10, 7), (20, 10)], 11)
        10
        >>> band_value([(10, 7), (20, 10)], 250)
        10
    """
    for upper_bound, value in bands:
        if level <= upper_bound:
            return value
    return bands[-1][1]


def cumulative_experience(level: int, bands: Bands) -> int:
    """
    Total experience needed to reach `level` from level 1.

    Args:
        level: Target level
        bands: Per-level experience cost bands

    Returns:
        Sum of the cost of every level below `level`; 0 for level <= 1

    Example:
        >>> cumulative_experience(3, [(4, 3), (10, 5)])
        6
    """
    if level <= 1:
        return 0
    return sum(band_value(bands, current) for current in range(1, level))


def level_from_experience(experience: int, bands: Bands, max_level: int = 100) -> int:
    """
    Level reached with `experience` total points.

    The smallest L whose next-level threshold exceeds `experience`, capped
    at `max_level`.

    Example:
        >>> level_from_experience(3, [(4, 3), (10, 5)])
        2
    """
    level = 1
    threshold = 0
    while level < max_level:
        threshold += band_value(bands, level)
        if experience < threshold:
            return level
        level += 1
    return max_level


def split_proportionally(total: int, weights: Sequence[float]) -> Tuple[List[int], int]:
    """
    Split `total` into floored integer shares proportional to `weights`.

    All-zero weights split evenly. The caller decides where the flooring
    remainder goes; shares plus remainder always sum to `total`.

    Args:
        total: Non-negative amount to distribute
        weights: Non-negative weights, one per share

    Returns:
        (shares in the order of `weights`, undistributed remainder)

    Example:
        >>> split_proportionally(10, [1.0, 1.0, 1.0, 1.0])
        ([2, 2, 2, 2], 2)
    """
    weight_sum = sum(weights)
    if weight_sum <= 0:
        weights = [1.0] * len(weights)
        weight_sum = float(len(weights))

    shares = [math.floor(total * weight / weight_sum) for weight in weights]
    return shares, total - sum(shares)


def pick_weighted(table: Sequence[Tuple[K, float]], roll: float, fallback: K) -> K:
    """
    Pick the entry whose cumulative rate band contains `roll`.

    Rates need not sum to 1: a roll past the last band yields `fallback`.

    Example:
        >>> pick_weighted([("a", 0.5), ("b", 0.3)], 0.6, "a")
        'b'
        >>> pick_weighted([("a", 0.5), ("b", 0.3)], 0.95, "a")
        'a'
    """
    cumulative = 0.0
    for key, rate in table:
        cumulative += rate
        if roll < cumulative:
            return key
    return fallback


def truncate_money(value: float) -> float:
    """
    Truncate a currency amount to 2 decimals.

    Example:
        >>> truncate_money(20.009)
        20.0
    """
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_DOWN))


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves away from zero.

    Example:
        >>> round_half_up(2.5)
        3
    """
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
