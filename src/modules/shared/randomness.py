"""
Random source abstraction.

Every roll in Brood (rarity, gender, power, stat split, genetics) goes through
a `RandomSource`, so tests can hand in a seeded `random.Random` or a scripted
sequence and assert exact outcomes. Production uses the OS entropy pool.
"""

from __future__ import annotations

import secrets
from typing import Protocol, Sequence, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class RandomSource(Protocol):
    """Subset of the `random.Random` API the engines rely on."""

    def random(self) -> float: ...

    def randint(self, a: int, b: int) -> int: ...

    def choice(self, seq: Sequence[T]) -> T: ...


def default_random() -> RandomSource:
    return secrets.SystemRandom()
