"""
Clock abstraction.

Engines take `now` as a parameter. Orchestration code asks a `Clock` for it
so tests can freeze time.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Protocol, runtime_checkable

from src.domain.models.base import ensure_utc


@runtime_checkable
class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


def hours_between(start: datetime, end: datetime) -> float:
    """Elapsed hours from `start` to `end`; negative when `end` is earlier."""
    return (ensure_utc(end) - ensure_utc(start)).total_seconds() / 3600.0


def minutes_between(start: datetime, end: datetime) -> float:
    return (ensure_utc(end) - ensure_utc(start)).total_seconds() / 60.0


__all__ = ["Clock", "SystemClock", "ensure_utc", "hours_between", "minutes_between"]
