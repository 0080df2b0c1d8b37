"""
Progression Module
==================

Experience curve, feeder costs and level-up rolls.

Exports:
- ProgressionService: Level, cost and roll calculations
- LevelUpResult: Outcome of an experience grant
"""

from .service import LevelUpResult, ProgressionService

__all__ = ["ProgressionService", "LevelUpResult"]
