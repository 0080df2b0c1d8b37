"""
Condition Module
================

Time-based decay of hunger, hydration and health.

Exports:
- ConditionService: Decay catch-up for single creatures and sweeps
"""

from .service import ConditionService, DecayRates

__all__ = ["ConditionService", "DecayRates"]
