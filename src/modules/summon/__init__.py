"""
Summon Module
=============

Business logic for creature summoning.

Exports:
- SummonService: Summon pricing, rarity rolls and creature creation
- SummonResult: Summoned creatures and the debited balance
"""

from .service import SummonResult, SummonService

__all__ = ["SummonService", "SummonResult"]
