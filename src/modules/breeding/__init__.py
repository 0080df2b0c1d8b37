"""
Breeding Module
===============

Exports:
- BreedingService: Compatibility, cost and offspring resolution
- BreedingResult: Offspring, strained parents and debited balance
- Compatibility: Compatibility verdict with every violated reason
"""

from .service import BREEDING_LADDER, BreedingResult, BreedingService, Compatibility

__all__ = ["BreedingService", "BreedingResult", "Compatibility", "BREEDING_LADDER"]
