"""
Generation Module
=================

Passive SPIDER token accrual.

Exports:
- TokenGenerationService: Continuous and batch accrual
- GenerationCredit: One owner's batch credit
- GenerationMode: Active / offline batch classification
- AccrualResult: Continuous claim result
"""

from .service import AccrualResult, GenerationCredit, GenerationMode, TokenGenerationService

__all__ = ["TokenGenerationService", "GenerationCredit", "GenerationMode", "AccrualResult"]
