"""
Core database models for Brood.

- CreatureRecord
- PlayerRecord

All models are SQLModel tables registered on `SQLModel.metadata`.
"""

from .creature import CreatureRecord
from .player import PlayerRecord

__all__ = ["CreatureRecord", "PlayerRecord"]
