"""
Game Module
===========

Async command surface over a transactional game store.

Exports:
- GameService: Player commands and scheduled sweeps
- GameStore / GameUnitOfWork: Storage contract
- SqlGameStore: SQLAlchemy-backed store
"""

from .service import BreedingCheck, DecaySweepReport, GameService
from .sql_store import SqlGameSession, SqlGameStore
from .store import GameStore, GameUnitOfWork

__all__ = [
    "GameService",
    "BreedingCheck",
    "DecaySweepReport",
    "GameStore",
    "GameUnitOfWork",
    "SqlGameStore",
    "SqlGameSession",
]
