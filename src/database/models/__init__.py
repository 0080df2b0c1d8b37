"""
Unified model aggregator for Brood.

Importing this package registers every table on `SQLModel.metadata`.
"""

# --- Core ---
from .core.creature import CreatureRecord
from .core.player import PlayerRecord

# --- Economy ---
from .economy.transaction_log import TransactionLog

# --- Enums ---
from .enums import Currency, TransactionType

__all__ = [
    "CreatureRecord",
    "PlayerRecord",
    "TransactionLog",
    "Currency",
    "TransactionType",
]
