"""
Economy Module
==============

Ledger descriptions for currency movements.

Exports:
- TransactionLogService: Builds ledger entries
- TransactionRecord: Immutable ledger entry
"""

from .transaction_log_service import TransactionLogService, TransactionRecord

__all__ = ["TransactionLogService", "TransactionRecord"]
