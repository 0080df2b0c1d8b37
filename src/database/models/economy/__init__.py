"""
Economy domain ORM models.

Exports:
- TransactionLog
"""

from .transaction_log import TransactionLog

__all__ = ["TransactionLog"]
