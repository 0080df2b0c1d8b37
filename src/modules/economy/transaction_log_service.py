"""
TransactionLogService - Ledger descriptions for economy events
==============================================================

Handles:
- Building immutable ledger entries for every currency movement
- Transaction categorization (see `TransactionType`)
- Sensitive data filtering (wallet secrets never reach the ledger)

The service only describes transactions. The game store persists them in
the same transaction as the balance change they record.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, Optional

from src.database.models.enums import Currency, TransactionType
from src.modules.shared.base_service import BaseService

if TYPE_CHECKING:
    from logging import Logger

    from src.core.config.manager import ConfigManager
    from src.modules.generation.service import GenerationCredit


_SENSITIVE_KEYWORDS = (
    "password",
    "secret",
    "api_key",
    "auth",
    "credential",
    "private_key",
    "mnemonic",
    "seed_phrase",
)


@dataclass(frozen=True)
class TransactionRecord:
    """
    Immutable ledger entry.

    `amount` is positive for earnings and negative for spends.
    """

    player_id: str
    transaction_type: TransactionType
    amount: float
    currency: Currency
    description: str
    created_at: datetime
    details: Dict[str, Any] = field(default_factory=dict)

    def to_db_values(self) -> Dict[str, Any]:
        return {
            "player_id": self.player_id,
            "transaction_type": self.transaction_type.value,
            "amount": self.amount,
            "currency": self.currency.value,
            "description": self.description,
            "details": dict(self.details),
            "created_at": self.created_at,
        }


class TransactionLogService(BaseService):
    """
    Builds ledger entries for economy events.

    Business Logic:
    - Every credit and debit produces exactly one entry
    - Spends are recorded as negative amounts
    - Sensitive fields are redacted from details
    """

    def __init__(self, config_manager: type[ConfigManager], logger: Logger) -> None:
        super().__init__(config_manager, logger)

    # -------------------------------------------------------------------------
    # Core Operations
    # -------------------------------------------------------------------------

    def record(
        self,
        player_id: str,
        transaction_type: TransactionType,
        amount: float,
        currency: Currency,
        description: str,
        now: datetime,
        details: Optional[Dict[str, Any]] = None,
    ) -> TransactionRecord:
        """
        Build a ledger entry.

        Args:
            player_id: Player whose balance changed
            transaction_type: Category of the movement
            amount: Signed amount (negative for spends)
            currency: SPIDER or feeders
            description: Human-readable summary
            now: When the movement happened
            details: Extra context; filtered for sensitive keys

        Returns:
            TransactionRecord ready for the store
        """
        self.validate_not_blank(player_id, "player_id")
        entry = TransactionRecord(
            player_id=player_id,
            transaction_type=transaction_type,
            amount=amount,
            currency=currency,
            description=description,
            created_at=now,
            details=self._filter_sensitive_data(details or {}),
        )
        self.log.debug(
            "Ledger entry built",
            extra={
                "player_id": player_id,
                "transaction_type": transaction_type.value,
                "amount": amount,
                "currency": currency.value,
            },
        )
        return entry

    def record_spend(
        self,
        player_id: str,
        transaction_type: TransactionType,
        amount: float,
        currency: Currency,
        purpose: str,
        now: datetime,
        details: Optional[Dict[str, Any]] = None,
    ) -> TransactionRecord:
        """Ledger entry for a debit; `amount` is the positive amount spent."""
        return self.record(
            player_id,
            transaction_type,
            -abs(amount),
            currency,
            purpose,
            now,
            {"purpose": purpose, **(details or {})},
        )

    def record_earn(
        self,
        player_id: str,
        transaction_type: TransactionType,
        amount: float,
        currency: Currency,
        source: str,
        now: datetime,
        details: Optional[Dict[str, Any]] = None,
    ) -> TransactionRecord:
        return self.record(
            player_id,
            transaction_type,
            abs(amount),
            currency,
            source,
            now,
            {"source": source, **(details or {})},
        )

    def record_generation(self, credit: GenerationCredit) -> TransactionRecord:
        """Ledger entry for one owner's batch generation credit."""
        return self.record(
            credit.player_id,
            TransactionType.GENERATION,
            credit.amount,
            Currency.SPIDER,
            credit.description,
            credit.generated_at,
            {
                "mode": credit.mode.value,
                "creature_count": credit.contributing_count,
                "creature_ids": list(credit.creature_ids),
            },
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _filter_sensitive_data(self, details: Dict[str, Any]) -> Dict[str, Any]:
        """
        Redact fields whose key contains a sensitive keyword
        (password, secret, api_key, auth, credential, wallet keys).
        """
        filtered: Dict[str, Any] = {}
        for key, value in details.items():
            if any(keyword in key.lower() for keyword in _SENSITIVE_KEYWORDS):
                filtered[key] = "[REDACTED]"
            else:
                filtered[key] = value
        return filtered
