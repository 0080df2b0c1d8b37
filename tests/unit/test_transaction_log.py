"""
Unit tests for TransactionLogService.
"""

import pytest

from src.core.config.manager import ConfigManager
from src.core.logging.logger import get_logger
from src.database.models.enums import Currency, TransactionType
from src.modules.economy.transaction_log_service import TransactionLogService
from src.modules.generation.service import GenerationCredit, GenerationMode
from src.modules.shared.exceptions import InvalidOperationError
from tests.helpers import NOW


@pytest.fixture
def ledger():
    return TransactionLogService(ConfigManager, get_logger(__name__))


@pytest.mark.unit
class TestLedgerEntries:
    def test_spend_is_negative(self, ledger):
        entry = ledger.record_spend(
            "player-1", TransactionType.FEED, 7, Currency.FEEDERS, "Feed", NOW, {"creature_id": "c1"}
        )

        assert entry.amount == -7
        assert entry.currency is Currency.FEEDERS
        assert entry.details == {"purpose": "Feed", "creature_id": "c1"}

    def test_earn_is_positive(self, ledger):
        entry = ledger.record_earn("player-1", TransactionType.ACCRUAL, 20.0, Currency.SPIDER, "Accrual", NOW)

        assert entry.amount == 20.0
        assert entry.details == {"source": "Accrual"}
        assert entry.created_at == NOW

    def test_generation_credit_entry(self, ledger):
        credit = GenerationCredit(
            player_id="player-1",
            amount=25,
            contributing_count=2,
            mode=GenerationMode.OFFLINE,
            generated_at=NOW,
            creature_ids=("c1", "c2"),
        )

        entry = ledger.record_generation(credit)

        assert entry.transaction_type is TransactionType.GENERATION
        assert entry.amount == 25
        assert entry.description == "Token generation from 2 spiders (offline)"
        assert entry.details["creature_ids"] == ["c1", "c2"]

    def test_sensitive_details_redacted(self, ledger):
        entry = ledger.record(
            "player-1",
            TransactionType.SUMMON,
            -200,
            Currency.SPIDER,
            "Summon",
            NOW,
            {"wallet_private_key": "0xabc", "api_key": "k", "creature_id": "c1"},
        )

        assert entry.details == {
            "wallet_private_key": "[REDACTED]",
            "api_key": "[REDACTED]",
            "creature_id": "c1",
        }

    def test_blank_player_rejected(self, ledger):
        with pytest.raises(InvalidOperationError):
            ledger.record(" ", TransactionType.HEAL, -50, Currency.SPIDER, "Heal", NOW)

    def test_db_values_use_enum_values(self, ledger):
        entry = ledger.record_spend("player-1", TransactionType.HEAL, 50, Currency.SPIDER, "Heal", NOW)

        values = entry.to_db_values()

        assert values["transaction_type"] == "heal"
        assert values["currency"] == "SPIDER"
        assert values["amount"] == -50
