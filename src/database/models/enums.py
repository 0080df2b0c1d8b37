"""
Database Model Enums
====================

Lightweight enumerations for database models.

Declarative schema helpers, not business logic containers. Services
reference them when building ledger entries.
"""

from __future__ import annotations

import enum


class TransactionType(str, enum.Enum):
    """
    Categories of ledger entries.

    Earnings, spends and the scheduled generation credits all share one
    table and are told apart by this value.
    """

    GENERATION = "generation"
    ACCRUAL = "accrual"
    FEED = "feed"
    HYDRATE = "hydrate"
    HEAL = "heal"
    BREEDING = "breeding"
    SUMMON = "summon"
    WEBTRAP_UNLOCK = "webtrap_unlock"
    WEBTRAP_UPGRADE = "webtrap_upgrade"
    WEBTRAP_COLLECT = "webtrap_collect"


class Currency(str, enum.Enum):
    SPIDER = "SPIDER"
    FEEDERS = "feeders"
