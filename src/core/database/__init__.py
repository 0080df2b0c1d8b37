"""
Database subsystem for Brood.

Provides the async SQLAlchemy engine, session management, and the SQLModel
metadata and mixins used by model definitions.
"""

from src.core.database.base import (
    TimestampMixin,
    metadata,
    utc_now,
)
from src.core.database.service import (
    DatabaseInitializationError,
    DatabaseNotInitializedError,
    DatabaseService,
)

__all__ = [
    "TimestampMixin",
    "metadata",
    "utc_now",
    "DatabaseService",
    "DatabaseInitializationError",
    "DatabaseNotInitializedError",
]
