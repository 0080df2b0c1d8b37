"""
Core infrastructure layer for Brood.

Purpose
-------
Provide a single import surface for the infrastructure subsystems:

- Configuration management (Config, ConfigManager)
- Database subsystem (DatabaseService)
- Logging (structured logging, logger factory, log context)

Non-Responsibilities
--------------------
- Game rules (see `src.modules`)
- Any side effects beyond simple re-exports

Design Decisions
----------------
- No logic, no configuration, no I/O in this module.
- Game modules import from the concrete submodules; this surface is for
  entrypoints and scripts.
"""

from __future__ import annotations

from src.core.config import Config, ConfigManager
from src.core.database import DatabaseService
from src.core.logging import LogContext, get_logger, setup_logging, shutdown_logging

__all__ = [
    # Configuration
    "Config",
    "ConfigManager",
    # Database
    "DatabaseService",
    # Logging
    "setup_logging",
    "shutdown_logging",
    "get_logger",
    "LogContext",
]
