"""
Brood - Application Entry Point
===============================

Command-line bootstrap for the scheduled jobs:
- init-db: create tables
- sweep-decay: catch every creature's condition up to now
- sweep-tokens: batch token generation (`--include-offline` for the
  three-hourly run)

Each run validates configuration, initializes ConfigManager and the
database, runs one command and shuts everything down.
"""

import argparse
import asyncio
import signal
import sys
from typing import List, Optional

from src.core.config.config import Config
from src.core.config.manager import ConfigManager
from src.core.database.service import DatabaseService
from src.core.logging.logger import get_logger, setup_logging, shutdown_logging
from src.modules.game.service import GameService
from src.modules.game.sql_store import SqlGameStore
from src.modules.shared.exceptions import should_alert

logger = get_logger(__name__)


# ============================================================================
# Application Bootstrap
# ============================================================================

async def _startup(database_url: Optional[str] = None) -> None:
    logger.info("========== BROOD INITIALIZATION START ==========")

    try:
        Config.validate()
        logger.info("✓ Configuration validated")
    except Exception as exc:
        logger.critical(f"Configuration validation failed: {exc}")
        raise

    try:
        ConfigManager.initialize()
        logger.info("✓ Config manager initialized")
    except Exception as exc:
        logger.critical(f"Config manager initialization failed: {exc}", exc_info=True)
        raise

    try:
        await DatabaseService.initialize(database_url)
        logger.info("✓ Database service initialized")
    except Exception as exc:
        logger.critical(f"Database initialization failed: {exc}", exc_info=True)
        raise


async def _shutdown() -> None:
    try:
        await DatabaseService.shutdown()
        logger.info("✓ Database service shut down")
    except Exception as exc:
        logger.error(f"Database service shutdown error: {exc}", exc_info=True)

    logger.info("========== SHUTDOWN COMPLETE ==========")


# ============================================================================
# Commands
# ============================================================================

async def _run_command(args: argparse.Namespace) -> int:
    if args.command == "init-db":
        await DatabaseService.create_all()
        logger.info("✓ Tables created")
        return 0

    service = GameService(SqlGameStore())

    if args.command == "sweep-decay":
        report = await service.sweep_condition_decay()
        print(
            f"Processed {report.creatures_processed} spiders, "
            f"{report.creatures_died} died"
        )
        return 0

    if args.command == "sweep-tokens":
        credits = await service.sweep_token_generation(include_offline=args.include_offline)
        total = sum(credit.amount for credit in credits)
        print(f"Credited {len(credits)} players, {total} SPIDER total")
        return 0

    raise ValueError(f"Unknown command: {args.command}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="brood", description="Brood game jobs")
    parser.add_argument(
        "--database-url",
        default=None,
        help="Override DATABASE_URL for this run",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init-db", help="Create database tables")
    subparsers.add_parser("sweep-decay", help="Apply condition decay to every spider")

    tokens = subparsers.add_parser("sweep-tokens", help="Run batch token generation")
    tokens.add_argument(
        "--include-offline",
        action="store_true",
        help="Also credit offline players at the offline penalty",
    )
    return parser


async def main(argv: Optional[List[str]] = None) -> int:
    """
    Brood entry point.

    Lifecycle:
        1. Validate configuration
        2. Initialize ConfigManager and the database
        3. Run one command
        4. Shut down gracefully
    """
    args = build_parser().parse_args(argv)

    try:
        await _startup(args.database_url)
        return await _run_command(args)
    except asyncio.CancelledError:
        logger.warning("Asyncio task cancellation received; shutting down gracefully.")
        raise
    except Exception as exc:
        if should_alert(exc):
            logger.critical(f"Command failed: {exc}", exc_info=True)
        else:
            logger.warning(
                f"Command rejected: {exc}",
                extra={"error_code": getattr(exc, "error_code", None)},
            )
        return 1
    finally:
        await _shutdown()


# ============================================================================
# Process Startup
# ============================================================================

def _install_signal_handlers(loop: asyncio.AbstractEventLoop, task: asyncio.Task) -> None:
    # SIGTERM cancels main(); its finally block disposes the engine
    try:
        loop.add_signal_handler(signal.SIGTERM, task.cancel)
        logger.debug("SIGTERM handler installed")
    except NotImplementedError:
        logger.debug("SIGTERM not supported on this platform (likely Windows)")


def run() -> None:
    """Console script entry point."""
    setup_logging()
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    task = loop.create_task(main())
    _install_signal_handlers(loop, task)

    exit_code = 1
    try:
        exit_code = loop.run_until_complete(task)
    except asyncio.CancelledError:
        logger.warning("Stopped by SIGTERM.")
        exit_code = 143
    except KeyboardInterrupt:
        logger.info("Stopped via keyboard interrupt.")
    finally:
        loop.close()
        shutdown_logging()
    sys.exit(exit_code)


if __name__ == "__main__":
    run()
