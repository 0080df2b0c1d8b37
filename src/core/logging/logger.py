"""
Brood Logging Subsystem

Every module logs through `get_logger(__name__)`. Records are pushed onto a
bounded queue by the emitting task and written by a listener thread, so
console or file I/O never blocks the event loop.

Each record is stamped with the active command context (player, creature,
command, correlation id) captured from a ContextVar at emit time. Game
commands open that context with `LogContext`; sweeps open one per run, so
all lines of a sweep share a correlation id.

Output
------
- Console: JSON in production (or when LOG_JSON is set), plain or coloured
  text otherwise.
- File: optional daily-rotated JSON file under LOGS_DIR (LOG_TO_FILE).

Extras passed via `logger.info("msg", extra={...})` appear under `"extra"`
in JSON output.
"""

from __future__ import annotations

import json
import logging
import queue
import sys
import uuid
from contextvars import ContextVar, Token
from dataclasses import dataclass
from datetime import datetime, timezone
from logging import Logger
from logging.handlers import QueueHandler, QueueListener, TimedRotatingFileHandler
from pathlib import Path
from typing import Any, Dict, List, Optional

from src.core.config.config import Config


_log_context: ContextVar[Dict[str, Any]] = ContextVar("brood_log_context", default={})

CONTEXT_FIELDS = ("player_id", "creature_id", "command")

_INIT_FLAG = "_brood_logging_initialized"


# ============================================================================
# Settings
# ============================================================================


@dataclass(frozen=True, slots=True)
class LoggerConfig:
    """Static logging settings; environment-driven values are read lazily."""

    CONSOLE_FORMAT: str = "%(asctime)s | %(levelname)-8s | %(name)-32s | %(message)s"
    DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"

    DAILY_BASENAME: str = "brood_daily.json.log"
    DAILY_BACKUP_COUNT: int = 1

    QUEUE_MAX_SIZE: int = 10_000

    @property
    def environment(self) -> str:
        return str(Config.ENVIRONMENT).lower()

    @property
    def log_level(self) -> int:
        name = Config.LOG_LEVEL if isinstance(Config.LOG_LEVEL, str) else "INFO"
        level = logging.getLevelName(name.upper())
        return level if isinstance(level, int) else logging.INFO

    @property
    def use_json(self) -> bool:
        if Config.LOG_JSON is None:
            return self.environment == "production"
        return bool(Config.LOG_JSON)

    @property
    def use_colors(self) -> bool:
        return not self.use_json and bool(Config.LOG_COLORS) and sys.stdout.isatty()

    @property
    def to_file(self) -> bool:
        return bool(Config.LOG_TO_FILE)

    @property
    def logs_dir(self) -> Path:
        return Path(Config.LOGS_DIR).resolve()


LOGGER_CONFIG = LoggerConfig()


@dataclass(frozen=True, slots=True)
class LoggingHealth:
    initialized: bool
    queue_size: int
    queue_max_size: int
    records_enqueued: int
    records_dropped: int
    listener_errors: int


class _Counters:
    enqueued = 0
    dropped = 0
    listener_errors = 0

    @classmethod
    def reset(cls) -> None:
        cls.enqueued = cls.dropped = cls.listener_errors = 0


_log_queue: Optional["queue.Queue[logging.LogRecord]"] = None
_listener: Optional[QueueListener] = None


# ============================================================================
# Record Enrichment & Formatting
# ============================================================================


class ContextFilter(logging.Filter):
    """Stamps the active command context onto each record. Explicit `extra` wins."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        context = _log_context.get()

        for key in CONTEXT_FIELDS:
            if getattr(record, key, None) is None:
                setattr(record, key, context.get(key, "N/A"))

        record.correlation_id = context.get("correlation_id") or "N/A"
        record.component = context.get("component") or record.name.split(".", 1)[0]
        record.operation = context.get("operation", "N/A")
        return True


class ColoredFormatter(logging.Formatter):
    LEVEL_COLORS: Dict[int, str] = {
        logging.DEBUG: "\033[90m",
        logging.INFO: "\033[94m",
        logging.WARNING: "\033[93m",
        logging.ERROR: "\033[91m",
        logging.CRITICAL: "\033[1;91m",
    }

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        text = super().format(record)
        color = self.LEVEL_COLORS.get(record.levelno)
        return f"{color}{text}\033[0m" if color else text


# attributes every LogRecord carries; anything else arrived via `extra`
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}

_CONTEXT_ATTRS = frozenset(CONTEXT_FIELDS) | {"correlation_id", "component", "operation"}


class JSONFormatter(logging.Formatter):
    """One JSON object per line. Context fields left at "N/A" are omitted."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for attr in _CONTEXT_ATTRS:
            value = getattr(record, attr, None)
            if value not in (None, "N/A"):
                payload[attr] = value

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        extra = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and key not in _CONTEXT_ATTRS and not key.startswith("_")
        }
        if extra:
            payload["extra"] = extra

        return json.dumps(payload, ensure_ascii=False, default=str)


# ============================================================================
# Queue Plumbing
# ============================================================================


class BroodQueueHandler(QueueHandler):
    """Never blocks the caller; a full queue drops the record and counts it."""

    def enqueue(self, record: logging.LogRecord) -> None:  # type: ignore[override]
        _Counters.enqueued += 1
        try:
            self.queue.put_nowait(record)
        except queue.Full:
            _Counters.dropped += 1
            sys.stderr.write("Brood logging queue full; dropping log record.\n")


class BroodQueueListener(QueueListener):
    def handleError(self, record: logging.LogRecord) -> None:  # type: ignore[override]
        _Counters.listener_errors += 1
        sys.stderr.write("Brood logging handler error while processing record.\n")


def _console_formatter() -> logging.Formatter:
    if LOGGER_CONFIG.use_json:
        return JSONFormatter()
    formatter_cls = ColoredFormatter if LOGGER_CONFIG.use_colors else logging.Formatter
    return formatter_cls(fmt=LOGGER_CONFIG.CONSOLE_FORMAT, datefmt=LOGGER_CONFIG.DATE_FORMAT)


def _build_sinks() -> List[logging.Handler]:
    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(_console_formatter())
    sinks: List[logging.Handler] = [console]

    if LOGGER_CONFIG.to_file:
        LOGGER_CONFIG.logs_dir.mkdir(parents=True, exist_ok=True)
        daily = TimedRotatingFileHandler(
            filename=str(LOGGER_CONFIG.logs_dir / LOGGER_CONFIG.DAILY_BASENAME),
            when="midnight",
            backupCount=LOGGER_CONFIG.DAILY_BACKUP_COUNT,
            encoding="utf-8",
            utc=True,
        )
        daily.setFormatter(JSONFormatter())
        sinks.append(daily)

    for sink in sinks:
        sink.setLevel(LOGGER_CONFIG.log_level)
    return sinks


# ============================================================================
# Lifecycle
# ============================================================================


def setup_logging() -> None:
    """Install the queue-backed root handler. Idempotent."""
    global _log_queue, _listener

    root = logging.getLogger()
    if getattr(root, _INIT_FLAG, False):
        return

    _Counters.reset()
    root.setLevel(LOGGER_CONFIG.log_level)
    root.handlers.clear()
    root.filters.clear()

    _log_queue = queue.Queue(LOGGER_CONFIG.QUEUE_MAX_SIZE)
    _listener = BroodQueueListener(_log_queue, *_build_sinks(), respect_handler_level=True)
    _listener.start()

    handler = BroodQueueHandler(_log_queue)
    handler.setLevel(LOGGER_CONFIG.log_level)
    # Context must be captured on the emitting task, not the listener thread
    handler.addFilter(ContextFilter())
    root.addHandler(handler)

    for noisy in ("sqlalchemy.engine", "sqlalchemy.pool", "aiosqlite", "asyncio"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    setattr(root, _INIT_FLAG, True)
    logging.getLogger(__name__).info(
        "Logging initialized",
        extra={
            "environment": LOGGER_CONFIG.environment,
            "log_level": logging.getLevelName(LOGGER_CONFIG.log_level),
            "json": LOGGER_CONFIG.use_json,
            "to_file": LOGGER_CONFIG.to_file,
        },
    )


def shutdown_logging() -> None:
    """Drain the queue, close sinks and detach the root handler."""
    global _log_queue, _listener

    root = logging.getLogger()
    if not getattr(root, _INIT_FLAG, False):
        return

    logging.getLogger(__name__).info("Shutting down logging subsystem.")

    if _listener is not None:
        try:
            _listener.stop()
        finally:
            _listener = None

    for handler in list(root.handlers):
        handler.close()
        root.removeHandler(handler)

    setattr(root, _INIT_FLAG, False)
    _log_queue = None


def get_logging_health() -> LoggingHealth:
    return LoggingHealth(
        initialized=bool(getattr(logging.getLogger(), _INIT_FLAG, False)),
        queue_size=_log_queue.qsize() if _log_queue is not None else 0,
        queue_max_size=_log_queue.maxsize if _log_queue is not None else 0,
        records_enqueued=_Counters.enqueued,
        records_dropped=_Counters.dropped,
        listener_errors=_Counters.listener_errors,
    )


# ============================================================================
# Public API
# ============================================================================


def get_logger(name: str) -> Logger:
    return logging.getLogger(name)


class LogContext:
    """
    Scoped command context, usable as a sync or async context manager.

    >>> async with LogContext(player_id="p1", command="feed_creature"):
    ...     logger.info("Feeding creature")
    """

    def __init__(
        self,
        player_id: Optional[str] = None,
        creature_id: Optional[str] = None,
        command: Optional[str] = None,
        component: Optional[str] = None,
        operation: Optional[str] = None,
        correlation_id: Optional[str] = None,
        **extra: Any,
    ) -> None:
        self.context: Dict[str, Any] = {
            "player_id": "N/A" if player_id is None else str(player_id),
            "creature_id": "N/A" if creature_id is None else str(creature_id),
            "command": command or "N/A",
            "component": component,
            "operation": operation,
            "correlation_id": correlation_id or uuid.uuid4().hex[:8],
            **extra,
        }
        self._token: Optional[Token[Dict[str, Any]]] = None

    def __enter__(self) -> "LogContext":
        self._token = _log_context.set(self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._token is not None:
            _log_context.reset(self._token)
            self._token = None

    async def __aenter__(self) -> "LogContext":
        return self.__enter__()

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.__exit__(exc_type, exc_val, exc_tb)


def set_log_context(**fields: Any) -> None:
    """Merge fields into the current context; None values are ignored."""
    merged = dict(_log_context.get())
    for key, value in fields.items():
        if value is None:
            continue
        merged[key] = str(value) if key in ("player_id", "creature_id") else value
    _log_context.set(merged)


def get_log_context() -> Dict[str, Any]:
    return dict(_log_context.get())


def clear_log_context() -> None:
    _log_context.set({})


setup_logging()
