"""
Process configuration for Brood, read from the environment.

Values come from environment variables, with a `.env` file loaded first via
python-dotenv. Malformed values fall back to their defaults with a warning.
Game balance numbers live elsewhere (ConfigManager, `config/*.yaml`).

Environment Variables
---------------------
- ENVIRONMENT: development | testing | staging | production
- DEBUG, LOG_LEVEL
- LOG_JSON: force JSON console output (unset: production only)
- LOG_COLORS: coloured console output on a TTY
- LOG_TO_FILE: keep a rotating daily JSON log (default: off when testing)
- LOGS_DIR, DATA_DIR, GAME_CONFIG_DIR
- DATABASE_URL: SQLAlchemy async URL (default: SQLite file in DATA_DIR)
- DATABASE_ECHO, DATABASE_POOL_SIZE, DATABASE_MAX_OVERFLOW, DATABASE_POOL_RECYCLE
"""

import logging
import os
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv

load_dotenv()

_TRUE = {"true", "yes", "1", "on"}
_FALSE = {"false", "no", "0", "off"}
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Config:
    """
    Class-level settings; never instantiated.

    >>> if Config.is_production():
    ...     logger.info("Running in production mode")
    """

    APP_NAME: str = "Brood"

    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_JSON: Optional[bool] = None
    LOG_COLORS: bool = True
    LOG_TO_FILE: bool = True

    PROJECT_ROOT = Path(__file__).resolve().parents[3]
    LOGS_DIR = PROJECT_ROOT / "logs"
    DATA_DIR = PROJECT_ROOT / "data"
    GAME_CONFIG_DIR = PROJECT_ROOT / "config"

    DATABASE_URL: str = ""
    DATABASE_ECHO: bool = False
    DATABASE_POOL_SIZE: int = 5
    DATABASE_MAX_OVERFLOW: int = 10
    DATABASE_POOL_RECYCLE: int = 1800

    # key -> message for every environment value that was rejected
    _warnings: Dict[str, str] = {}
    _validated: bool = False

    # =========================================================================
    # Environment parsing
    # =========================================================================

    @classmethod
    def _reject(cls, key: str, message: str) -> None:
        # Structured logging is not configured yet when this runs at import
        logging.warning(message)
        cls._warnings[key] = message

    @classmethod
    def _env_int(
        cls,
        key: str,
        default: int,
        min_val: Optional[int] = None,
        max_val: Optional[int] = None,
    ) -> int:
        raw = os.getenv(key)
        if raw is None:
            return default
        try:
            value = int(raw)
        except ValueError:
            cls._reject(key, f"{key}='{raw}' is not a valid integer, using default {default}")
            return default
        if (min_val is not None and value < min_val) or (max_val is not None and value > max_val):
            cls._reject(key, f"{key}={value} is out of range, using default {default}")
            return default
        return value

    @classmethod
    def _env_flag(cls, key: str) -> Optional[bool]:
        """Tri-state: None when unset or unparseable."""
        raw = os.getenv(key)
        if raw is None:
            return None
        normalized = raw.strip().lower()
        if normalized in _TRUE:
            return True
        if normalized in _FALSE:
            return False
        cls._reject(key, f"{key}='{raw}' is not a valid boolean")
        return None

    @classmethod
    def _env_bool(cls, key: str, default: bool) -> bool:
        value = cls._env_flag(key)
        return default if value is None else value

    @classmethod
    def _env_path(cls, key: str, default: Path) -> Path:
        return Path(os.getenv(key, str(default))).expanduser()

    # =========================================================================
    # Loading & validation
    # =========================================================================

    @classmethod
    def load(cls) -> None:
        """(Re)read the environment. Runs at import."""
        cls._warnings = {}

        cls.ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
        cls.DEBUG = cls._env_bool("DEBUG", False)
        cls.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
        cls.LOG_JSON = cls._env_flag("LOG_JSON")
        cls.LOG_COLORS = cls._env_bool("LOG_COLORS", True)
        cls.LOG_TO_FILE = cls._env_bool("LOG_TO_FILE", not cls.is_testing())

        cls.LOGS_DIR = cls._env_path("LOGS_DIR", cls.PROJECT_ROOT / "logs")
        cls.DATA_DIR = cls._env_path("DATA_DIR", cls.PROJECT_ROOT / "data")
        cls.GAME_CONFIG_DIR = cls._env_path("GAME_CONFIG_DIR", cls.PROJECT_ROOT / "config")

        cls.DATABASE_URL = os.getenv(
            "DATABASE_URL", f"sqlite+aiosqlite:///{cls.DATA_DIR / 'brood.db'}"
        )
        cls.DATABASE_ECHO = cls._env_bool("DATABASE_ECHO", False)
        cls.DATABASE_POOL_SIZE = cls._env_int("DATABASE_POOL_SIZE", 5, min_val=1, max_val=200)
        cls.DATABASE_MAX_OVERFLOW = cls._env_int("DATABASE_MAX_OVERFLOW", 10, min_val=0, max_val=200)
        cls.DATABASE_POOL_RECYCLE = cls._env_int("DATABASE_POOL_RECYCLE", 1800, min_val=60)

    @classmethod
    def validate(cls) -> None:
        """
        Startup check: reload, normalize LOG_LEVEL and create runtime directories.

        Raises
        ------
        ValueError
            If DATABASE_URL is empty. Outside production this is only logged.
        """
        if cls._validated:
            return

        logger = logging.getLogger(__name__)
        cls.load()

        if not cls.DATABASE_URL:
            if cls.is_production():
                logger.error("DATABASE_URL is required in production")
                raise ValueError("DATABASE_URL environment variable is required")
            logger.warning("DATABASE_URL is empty")

        if cls.LOG_LEVEL.upper() not in _LOG_LEVELS:
            logger.warning(f"Invalid LOG_LEVEL '{cls.LOG_LEVEL}', using INFO")
            cls.LOG_LEVEL = "INFO"

        if cls.is_production():
            if cls.DATABASE_URL.startswith("sqlite"):
                logger.warning("Production environment using a SQLite database")
            if cls.DEBUG:
                logger.warning("DEBUG mode enabled in production!")

        if not cls.GAME_CONFIG_DIR.exists():
            logger.warning(
                "Game config directory not found",
                extra={"game_config_dir": str(cls.GAME_CONFIG_DIR)},
            )

        cls.LOGS_DIR.mkdir(parents=True, exist_ok=True)
        cls.DATA_DIR.mkdir(parents=True, exist_ok=True)

        cls._validated = True
        logger.info(
            "Configuration loaded",
            extra={
                "environment": cls.ENVIRONMENT,
                "database_scheme": cls.DATABASE_URL.split(":", 1)[0],
                "rejected_values": sorted(cls._warnings),
            },
        )

    # =========================================================================
    # Environment checks
    # =========================================================================

    @classmethod
    def is_production(cls) -> bool:
        return cls.ENVIRONMENT.lower() == "production"

    @classmethod
    def is_testing(cls) -> bool:
        return cls.ENVIRONMENT.lower() == "testing"


Config.load()
