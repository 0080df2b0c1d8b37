"""
ConfigManager: dot-notation access to Brood game balance values.

Purpose
-------
- Provide hierarchical, dot-notation access to tunable balance values
  (decay rates, token rates, breeding costs, summon tables).
- Back configuration with YAML defaults from the balance directory.
- Allow validated runtime overrides without editing files.

Responsibilities
----------------
- Load and deep-merge every YAML file under `Config.GAME_CONFIG_DIR`.
- Serve reads from an in-memory cache, falling back to YAML defaults.
- Validate overrides against the schema registered for their top-level key.
- Track read/override counts for diagnostics.

Key Design Decisions
--------------------
- YAML is the single source for **defaults**; `set()` layers **overrides**
  on top and never writes back to disk.
- `reset()` drops overrides and forces a reload on the next read, which is
  what test fixtures rely on for isolation.
- Reads never raise for a missing key; callers pass explicit defaults.
"""

from __future__ import annotations

import copy
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, MutableMapping, Optional

import yaml

from src.core.config.config import Config
from src.core.config.errors import ConfigInitializationError, ConfigValidationError
from src.core.config.validator import get_schema_for_top_key, validate_config_value
from src.core.logging.logger import get_logger

logger = get_logger(__name__)


@dataclass
class ConfigMetrics:
    """Read/write counters for ConfigManager."""

    gets: int = 0
    sets: int = 0
    cache_misses: int = 0
    fallback_to_defaults: int = 0
    errors: int = 0
    total_get_time_ms: float = 0.0

    def snapshot(self) -> Dict[str, Any]:
        avg_get = self.total_get_time_ms / self.gets if self.gets else 0.0
        return {
            "gets": self.gets,
            "sets": self.sets,
            "cache_misses": self.cache_misses,
            "fallback_to_defaults": self.fallback_to_defaults,
            "errors": self.errors,
            "avg_get_time_ms": round(avg_get, 4),
        }


class ConfigManager:
    """
    Game balance configuration with YAML defaults and runtime overrides.

    Examples
    --------
    >>> ConfigManager.get("breeding.base_cost")
    500
    >>> ConfigManager.set("breeding.base_cost", 750)
    >>> ConfigManager.get("breeding.base_cost")
    750
    """

    _cache: Dict[str, Any] = {}
    _defaults: Dict[str, Any] = {}
    _initialized: bool = False
    _config_dir: Optional[Path] = None
    _metrics: ConfigMetrics = ConfigMetrics()

    # =========================================================================
    # YAML LOADING
    # =========================================================================

    @staticmethod
    def _deep_merge_dict(
        target: MutableMapping[str, Any],
        source: MutableMapping[str, Any],
    ) -> None:
        """Recursively merge `source` into `target` (in-place)."""
        for key, value in source.items():
            if isinstance(value, dict) and isinstance(target.get(key), dict):
                ConfigManager._deep_merge_dict(target[key], value)
            else:
                target[key] = value

    @classmethod
    def _load_yaml_configs(cls, config_dir: Path) -> None:
        """
        Load all YAML files from `config_dir` into `_defaults`.

        Files are merged in sorted path order so later files win on
        conflicting keys.
        """
        cls._defaults = {}

        if not config_dir.exists():
            logger.warning(
                "Config directory not found; using built-in defaults only",
                extra={"config_dir": str(config_dir)},
            )
            return

        yaml_files = sorted(
            list(config_dir.rglob("*.yaml")) + list(config_dir.rglob("*.yml"))
        )
        if not yaml_files:
            logger.info(
                "No YAML config files discovered; using built-in defaults only",
                extra={"config_dir": str(config_dir)},
            )
            return

        loaded_count = 0
        for yaml_file in yaml_files:
            try:
                with yaml_file.open("r", encoding="utf-8") as handle:
                    data = yaml.safe_load(handle)
            except yaml.YAMLError as exc:
                cls._metrics.errors += 1
                raise ConfigInitializationError(
                    f"Failed to parse YAML config '{yaml_file}'"
                ) from exc

            if isinstance(data, dict):
                cls._deep_merge_dict(cls._defaults, data)
                loaded_count += 1
                logger.debug(
                    "Loaded YAML config",
                    extra={"file": str(yaml_file.relative_to(config_dir))},
                )
            elif data is not None:
                logger.warning(
                    "Ignoring non-dict YAML root object",
                    extra={
                        "file": str(yaml_file.relative_to(config_dir)),
                        "root_type": type(data).__name__,
                    },
                )

        for top_key, value in cls._defaults.items():
            try:
                validate_config_value(top_key, value)
            except ConfigValidationError as exc:
                cls._metrics.errors += 1
                raise ConfigInitializationError(str(exc)) from exc

        logger.info(
            "YAML configs loaded",
            extra={
                "yaml_file_count": loaded_count,
                "top_level_keys": sorted(cls._defaults.keys()),
            },
        )

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    @classmethod
    def initialize(cls, config_dir: Optional[Path] = None) -> None:
        """
        Load YAML defaults into the cache (idempotent).

        Raises
        ------
        ConfigInitializationError
            If a YAML file cannot be parsed or violates its schema.
        """
        if cls._initialized:
            return

        start = time.perf_counter()
        cls._config_dir = Path(config_dir) if config_dir else Config.GAME_CONFIG_DIR
        cls._load_yaml_configs(cls._config_dir)
        cls._cache = copy.deepcopy(cls._defaults)
        cls._initialized = True

        logger.info(
            "ConfigManager initialized",
            extra={
                "config_dir": str(cls._config_dir),
                "latency_ms": round((time.perf_counter() - start) * 1000, 2),
            },
        )

    @classmethod
    def reset(cls) -> None:
        """Drop overrides and loaded defaults; the next read reloads YAML."""
        cls._cache = {}
        cls._defaults = {}
        cls._initialized = False
        cls._config_dir = None
        cls._metrics = ConfigMetrics()

    # =========================================================================
    # READ API
    # =========================================================================

    @staticmethod
    def _traverse(source: Dict[str, Any], key: str) -> Any:
        value: Any = source
        for part in key.split("."):
            if not isinstance(value, dict):
                return None
            value = value.get(part)
            if value is None:
                return None
        return value

    @classmethod
    def get(cls, key: str, default: Any = None) -> Any:
        """
        Retrieve a configuration value by dot-notation path.

        Examples
        --------
        >>> ConfigManager.get("decay.hunger_rate_per_minute")
        0.0231
        >>> ConfigManager.get("tokens.batch.unknown", 0)
        0
        """
        start = time.perf_counter()
        cls._metrics.gets += 1

        if not cls._initialized:
            cls.initialize()

        try:
            value = cls._traverse(cls._cache, key)
            if value is not None:
                return value

            cls._metrics.cache_misses += 1
            fallback = cls._traverse(cls._defaults, key)
            if fallback is not None:
                cls._metrics.fallback_to_defaults += 1
                return fallback
            return default
        finally:
            cls._metrics.total_get_time_ms += (time.perf_counter() - start) * 1000

    @classmethod
    def get_all_keys(cls) -> List[str]:
        """Return all top-level configuration keys currently cached."""
        if not cls._initialized:
            cls.initialize()
        return list(cls._cache.keys())

    # =========================================================================
    # WRITE API
    # =========================================================================

    @classmethod
    def set(cls, key: str, value: Any) -> None:
        """
        Override a configuration value in memory.

        The full top-level payload is validated against its schema before the
        override becomes visible.

        Raises
        ------
        ConfigValidationError
            If the resulting payload violates the registered schema.
        """
        if not cls._initialized:
            cls.initialize()

        parts = key.split(".")
        top_key = parts[0]

        if len(parts) > 1:
            current_top = cls._cache.get(top_key)
            base: Dict[str, Any] = (
                copy.deepcopy(current_top) if isinstance(current_top, dict) else {}
            )
            cursor = base
            for segment in parts[1:-1]:
                nested = cursor.get(segment)
                if not isinstance(nested, dict):
                    nested = {}
                    cursor[segment] = nested
                cursor = nested
            cursor[parts[-1]] = value
            final_value: Any = base
        else:
            final_value = value

        if get_schema_for_top_key(top_key) is not None:
            try:
                validate_config_value(top_key, final_value)
            except ConfigValidationError:
                cls._metrics.errors += 1
                logger.error(
                    "Rejected invalid configuration override",
                    extra={"config_key": key},
                    exc_info=True,
                )
                raise

        cls._cache[top_key] = final_value
        cls._metrics.sets += 1

        logger.info("Configuration overridden", extra={"config_key": key})

    # =========================================================================
    # METRICS
    # =========================================================================

    @classmethod
    def get_metrics(cls) -> Dict[str, Any]:
        snapshot = cls._metrics.snapshot()
        snapshot["initialized"] = cls._initialized
        snapshot["cached_configs"] = len(cls._cache)
        return snapshot


__all__ = ["ConfigManager", "ConfigMetrics"]
