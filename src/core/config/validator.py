"""
Schemas for the balance tables in `config/*.yaml`.

Each top-level key (decay, tokens, breeding, ...) has a ConfigSchema. YAML
defaults are checked at load and every `ConfigManager.set()` override is
checked before it becomes visible, so engines can trust the types they read.

Rules: listed fields must have the declared type (ints pass for floats,
bools never pass for numbers); absent fields are fine; unknown fields are
rejected only where `allow_extra=False`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

from src.core.config.errors import ConfigValidationError


SchemaField = Union[type, "ConfigSchema"]


@dataclass(slots=True)
class ConfigSchema:
    """
    Field name to type (or nested schema) for one mapping level.

    Examples
    --------
    >>> schema = ConfigSchema(fields={"base_cost": int, "stat_inheritance": float})
    >>> schema.validate({"base_cost": 500, "stat_inheritance": 0.6})
    {'base_cost': 500, 'stat_inheritance': 0.6}

    >>> try:
    ...     schema.validate({"base_cost": "cheap"})
    ... except ConfigValidationError as e:
    ...     print(e)
    Config value at 'base_cost' must be int; got str
    """

    fields: Mapping[str, SchemaField]
    allow_extra: bool = True

    def validate(self, value: Any, path: str = "") -> Any:
        """
        Validate value against this schema.

        Raises
        ------
        ConfigValidationError
            If validation fails, with the dot-notation path of the bad field.
        """
        if not isinstance(value, Mapping):
            raise ConfigValidationError(
                f"Config value at '{path or '<root>'}' must be a mapping; "
                f"got {type(value).__name__}"
            )

        for key, expected in self.fields.items():
            full_path = f"{path}.{key}" if path else key

            if key not in value:
                continue

            raw = value[key]

            if isinstance(expected, ConfigSchema):
                expected.validate(raw, path=full_path)
                continue

            # bool is an int subclass; never accept it for numeric fields
            if isinstance(raw, bool) and expected is not bool:
                raise ConfigValidationError(
                    f"Config value at '{full_path}' must be {expected.__name__}; got bool"
                )

            if expected is float and isinstance(raw, int):
                continue

            if not isinstance(raw, expected):
                raise ConfigValidationError(
                    f"Config value at '{full_path}' must be {expected.__name__}; "
                    f"got {type(raw).__name__}"
                )

        unknown = sorted(str(k) for k in value if k not in self.fields)
        if unknown and not self.allow_extra:
            raise ConfigValidationError(
                f"Unexpected config keys at '{path or '<root>'}': {', '.join(unknown)}"
            )

        return value


# ============================================================================
# Schema Registry
# ============================================================================

_RATE_TABLE = ConfigSchema(
    fields={
        "Common": float,
        "Excellent": float,
        "Rare": float,
        "Epic": float,
        "Legendary": float,
        "Mythical": float,
        "SPECIAL": float,
    },
    allow_extra=False,
)

_SCHEMAS: Dict[str, ConfigSchema] = {
    "decay": ConfigSchema(
        fields={
            "hunger_rate_per_minute": float,
            "hydration_rate_per_minute": float,
            "health_rate_per_minute": float,
        },
        allow_extra=False,
    ),
    "actions": ConfigSchema(
        fields={
            "feed_restore": float,
            "hydrate_restore": float,
            "experience_per_action": int,
            "heal_amount": float,
            "heal_cost": int,
        },
    ),
    "tokens": ConfigSchema(
        fields={
            "continuous": ConfigSchema(fields={"rate_per_power_hour": float}),
            "batch": ConfigSchema(
                fields={
                    "base_rate_per_hour": float,
                    "rarity_multipliers": _RATE_TABLE,
                    "offline_after_minutes": int,
                    "offline_penalty": float,
                    "max_offline_hours": float,
                    "offline_sweep_interval_hours": float,
                },
            ),
        },
    ),
    "breeding": ConfigSchema(
        fields={
            "base_cost": int,
            "min_health": float,
            "min_hunger": float,
            "stat_inheritance": float,
            "parent_health_cost": float,
            "parent_hunger_cost": float,
            "rarity_roll": ConfigSchema(fields={"keep": float, "downgrade": float}),
        },
    ),
    "summon": ConfigSchema(
        fields={
            "single_cost": int,
            "multi_cost": int,
            "multi_count": int,
            "base_stat": int,
            "stat_variance": int,
            "genetic_power_bonus": ConfigSchema(fields={"S": int, "A": int, "J": int}),
            "single_rates": _RATE_TABLE,
            "multi_rates": _RATE_TABLE,
        },
    ),
    "webtrap": ConfigSchema(
        fields={
            "unlock_cost": int,
            "upgrade_cost_per_level": int,
            "cooldown_hours": float,
            "feeders_per_level": int,
            "spider_per_level": int,
        },
    ),
    "player": ConfigSchema(fields={"starting_spider": float, "starting_feeders": int}),
}


def get_schema_for_top_key(top_key: str) -> Optional[ConfigSchema]:
    """Return the validation schema for a top-level key, or None."""
    return _SCHEMAS.get(top_key)


def validate_config_value(top_key: str, value: Any) -> Any:
    """
    Validate a top-level configuration value against its schema.

    If no schema is registered for the key, the value passes unchanged.

    Examples
    --------
    >>> validate_config_value("breeding", {"base_cost": 500})
    {'base_cost': 500}
    >>> validate_config_value("unknown_key", {"any": "value"})
    {'any': 'value'}
    """
    schema = get_schema_for_top_key(top_key)
    if schema is None:
        return value
    return schema.validate(value, path=top_key)


__all__ = [
    "ConfigSchema",
    "SchemaField",
    "get_schema_for_top_key",
    "validate_config_value",
]
