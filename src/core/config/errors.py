"""
Errors raised by the balance configuration layer.

ConfigError
├── ConfigValidationError      a value has the wrong type for its schema
└── ConfigInitializationError  a YAML file failed to parse or validate at load
"""


class ConfigError(Exception):
    """Anything wrong with Brood's balance configuration."""


class ConfigValidationError(ConfigError):
    """A loaded or overridden value does not match its registered schema."""


class ConfigInitializationError(ConfigError):
    """ConfigManager could not load the balance directory."""


__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "ConfigInitializationError",
]
