"""
Configuration subsystem for Brood.

Static vs Dynamic Configuration
-------------------------------
**Static (Config):**
- Loaded from environment variables at startup (.env supported)
- Includes: database URL, pool sizes, log settings, directories
- Changes require a restart

**Dynamic (ConfigManager):**
- Loaded from `config/*.yaml` balance files
- Includes: decay rates, token rates, breeding and summon tables
- Supports validated in-memory overrides via `ConfigManager.set()`

Usage
-----
```python
from src.core.config import Config, ConfigManager

db_url = Config.DATABASE_URL
base_cost = ConfigManager.get("breeding.base_cost", 500)
```
"""

# Static configuration must load before anything that logs
from src.core.config.config import Config

from src.core.config.errors import (
    ConfigError,
    ConfigInitializationError,
    ConfigValidationError,
)
from src.core.config.manager import ConfigManager, ConfigMetrics
from src.core.config.validator import (
    ConfigSchema,
    SchemaField,
    get_schema_for_top_key,
    validate_config_value,
)

__all__ = [
    "Config",
    "ConfigManager",
    "ConfigMetrics",
    "ConfigError",
    "ConfigInitializationError",
    "ConfigValidationError",
    "ConfigSchema",
    "SchemaField",
    "get_schema_for_top_key",
    "validate_config_value",
]
