"""
Shared plumbing for Brood's orchestration services.

A service loads state through a store, runs the pure engines over it and
writes back what they return. This base only carries what every such
service needs: the balance config and a logger.

    class GameService(BaseService):
        def __init__(self, store, config_manager=ConfigManager, logger=None):
            super().__init__(config_manager, logger or get_logger(__name__))
            self.store = store
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from src.core.config.errors import ConfigError
from src.modules.shared.exceptions import InvalidOperationError

if TYPE_CHECKING:
    from logging import Logger

    from src.core.config.manager import ConfigManager


class BaseService:
    def __init__(self, config_manager: type[ConfigManager], logger: Logger) -> None:
        self._config = config_manager
        self.log = logger

    def get_config(
        self, key: str, default: Optional[Any] = None, required: bool = False
    ) -> Any:
        """
        Balance value at `key`.

        Raises:
            ConfigError: If required=True and the key is missing
        """
        value = self._config.get(key, default)
        if required and value is None:
            raise ConfigError(f"Required configuration key '{key}' is missing")
        return value

    def log_operation(self, operation: str, **context: Any) -> None:
        self.log.info(
            f"Service operation: {operation}",
            extra={"operation_name": operation, **context},
        )

    def validate_not_blank(self, value: str, name: str) -> None:
        """Raises InvalidOperationError for empty or whitespace-only ids."""
        if not isinstance(value, str) or not value.strip():
            raise InvalidOperationError(name, f"{name} must not be blank")
