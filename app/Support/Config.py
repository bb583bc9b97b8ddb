from __future__ import annotations

from typing import Any, Dict, List, Optional
import importlib
import json
import logging
import os
import pkgutil
from pathlib import Path


def _convert_env_value(value: str) -> Any:
    """Convert environment variable string to appropriate type."""
    lowered = value.lower()

    if lowered in ('true', 'false'):
        return lowered == 'true'

    if lowered in ('null', 'none', ''):
        return None

    try:
        if '.' in value:
            return float(value)
        return int(value)
    except ValueError:
        pass

    if value.startswith(('{', '[')):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            pass

    return value


def env(key: str, default: Any = None) -> Any:
    """Get environment variable with type conversion."""
    value = os.getenv(key)
    if value is None:
        return default
    return _convert_env_value(value)


class ConfigRepository:
    """Laravel-style configuration repository.

    Every module of the ``config`` package becomes a top-level key holding its
    public plain-value attributes. Loading happens on first access so config
    modules may import ``env`` from here.
    """

    VALUE_TYPES = (dict, list, tuple, str, int, float, bool, type(None))

    def __init__(self, package: str = 'config', env_file: Optional[str] = '.env') -> None:
        self.package = package
        self.env_file = env_file
        self._config: Dict[str, Any] = {}
        self._loaded = False
        self.logger = logging.getLogger(self.__class__.__name__)

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self._loaded = True
            self._load_config()

    def _load_config(self) -> None:
        """Load configuration from the .env file and config modules."""
        self._load_environment_file()

        try:
            package = importlib.import_module(self.package)
        except ImportError:
            self.logger.warning(f"Config package '{self.package}' not found")
            return

        for module_info in pkgutil.iter_modules(package.__path__):
            module_name = module_info.name
            module = importlib.reload(importlib.import_module(f"{self.package}.{module_name}"))

            self._config[module_name] = {
                key: value for key, value in vars(module).items()
                if not key.startswith('_') and isinstance(value, self.VALUE_TYPES)
            }

    def _load_environment_file(self) -> None:
        """Export KEY=VALUE lines from the .env file without overriding the environment."""
        if not self.env_file:
            return

        env_path = Path(self.env_file)
        if not env_path.exists():
            return

        for line in env_path.read_text(encoding='utf-8').splitlines():
            line = line.strip()
            if not line or line.startswith('#') or '=' not in line:
                continue
            key, value = line.split('=', 1)
            os.environ.setdefault(key.strip(), value.strip().strip('"\''))

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value using dot notation."""
        self._ensure_loaded()

        value: Any = self._config
        for k in key.split('.'):
            if not isinstance(value, dict) or k not in value:
                return default
            value = value[k]

        return value

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value using dot notation."""
        self._ensure_loaded()

        keys = key.split('.')
        current = self._config

        for k in keys[:-1]:
            if not isinstance(current.get(k), dict):
                current[k] = {}
            current = current[k]

        current[keys[-1]] = value

    def has(self, key: str) -> bool:
        """Check if a configuration key exists."""
        sentinel = object()
        return self.get(key, sentinel) is not sentinel

    def all(self) -> Dict[str, Any]:
        """Get all configuration."""
        self._ensure_loaded()
        return self._config.copy()

    def get_many(self, keys: List[str]) -> Dict[str, Any]:
        """Get multiple configuration values at once."""
        return {key: self.get(key) for key in keys}

    def reload(self) -> None:
        """Reload all configuration from the environment and config modules."""
        self._config.clear()
        self._loaded = False
        self._ensure_loaded()


# Global config instance
config = ConfigRepository()
