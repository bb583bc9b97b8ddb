from .Config import config, ConfigRepository, env

__all__ = [
    "config",
    "ConfigRepository",
    "env"
]
