from __future__ import annotations

import logging
import logging.handlers
from typing import Any, Dict, List, Optional, Union
from pathlib import Path
from datetime import datetime
import json
import sys


def _parse_level(level: Union[str, int, None]) -> int:
    """Map Laravel/Monolog level names onto logging levels."""
    if isinstance(level, int):
        return level
    if not level:
        return logging.INFO

    aliases = {'notice': 'info', 'emergency': 'critical', 'alert': 'critical'}
    name = aliases.get(level.lower(), level.lower())
    return getattr(logging, name.upper(), logging.INFO)


class LogChannel:
    """Laravel-style log channel: a named logger that accepts a context mapping."""

    def __init__(self, name: str, handlers: List[logging.Handler], level: Union[str, int, None] = logging.INFO) -> None:
        self.name = name
        self.logger = logging.getLogger(f"channel.{name}")
        self.logger.setLevel(_parse_level(level))
        self.logger.propagate = False

        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
        for handler in handlers:
            self.logger.addHandler(handler)

    def debug(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.DEBUG, message, context)

    def info(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.INFO, message, context)

    def warning(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.WARNING, message, context)

    def error(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.ERROR, message, context)

    def critical(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.CRITICAL, message, context)

    def log(self, level: Union[str, int], message: str, context: Optional[Dict[str, Any]] = None) -> None:
        """Log message at specified level."""
        self._log(_parse_level(level), message, context)

    def _log(self, level: int, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        extra = {'context': context, 'channel': self.name} if context else {'channel': self.name}
        self.logger.log(level, message, extra=extra)


class LaravelFormatter(logging.Formatter):
    """Formats records as ``[date] channel.LEVEL: message {context}``."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S')
        channel = getattr(record, 'channel', record.name)
        log_line = f"[{timestamp}] {channel}.{record.levelname}: {record.getMessage()}"

        context = getattr(record, 'context', None)
        if context:
            log_line += f" {json.dumps(context, default=str)}"

        if record.exc_info:
            log_line += f"\n{self.formatException(record.exc_info)}"

        return log_line


class JsonFormatter(logging.Formatter):
    """JSON log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'channel': getattr(record, 'channel', record.name),
            'message': record.getMessage(),
            'context': getattr(record, 'context', None) or {},
        }

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


class LogManager:
    """Laravel-style log manager building channels from the ``logging`` config."""

    def __init__(self, config: Optional[Dict[str, Any]] = None) -> None:
        self._config = config or {}
        self._channels: Dict[str, LogChannel] = {}
        self._default_channel = self._config.get('default', 'stderr')

    def channel(self, name: Optional[str] = None) -> LogChannel:
        """Get a log channel, creating it on first use."""
        name = name or self._default_channel

        if name not in self._channels:
            self._channels[name] = self._create_channel(name)

        return self._channels[name]

    def _create_channel(self, name: str) -> LogChannel:
        config = self._config.get('channels', {}).get(name, {})
        return LogChannel(name, self._create_handlers(config), config.get('level', logging.INFO))

    def _create_handlers(self, config: Dict[str, Any]) -> List[logging.Handler]:
        driver = config.get('driver', 'stderr')

        if driver == 'stack':
            handlers: List[logging.Handler] = []
            for channel_name in config.get('channels', []):
                handlers.extend(self.channel(channel_name).logger.handlers)
            return handlers

        if driver == 'single':
            handler: logging.Handler = logging.FileHandler(self._ensure_log_path(config, 'storage.log'))
        elif driver == 'daily':
            handler = logging.handlers.TimedRotatingFileHandler(
                self._ensure_log_path(config, 'storage.log'), when='midnight', interval=1, backupCount=config.get('days', 14)
            )
        elif driver == 'null':
            handler = logging.NullHandler()
        else:
            handler = logging.StreamHandler(sys.stderr)

        handler.setFormatter(self._get_formatter(config))
        return [handler]

    def _ensure_log_path(self, config: Dict[str, Any], default: str) -> str:
        path = Path(config.get('path', f'storage/logs/{default}'))
        path.parent.mkdir(parents=True, exist_ok=True)
        return str(path)

    def _get_formatter(self, config: Dict[str, Any]) -> logging.Formatter:
        if config.get('formatter') == 'json':
            return JsonFormatter()
        return LaravelFormatter()

    def get_default_driver(self) -> str:
        return self._default_channel

    def set_default_driver(self, name: str) -> None:
        self._default_channel = name

    def get_channels(self) -> Dict[str, LogChannel]:
        return self._channels

    def forget_channel(self, name: str) -> None:
        self._channels.pop(name, None)

    # Proxy methods to default channel
    def debug(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self.channel().debug(message, context)

    def info(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self.channel().info(message, context)

    def warning(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self.channel().warning(message, context)

    def error(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self.channel().error(message, context)


# Global log manager instance
log_manager_instance: Optional[LogManager] = None


def get_log_manager() -> LogManager:
    """Get the global log manager, configured from ``config/logging.py``."""
    global log_manager_instance
    if log_manager_instance is None:
        from app.Support.Config import config
        log_manager_instance = LogManager(config.get('logging', {}))
    return log_manager_instance


def set_log_manager(manager: Optional[LogManager]) -> None:
    """Replace the global log manager (None resets it)."""
    global log_manager_instance
    log_manager_instance = manager


def logger(channel: Optional[str] = None) -> LogChannel:
    """Get a log channel."""
    return get_log_manager().channel(channel)
