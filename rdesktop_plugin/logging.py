"""
Logging configuration for the rdesktop plugin.

This module provides logging setup with structured output and a
connection id carried through every record, so that the lines emitted by
one connection's init, launch and teardown can be grouped together.
"""

import logging
import logging.handlers
import json
import sys
import uuid
from typing import Dict, Any, Optional
from datetime import datetime, timezone
from pathlib import Path
import contextvars

from .config import LoggingConfig
from .exceptions import ConfigurationError


PLUGIN_LOGGER_NAME = "rdesktop_plugin"

connection_id_var: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    'connection_id', default=None
)


class ConnectionFilter(logging.Filter):
    """Logging filter that adds the current connection id to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Add connection id to log record."""
        if not getattr(record, 'connection_id', None):
            record.connection_id = connection_id_var.get() or "-"
        return True


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Formats log records as one JSON object per line.
    """

    _RESERVED = {
        'name', 'msg', 'args', 'levelname', 'levelno', 'pathname',
        'filename', 'module', 'exc_info', 'exc_text', 'stack_info',
        'lineno', 'funcName', 'created', 'msecs', 'relativeCreated',
        'thread', 'threadName', 'processName', 'process', 'getMessage',
        'connection_id', 'taskName', 'message', 'asctime'
    }

    def __init__(self, include_caller_info: bool = True):
        super().__init__()
        self.include_caller_info = include_caller_info

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry = {
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'connection_id': getattr(record, 'connection_id', '-')
        }

        if self.include_caller_info:
            log_entry.update({
                'module': record.module,
                'function': record.funcName,
                'line': record.lineno
            })

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        # Extra attributes passed through the adapter or `extra=`
        for key, value in record.__dict__.items():
            if key not in self._RESERVED and not key.startswith('_'):
                log_entry[key] = value

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable text formatter for console output."""

    def __init__(self, include_caller_info: bool = False):
        format_string = '%(asctime)s [%(levelname)s] %(name)s'

        if include_caller_info:
            format_string += ' [%(module)s:%(funcName)s:%(lineno)d]'

        format_string += ' [%(connection_id)s] %(message)s'

        super().__init__(fmt=format_string, datefmt='%Y-%m-%d %H:%M:%S')


class PluginLoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter for the plugin.

    Adds plugin context to log records and merges call-specific extra
    fields with the adapter's own.
    """

    def __init__(self, logger: logging.Logger, extra: Optional[Dict[str, Any]] = None):
        super().__init__(logger, extra or {})

    def process(self, msg: Any, kwargs: Dict[str, Any]) -> tuple:
        """Process log record with extra context."""
        if 'extra' in kwargs:
            kwargs['extra'] = {**self.extra, **kwargs['extra']}
        else:
            kwargs['extra'] = self.extra.copy()

        return msg, kwargs


def setup_logging(config: LoggingConfig) -> None:
    """
    Set up logging for the plugin.

    Handlers are attached to the plugin's own logger rather than the root
    logger, since the plugin lives inside a host process that owns the
    root configuration.

    Args:
        config: Logging configuration

    Raises:
        ConfigurationError: If logging configuration is invalid
    """
    if config.format == "json":
        formatter: logging.Formatter = JSONFormatter(
            include_caller_info=config.include_caller_info
        )
    else:
        formatter = TextFormatter(
            include_caller_info=config.include_caller_info
        )

    handlers = []

    if config.output in ["console", "both"]:
        console_handler = logging.StreamHandler(sys.stderr)
        handlers.append(console_handler)

    if config.output in ["file", "both"]:
        if not config.file_path:
            raise ConfigurationError(
                "file_path is required when output includes 'file'",
                config_key="file_path"
            )

        log_path = Path(config.file_path)
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                filename=config.file_path,
                maxBytes=_parse_size(config.max_file_size),
                backupCount=config.backup_count,
                encoding='utf-8'
            )
        except OSError as e:
            raise ConfigurationError(
                f"Failed to open log file: {e}",
                config_key="file_path",
                config_value=config.file_path
            ) from e
        handlers.append(file_handler)

    plugin_logger = logging.getLogger(PLUGIN_LOGGER_NAME)
    for handler in list(plugin_logger.handlers):
        plugin_logger.removeHandler(handler)
        handler.close()

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(ConnectionFilter())
        plugin_logger.addHandler(handler)

    plugin_logger.setLevel(getattr(logging, config.level))
    plugin_logger.propagate = False

    plugin_logger.debug(
        "Logging configured",
        extra={'level': config.level, 'format': config.format, 'output': config.output}
    )


def get_logger(name: str, **extra: Any) -> PluginLoggerAdapter:
    """
    Get a configured logger for plugin components.

    Args:
        name: Logger name (typically __name__)
        **extra: Extra fields to include in all log records

    Returns:
        Logger adapter with plugin context
    """
    from . import __version__

    base_logger = logging.getLogger(name)

    plugin_extra = {
        'plugin_version': __version__,
        'component': name.replace(f'{PLUGIN_LOGGER_NAME}.', ''),
        **extra
    }

    return PluginLoggerAdapter(base_logger, plugin_extra)


def set_connection_id(connection_id: Optional[str] = None) -> str:
    """
    Set the connection id for subsequent log records.

    Args:
        connection_id: Connection id to set (generates a short UUID if None)

    Returns:
        The connection id that was set
    """
    if connection_id is None:
        connection_id = uuid.uuid4().hex[:12]

    connection_id_var.set(connection_id)
    return connection_id


def get_connection_id() -> Optional[str]:
    """Return the current connection id, if any."""
    return connection_id_var.get()


def _parse_size(size_str: str) -> int:
    """
    Parse size string to bytes.

    Args:
        size_str: Size string (e.g., "10MB", "1GB")

    Returns:
        Size in bytes

    Raises:
        ConfigurationError: If size format is invalid
    """
    size_str = str(size_str).upper().strip()

    # Longest suffixes first so that "MB" is not read as "B"
    size_units = [
        ('TB', 1024 ** 4),
        ('GB', 1024 ** 3),
        ('MB', 1024 ** 2),
        ('KB', 1024),
        ('B', 1),
    ]

    for unit, multiplier in size_units:
        if size_str.endswith(unit):
            try:
                return int(float(size_str[:-len(unit)]) * multiplier)
            except ValueError:
                break

    try:
        return int(size_str)
    except ValueError:
        raise ConfigurationError(
            f"Invalid size format: {size_str}. Expected formats: 100MB, 1GB, etc.",
            config_key="max_file_size",
            config_value=size_str
        )


class ConnectionLogContext:
    """
    Context manager scoping the connection id for log records.

    Restores the previous id on exit, so nested host callbacks keep their
    own connection id.
    """

    def __init__(self, connection_id: Optional[str] = None):
        self.connection_id = connection_id
        self._token: Optional[contextvars.Token] = None

    def __enter__(self) -> Optional[str]:
        """Enter logging context."""
        if self.connection_id is not None:
            self._token = connection_id_var.set(self.connection_id)
        return self.connection_id

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit logging context."""
        if self._token is not None:
            connection_id_var.reset(self._token)
            self._token = None


def connection_context(connection_id: Optional[str] = None) -> ConnectionLogContext:
    """
    Create a logging context manager for one connection.

    Args:
        connection_id: Connection id to tag records with; None leaves the
            current id untouched

    Returns:
        ConnectionLogContext instance
    """
    return ConnectionLogContext(connection_id)
