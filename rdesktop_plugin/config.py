"""
Configuration management for the rdesktop protocol plugin.

This module provides configuration classes with validation for the plugin
itself: which client executable to launch, the size of the embedding area
and the logging setup. Per-connection options live in connection profiles,
not here.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, Any, Optional, Union
from pathlib import Path

import yaml
from dotenv import load_dotenv

from .exceptions import ConfigurationError


ENV_PREFIX = "RDESKTOP_PLUGIN_"


def _coerce_bool(value: Union[str, bool]) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ClientConfig:
    """
    External client settings.

    Defines the rdesktop executable to launch, the size requested for the
    embedding area and the fallback session geometry.
    """

    executable: str = "rdesktop"

    # Size requested for the host widget while the client window is embedded
    embed_width: int = 640
    embed_height: int = 480

    # Geometry used when the profile carries no resolution
    default_width: int = 1024
    default_height: int = 768

    redact_password_in_logs: bool = True

    def __post_init__(self) -> None:
        """Validate client configuration after initialization."""
        if not self.executable or not str(self.executable).strip():
            raise ConfigurationError(
                "Client executable must not be empty",
                config_key="executable",
                config_value=self.executable
            )

        for key in ("embed_width", "embed_height", "default_width", "default_height"):
            raw = getattr(self, key)
            try:
                value = int(raw)
            except (TypeError, ValueError) as e:
                raise ConfigurationError(
                    f"{key} must be an integer",
                    config_key=key,
                    config_value=raw
                ) from e
            if value <= 0:
                raise ConfigurationError(
                    f"{key} must be a positive number of pixels",
                    config_key=key,
                    config_value=value
                )
            setattr(self, key, value)

        self.redact_password_in_logs = _coerce_bool(self.redact_password_in_logs)


@dataclass
class LoggingConfig:
    """
    Logging configuration settings.

    Defines log levels, output destinations, and structured logging
    configuration.
    """

    level: str = "INFO"
    format: str = "text"  # json or text
    output: str = "console"  # console, file, or both
    file_path: Optional[str] = None
    max_file_size: str = "10MB"
    backup_count: int = 3
    include_caller_info: bool = False

    def __post_init__(self) -> None:
        """Validate logging configuration after initialization."""
        self.level = str(self.level).upper()
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.level not in valid_levels:
            raise ConfigurationError(
                f"Log level must be one of {valid_levels}",
                config_key="level",
                config_value=self.level
            )

        if self.format not in ["json", "text"]:
            raise ConfigurationError(
                "Log format must be 'json' or 'text'",
                config_key="format",
                config_value=self.format
            )

        if self.output not in ["console", "file", "both"]:
            raise ConfigurationError(
                "Log output must be 'console', 'file' or 'both'",
                config_key="output",
                config_value=self.output
            )

        if self.output in ["file", "both"] and not self.file_path:
            raise ConfigurationError(
                f"file_path is required when output is set to '{self.output}'",
                config_key="file_path"
            )

        self.backup_count = int(self.backup_count)
        self.include_caller_info = _coerce_bool(self.include_caller_info)


@dataclass
class PluginConfig:
    """
    Main configuration class for the rdesktop plugin.

    Combines all configuration sections and provides methods for loading
    configuration from files, environment variables, and validation.
    """

    client: ClientConfig = field(default_factory=ClientConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> 'PluginConfig':
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            PluginConfig instance with loaded configuration

        Raises:
            ConfigurationError: If file cannot be read or parsed
        """
        path = Path(config_path)
        if not path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {config_path}",
                config_key="config_path",
                config_value=str(config_path)
            )

        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Failed to parse YAML configuration: {e}",
                config_key="yaml_parsing"
            ) from e
        except OSError as e:
            raise ConfigurationError(
                f"Failed to load configuration file: {e}",
                config_key="file_loading"
            ) from e

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PluginConfig':
        """
        Create configuration from dictionary.

        Args:
            data: Configuration dictionary keyed by section name

        Returns:
            PluginConfig instance

        Raises:
            ConfigurationError: If a section is malformed
        """
        if not isinstance(data, dict):
            raise ConfigurationError(
                "Configuration root must be a mapping",
                config_key="root",
                config_value=type(data).__name__
            )

        sections = {'client': ClientConfig, 'logging': LoggingConfig}
        kwargs = {}
        for name, section_cls in sections.items():
            section = data.get(name) or {}
            if not isinstance(section, dict):
                raise ConfigurationError(
                    f"Configuration section '{name}' must be a mapping",
                    config_key=name
                )
            try:
                kwargs[name] = section_cls(**section)
            except TypeError as e:
                raise ConfigurationError(
                    f"Unknown option in section '{name}': {e}",
                    config_key=name
                ) from e

        return cls(**kwargs)

    @classmethod
    def from_dotenv(cls, dotenv_path: Optional[Union[str, Path]] = None) -> 'PluginConfig':
        """
        Load configuration from .env file.

        Args:
            dotenv_path: Path to .env file. If None, looks for .env in current directory

        Returns:
            PluginConfig instance with .env-based configuration

        Raises:
            ConfigurationError: If the file does not exist
        """
        if dotenv_path is None:
            dotenv_path = Path.cwd() / '.env'
        else:
            dotenv_path = Path(dotenv_path)

        if not dotenv_path.exists():
            raise ConfigurationError(
                f".env file not found: {dotenv_path}",
                config_key="dotenv_path",
                config_value=str(dotenv_path)
            )

        load_dotenv(dotenv_path)

        return cls.from_environment()

    @classmethod
    def from_environment(cls) -> 'PluginConfig':
        """
        Create configuration from environment variables.

        Environment variables should be prefixed with 'RDESKTOP_PLUGIN_'
        and use double underscores for nested configuration.

        Examples:
            RDESKTOP_PLUGIN_CLIENT__EXECUTABLE=/opt/rdesktop/bin/rdesktop
            RDESKTOP_PLUGIN_LOGGING__LEVEL=DEBUG

        Returns:
            PluginConfig instance with environment-based configuration
        """
        data: Dict[str, Dict[str, str]] = {}

        for key, value in os.environ.items():
            if key.startswith(ENV_PREFIX):
                config_key = key[len(ENV_PREFIX):]
                if '__' in config_key:
                    section, option = config_key.split('__', 1)
                    data.setdefault(section.lower(), {})[option.lower()] = value

        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert configuration to dictionary.

        Returns:
            Dictionary representation of configuration
        """
        return {
            'client': dict(self.client.__dict__),
            'logging': dict(self.logging.__dict__)
        }
