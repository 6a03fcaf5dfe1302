"""
rdesktop protocol plugin for remote-desktop connection managers.

Translates a stored connection profile into an rdesktop command line,
launches the client and embeds its window into the host's connection
widget.

Key Components:
- Argument Builder: profile options to rdesktop flags
- Process Launcher: spawns the client without a shell
- Lifecycle Bridge: forwards plug and close events to the host

License: GPL-2.0-or-later
"""

from typing import Dict, Any

__version__ = "1.0.0"

from .arguments import build_arguments, redact_arguments
from .config import PluginConfig, ClientConfig, LoggingConfig
from .exceptions import (
    RdesktopPluginException,
    SpawnError,
    ProfileError,
    SessionStateError,
    ConfigurationError
)
from .host import EmbeddingSurface, PluginService, ProtocolWidget
from .launcher import LaunchResult, ProcessLauncher
from .plugin import PluginMetadata, ProtocolPlugin, RdesktopPlugin, plugin_entry
from .profile import ConnectionProfile
from .session import SessionPhase, SessionState
from .settings import ADVANCED_SETTINGS, BASIC_SETTINGS, ProtocolSetting, SettingType

__all__ = [
    # Core Components
    "RdesktopPlugin",
    "ProtocolPlugin",
    "ProcessLauncher",
    "build_arguments",
    "redact_arguments",
    "plugin_entry",

    # Host Interfaces
    "PluginService",
    "ProtocolWidget",
    "EmbeddingSurface",

    # Data Models
    "ConnectionProfile",
    "SessionState",
    "SessionPhase",
    "LaunchResult",
    "PluginMetadata",
    "ProtocolSetting",
    "SettingType",
    "BASIC_SETTINGS",
    "ADVANCED_SETTINGS",

    # Configuration
    "PluginConfig",
    "ClientConfig",
    "LoggingConfig",

    # Exceptions
    "RdesktopPluginException",
    "SpawnError",
    "ProfileError",
    "SessionStateError",
    "ConfigurationError",
]

PLUGIN_INFO: Dict[str, Any] = {
    "name": "rdesktop-plugin",
    "version": __version__,
    "description": "RDP protocol plugin driving the rdesktop client",
    "client": "rdesktop",
    "plugin_type": "protocol",
}
