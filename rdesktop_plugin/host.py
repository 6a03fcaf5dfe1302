"""
Interfaces of the host connection manager.

The host application owns the widget toolkit, profile storage and plugin
loading. The plugin only talks to it through the abstractions below.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from .profile import ConnectionProfile


PLUG_ADDED = "plug-added"
PLUG_REMOVED = "plug-removed"

SIGNAL_CONNECT = "connect"
SIGNAL_DISCONNECT = "disconnect"


class EmbeddingSurface(ABC):
    """
    Window-embedding primitive (an X11 socket in GTK terms).

    A foreign process reparents its window into the surface by id; the
    surface then fires ``plug-added``, and ``plug-removed`` when that
    window goes away. Handlers are called as ``handler(surface)``.
    """

    @abstractmethod
    def get_id(self) -> int:
        """Return the windowing-system id of the realized surface."""

    @abstractmethod
    def show(self) -> None:
        """Make the surface visible."""

    @abstractmethod
    def connect(self, event: str, handler: Callable[['EmbeddingSurface'], None]) -> Any:
        """Subscribe ``handler`` to ``event``."""


class ProtocolWidget(ABC):
    """Host widget representing one open connection."""

    @abstractmethod
    def get_plugin_data(self) -> Optional[Any]:
        """Return the per-connection data the plugin attached, if any."""

    @abstractmethod
    def set_plugin_data(self, data: Any) -> None:
        """Attach per-connection plugin data; released with the widget."""

    @abstractmethod
    def add_surface(self, surface: EmbeddingSurface) -> None:
        """Pack an embedding surface into the widget."""

    @abstractmethod
    def set_size_request(self, width: int, height: int) -> None:
        """Request a minimum size for the widget."""


class PluginService(ABC):
    """
    Services the host offers to protocol plugins.

    Passed to the plugin at construction; every host notification goes
    through it.
    """

    @abstractmethod
    def register_plugin(self, plugin: Any) -> bool:
        """Register a plugin with the host. Returns False when refused."""

    @abstractmethod
    def get_profile(self, widget: ProtocolWidget) -> ConnectionProfile:
        """Return the connection profile behind ``widget``."""

    @abstractmethod
    def emit_signal(self, widget: ProtocolWidget, signal: str) -> None:
        """Emit a protocol signal such as ``connect`` or ``disconnect``."""

    @abstractmethod
    def close_connection(self, widget: ProtocolWidget) -> None:
        """Ask the host to tear the connection down."""

    @abstractmethod
    def set_error(self, widget: ProtocolWidget, message: str) -> None:
        """Record the connection's error message for display."""

    @abstractmethod
    def register_hostkey(self, widget: ProtocolWidget, surface: EmbeddingSurface) -> None:
        """Route the host key combination through ``surface``."""

    @abstractmethod
    def set_size(self, widget: ProtocolWidget, width: int, height: int) -> None:
        """Tell the host the remote desktop size."""


SurfaceFactory = Callable[[], EmbeddingSurface]
