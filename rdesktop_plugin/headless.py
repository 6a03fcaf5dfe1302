"""
Headless host implementation.

Lets the plugin run without a GUI host, e.g. from the command line. There
is no widget toolkit here, so only detached sessions can be opened.
"""

from typing import Any, Dict, List, Optional, Tuple

from .host import EmbeddingSurface, PluginService, ProtocolWidget
from .logging import get_logger
from .profile import ConnectionProfile


logger = get_logger(__name__)


class HeadlessWidget(ProtocolWidget):
    """Connection widget holding a profile and nothing drawable."""

    def __init__(self, profile: ConnectionProfile):
        self.profile = profile
        self.plugin_data: Optional[Any] = None
        self.surfaces: List[EmbeddingSurface] = []
        self.size_request: Optional[Tuple[int, int]] = None

    def get_plugin_data(self) -> Optional[Any]:
        return self.plugin_data

    def set_plugin_data(self, data: Any) -> None:
        self.plugin_data = data

    def add_surface(self, surface: EmbeddingSurface) -> None:
        self.surfaces.append(surface)

    def set_size_request(self, width: int, height: int) -> None:
        self.size_request = (width, height)


class HeadlessPluginService(PluginService):
    """
    Plugin service that logs host notifications and keeps them for
    inspection.
    """

    def __init__(self) -> None:
        self.plugins: List[Any] = []
        self.signals: List[Tuple[HeadlessWidget, str]] = []
        self.errors: Dict[int, str] = {}
        self.close_requests: int = 0
        self.sizes: Dict[int, Tuple[int, int]] = {}

    def register_plugin(self, plugin: Any) -> bool:
        self.plugins.append(plugin)
        return True

    def get_profile(self, widget: ProtocolWidget) -> ConnectionProfile:
        if not isinstance(widget, HeadlessWidget):
            raise TypeError(f"Unsupported widget type: {type(widget).__name__}")
        return widget.profile

    def emit_signal(self, widget: ProtocolWidget, signal: str) -> None:
        logger.info(f"Signal: {signal}")
        self.signals.append((widget, signal))

    def close_connection(self, widget: ProtocolWidget) -> None:
        logger.info("Close requested")
        self.close_requests += 1
        for plugin in self.plugins:
            plugin.close_connection(widget)

    def set_error(self, widget: ProtocolWidget, message: str) -> None:
        logger.error(f"Connection error: {message}")
        self.errors[id(widget)] = message

    def get_error(self, widget: ProtocolWidget) -> Optional[str]:
        return self.errors.get(id(widget))

    def register_hostkey(self, widget: ProtocolWidget, surface: EmbeddingSurface) -> None:
        logger.debug("Host key registration ignored in headless mode")

    def set_size(self, widget: ProtocolWidget, width: int, height: int) -> None:
        self.sizes[id(widget)] = (width, height)
