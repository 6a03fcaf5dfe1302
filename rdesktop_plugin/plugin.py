"""
rdesktop protocol plugin.

Implements the host's protocol plugin contract: ``init`` prepares the
embedding surface, ``open_connection`` launches rdesktop bound to it, and
the surface's plug events are forwarded to the host as connect and close
requests.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from . import __version__
from .arguments import build_arguments
from .config import ClientConfig
from .exceptions import ConfigurationError, SessionStateError, SpawnError
from .host import (
    PLUG_ADDED,
    PLUG_REMOVED,
    SIGNAL_CONNECT,
    SIGNAL_DISCONNECT,
    EmbeddingSurface,
    PluginService,
    ProtocolWidget,
    SurfaceFactory,
)
from .launcher import ProcessLauncher
from .logging import connection_context, get_logger
from .session import SessionPhase, SessionState
from .settings import ADVANCED_SETTINGS, BASIC_SETTINGS, ProtocolSetting


logger = get_logger(__name__)

PLUGIN_NAME = "RDESKTOP"
PLUGIN_DESCRIPTION = "RDP - rdesktop"
PLUGIN_APPICON = "remmina-rdp"
PLUGIN_DOMAIN = "remmina-plugin-rdesktop"


@dataclass(frozen=True)
class PluginMetadata:
    """Descriptive metadata the host shows for a protocol plugin."""
    name: str
    description: str
    version: str
    icon: str
    domain: str = ""
    plugin_type: str = "protocol"
    basic_settings: Tuple[ProtocolSetting, ...] = field(default_factory=tuple)
    advanced_settings: Tuple[ProtocolSetting, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        """Convert metadata to dictionary."""
        return {
            "name": self.name,
            "description": self.description,
            "version": self.version,
            "icon": self.icon,
            "domain": self.domain,
            "plugin_type": self.plugin_type,
            "basic_settings": [s.to_dict() for s in self.basic_settings],
            "advanced_settings": [s.to_dict() for s in self.advanced_settings],
        }


class ProtocolPlugin(ABC):
    """Contract every protocol plugin offers to the host."""

    @property
    @abstractmethod
    def metadata(self) -> PluginMetadata:
        """Plugin metadata and settings schema."""

    @abstractmethod
    def init(self, widget: ProtocolWidget) -> None:
        """Prepare a freshly created connection widget."""

    @abstractmethod
    def open_connection(self, widget: ProtocolWidget) -> bool:
        """
        Start the connection.

        Returns:
            True when the host should wait for further events on the widget
        """

    @abstractmethod
    def close_connection(self, widget: ProtocolWidget) -> bool:
        """Tear the connection down. Returns False to stop further propagation."""

    @abstractmethod
    def query_feature(self, widget: ProtocolWidget, feature: Any) -> bool:
        """Report whether ``feature`` is available."""

    @abstractmethod
    def call_feature(self, widget: ProtocolWidget, feature: Any) -> None:
        """Invoke ``feature``."""


class RdesktopPlugin(ProtocolPlugin):
    """
    Protocol plugin driving the rdesktop client.

    The host service is injected at construction and is the only channel
    used for host notifications. The embedding surface comes from
    ``surface_factory`` since the widget toolkit belongs to the host.
    """

    def __init__(
        self,
        service: PluginService,
        surface_factory: Optional[SurfaceFactory] = None,
        config: Optional[ClientConfig] = None,
        launcher: Optional[ProcessLauncher] = None
    ):
        self.service = service
        self.surface_factory = surface_factory
        self.config = config or ClientConfig()
        self.launcher = launcher or ProcessLauncher(
            redact_password=self.config.redact_password_in_logs
        )
        self._metadata = PluginMetadata(
            name=PLUGIN_NAME,
            description=PLUGIN_DESCRIPTION,
            version=__version__,
            icon=PLUGIN_APPICON,
            domain=PLUGIN_DOMAIN,
            basic_settings=BASIC_SETTINGS,
            advanced_settings=ADVANCED_SETTINGS,
        )

    @property
    def metadata(self) -> PluginMetadata:
        return self._metadata

    def _state(self, widget: ProtocolWidget, operation: str) -> SessionState:
        state = widget.get_plugin_data()
        if not isinstance(state, SessionState):
            raise SessionStateError(
                f"{operation} called on a widget that was not initialized",
                operation=operation
            )
        return state

    def init(self, widget: ProtocolWidget) -> None:
        """
        Attach session state to the widget and, unless the profile asks for
        a detached window, create and wire the embedding surface.

        Raises:
            ConfigurationError: If an embedded session is requested but no
                surface factory was supplied
        """
        profile = self.service.get_profile(widget)
        state = SessionState(detached=profile.get_bool("detached"))

        with connection_context(state.connection_id):
            logger.info(f"[{PLUGIN_NAME}] init", extra={'detached': state.detached})

            if not state.detached:
                if self.surface_factory is None:
                    raise ConfigurationError(
                        "An embedding surface factory is required for embedded sessions",
                        config_key="surface_factory"
                    )
                surface = self.surface_factory()
                state.surface = surface
                self.service.register_hostkey(widget, surface)
                surface.show()
                surface.connect(PLUG_ADDED, lambda _surface: self._on_plug_added(widget))
                surface.connect(PLUG_REMOVED, lambda _surface: self._on_plug_removed(widget))
                widget.add_surface(surface)

            widget.set_plugin_data(state)
            state.advance(SessionPhase.INITIALIZED)

    def open_connection(self, widget: ProtocolWidget) -> bool:
        """
        Launch rdesktop for the widget's profile.

        A spawn failure is reported through ``service.set_error`` and does
        not change the return value.

        Returns:
            True for embedded sessions, False for detached ones
        """
        state = self._state(widget, "open_connection")

        with connection_context(state.connection_id):
            logger.info(f"[{PLUGIN_NAME}] open_connection")
            profile = self.service.get_profile(widget)

            socket_id: Optional[int] = None
            if not state.detached:
                width, height = self.config.embed_width, self.config.embed_height
                self.service.set_size(widget, width, height)
                widget.set_size_request(width, height)
                state.socket_id = self._surface(state).get_id()
                socket_id = state.socket_id

            argv = build_arguments(
                profile,
                socket_id=socket_id,
                client=self.config.executable,
                default_width=self.config.default_width,
                default_height=self.config.default_height
            )
            state.advance(SessionPhase.CONNECTING)

            try:
                result = self.launcher.spawn(argv)
            except SpawnError as e:
                state.error_message = e.os_error
                self.service.set_error(widget, e.os_error)
            else:
                state.process = result.process
                state.pid = result.pid

            if state.detached:
                return False

            logger.info(f"[{PLUGIN_NAME}] attached window to socket {state.socket_id}")
            return True

    def _surface(self, state: SessionState) -> EmbeddingSurface:
        if state.surface is None:
            raise SessionStateError(
                "Embedded session has no embedding surface",
                operation="open_connection"
            )
        return state.surface

    def _on_plug_added(self, widget: ProtocolWidget) -> None:
        state = self._state(widget, "plug-added")

        with connection_context(state.connection_id):
            logger.info(f"[{PLUGIN_NAME}] plug added on socket {state.socket_id}")
            if state.ready or state.is_closed:
                return

            state.ready = True
            state.advance(SessionPhase.CONNECTED)
            self.service.emit_signal(widget, SIGNAL_CONNECT)

    def _on_plug_removed(self, widget: ProtocolWidget) -> None:
        state = self._state(widget, "plug-removed")

        with connection_context(state.connection_id):
            logger.info(f"[{PLUGIN_NAME}] plug removed")
            if state.close_requested:
                return

            state.close_requested = True
            state.advance(SessionPhase.CLOSED)
            self.service.close_connection(widget)

    def close_connection(self, widget: ProtocolWidget) -> bool:
        """
        Emit ``disconnect`` to the host.

        The rdesktop process is left alone; it exits on its own once its
        embedded window is destroyed. A client that already exited is
        reaped here with a non-blocking poll.
        """
        state = widget.get_plugin_data()
        if not isinstance(state, SessionState):
            logger.info(f"[{PLUGIN_NAME}] close_connection")
            self.service.emit_signal(widget, SIGNAL_DISCONNECT)
            return False

        with connection_context(state.connection_id):
            logger.info(f"[{PLUGIN_NAME}] close_connection", extra={'pid': state.pid})
            if state.process is not None and not state.process_running():
                logger.info(f"rdesktop pid {state.pid} exited with status {state.process.returncode}")
            if not state.disconnected:
                state.disconnected = True
                state.advance(SessionPhase.CLOSED)
                self.service.emit_signal(widget, SIGNAL_DISCONNECT)
        return False

    def query_feature(self, widget: ProtocolWidget, feature: Any) -> bool:
        logger.debug(f"[{PLUGIN_NAME}] query_feature")
        return False

    def call_feature(self, widget: ProtocolWidget, feature: Any) -> None:
        logger.debug(f"[{PLUGIN_NAME}] call_feature")


def plugin_entry(
    service: PluginService,
    surface_factory: Optional[SurfaceFactory] = None,
    config: Optional[ClientConfig] = None
) -> bool:
    """
    Host entry point: build the plugin and register it.

    Args:
        service: Host plugin service
        surface_factory: Creates embedding surfaces for embedded sessions
        config: Client settings; defaults apply when omitted

    Returns:
        Whatever the host's registration call returns
    """
    plugin = RdesktopPlugin(service, surface_factory=surface_factory, config=config)
    registered = bool(service.register_plugin(plugin))
    if registered:
        logger.info(f"[{PLUGIN_NAME}] registered", extra={'version': __version__})
    else:
        logger.warning(f"[{PLUGIN_NAME}] host refused registration")
    return registered
