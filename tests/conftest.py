"""
Pytest configuration and shared fixtures for the rdesktop plugin tests.

Provides stand-ins for the host: a mock plugin service, a widget that
stores plugin data, and an embedding surface whose events can be fired
by hand.
"""

import logging

import pytest
from typing import Any, Callable, Dict, List, Optional
from unittest.mock import Mock

from rdesktop_plugin.config import ClientConfig
from rdesktop_plugin.host import EmbeddingSurface, PluginService, ProtocolWidget
from rdesktop_plugin.launcher import LaunchResult, ProcessLauncher
from rdesktop_plugin.plugin import RdesktopPlugin
from rdesktop_plugin.profile import ConnectionProfile


class FakeSurface(EmbeddingSurface):
    """Embedding surface with a fixed id and manually fired events."""

    def __init__(self, surface_id: int = 4242):
        self.surface_id = surface_id
        self.shown = False
        self.handlers: Dict[str, List[Callable]] = {}

    def get_id(self) -> int:
        return self.surface_id

    def show(self) -> None:
        self.shown = True

    def connect(self, event: str, handler: Callable) -> int:
        self.handlers.setdefault(event, []).append(handler)
        return len(self.handlers[event])

    def fire(self, event: str) -> None:
        for handler in self.handlers.get(event, []):
            handler(self)


class FakeWidget(ProtocolWidget):
    """Connection widget carrying a profile."""

    def __init__(self, profile: ConnectionProfile):
        self.profile = profile
        self.data: Optional[Any] = None
        self.surfaces: List[EmbeddingSurface] = []
        self.size_request = None

    def get_plugin_data(self) -> Optional[Any]:
        return self.data

    def set_plugin_data(self, data: Any) -> None:
        self.data = data

    def add_surface(self, surface: EmbeddingSurface) -> None:
        self.surfaces.append(surface)

    def set_size_request(self, width: int, height: int) -> None:
        self.size_request = (width, height)


@pytest.fixture
def surface() -> FakeSurface:
    """Provide an embedding surface with id 4242."""
    return FakeSurface()


@pytest.fixture
def mock_service() -> Mock:
    """
    Provide a mock host plugin service.

    ``get_profile`` reads the profile off the fake widget, mirroring how
    a real host looks up the profile behind a connection widget.
    """
    service = Mock(spec=PluginService)
    service.get_profile.side_effect = lambda widget: widget.profile
    service.register_plugin.return_value = True
    return service


@pytest.fixture
def mock_process() -> Mock:
    """Provide a mock child process handle."""
    process = Mock()
    process.pid = 31337
    process.poll.return_value = None
    return process


@pytest.fixture
def mock_launcher(mock_process: Mock) -> Mock:
    """Provide a launcher that records argument vectors instead of spawning."""
    launcher = Mock(spec=ProcessLauncher)
    launcher.spawn.side_effect = lambda argv: LaunchResult(process=mock_process, argv=list(argv))
    return launcher


@pytest.fixture
def plugin(mock_service: Mock, surface: FakeSurface, mock_launcher: Mock) -> RdesktopPlugin:
    """Provide a plugin wired to the mock host and launcher."""
    return RdesktopPlugin(
        mock_service,
        surface_factory=lambda: surface,
        config=ClientConfig(),
        launcher=mock_launcher
    )


@pytest.fixture
def make_widget() -> Callable[..., FakeWidget]:
    """Factory building a widget from profile keyword options."""
    def _make(secrets: Optional[Dict[str, str]] = None, **values: Any) -> FakeWidget:
        return FakeWidget(ConnectionProfile(values, secrets))
    return _make


@pytest.fixture(autouse=True)
def reset_plugin_logger():
    """
    Undo setup_logging between tests.

    setup_logging stops propagation on the plugin logger, which would hide
    records from caplog in later tests.
    """
    yield
    plugin_logger = logging.getLogger("rdesktop_plugin")
    for handler in list(plugin_logger.handlers):
        plugin_logger.removeHandler(handler)
        handler.close()
    plugin_logger.propagate = True
    plugin_logger.setLevel(logging.NOTSET)
