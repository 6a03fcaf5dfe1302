"""
Per-connection session state.

One SessionState is attached to each host widget by ``init`` and lives as
long as the widget does.
"""

import subprocess
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from .host import EmbeddingSurface


class SessionPhase(Enum):
    """Lifecycle phases of a single connection."""
    CREATED = "created"
    INITIALIZED = "initialized"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    CLOSED = "closed"


@dataclass
class SessionState:
    """
    State of one rdesktop connection.

    ``socket_id`` is only assigned in embedded mode, when
    ``open_connection`` reads it from the realized surface.
    """

    connection_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    phase: SessionPhase = SessionPhase.CREATED
    detached: bool = False

    surface: Optional[EmbeddingSurface] = None
    socket_id: Optional[int] = None

    process: Optional[subprocess.Popen] = None
    pid: Optional[int] = None

    ready: bool = False
    close_requested: bool = False
    disconnected: bool = False
    error_message: Optional[str] = None

    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    connected_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None

    def advance(self, phase: SessionPhase) -> None:
        """Move to ``phase``, stamping the connect and close times."""
        self.phase = phase
        if phase is SessionPhase.CONNECTED and self.connected_at is None:
            self.connected_at = datetime.now(timezone.utc)
        elif phase is SessionPhase.CLOSED and self.closed_at is None:
            self.closed_at = datetime.now(timezone.utc)

    @property
    def is_closed(self) -> bool:
        return self.phase is SessionPhase.CLOSED

    def process_running(self) -> bool:
        """Check whether the spawned client is still alive, without blocking."""
        if self.process is None:
            return False
        return self.process.poll() is None

    def to_dict(self) -> Dict[str, Any]:
        """Convert session state to dictionary."""
        return {
            "connection_id": self.connection_id,
            "phase": self.phase.value,
            "detached": self.detached,
            "socket_id": self.socket_id,
            "pid": self.pid,
            "ready": self.ready,
            "error_message": self.error_message,
            "created_at": self.created_at.isoformat(),
            "connected_at": self.connected_at.isoformat() if self.connected_at else None,
            "closed_at": self.closed_at.isoformat() if self.closed_at else None,
        }
