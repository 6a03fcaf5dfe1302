"""
External client process launcher.

Starts rdesktop as an independent child process. The launcher never waits
for the child: once spawned, the embedding surface's plug events are the
only liveness signal the plugin follows.
"""

import subprocess
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .arguments import redact_arguments
from .exceptions import SpawnError
from .logging import get_logger


logger = get_logger(__name__)


@dataclass
class LaunchResult:
    """Outcome of a successful spawn."""
    process: subprocess.Popen
    argv: List[str]

    @property
    def pid(self) -> int:
        return self.process.pid


class ProcessLauncher:
    """
    Spawns the client binary, searching PATH and without a shell.

    ``redact_password`` controls whether the ``-p`` value is masked in the
    logged command line.
    """

    def __init__(self, redact_password: bool = True):
        self.redact_password = redact_password

    def spawn(self, argv: Sequence[str]) -> LaunchResult:
        """
        Start the client process.

        Args:
            argv: Full argument vector, executable first

        Returns:
            LaunchResult holding the process handle

        Raises:
            SpawnError: If the operating system could not start the process,
                or refused the argument vector (e.g. an embedded NUL byte)
        """
        command = list(argv)
        if not command:
            raise SpawnError("Empty command line", command=command, os_error="Empty command line")

        shown = redact_arguments(command) if self.redact_password else command
        logger.info(f"Starting {command[0]}", extra={'argv': shown})

        try:
            process = subprocess.Popen(command, shell=False)
        except (OSError, ValueError) as e:
            os_error = _describe_spawn_error(e, command[0])
            logger.error(f"Failed to start {command[0]}: {os_error}")
            raise SpawnError(
                f"Failed to start {command[0]}: {os_error}",
                command=command,
                os_error=os_error
            ) from e

        logger.info(f"Started {command[0]} with pid {process.pid}", extra={'pid': process.pid})
        return LaunchResult(process=process, argv=command)


def _describe_spawn_error(error: Exception, executable: str) -> str:
    """Render a spawn failure the way a user should read it."""
    if isinstance(error, OSError):
        reason: Optional[str] = error.strerror or None
    else:
        reason = str(error) or None
    if reason is None:
        return str(error)
    return f"Failed to execute child process \"{executable}\" ({reason})"
