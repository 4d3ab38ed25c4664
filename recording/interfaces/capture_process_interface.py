"""
Capture Process Interface

Abstract interface for a running capture-tool process and for the
launcher that spawns it.

High-level code (SessionSupervisor) depends on these abstractions, not on
subprocess directly, so the whole lifecycle can be exercised with
MockCaptureProcess in tests.
"""

from abc import ABC, abstractmethod
from typing import Iterator, Optional

from recording.models.capture_models import CommandSpec


class CaptureProcessInterface(ABC):
    """
    Abstract base class for one running capture process.

    Exit detection is done by whoever calls wait(); implementations must
    make wait() safe to call from a background thread while the other
    methods are called from elsewhere.
    """

    @property
    @abstractmethod
    def pid(self) -> Optional[int]:
        """OS process id (None if unknown)"""

    @property
    @abstractmethod
    def is_shell(self) -> bool:
        """
        True if the capture tool runs under a shell wrapper.

        The wrapper owns the pid; the capture tool is its child, so a stop
        has to reach the whole tree.
        """

    @abstractmethod
    def poll(self) -> Optional[int]:
        """
        Check whether the process has exited.

        Returns:
            Return code, or None if still running
        """

    @abstractmethod
    def wait(self, timeout: Optional[float] = None) -> Optional[int]:
        """
        Block until the process exits.

        Args:
            timeout: Seconds to wait, None for forever

        Returns:
            Return code, or None if the timeout expired
        """

    @abstractmethod
    def iter_stderr(self) -> Iterator[str]:
        """
        Yield diagnostic output line by line until the stream closes.

        Lines are decoded text without the trailing newline.
        """

    @abstractmethod
    def write_stdin(self, data: bytes) -> bool:
        """
        Write to the process's stdin (graceful-quit token).

        Returns:
            True if the write went through, False if stdin is closed
        """

    @abstractmethod
    def terminate(self) -> None:
        """Ask the process to stop (SIGTERM / TerminateProcess)."""

    @abstractmethod
    def kill(self) -> None:
        """Kill the process itself, unconditionally."""

    @abstractmethod
    def kill_tree(self) -> None:
        """Kill the process and every descendant, unconditionally."""


class ProcessLauncherInterface(ABC):
    """
    Abstract base class for spawning capture processes.

    Usage:
        launcher = RecordingFactory.create_launcher(mode="mock")
        process = launcher.launch(command)
    """

    @abstractmethod
    def launch(self, command: CommandSpec) -> CaptureProcessInterface:
        """
        Spawn the capture tool.

        Args:
            command: Built command (argument vector or shell string)

        Returns:
            Handle to the running process

        Raises:
            SpawnFailureError: If the process could not be started at all
        """

    def is_available(self) -> bool:
        """Check that the capture tool can be launched. Default: assume yes."""
        return True


# Exception classes for capture errors
class CaptureError(Exception):
    """Base exception for capture-related errors"""


class InvalidRequestError(CaptureError):
    """Request is missing a required field or has an out-of-range value"""


class SpawnFailureError(CaptureError):
    """The capture process could not be started"""

