"""
Mock Capture Process Implementation

Simulated capture processes for testing without ffmpeg.

This is a "Fake" (test double): processes have real exit/stderr/stdin
behaviour driven by threading primitives, but nothing is spawned. Tests
either script each launch up front (MockRun) or drive the process by hand
through the simulate_* methods.
"""

import itertools
import logging
import queue
import signal
import threading
import time
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence

from config.settings import GRACEFUL_QUIT_TOKEN
from recording.interfaces.capture_process_interface import (
    CaptureProcessInterface,
    ProcessLauncherInterface,
    SpawnFailureError,
)
from recording.models.capture_models import CommandSpec

_STDERR_CLOSED = object()
_pids = itertools.count(40000)


@dataclass
class MockRun:
    """
    Script for one launched process.

    Attributes:
        exit_code: Exit right after launch with this code (None = keep
                   running until stopped or simulate_exit() is called)
        stderr_lines: Lines emitted on stderr right after launch
        output_bytes: Size of the output file written when the process
                      finishes on its own or honours a quit request
        responsive: If False, ignores the quit token and terminate();
                    only kill()/kill_tree() end it
        quit_exit_code: Exit code after honouring the quit token
        kill_exit_code: Exit code after kill()/kill_tree()
        kill_tree_delay: Seconds kill_tree() blocks before the tree is gone
    """

    exit_code: Optional[int] = None
    stderr_lines: Sequence[str] = ()
    output_bytes: int = 0
    responsive: bool = True
    quit_exit_code: int = 0
    kill_exit_code: int = -signal.SIGKILL
    kill_tree_delay: float = 0.0


class MockCaptureProcess(CaptureProcessInterface):
    """
    Mock capture process for testing.

    Usage:
        process = MockCaptureProcess(command, MockRun(output_bytes=4096))
        process.simulate_stderr("frame=  100 fps=30")
        process.write_stdin(b"q")   # writes 4096 bytes, exits with 0
    """

    def __init__(self, command: CommandSpec, run: Optional[MockRun] = None):
        self.logger = logging.getLogger(__name__)
        self.command = command
        self.run = run or MockRun()
        self._pid = next(_pids)

        self._returncode: Optional[int] = None
        self._exited = threading.Event()
        self._lock = threading.Lock()
        self._stderr: "queue.Queue" = queue.Queue()

        # Track calls for test assertions
        self.stdin_writes: List[bytes] = []
        self.terminate_calls = 0
        self.kill_calls = 0
        self.kill_tree_calls = 0

    # =========================================================================
    # INTERFACE
    # =========================================================================

    @property
    def pid(self) -> Optional[int]:
        return self._pid

    @property
    def is_shell(self) -> bool:
        return self.command.is_shell

    @property
    def returncode(self) -> Optional[int]:
        return self._returncode

    def poll(self) -> Optional[int]:
        return self._returncode

    def wait(self, timeout: Optional[float] = None) -> Optional[int]:
        self._exited.wait(timeout)
        return self._returncode

    def iter_stderr(self) -> Iterator[str]:
        while True:
            line = self._stderr.get()
            if line is _STDERR_CLOSED:
                return
            yield line

    def write_stdin(self, data: bytes) -> bool:
        if self._exited.is_set():
            return False

        self.stdin_writes.append(data)
        self.logger.debug(f"[MOCK] PID {self._pid} stdin <- {data!r}")

        if data.strip() == GRACEFUL_QUIT_TOKEN and self.run.responsive:
            self._write_output()
            self.simulate_exit(self.run.quit_exit_code)
        return True

    def terminate(self) -> None:
        self.terminate_calls += 1
        if self.run.responsive:
            self._write_output()
            self.simulate_exit(-signal.SIGTERM)

    def kill(self) -> None:
        self.kill_calls += 1
        self.simulate_exit(self.run.kill_exit_code)

    def kill_tree(self) -> None:
        self.kill_tree_calls += 1
        if self.run.kill_tree_delay:
            time.sleep(self.run.kill_tree_delay)
        self.simulate_exit(self.run.kill_exit_code)

    # =========================================================================
    # TEST HELPERS
    # =========================================================================

    def simulate_stderr(self, line: str) -> None:
        """Emit one diagnostic line."""
        if not self._exited.is_set():
            self._stderr.put(line)

    def simulate_output(self, size: int) -> None:
        """Write an output file of the given size (replaces any existing one)."""
        self.command.output_path.parent.mkdir(parents=True, exist_ok=True)
        self.command.output_path.write_bytes(b"\0" * size)

    def simulate_exit(self, returncode: int) -> None:
        """
        End the process. Only the first call has any effect.

        Closes stderr before marking the process as exited, like a real
        process whose pipes close when it dies.
        """
        with self._lock:
            if self._exited.is_set():
                return
            self._returncode = returncode
            self._stderr.put(_STDERR_CLOSED)
            self._exited.set()

        self.logger.info(f"[MOCK] PID {self._pid} exited with {returncode}")

    def is_running(self) -> bool:
        return not self._exited.is_set()

    def _write_output(self) -> None:
        if self.run.output_bytes and not self._exited.is_set():
            self.simulate_output(self.run.output_bytes)


class MockProcessLauncher(ProcessLauncherInterface):
    """
    Mock launcher for testing.

    Each launch consumes the next MockRun from the script; once the script
    is exhausted, default_run is used.

    Usage:
        launcher = MockProcessLauncher(runs=[
            MockRun(exit_code=1),
            MockRun(exit_code=1),
            MockRun(exit_code=0, output_bytes=4096),
        ])
        supervisor = SessionSupervisor(launcher=launcher, ...)
    """

    def __init__(
        self,
        runs: Optional[List[MockRun]] = None,
        default_run: Optional[MockRun] = None,
    ):
        self.logger = logging.getLogger(__name__)
        self._runs = list(runs or [])
        self.default_run = default_run or MockRun()

        self.commands: List[CommandSpec] = []
        self.processes: List[MockCaptureProcess] = []
        self._launched = threading.Condition()

        # Configuration for test scenarios
        self._spawn_error: Optional[str] = None
        self._available = True

    def launch(self, command: CommandSpec) -> CaptureProcessInterface:
        if self._spawn_error:
            self.logger.error(f"[MOCK] Simulated spawn failure: {self._spawn_error}")
            raise SpawnFailureError(self._spawn_error)

        run = self._runs.pop(0) if self._runs else self.default_run
        process = MockCaptureProcess(command, run)

        with self._launched:
            self.commands.append(command)
            self.processes.append(process)
            self._launched.notify_all()

        self.logger.info(
            f"[MOCK] Launched {command.label} (PID: {process.pid}) -> {command.output_path.name}"
        )

        for line in run.stderr_lines:
            process.simulate_stderr(line)

        if run.exit_code is not None:
            if run.output_bytes:
                process.simulate_output(run.output_bytes)
            process.simulate_exit(run.exit_code)

        return process

    def is_available(self) -> bool:
        return self._available

    # =========================================================================
    # TEST HELPERS
    # =========================================================================

    @property
    def last_process(self) -> Optional[MockCaptureProcess]:
        return self.processes[-1] if self.processes else None

    @property
    def launch_count(self) -> int:
        return len(self.processes)

    def wait_for_launches(self, count: int, timeout: float = 5.0) -> bool:
        """Block until at least `count` processes were launched."""
        with self._launched:
            return self._launched.wait_for(lambda: len(self.processes) >= count, timeout)

    def simulate_spawn_failure(self, message: str = "ffmpeg: command not found") -> None:
        """Make every following launch() raise SpawnFailureError."""
        self._spawn_error = message

    def simulate_unavailable(self) -> None:
        self._available = False

    def reset_test_config(self) -> None:
        self._spawn_error = None
        self._available = True
