"""
FFmpeg Capture Process

Real capture process using subprocess.

Direct commands (desktop, window, region) are spawned from an argument
vector. Camera commands are one composed string run through the shell,
because dshow device names with spaces, parentheses or accents do not
survive as separate arguments.

Every process is started in its own session / process group so a stop can
reach the capture tool even when a shell wrapper owns the pid.
"""

import io
import logging
import os
import shutil
import signal
import subprocess
import threading
from typing import Iterator, Optional

import psutil

from config.settings import FFMPEG_PATH
from recording.interfaces.capture_process_interface import (
    CaptureProcessInterface,
    ProcessLauncherInterface,
    SpawnFailureError,
)
from recording.models.capture_models import CommandSpec

logger = logging.getLogger(__name__)


def kill_process_tree(pid: int, timeout: float = 5.0, include_parent: bool = True) -> None:
    """
    Kill a process and all its children.

    Children are killed first so the shell cannot respawn or orphan them.
    Falls back to taskkill /T on Windows or the process group on POSIX if
    psutil cannot walk the tree.

    Args:
        pid: Root of the tree
        timeout: Seconds to wait for the processes to disappear
        include_parent: Also kill pid itself. Pass False when the caller
                        owns pid through Popen and must reap it there.
    """
    try:
        parent = psutil.Process(pid)
        children = parent.children(recursive=True)
        for child in children:
            try:
                child.kill()
            except psutil.NoSuchProcess:
                pass
        victims = list(children)
        if include_parent:
            try:
                parent.kill()
            except psutil.NoSuchProcess:
                pass
            victims.append(parent)

        gone, alive = psutil.wait_procs(victims, timeout=timeout)
        if alive:
            logger.warning(f"Processes still alive after tree kill: {[p.pid for p in alive]}")
        else:
            logger.info(f"Killed process tree for PID {pid} ({len(children)} children)")

    except psutil.NoSuchProcess:
        logger.debug(f"Process {pid} already gone")

    except psutil.Error as e:
        logger.warning(f"psutil tree kill failed for PID {pid}: {e}")
        _kill_process_tree_fallback(pid)


def _kill_process_tree_fallback(pid: int) -> None:
    """Tree kill through the operating system's own tools."""
    if os.name == "nt":
        result = subprocess.run(
            ["taskkill", "/F", "/T", "/PID", str(pid)],
            capture_output=True,
            text=True,
            timeout=10,
        )
        if result.returncode == 0:
            logger.info(f"Killed process tree for PID {pid}")
        elif "not found" not in result.stderr.lower():
            logger.warning(f"taskkill returned {result.returncode}: {result.stderr.strip()}")
        return

    try:
        os.killpg(os.getpgid(pid), signal.SIGKILL)
    except ProcessLookupError:
        logger.debug(f"Process group of {pid} already gone")


class FFmpegProcess(CaptureProcessInterface):
    """
    Handle to a running capture tool.

    Usage:
        process = FFmpegLauncher().launch(command)
        for line in process.iter_stderr():
            ...
        process.write_stdin(b"q")
        process.wait(timeout=3.0)
    """

    def __init__(self, popen: subprocess.Popen, shell: bool):
        self.logger = logging.getLogger(__name__)
        self._popen = popen
        self._shell = shell
        self._stdin_lock = threading.Lock()

    @property
    def pid(self) -> Optional[int]:
        return self._popen.pid

    @property
    def is_shell(self) -> bool:
        return self._shell

    def poll(self) -> Optional[int]:
        return self._popen.poll()

    def wait(self, timeout: Optional[float] = None) -> Optional[int]:
        try:
            return self._popen.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            return None

    def iter_stderr(self) -> Iterator[str]:
        """
        Yield stderr lines.

        ffmpeg rewrites its progress line with carriage returns; universal
        newline decoding turns each update into its own line.
        """
        if self._popen.stderr is None:
            return

        stream = io.TextIOWrapper(self._popen.stderr, encoding="utf-8", errors="replace")
        try:
            for line in stream:
                line = line.rstrip()
                if line:
                    yield line
        except (OSError, ValueError) as e:
            # Stream closed underneath us while the process was killed
            self.logger.debug(f"stderr reader stopped: {e}")

    def write_stdin(self, data: bytes) -> bool:
        with self._stdin_lock:
            stdin = self._popen.stdin
            if stdin is None or stdin.closed:
                return False
            try:
                stdin.write(data)
                stdin.flush()
                return True
            except (BrokenPipeError, OSError, ValueError) as e:
                self.logger.debug(f"Could not write to stdin of PID {self.pid}: {e}")
                return False

    def terminate(self) -> None:
        if self._popen.poll() is None:
            self._popen.terminate()

    def kill(self) -> None:
        if self._popen.poll() is None:
            self._popen.kill()

    def kill_tree(self) -> None:
        if self._popen.poll() is None:
            kill_process_tree(self._popen.pid, include_parent=False)
            self.kill()


class FFmpegLauncher(ProcessLauncherInterface):
    """
    Spawns the capture tool.

    Usage:
        launcher = FFmpegLauncher()
        if launcher.is_available():
            process = launcher.launch(command)
    """

    def __init__(self, ffmpeg_path: str = FFMPEG_PATH):
        """
        Initialize launcher.

        Args:
            ffmpeg_path: Capture tool executable, used for availability
                         checks (commands carry their own executable)
        """
        self.logger = logging.getLogger(__name__)
        self.ffmpeg_path = ffmpeg_path

    def launch(self, command: CommandSpec) -> CaptureProcessInterface:
        self.logger.info(f"Spawning {command.label}: {command.display()}")

        popen_kwargs = {
            "stdin": subprocess.PIPE,
            "stdout": subprocess.DEVNULL,
            "stderr": subprocess.PIPE,
        }
        if os.name == "nt":
            popen_kwargs["creationflags"] = subprocess.CREATE_NEW_PROCESS_GROUP
        else:
            popen_kwargs["start_new_session"] = True

        try:
            if command.is_shell:
                popen = subprocess.Popen(command.shell_command, shell=True, **popen_kwargs)
            else:
                popen = subprocess.Popen(command.args, **popen_kwargs)
        except FileNotFoundError as e:
            raise SpawnFailureError(
                f"Capture tool not found ({e}). Install FFmpeg and add it to PATH."
            ) from e
        except PermissionError as e:
            raise SpawnFailureError(f"Not allowed to run capture tool: {e}") from e
        except OSError as e:
            raise SpawnFailureError(f"Failed to start capture tool: {e}") from e

        self.logger.info(f"Capture process started (PID: {popen.pid})")
        return FFmpegProcess(popen, shell=command.is_shell)

    def is_available(self) -> bool:
        if os.path.isabs(self.ffmpeg_path):
            return os.access(self.ffmpeg_path, os.X_OK)
        return shutil.which(self.ffmpeg_path) is not None
