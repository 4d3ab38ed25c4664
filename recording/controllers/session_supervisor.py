"""
Session Supervisor

Owns at most one capture session: builds the command, launches the
capture tool, watches it, drives the camera fallback ladder, stops it
(gracefully, then by force) and reports the outcome exactly once.

Threading model:
- start_recording() / stop_recording() / get_state() run on the caller's
  thread, take the supervisor lock and never wait on the process.
- Per attempt, a stderr reader thread and an exit waiter thread watch the
  process. They only post events.
- Timers (retry backoff, force-kill deadline, graceful-stop escalation)
  also only post events.
- One dispatcher thread consumes the event queue and performs every
  transition that follows a spawn. Events carry the session id and
  attempt index; events for an older session or attempt are dropped.

Lifecycle: IDLE -> STARTING -> RECORDING -> STOPPING -> TERMINATED
"""

import logging
import queue
import threading
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from config.recorder_config import RecorderConfig
from config.settings import GRACEFUL_QUIT_TOKEN, IO_ERROR_MARKERS
from recording.constants import (
    ExitOutcome,
    RecordingError,
    SessionState,
    SourceType,
    classify_exit,
    describe_exit,
    format_duration,
)
from recording.controllers.capture_session import CaptureSession
from recording.controllers.command_builder import CommandBuilder
from recording.controllers.completion_relay import CompletionCallback, CompletionRelay
from recording.interfaces.capture_process_interface import (
    CaptureProcessInterface,
    InvalidRequestError,
    ProcessLauncherInterface,
    SpawnFailureError,
)
from recording.models.capture_models import (
    CaptureRequest,
    CompletionResult,
    RecorderStatus,
    StartResult,
    StopResult,
)
from recording.utils.recording_utils import (
    file_has_content,
    generate_filename,
    get_file_size,
    is_valid_recording,
)
from region.controllers.region_negotiator import RegionNegotiator, validate_region
from region.interfaces.region_selector_interface import InvalidRegionError, RegionTooSmallError
from sources.controllers.device_catalog import DeviceCatalog
from timeline.interfaces.timeline_interface import TimelineInterface

# Seconds the exit waiter gives the stderr reader to drain after exit
STDERR_DRAIN_TIMEOUT = 2.0


class _EventType(Enum):
    IO_ERROR = "io_error"  # stderr matched an I/O error marker
    PROCESS_EXIT = "process_exit"  # process exited, stderr drained
    STOP = "stop"  # stop_recording() accepted, signal the process
    GRACEFUL_TIMEOUT = "graceful_timeout"  # quit token ignored, escalate
    FORCE_KILL = "force_kill"  # stop deadline passed
    RETRY = "retry"  # backoff over, launch next camera attempt
    SHUTDOWN = "shutdown"


@dataclass
class _Event:
    kind: _EventType
    session_id: int = 0
    attempt: int = 0
    returncode: Optional[int] = None
    detail: Optional[str] = None


class SessionSupervisor:
    """
    Recording lifecycle manager.

    Usage:
        supervisor = SessionSupervisor(launcher=FFmpegLauncher())
        supervisor.on_completion(lambda result: print(result.to_dict()))

        result = supervisor.start_recording(CaptureRequest(SourceType.DESKTOP))
        ...
        supervisor.stop_recording()
    """

    def __init__(
        self,
        launcher: ProcessLauncherInterface,
        builder: Optional[CommandBuilder] = None,
        catalog: Optional[DeviceCatalog] = None,
        region_negotiator: Optional[RegionNegotiator] = None,
        timeline: Optional[TimelineInterface] = None,
        config: Optional[RecorderConfig] = None,
    ):
        """
        Initialize supervisor.

        Args:
            launcher: Spawns capture processes (real or mock)
            builder: Command builder (default: built from config)
            catalog: Device catalog, used to pick a microphone for cameras
                     when the request names none
            region_negotiator: Interactive region picker for region requests
                               without a pre-selected rectangle
            timeline: Integration that receives successful recordings
            config: Timeouts, attempts and paths (default: RecorderConfig())
        """
        self.logger = logging.getLogger(__name__)

        self.config = config or RecorderConfig()
        self.launcher = launcher
        self.builder = builder or CommandBuilder(
            ffmpeg_path=self.config.ffmpeg_path,
            max_attempts=self.config.max_fallback_attempts,
            min_region_size=self.config.min_region_size,
        )
        self.catalog = catalog
        self.region_negotiator = region_negotiator
        self.timeline = timeline

        # Session state
        self._lock = threading.RLock()
        self._session: Optional[CaptureSession] = None
        self._next_session_id = 1
        self._listeners: List[CompletionCallback] = []

        # Tree kills queued by handlers, run after the lock is released
        self._deferred: List[Callable[[], None]] = []

        # Event dispatcher
        self._events: "queue.Queue[_Event]" = queue.Queue()
        self._dispatcher_running = True
        self._dispatcher = threading.Thread(
            target=self._dispatch_loop,
            daemon=True,
            name="SessionSupervisor-Dispatcher",
        )
        self._dispatcher.start()

        self.logger.info(
            f"Session Supervisor initialized "
            f"(recordings: {self.config.recordings_dir}, "
            f"attempts: {self.config.max_fallback_attempts}, "
            f"force kill: {self.config.force_kill_timeout}s)"
        )

    # =========================================================================
    # CALLER API
    # =========================================================================

    def on_completion(self, callback: CompletionCallback) -> None:
        """
        Register a callback for session outcomes.

        Called once per recording, on a background thread, after the
        timeline integration finished.
        """
        with self._lock:
            self._listeners.append(callback)

    def start_recording(self, request: Union[CaptureRequest, Dict[str, Any]]) -> StartResult:
        """
        Start a recording.

        Returns once the first capture process is running. Everything that
        happens after that is reported through on_completion().

        Args:
            request: CaptureRequest, or a mapping accepted by
                     CaptureRequest.from_dict()

        Returns:
            StartResult with the output path, or the error code
        """
        try:
            if not isinstance(request, CaptureRequest):
                request = CaptureRequest.from_dict(request)
        except (TypeError, ValueError) as e:
            return StartResult(success=False, error=RecordingError.INVALID_REQUEST, message=str(e))

        with self._lock:
            if self._session is not None and self._session.is_live:
                self.logger.warning(
                    f"Start rejected, session {self._session.session_id} is {self._session.state.value}"
                )
                return StartResult(
                    success=False,
                    error=RecordingError.ALREADY_RECORDING,
                    message="Recording already in progress",
                )

            session = CaptureSession(
                session_id=self._next_session_id,
                request=request,
                relay=CompletionRelay(
                    timeline=self.timeline,
                    listeners=self._listeners,
                    name=f"session-{self._next_session_id}",
                ),
            )
            self._next_session_id += 1
            session.state = SessionState.STARTING
            self._session = session

        self.logger.info(f"Starting {request.source_type.value} recording (session {session.session_id})")

        try:
            self._prepare_session(session)
            process = self.launcher.launch(session.current_command)

        except InvalidRequestError as e:
            return self._abort_start(session, RecordingError.INVALID_REQUEST, str(e))
        except InvalidRegionError as e:
            return self._abort_start(session, RecordingError.INVALID_REQUEST, str(e))
        except RegionTooSmallError as e:
            return self._abort_start(session, RecordingError.REGION_TOO_SMALL, str(e))
        except _RegionCancelled:
            return self._abort_start(
                session, RecordingError.REGION_CANCELLED, "Region selection cancelled"
            )
        except SpawnFailureError as e:
            return self._abort_start(session, RecordingError.SPAWN_FAILURE, str(e))
        except OSError as e:
            return self._abort_start(
                session, RecordingError.SPAWN_FAILURE, f"Cannot prepare recording: {e}"
            )

        with self._lock:
            self._attach_process(session, process)
            session.state = SessionState.RECORDING

        self.logger.info(f"Recording started: {session.base_output_path}")
        return StartResult(success=True, file_path=session.base_output_path)

    def stop_recording(self) -> StopResult:
        """
        Stop the current recording.

        Returns immediately; the process is signalled on the dispatcher
        thread and a force-kill deadline is armed. A second call while the
        first stop is in progress is rejected with NOT_RECORDING.

        Returns:
            StopResult
        """
        with self._lock:
            session = self._session
            if session is None or session.state != SessionState.RECORDING:
                return StopResult(
                    success=False,
                    error=RecordingError.NOT_RECORDING,
                    message="No recording in progress",
                )

            session.stop_requested = True
            session.state = SessionState.STOPPING
            self.logger.info(f"Stopping recording (session {session.session_id})")

            if session.process is None:
                # Between camera attempts: nothing to signal
                session.cancel_retry()
                self._finish(session, CompletionResult(
                    success=False,
                    error="Recording stopped before the camera started recording",
                    warning="Stopped by user",
                    error_code=RecordingError.PROCESS_RUNTIME_FAILURE,
                    attempts=session.launch_count,
                ))
                return StopResult(success=True)

            self._post(_Event(_EventType.STOP, session.session_id, session.attempt_index))

            session.force_kill_timer = self._schedule(
                self.config.force_kill_timeout,
                _Event(_EventType.FORCE_KILL, session.session_id, session.attempt_index),
            )

        return StopResult(success=True)

    def get_state(self) -> RecorderStatus:
        """Snapshot of the current recording"""
        with self._lock:
            session = self._session
            if session is None:
                return RecorderStatus(is_recording=False, state=SessionState.IDLE.value)

            live = session.is_live
            process = session.process
            return RecorderStatus(
                is_recording=live,
                current_recording_path=session.current_output_path if live else None,
                has_process=process is not None and process.poll() is None,
                state=session.state.value,
                attempt_index=session.attempt_index,
                details={
                    "session_id": session.session_id,
                    "source_type": session.request.source_type.value,
                    "elapsed": format_duration(session.get_elapsed_time()),
                    "stop_requested": session.stop_requested,
                },
            )

    @property
    def current_session(self) -> Optional[CaptureSession]:
        """Most recent session (live or terminated)"""
        return self._session

    def is_recording(self) -> bool:
        with self._lock:
            return self._session is not None and self._session.is_live

    def wait_for_completion(self, timeout: Optional[float] = None) -> Optional[CompletionResult]:
        """Block until the current session's result was delivered."""
        session = self._session
        if session is None:
            return None
        return session.wait_for_completion(timeout)

    def cleanup(self, timeout: float = 5.0) -> None:
        """
        Stop any recording and shut down the dispatcher.

        Args:
            timeout: Seconds to wait for the running session to finish
        """
        self.logger.info("Cleaning up Session Supervisor")

        if self.stop_recording().success:
            self.wait_for_completion(timeout)

        self._dispatcher_running = False
        self._post(_Event(_EventType.SHUTDOWN))
        self._dispatcher.join(timeout=timeout)

        self.logger.info("Session Supervisor cleanup complete")

    # =========================================================================
    # START HELPERS
    # =========================================================================

    def _prepare_session(self, session: CaptureSession) -> None:
        """Validate, resolve region and audio, build the command list."""
        request = session.request
        self.builder.validate_request(request)

        region = None
        if request.source_type == SourceType.REGION:
            region = self._resolve_region(request)
        elif request.region is not None and request.source_type == SourceType.DESKTOP:
            region = validate_region(request.region, self.config.min_region_size)

        audio_device = request.audio_device_name
        if not audio_device and request.source_type == SourceType.CAMERA and self.catalog:
            best = self.catalog.get_best_audio_device()
            if best is not None:
                audio_device = best.display_name
                self.logger.info(f"Adding audio device '{audio_device}' to camera recording")

        recordings_dir = self.config.recordings_dir
        recordings_dir.mkdir(parents=True, exist_ok=True)
        output_path = generate_filename(recordings_dir)

        if request.source_type == SourceType.CAMERA:
            commands = self.builder.build_fallback_ladder(request, output_path, audio_device)
        else:
            commands = [self.builder.build(request, output_path, region, audio_device)]

        with self._lock:
            session.base_output_path = output_path
            session.commands = commands

    def _resolve_region(self, request: CaptureRequest):
        if request.region is not None:
            return validate_region(request.region, self.config.min_region_size)

        if self.region_negotiator is None:
            raise InvalidRequestError("Region recording requires a region or a region selector")

        region = self.region_negotiator.select_region()
        if region is None:
            raise _RegionCancelled()
        return region

    def _abort_start(self, session: CaptureSession, error: RecordingError, message: str) -> StartResult:
        """Discard a session that never got a process."""
        if error == RecordingError.REGION_CANCELLED:
            self.logger.info(message)
        else:
            self.logger.error(f"Failed to start recording: {message}")

        with self._lock:
            session.state = SessionState.TERMINATED
            if self._session is session:
                self._session = None

        return StartResult(success=False, error=error, message=message)

    # =========================================================================
    # PROCESS MONITORING
    # =========================================================================

    def _attach_process(self, session: CaptureSession, process: CaptureProcessInterface) -> None:
        """Record the running process and start its watcher threads."""
        session.process = process
        session.launch_count += 1
        session.io_error_observed = False
        if session.started_at is None:
            session.started_at = time.time()

        attempt = session.attempt_index
        label = session.current_command.label

        reader = threading.Thread(
            target=self._read_stderr,
            args=(session.session_id, attempt, label, process),
            daemon=True,
            name=f"Capture-{session.session_id}.{attempt}-stderr",
        )
        waiter = threading.Thread(
            target=self._wait_for_exit,
            args=(session.session_id, attempt, process, reader),
            daemon=True,
            name=f"Capture-{session.session_id}.{attempt}-exit",
        )
        reader.start()
        waiter.start()

    def _read_stderr(
        self,
        session_id: int,
        attempt: int,
        label: str,
        process: CaptureProcessInterface,
    ) -> None:
        """Stderr reader thread: log lines, post the first I/O error marker."""
        markers = [marker.lower() for marker in IO_ERROR_MARKERS]
        reported = False

        for line in process.iter_stderr():
            self.logger.debug(f"[{label}] {line}")

            if not reported and any(marker in line.lower() for marker in markers):
                reported = True
                self._post(_Event(_EventType.IO_ERROR, session_id, attempt, detail=line))

    def _wait_for_exit(
        self,
        session_id: int,
        attempt: int,
        process: CaptureProcessInterface,
        reader: threading.Thread,
    ) -> None:
        """Exit waiter thread: post the exit once stderr is drained."""
        returncode = process.wait()
        reader.join(timeout=STDERR_DRAIN_TIMEOUT)
        self._post(_Event(_EventType.PROCESS_EXIT, session_id, attempt, returncode=returncode))

    # =========================================================================
    # DISPATCHER
    # =========================================================================

    def _post(self, event: _Event) -> None:
        self._events.put(event)

    def _schedule(self, delay: float, event: _Event) -> threading.Timer:
        timer = threading.Timer(delay, self._post, args=(event,))
        timer.daemon = True
        timer.start()
        return timer

    def _dispatch_loop(self) -> None:
        """Dispatcher thread: apply events one at a time."""
        self.logger.debug("Dispatcher thread started")

        while self._dispatcher_running:
            try:
                event = self._events.get(timeout=1.0)
            except queue.Empty:
                continue

            if event.kind == _EventType.SHUTDOWN:
                break

            try:
                self._handle_event(event)
            except Exception as e:
                # Never let the dispatcher die; the force-kill deadline
                # still guarantees a completion for stopped sessions
                self.logger.error(f"Error handling {event.kind.value} event: {e}", exc_info=True)

        self.logger.debug("Dispatcher thread stopped")

    def _handle_event(self, event: _Event) -> None:
        try:
            with self._lock:
                session = self._session
                if (
                    session is None
                    or session.session_id != event.session_id
                    or session.state == SessionState.TERMINATED
                    or session.attempt_index != event.attempt
                ):
                    self.logger.debug(f"Dropping stale {event.kind.value} event ({event})")
                    return

                handlers = {
                    _EventType.IO_ERROR: self._on_io_error,
                    _EventType.PROCESS_EXIT: self._on_process_exit,
                    _EventType.STOP: self._on_stop,
                    _EventType.GRACEFUL_TIMEOUT: self._on_graceful_timeout,
                    _EventType.FORCE_KILL: self._on_force_kill,
                    _EventType.RETRY: self._on_retry,
                }
                handlers[event.kind](session, event)
        finally:
            deferred, self._deferred = self._deferred, []
            for action in deferred:
                action()

    def _kill_tree_later(self, process: CaptureProcessInterface) -> None:
        """
        Kill a process tree once the current event is applied.

        A tree kill waits for the children to disappear; get_state() and
        stop_recording() must not block on that. The resulting exit still
        arrives as a PROCESS_EXIT event.
        """
        self._deferred.append(process.kill_tree)

    # =========================================================================
    # EVENT HANDLERS (dispatcher thread, lock held)
    # =========================================================================

    def _on_io_error(self, session: CaptureSession, event: _Event) -> None:
        session.io_error_observed = True
        label = session.current_command.label
        self.logger.warning(f"I/O error detected in {label}: {event.detail}")

        if session.is_camera and not session.stop_requested and session.process is not None:
            # The attempt is lost; end it now instead of waiting for ffmpeg
            self.logger.info(f"Abandoning {label}")
            self._kill_tree_later(session.process)

    def _on_stop(self, session: CaptureSession, event: _Event) -> None:
        process = session.process
        if process is None:
            return

        if process.is_shell:
            # The shell owns the pid; try the in-band quit first, then
            # take down the whole tree
            if process.write_stdin(GRACEFUL_QUIT_TOKEN) and self.config.graceful_stop_timeout > 0:
                self.logger.info(
                    f"Sent quit to shell process (PID: {process.pid}), "
                    f"tree kill in {self.config.graceful_stop_timeout}s"
                )
                session.graceful_stop_timer = self._schedule(
                    self.config.graceful_stop_timeout,
                    _Event(_EventType.GRACEFUL_TIMEOUT, session.session_id, session.attempt_index),
                )
            else:
                self.logger.info(f"Killing process tree (PID: {process.pid})")
                self._kill_tree_later(process)
        else:
            if process.write_stdin(GRACEFUL_QUIT_TOKEN):
                self.logger.info(f"Sent quit to capture process (PID: {process.pid})")
            else:
                self.logger.warning(f"stdin closed, terminating PID {process.pid}")
                process.terminate()

    def _on_graceful_timeout(self, session: CaptureSession, event: _Event) -> None:
        session.graceful_stop_timer = None
        process = session.process
        if process is not None and process.poll() is None:
            self.logger.warning(f"Quit ignored, killing process tree (PID: {process.pid})")
            self._kill_tree_later(process)

    def _on_force_kill(self, session: CaptureSession, event: _Event) -> None:
        session.force_kill_timer = None
        process = session.process

        if process is not None:
            returncode = process.poll()
            if returncode is not None:
                # Exited just before the deadline; its exit event is still queued
                self.logger.info(f"Process exited at the force-kill deadline ({describe_exit(returncode)})")
                self._on_process_exit(session, _Event(
                    _EventType.PROCESS_EXIT,
                    session.session_id,
                    session.attempt_index,
                    returncode=returncode,
                ))
                return

            self.logger.warning(
                f"Process did not exit within {self.config.force_kill_timeout}s, force killing"
            )
            if process.is_shell:
                self._kill_tree_later(process)
            else:
                process.kill()

        output_path = session.current_output_path
        if is_valid_recording(output_path, self.config.min_valid_recording_bytes):
            result = CompletionResult(
                success=True,
                output_path=output_path,
                warning="Capture process did not stop in time and was force-killed; "
                        "the end of the recording may be missing",
                attempts=session.launch_count,
            )
        else:
            result = CompletionResult(
                success=False,
                error="Recording process did not respond to stop and was force-killed",
                error_code=RecordingError.PROCESS_RUNTIME_FAILURE,
                attempts=session.launch_count,
            )
        self._finish(session, result)

    def _on_retry(self, session: CaptureSession, event: _Event) -> None:
        session.retry_timer = None
        command = session.current_command
        self.logger.info(f"Trying {command.label}: {command.display()}")

        try:
            process = self.launcher.launch(command)
        except SpawnFailureError as e:
            session.launch_count += 1
            self.logger.error(f"{command.label} could not be started: {e}")
            self._advance_ladder(session, str(e))
            return

        self._attach_process(session, process)

    def _on_process_exit(self, session: CaptureSession, event: _Event) -> None:
        returncode = event.returncode
        session.cancel_force_kill()
        session.cancel_graceful_stop()
        session.process = None

        command = session.current_command
        output_path = command.output_path
        outcome = classify_exit(returncode, session.stop_requested)

        self.logger.info(
            f"{command.label} closed with {describe_exit(returncode)} "
            f"(outcome: {outcome.value}, I/O error: {session.io_error_observed}, "
            f"size: {get_file_size(output_path)} bytes)"
        )

        # An I/O error dooms a camera attempt, including the kill we sent
        # to abandon it
        if session.is_camera and session.io_error_observed and not session.stop_requested:
            outcome = ExitOutcome.FAILED

        if outcome == ExitOutcome.STOPPED:
            self._finish_stopped(session, returncode, output_path)
            return

        if session.is_camera:
            if outcome == ExitOutcome.CLEAN and not session.io_error_observed and file_has_content(output_path):
                self.logger.info(f"Camera recording successful with {command.label}")
                self._finish(session, CompletionResult(
                    success=True,
                    output_path=output_path,
                    attempts=session.launch_count,
                ))
                return

            reason = "I/O error" if session.io_error_observed else describe_exit(returncode)
            self._discard_attempt_file(output_path)
            self._advance_ladder(session, reason)
            return

        # Single-attempt sources
        if outcome == ExitOutcome.CLEAN and file_has_content(output_path):
            self._finish(session, CompletionResult(
                success=True,
                output_path=output_path,
                attempts=session.launch_count,
            ))
            return

        if is_valid_recording(output_path, self.config.min_valid_recording_bytes):
            self.logger.warning(f"Recovered recording after {describe_exit(returncode)}")
            self._finish(session, CompletionResult(
                success=True,
                output_path=output_path,
                warning=f"Capture process exited with {describe_exit(returncode)}, "
                        f"but a valid recording was saved",
                attempts=session.launch_count,
            ))
            return

        self._finish(session, CompletionResult(
            success=False,
            error=f"Recording failed ({describe_exit(returncode)})",
            error_code=RecordingError.PROCESS_RUNTIME_FAILURE,
            attempts=session.launch_count,
        ))

    # =========================================================================
    # OUTCOMES
    # =========================================================================

    def _finish_stopped(self, session: CaptureSession, returncode: Optional[int], output_path: Path) -> None:
        """Outcome of a stopped process: the output file decides."""
        if not is_valid_recording(output_path, self.config.min_valid_recording_bytes):
            self._finish(session, CompletionResult(
                success=False,
                error=f"Recording stopped ({describe_exit(returncode)}) "
                      f"but no valid output was produced",
                error_code=RecordingError.PROCESS_RUNTIME_FAILURE,
                attempts=session.launch_count,
            ))
            return

        warning = None
        if not session.stop_requested:
            warning = f"Capture process was terminated externally ({describe_exit(returncode)})"
        elif returncode != 0:
            warning = f"Recording stopped ({describe_exit(returncode)}); the file may be truncated"

        self._finish(session, CompletionResult(
            success=True,
            output_path=output_path,
            warning=warning,
            attempts=session.launch_count,
        ))

    def _advance_ladder(self, session: CaptureSession, reason: str) -> None:
        """Move to the next camera command, or give up."""
        failed_label = session.current_command.label

        if not session.has_more_attempts:
            self.logger.error(f"All camera recording attempts failed (last: {failed_label}, {reason})")
            self._finish(session, CompletionResult(
                success=False,
                error="Camera recording failed: all fallback attempts failed. "
                      "The camera may be in use by another application.",
                error_code=RecordingError.ALL_FALLBACK_ATTEMPTS_FAILED,
                attempts=session.launch_count,
            ))
            return

        session.attempt_index += 1
        session.io_error_observed = False
        self.logger.info(
            f"{failed_label} failed ({reason}), trying "
            f"{session.current_command.label} in {self.config.fallback_retry_delay}s"
        )
        session.retry_timer = self._schedule(
            self.config.fallback_retry_delay,
            _Event(_EventType.RETRY, session.session_id, session.attempt_index),
        )

    def _finish(self, session: CaptureSession, result: CompletionResult) -> None:
        """Terminate the session and fire its completion (first call wins)."""
        session.cancel_timers()
        session.state = SessionState.TERMINATED
        session.process = None

        if result.success:
            self.logger.info(
                f"Session {session.session_id} finished after "
                f"{format_duration(session.get_elapsed_time())}: {result.output_path}"
            )
        session.relay.fire(result)

    def _discard_attempt_file(self, path: Path) -> None:
        """Remove what a failed camera attempt left behind."""
        if path.exists() and not is_valid_recording(path, self.config.min_valid_recording_bytes):
            try:
                path.unlink()
                self.logger.debug(f"Removed failed attempt file {path.name}")
            except OSError as e:
                self.logger.warning(f"Could not remove {path}: {e}")


class _RegionCancelled(Exception):
    """The user dismissed the region overlay."""
