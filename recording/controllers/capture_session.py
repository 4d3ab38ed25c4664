"""
Capture Session

State of one recording, from start request to completion.

A session is created for every start request and never reused: once it is
TERMINATED the supervisor allocates a fresh one for the next recording.
All mutation happens under the supervisor's lock; this class only holds
state and the timers that belong to it.
"""

import threading
import time
from pathlib import Path
from typing import List, Optional

from recording.constants import LIVE_STATES, SessionState, SourceType
from recording.controllers.completion_relay import CompletionRelay
from recording.interfaces.capture_process_interface import CaptureProcessInterface
from recording.models.capture_models import CaptureRequest, CommandSpec, CompletionResult


class CaptureSession:
    """
    One recording attempt sequence.

    Attributes:
        session_id: Token carried by every event for this session
        request: What is being recorded
        state: Current lifecycle state
        base_output_path: Output path of the first attempt
        commands: Commands to try in order (one unless camera fallback)
        attempt_index: Index into commands of the current attempt
        process: Running capture process (None before spawn, between
                 attempts and after exit)
        io_error_observed: An I/O error marker was seen for this attempt
        stop_requested: stop_recording() was accepted
        relay: Single-fire completion guard
    """

    def __init__(self, session_id: int, request: CaptureRequest, relay: CompletionRelay):
        self.session_id = session_id
        self.request = request
        self.relay = relay

        self.state = SessionState.IDLE
        self.base_output_path: Optional[Path] = None
        self.commands: List[CommandSpec] = []
        self.attempt_index = 0
        self.launch_count = 0
        self.process: Optional[CaptureProcessInterface] = None
        self.io_error_observed = False
        self.stop_requested = False

        self.created_at = time.time()
        self.started_at: Optional[float] = None

        # Deferred actions
        self.force_kill_timer: Optional[threading.Timer] = None
        self.retry_timer: Optional[threading.Timer] = None
        self.graceful_stop_timer: Optional[threading.Timer] = None

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def is_live(self) -> bool:
        return self.state in LIVE_STATES

    @property
    def is_camera(self) -> bool:
        return self.request.source_type == SourceType.CAMERA

    @property
    def current_command(self) -> Optional[CommandSpec]:
        if 0 <= self.attempt_index < len(self.commands):
            return self.commands[self.attempt_index]
        return None

    @property
    def current_output_path(self) -> Optional[Path]:
        """File the current attempt writes to"""
        command = self.current_command
        return command.output_path if command else self.base_output_path

    @property
    def has_more_attempts(self) -> bool:
        return self.attempt_index + 1 < len(self.commands)

    @property
    def completion_fired(self) -> bool:
        return self.relay.has_fired

    def get_elapsed_time(self) -> float:
        if self.started_at is None:
            return 0.0
        return time.time() - self.started_at

    # =========================================================================
    # TIMERS
    # =========================================================================

    def cancel_force_kill(self) -> None:
        if self.force_kill_timer is not None:
            self.force_kill_timer.cancel()
            self.force_kill_timer = None

    def cancel_retry(self) -> None:
        if self.retry_timer is not None:
            self.retry_timer.cancel()
            self.retry_timer = None

    def cancel_graceful_stop(self) -> None:
        if self.graceful_stop_timer is not None:
            self.graceful_stop_timer.cancel()
            self.graceful_stop_timer = None

    def cancel_timers(self) -> None:
        self.cancel_force_kill()
        self.cancel_retry()
        self.cancel_graceful_stop()

    # =========================================================================
    # COMPLETION
    # =========================================================================

    def wait_for_completion(self, timeout: Optional[float] = None) -> Optional[CompletionResult]:
        """
        Block until the session's result was delivered.

        Args:
            timeout: Seconds to wait, None for forever

        Returns:
            The CompletionResult, or None on timeout
        """
        return self.relay.wait(timeout)

    def __repr__(self) -> str:
        return (
            f"CaptureSession(id={self.session_id}, source={self.request.source_type.value}, "
            f"state={self.state.value}, attempt={self.attempt_index})"
        )
