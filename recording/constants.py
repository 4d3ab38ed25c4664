"""
Recording Constants

Enums, exit-code policy and small helpers for the recording system.

Note: Tunable values (timeouts, encoding settings, attempt counts) live in
config/settings.py. This file only holds enums, the exit classification
table and formatting helpers.
"""

import signal
from enum import Enum
from typing import Optional


# =============================================================================
# SOURCE TYPES
# =============================================================================


class SourceType(Enum):
    """What the capture tool should record."""

    DESKTOP = "desktop"  # Whole primary screen
    WINDOW = "window"  # One top-level window, by title
    CAMERA = "camera"  # Capture device, by display name
    REGION = "region"  # Rectangle of the desktop


# =============================================================================
# SESSION STATE TRACKING
# =============================================================================


class SessionState(Enum):
    """
    States a capture session can be in.

    Lifecycle: IDLE -> STARTING -> RECORDING -> STOPPING -> TERMINATED
    TERMINATED is final; the next recording gets a fresh session.
    """

    IDLE = "idle"  # Created, nothing launched yet
    STARTING = "starting"  # Command built, process being spawned
    RECORDING = "recording"  # Process running (or camera retry pending)
    STOPPING = "stopping"  # Stop requested or exit being processed
    TERMINATED = "terminated"  # Completion fired or process force-killed


LIVE_STATES = frozenset(
    {SessionState.STARTING, SessionState.RECORDING, SessionState.STOPPING},
)


# =============================================================================
# ERROR CODES
# =============================================================================


class RecordingError(Enum):
    """
    Error conditions reported to the caller.

    Validation and spawn errors come back from start_recording();
    everything that happens after spawn arrives in the completion result.
    """

    ALREADY_RECORDING = "AlreadyRecording"
    NOT_RECORDING = "NotRecording"
    INVALID_REQUEST = "InvalidRequest"
    REGION_TOO_SMALL = "RegionTooSmall"
    REGION_CANCELLED = "RegionCancelled"
    SPAWN_FAILURE = "SpawnFailure"
    PROCESS_RUNTIME_FAILURE = "ProcessRuntimeFailure"
    ALL_FALLBACK_ATTEMPTS_FAILED = "AllFallbackAttemptsFailed"
    INTEGRATION_FAILURE = "IntegrationFailure"


# =============================================================================
# EXIT CLASSIFICATION
# =============================================================================


class ExitOutcome(Enum):
    """How a capture process exit is interpreted."""

    CLEAN = "clean"  # Exit code 0, nobody asked it to stop
    STOPPED = "stopped"  # Stopped on request or by a termination signal
    FAILED = "failed"  # Anything else


# Exit codes that mean "terminated from outside" rather than "crashed".
# This is an empirical table, not a documented contract of the capture tool:
#   255 - ffmpeg's own exit code after SIGINT/SIGTERM or 'q' on some builds
#   130, 137, 143 - POSIX shells reporting a child killed by INT/KILL/TERM
# Exit code 1 is what a Windows tree kill (taskkill /F /T) leaves behind, but
# it is also ffmpeg's generic failure code, so it only counts as a stop when a
# stop was actually requested.
EXTERNAL_STOP_EXIT_CODES = frozenset({130, 137, 143, 255})


def classify_exit(returncode: Optional[int], stop_requested: bool) -> ExitOutcome:
    """
    Classify a capture process exit.

    Args:
        returncode: Popen-style return code (negative = killed by signal,
                    None = unknown)
        stop_requested: True if stop_recording() was called for this attempt

    Returns:
        ExitOutcome for the exit

    Example:
        classify_exit(0, stop_requested=False)   -> ExitOutcome.CLEAN
        classify_exit(-15, stop_requested=False) -> ExitOutcome.STOPPED
        classify_exit(1, stop_requested=False)   -> ExitOutcome.FAILED
    """
    if returncode is not None and returncode < 0:
        return ExitOutcome.STOPPED

    if stop_requested:
        # The caller asked for it; whatever the code, the file decides
        return ExitOutcome.STOPPED

    if returncode == 0:
        return ExitOutcome.CLEAN

    if returncode in EXTERNAL_STOP_EXIT_CODES:
        return ExitOutcome.STOPPED

    return ExitOutcome.FAILED


def describe_exit(returncode: Optional[int]) -> str:
    """
    Human-readable exit description for logs and error messages.

    Example:
        describe_exit(1)   -> "exit code 1"
        describe_exit(-9)  -> "signal SIGKILL"
    """
    if returncode is None:
        return "unknown exit"

    if returncode < 0:
        try:
            return f"signal {signal.Signals(-returncode).name}"
        except ValueError:
            return f"signal {-returncode}"

    return f"exit code {returncode}"


def format_duration(seconds: float) -> str:
    """
    Format duration in seconds to human-readable string.

    Example:
        format_duration(630) -> "10:30"
        format_duration(90) -> "1:30"
    """
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes}:{secs:02d}"
