"""
Recording Module

Screen, window, region and camera recording around ffmpeg.

Provides automatic detection and graceful fallback between the real
ffmpeg launcher and a mock launcher for testing.

Public API:
    - SessionSupervisor: start / stop / state / completion for one recording
    - CommandBuilder: Request -> ffmpeg command (and camera fallback ladder)
    - CompletionRelay: Exactly-once completion with timeline hand-off
    - RecordingFactory: Factory for creating process launchers
    - CaptureRequest / CompletionResult: What goes in, what comes out
    - SourceType / SessionState / RecordingError: Enumerations

Usage:
    from recording import CaptureRequest, RecordingFactory, SessionSupervisor

    supervisor = SessionSupervisor(RecordingFactory.create_launcher())
    supervisor.on_completion(lambda result: print(result.to_dict()))
    supervisor.start_recording(CaptureRequest("window", window_title="Notepad"))
    ...
    supervisor.stop_recording()
"""

from recording.constants import RecordingError, SessionState, SourceType
from recording.controllers.command_builder import CommandBuilder
from recording.controllers.completion_relay import CompletionRelay
from recording.controllers.session_supervisor import SessionSupervisor
from recording.factory import RecordingFactory, create_launcher
from recording.interfaces.capture_process_interface import (
    CaptureError,
    CaptureProcessInterface,
    ProcessLauncherInterface,
)
from recording.models.capture_models import (
    CaptureRequest,
    CompletionResult,
    RecorderStatus,
    StartResult,
    StopResult,
)
from recording.utils.recording_utils import generate_filename

__all__ = [
    "CaptureError",
    "CaptureProcessInterface",
    "CaptureRequest",
    "CommandBuilder",
    "CompletionRelay",
    "CompletionResult",
    "ProcessLauncherInterface",
    "RecorderStatus",
    "RecordingError",
    "RecordingFactory",
    "SessionState",
    "SessionSupervisor",
    "SourceType",
    "StartResult",
    "StopResult",
    "create_launcher",
    "generate_filename",
]
