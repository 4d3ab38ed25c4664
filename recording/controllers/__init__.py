"""
Recording Controllers Package

High-level controllers that orchestrate capture sessions.
"""

from recording.controllers.capture_session import CaptureSession
from recording.controllers.command_builder import CommandBuilder
from recording.controllers.completion_relay import CompletionRelay
from recording.controllers.session_supervisor import SessionSupervisor

# Public API
__all__ = [
    "CaptureSession",
    "CommandBuilder",
    "CompletionRelay",
    "SessionSupervisor",
]
