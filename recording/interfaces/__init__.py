"""
Recording Interfaces Package

Exposes abstract interfaces for recording components.
"""

from recording.interfaces.capture_process_interface import (
    CaptureError,
    CaptureProcessInterface,
    InvalidRequestError,
    ProcessLauncherInterface,
    SpawnFailureError,
)

# Public API
__all__ = [
    # Exceptions
    "CaptureError",
    "InvalidRequestError",
    "SpawnFailureError",
    # Interfaces
    "CaptureProcessInterface",
    "ProcessLauncherInterface",
]
