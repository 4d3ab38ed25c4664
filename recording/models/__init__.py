"""
Recording Models Package

Data classes shared by the recording controllers.
"""

from recording.models.capture_models import (
    CaptureRequest,
    CommandSpec,
    CompletionResult,
    RecorderStatus,
    StartResult,
    StopResult,
)

__all__ = [
    "CaptureRequest",
    "CommandSpec",
    "CompletionResult",
    "RecorderStatus",
    "StartResult",
    "StopResult",
]
