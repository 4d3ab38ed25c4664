"""
Recording Implementations Package

Exposes concrete implementations of recording interfaces.
"""

from recording.implementations.ffmpeg_process import (
    FFmpegLauncher,
    FFmpegProcess,
    kill_process_tree,
)
from recording.implementations.mock_process import (
    MockCaptureProcess,
    MockProcessLauncher,
    MockRun,
)

# Public API
__all__ = [
    "FFmpegLauncher",
    "FFmpegProcess",
    "MockCaptureProcess",
    "MockProcessLauncher",
    "MockRun",
    "kill_process_tree",
]
