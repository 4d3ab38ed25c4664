"""
Recording Factory

Factory pattern for creating process launchers.
Automatically selects the real ffmpeg launcher or the mock based on
availability.

Single place to decide implementation; the supervisor only sees
ProcessLauncherInterface.
"""

import logging
from typing import Dict, Literal

from config.settings import FFMPEG_PATH
from recording.implementations.ffmpeg_process import FFmpegLauncher
from recording.implementations.mock_process import MockProcessLauncher, MockRun
from recording.interfaces.capture_process_interface import ProcessLauncherInterface
from recording.utils.recording_utils import check_ffmpeg_available

# Type alias for better type hints
LauncherMode = Literal["auto", "real", "mock"]


class RecordingFactory:
    """
    Factory for creating capture process launchers.

    Usage:
        # Auto-detect (uses ffmpeg if available, mock otherwise)
        launcher = RecordingFactory.create_launcher()

        # Force mock mode (useful for testing)
        launcher = RecordingFactory.create_launcher(mode="mock")

        # Force real capture (raises error if not available)
        launcher = RecordingFactory.create_launcher(mode="real")
    """

    _logger = logging.getLogger(__name__)

    @classmethod
    def create_launcher(
        cls,
        mode: LauncherMode = "auto",
        ffmpeg_path: str = FFMPEG_PATH,
    ) -> ProcessLauncherInterface:
        """
        Create a process launcher.

        Args:
            mode: "auto" (detect), "real" (force ffmpeg), "mock" (force mock)
            ffmpeg_path: ffmpeg executable for the real launcher

        Returns:
            ProcessLauncherInterface implementation

        Raises:
            RuntimeError: If mode="real" but ffmpeg is not available

        Example:
            launcher = RecordingFactory.create_launcher(mode="mock")
            supervisor = SessionSupervisor(launcher)
        """
        if mode == "mock":
            cls._logger.info("Creating Mock Process Launcher (forced)")
            return cls._create_mock()

        launcher = FFmpegLauncher(ffmpeg_path=ffmpeg_path)

        if mode == "real":
            if not launcher.is_available():
                raise RuntimeError(f"Real capture requested but '{ffmpeg_path}' not found")
            cls._logger.info("Creating FFmpeg Launcher (forced)")
            return launcher

        # mode == "auto" - try real first, fall back to mock
        if launcher.is_available():
            cls._logger.info("Creating FFmpeg Launcher (auto-detected)")
            return launcher

        cls._logger.warning(f"'{ffmpeg_path}' not available, using Mock Process Launcher")
        return cls._create_mock()

    @classmethod
    def is_real_capture_available(cls, ffmpeg_path: str = FFMPEG_PATH) -> Dict[str, bool]:
        """
        Check if real capture is available.

        Returns:
            Dictionary with availability status:
            {
                'ffmpeg_found': True/False,  # executable on PATH
                'ffmpeg_runs': True/False    # `ffmpeg -version` succeeds
            }
        """
        return {
            "ffmpeg_found": FFmpegLauncher(ffmpeg_path=ffmpeg_path).is_available(),
            "ffmpeg_runs": check_ffmpeg_available(ffmpeg_path),
        }

    @staticmethod
    def _create_mock() -> MockProcessLauncher:
        # Mock processes run until stopped and leave a small valid file
        return MockProcessLauncher(default_run=MockRun(output_bytes=64 * 1024))


def create_launcher(force_mock: bool = False) -> ProcessLauncherInterface:
    """
    Quick launcher creation.

    Args:
        force_mock: If True, always use mock

    Returns:
        Process launcher
    """
    return RecordingFactory.create_launcher(mode="mock" if force_mock else "auto")
