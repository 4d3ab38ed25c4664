"""
Mock Device Enumerator

Simulated source discovery for testing and for hosts without DirectShow.
"""

import logging
from typing import List, Optional

from sources.interfaces.device_enumerator_interface import (
    Device,
    DeviceEnumeratorInterface,
    EnumerationError,
    WindowSource,
)


class MockDeviceEnumerator(DeviceEnumeratorInterface):
    """
    Mock enumerator for testing.

    Lists are returned as configured; tests change them between calls to
    simulate hardware being plugged in or windows opening.

    Usage:
        enumerator = MockDeviceEnumerator(
            cameras=[Device("Integrated Camera")],
            audio_devices=[Device("Microphone (Realtek)", is_default=True)],
        )
    """

    def __init__(
        self,
        windows: Optional[List[WindowSource]] = None,
        cameras: Optional[List[Device]] = None,
        audio_devices: Optional[List[Device]] = None,
    ):
        self.logger = logging.getLogger(__name__)
        self.windows = list(windows or [])
        self.cameras = list(cameras or [])
        self.audio_devices = list(audio_devices or [])

        # Track queries for testing
        self.window_scans = 0
        self.camera_scans = 0
        self.audio_scans = 0

        # Configuration for test scenarios
        self._fail_with: Optional[str] = None

    def list_windows(self) -> List[WindowSource]:
        self.window_scans += 1
        self._maybe_fail()
        self.logger.debug(f"[MOCK] {len(self.windows)} windows")
        return list(self.windows)

    def list_video_devices(self) -> List[Device]:
        self.camera_scans += 1
        self._maybe_fail()
        self.logger.debug(f"[MOCK] {len(self.cameras)} cameras")
        return list(self.cameras)

    def list_audio_devices(self) -> List[Device]:
        self.audio_scans += 1
        self._maybe_fail()
        self.logger.debug(f"[MOCK] {len(self.audio_devices)} audio devices")
        return list(self.audio_devices)

    def simulate_failure(self, message: str = "Simulated enumeration failure") -> None:
        """Make every following query raise EnumerationError."""
        self._fail_with = message

    def reset_test_config(self) -> None:
        self._fail_with = None

    def _maybe_fail(self) -> None:
        if self._fail_with:
            self.logger.error(f"[MOCK] {self._fail_with}")
            raise EnumerationError(self._fail_with)
