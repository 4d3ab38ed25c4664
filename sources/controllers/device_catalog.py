"""
Device Catalog

Source discovery with the caching rules the recorder relies on:
- windows and cameras are rescanned on every request (they come and go)
- audio devices are scanned once and reused for the life of the catalog

A failed query is logged and reported as an empty list, so a missing
PowerShell never takes the recorder down. A failed audio scan is not
cached; the next request tries again.
"""

import logging
import threading
from typing import Dict, List, Optional

from config.settings import MICROPHONE_PATTERNS
from sources.interfaces.device_enumerator_interface import (
    Device,
    DeviceEnumeratorInterface,
    EnumerationError,
    WindowSource,
)


class DeviceCatalog:
    """
    Cached view over a DeviceEnumeratorInterface.

    Usage:
        catalog = DeviceCatalog(DirectShowEnumerator())
        sources = catalog.refresh()
        mic = catalog.get_best_audio_device()
    """

    def __init__(self, enumerator: DeviceEnumeratorInterface):
        self.logger = logging.getLogger(__name__)
        self.enumerator = enumerator

        self._lock = threading.Lock()
        self._windows: List[WindowSource] = []
        self._cameras: List[Device] = []
        self._audio_devices: Optional[List[Device]] = None

    # =========================================================================
    # QUERIES
    # =========================================================================

    def list_windows(self) -> List[WindowSource]:
        """Rescan top-level windows."""
        try:
            windows = self.enumerator.list_windows()
        except EnumerationError as e:
            self.logger.error(f"Error getting windows: {e}")
            windows = []

        with self._lock:
            self._windows = windows
        return list(windows)

    def list_cameras(self) -> List[Device]:
        """Rescan capture devices."""
        try:
            cameras = self.enumerator.list_video_devices()
        except EnumerationError as e:
            self.logger.error(f"Error getting cameras: {e}")
            cameras = []

        with self._lock:
            self._cameras = cameras
        return list(cameras)

    def list_audio_devices(self) -> List[Device]:
        """Return audio devices, scanning only on the first successful call."""
        with self._lock:
            if self._audio_devices is not None:
                return list(self._audio_devices)

        try:
            devices = self.enumerator.list_audio_devices()
        except EnumerationError as e:
            self.logger.error(f"Error getting audio devices: {e}")
            return []

        with self._lock:
            if self._audio_devices is None:
                self._audio_devices = devices
                self.logger.info(f"Cached {len(devices)} audio devices")
            return list(self._audio_devices)

    def get_best_audio_device(self) -> Optional[Device]:
        """
        Pick the microphone to record with a camera.

        Preference: first device whose name looks like a microphone, then
        the first device of any kind, then None.
        """
        devices = self.list_audio_devices()
        if not devices:
            self.logger.warning("No audio devices found")
            return None

        for device in devices:
            lowered = device.display_name.lower()
            if any(pattern in lowered for pattern in MICROPHONE_PATTERNS):
                self.logger.debug(f"Best audio device: {device.display_name}")
                return device

        self.logger.debug(f"No microphone match, using {devices[0].display_name}")
        return devices[0]

    def refresh(self) -> Dict[str, list]:
        """
        Rescan windows and cameras; audio comes from the cache.

        Returns:
            Dict with 'windows', 'cameras' and 'audio_devices' lists
        """
        return {
            "windows": self.list_windows(),
            "cameras": self.list_cameras(),
            "audio_devices": self.list_audio_devices(),
        }

    def current_sources(self) -> Dict[str, list]:
        """Last scanned lists, without querying anything."""
        with self._lock:
            return {
                "windows": list(self._windows),
                "cameras": list(self._cameras),
                "audio_devices": list(self._audio_devices or []),
            }

    # =========================================================================
    # AVAILABILITY
    # =========================================================================

    def is_window_available(self, title: str) -> bool:
        """Check a window title against a fresh scan."""
        return any(window.title == title for window in self.list_windows())

    def is_camera_available(self, name: str) -> bool:
        """Check a camera display name against a fresh scan."""
        return any(camera.display_name == name for camera in self.list_cameras())
