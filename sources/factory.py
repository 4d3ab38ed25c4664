"""
Sources Factory

Factory pattern for creating device enumerators.
Follows the same pattern as recording/factory.py for consistency.
"""

import logging
from typing import Literal

from sources.implementations.directshow_enumerator import DirectShowEnumerator
from sources.implementations.mock_enumerator import MockDeviceEnumerator
from sources.interfaces.device_enumerator_interface import DeviceEnumeratorInterface

# Type alias
EnumeratorMode = Literal["auto", "real", "mock"]


class SourcesFactory:
    """
    Factory for creating device enumerators.

    Usage:
        # DirectShow if ffmpeg and PowerShell exist, otherwise mock
        enumerator = SourcesFactory.create_enumerator()

        # Force mock for testing
        enumerator = SourcesFactory.create_enumerator(mode="mock")
    """

    _logger = logging.getLogger(__name__)

    @classmethod
    def create_enumerator(
        cls,
        mode: EnumeratorMode = "auto",
        ffmpeg_path: str = "ffmpeg",
    ) -> DeviceEnumeratorInterface:
        """
        Create a device enumerator.

        Args:
            mode: "auto" (detect), "real" (force DirectShow), "mock" (force mock)
            ffmpeg_path: ffmpeg executable used for the device listing

        Returns:
            DeviceEnumeratorInterface implementation

        Raises:
            RuntimeError: If mode="real" but the query tools are missing
        """
        if mode == "mock":
            cls._logger.info("Creating Mock Device Enumerator (forced)")
            return MockDeviceEnumerator()

        enumerator = DirectShowEnumerator(ffmpeg_path=ffmpeg_path)

        if mode == "real":
            if not enumerator.is_available():
                raise RuntimeError("DirectShow enumeration requested but ffmpeg/PowerShell not available")
            cls._logger.info("Creating DirectShow Enumerator (forced)")
            return enumerator

        # mode == "auto"
        if enumerator.is_available():
            cls._logger.info("Creating DirectShow Enumerator (auto-detected)")
            return enumerator

        cls._logger.warning("ffmpeg/PowerShell not available, using Mock Device Enumerator")
        return MockDeviceEnumerator()
