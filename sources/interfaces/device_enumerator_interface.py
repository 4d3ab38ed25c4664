"""
Device Enumerator Interface

Abstract interface for discovering what can be recorded: top-level
windows, capture devices (cameras) and audio inputs.

High-level code (DeviceCatalog) depends on this abstraction; the
platform-specific queries live in the implementations.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Device:
    """
    A capture or audio device.

    Identity is the display name. It is also the only name ever put on a
    capture command line; the alternate (internal) name is kept for
    diagnostics.

    Attributes:
        display_name: Name shown to the user and passed to the capture tool
        alternate_name: Internal device path reported by the enumeration
        is_default: Looks like the preferred device of its kind
        is_virtual: Virtual-class device (e.g. OBS Virtual Camera)
    """

    display_name: str
    alternate_name: Optional[str] = None
    is_default: bool = False
    is_virtual: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.display_name,
            "altName": self.alternate_name,
            "isDefault": self.is_default,
            "isVirtual": self.is_virtual,
        }


@dataclass(frozen=True)
class WindowSource:
    """
    A top-level window that can be captured by title.

    Attributes:
        title: Window title (what the capture tool matches on)
        process_name: Owning process
        pid: Owning process id
    """

    title: str
    process_name: str = "Unknown"
    pid: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "processName": self.process_name, "id": self.pid}


class DeviceEnumeratorInterface(ABC):
    """
    Abstract base class for source discovery.

    Every call performs a fresh query; caching is DeviceCatalog's job.
    """

    @abstractmethod
    def list_windows(self) -> List[WindowSource]:
        """
        Query top-level windows with a non-empty title.

        Raises:
            EnumerationError: If the query could not be run or parsed
        """

    @abstractmethod
    def list_video_devices(self) -> List[Device]:
        """
        Query capture devices.

        Raises:
            EnumerationError: If the query could not be run or parsed
        """

    @abstractmethod
    def list_audio_devices(self) -> List[Device]:
        """
        Query audio input devices.

        Raises:
            EnumerationError: If the query could not be run or parsed
        """

    def is_available(self) -> bool:
        """Check that the platform query tools exist. Default: assume yes."""
        return True


class EnumerationError(Exception):
    """
    Exception raised when a source query fails.

    Examples:
    - PowerShell or ffmpeg missing
    - Query timed out
    - Output could not be parsed
    """
