"""
Sources Implementations Package
"""

from sources.implementations.directshow_enumerator import (
    DirectShowEnumerator,
    parse_dshow_devices,
    parse_window_list,
)
from sources.implementations.mock_enumerator import MockDeviceEnumerator

__all__ = [
    "DirectShowEnumerator",
    "MockDeviceEnumerator",
    "parse_dshow_devices",
    "parse_window_list",
]
