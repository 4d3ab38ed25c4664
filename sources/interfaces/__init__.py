"""
Sources Interfaces Package
"""

from sources.interfaces.device_enumerator_interface import (
    Device,
    DeviceEnumeratorInterface,
    EnumerationError,
    WindowSource,
)

__all__ = [
    "Device",
    "DeviceEnumeratorInterface",
    "EnumerationError",
    "WindowSource",
]
