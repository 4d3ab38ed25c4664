"""
Sources Module

Discovery of what can be recorded: windows, cameras and microphones.

Public API:
    - DeviceCatalog: Cached source lists and microphone selection
    - SourcesFactory: Creates the platform enumerator (or a mock)
    - Device / WindowSource: Discovered sources
    - EnumerationError: Query failures

Usage:
    from sources import DeviceCatalog, SourcesFactory

    catalog = DeviceCatalog(SourcesFactory.create_enumerator())
    print(catalog.refresh())
"""

from sources.controllers.device_catalog import DeviceCatalog
from sources.factory import SourcesFactory
from sources.implementations.mock_enumerator import MockDeviceEnumerator
from sources.interfaces.device_enumerator_interface import (
    Device,
    DeviceEnumeratorInterface,
    EnumerationError,
    WindowSource,
)

__all__ = [
    "Device",
    "DeviceCatalog",
    "DeviceEnumeratorInterface",
    "EnumerationError",
    "MockDeviceEnumerator",
    "SourcesFactory",
    "WindowSource",
]
