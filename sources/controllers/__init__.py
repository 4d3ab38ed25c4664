"""
Sources Controllers Package
"""

from sources.controllers.device_catalog import DeviceCatalog

__all__ = ["DeviceCatalog"]
