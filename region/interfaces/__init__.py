"""
Region Interfaces Package

Exposes the region picker contract and the rectangle types.
"""

from region.interfaces.region_selector_interface import (
    DisplayInfo,
    DragSelection,
    InvalidRegionError,
    Rect,
    RegionSelectorInterface,
    RegionTooSmallError,
)

__all__ = [
    "DisplayInfo",
    "DragSelection",
    "InvalidRegionError",
    "Rect",
    "RegionSelectorInterface",
    "RegionTooSmallError",
]
