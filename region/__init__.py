"""
Region Module

Capture-region selection and validation.

Public API:
    - Rect: Pixel rectangle
    - RegionNegotiator: Interactive selection with re-prompt and scaling
    - validate_region: Minimum-size check and even-dimension flooring
    - RegionSelectorInterface: Overlay contract
    - RegionTooSmallError / InvalidRegionError: Validation failures

Usage:
    from region import RegionNegotiator, validate_region, Rect

    rect = validate_region(Rect(0, 0, 641, 481))   # -> 640x480
"""

from region.controllers.region_negotiator import (
    RegionNegotiator,
    floor_even,
    validate_region,
)
from region.implementations.fixed_selector import FixedRegionSelector
from region.implementations.mock_selector import MockRegionSelector
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
    "FixedRegionSelector",
    "InvalidRegionError",
    "MockRegionSelector",
    "Rect",
    "RegionNegotiator",
    "RegionSelectorInterface",
    "RegionTooSmallError",
    "floor_even",
    "validate_region",
]
