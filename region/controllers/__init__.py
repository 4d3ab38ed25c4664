"""
Region Controllers Package
"""

from region.controllers.region_negotiator import (
    RegionNegotiator,
    floor_even,
    validate_region,
)

__all__ = [
    "RegionNegotiator",
    "floor_even",
    "validate_region",
]
