"""
Region Implementations Package
"""

from region.implementations.fixed_selector import FixedRegionSelector
from region.implementations.mock_selector import MockRegionSelector

__all__ = [
    "FixedRegionSelector",
    "MockRegionSelector",
]
