"""
Region Selector Interface

Abstract interface for interactive region pickers.

The picker itself (a full-screen overlay) is a UI concern. It only has to
report what the user dragged, in logical (unscaled) screen coordinates,
or that the user cancelled. Scaling, minimum-size checks and the
even-dimension rule are applied by RegionNegotiator.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True)
class Rect:
    """
    Pixel rectangle on the desktop.

    Coordinates are physical pixels (already multiplied by the display
    scale factor). Use validate_region() to get a codec-safe copy.
    """

    x: int
    y: int
    width: int
    height: int

    @property
    def size(self) -> str:
        """Size as the capture tool expects it: WIDTHxHEIGHT"""
        return f"{self.width}x{self.height}"

    def to_dict(self) -> Dict[str, int]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class DisplayInfo:
    """
    Geometry of the display the overlay covers.

    Attributes:
        x, y: Display origin in the virtual desktop (logical pixels)
        width, height: Display size (logical pixels)
        scale_factor: Physical pixels per logical pixel
    """

    x: int = 0
    y: int = 0
    width: int = 1920
    height: int = 1080
    scale_factor: float = 1.0


@dataclass(frozen=True)
class DragSelection:
    """
    One completed drag on the overlay.

    Start/end points are relative to the overlay (logical pixels) and may
    be in any order - dragging up-left is as valid as down-right.
    """

    start_x: int
    start_y: int
    end_x: int
    end_y: int

    @property
    def width(self) -> int:
        return abs(self.end_x - self.start_x)

    @property
    def height(self) -> int:
        return abs(self.end_y - self.start_y)

    @property
    def left(self) -> int:
        return min(self.start_x, self.end_x)

    @property
    def top(self) -> int:
        return min(self.start_y, self.end_y)


class RegionSelectorInterface(ABC):
    """
    Abstract base class for region pickers.

    RegionNegotiator calls get_display_info() once, then
    prompt_selection() until it gets a usable drag or a cancellation.
    """

    @abstractmethod
    def get_display_info(self) -> DisplayInfo:
        """
        Describe the display the overlay is shown on.

        Returns:
            DisplayInfo with origin, size and scale factor
        """

    @abstractmethod
    def prompt_selection(self, min_size: int, message: Optional[str] = None) -> Optional[DragSelection]:
        """
        Show the overlay and wait for one drag.

        Args:
            min_size: Minimum edge length in logical pixels (for the hint text)
            message: Optional notice to show (e.g. "selection too small")

        Returns:
            The drag, or None if the user cancelled (Escape, closed window,
            "record full screen" button)
        """

    def close(self) -> None:
        """Release overlay resources. Default: nothing to release."""


class RegionTooSmallError(ValueError):
    """
    A rectangle is smaller than the configured minimum.

    Attributes:
        width, height: The rejected size
        min_size: The minimum that applied
    """

    def __init__(self, width: int, height: int, min_size: int):
        super().__init__(
            f"Selected region is too small ({width}x{height}). "
            f"Minimum size is {min_size}x{min_size} pixels."
        )
        self.width = width
        self.height = height
        self.min_size = min_size


class InvalidRegionError(ValueError):
    """A rectangle has negative coordinates or exceeds the maximum size."""
