"""
Region Negotiator

Turns what the user dragged on the overlay into a rectangle the capture
tool and the H.264 encoder will accept:
- at least MIN_REGION_SIZE on both edges (re-prompts otherwise)
- scaled from logical to physical pixels
- even width and height (floored, never rounded up)
"""

import logging
import math
from typing import Optional

from config.settings import MAX_RESOLUTION, MIN_REGION_SIZE
from region.interfaces.region_selector_interface import (
    DisplayInfo,
    DragSelection,
    InvalidRegionError,
    Rect,
    RegionSelectorInterface,
    RegionTooSmallError,
)

logger = logging.getLogger(__name__)


def floor_even(value: int) -> int:
    """
    Largest even integer <= value.

    Example:
        floor_even(17) -> 16
        floor_even(16) -> 16
    """
    return (value // 2) * 2


def validate_region(rect: Rect, min_size: int = MIN_REGION_SIZE) -> Rect:
    """
    Validate a rectangle and make its dimensions codec-safe.

    Args:
        rect: Rectangle in physical pixels
        min_size: Minimum edge length

    Returns:
        Copy of rect with width and height floored to even numbers

    Raises:
        RegionTooSmallError: If either edge is below min_size
        InvalidRegionError: If coordinates are negative or the size exceeds
                            the maximum capture size

    Example:
        validate_region(Rect(10, 20, 301, 199))  -> Rect(10, 20, 300, 198)
    """
    if rect.x < 0 or rect.y < 0:
        raise InvalidRegionError(
            f"Region coordinates cannot be negative ({rect.x}, {rect.y})"
        )

    max_width, max_height = MAX_RESOLUTION
    if rect.width > max_width or rect.height > max_height:
        raise InvalidRegionError(
            f"Region {rect.size} exceeds maximum {max_width}x{max_height}"
        )

    if rect.width < min_size or rect.height < min_size:
        raise RegionTooSmallError(rect.width, rect.height, min_size)

    even_width = floor_even(rect.width)
    even_height = floor_even(rect.height)

    # An odd min_size can still be undercut by the floor
    if even_width < min_size or even_height < min_size:
        raise RegionTooSmallError(even_width, even_height, min_size)

    if even_width != rect.width or even_height != rect.height:
        logger.info(
            f"Adjusted region from {rect.size} to {even_width}x{even_height} "
            f"(H.264 requires even dimensions)"
        )

    return Rect(x=rect.x, y=rect.y, width=even_width, height=even_height)


class RegionNegotiator:
    """
    Obtains a valid capture rectangle from the user.

    Usage:
        negotiator = RegionNegotiator(selector)
        rect = negotiator.select_region()
        if rect is None:
            print("User cancelled")
    """

    def __init__(
        self,
        selector: RegionSelectorInterface,
        min_size: int = MIN_REGION_SIZE,
        max_prompts: Optional[int] = None,
    ):
        """
        Initialize negotiator.

        Args:
            selector: Overlay implementation that reports drags
            min_size: Minimum edge length in pixels
            max_prompts: Give up (as a cancellation) after this many drags;
                         None keeps asking until the user cancels
        """
        self.logger = logging.getLogger(__name__)
        self.selector = selector
        self.min_size = min_size
        self.max_prompts = max_prompts

    def select_region(self) -> Optional[Rect]:
        """
        Ask the user for a region.

        Returns:
            Validated rectangle in physical pixels, or None if cancelled
        """
        display = self.selector.get_display_info()
        self.logger.info(
            f"Screen info: bounds={display.x},{display.y} "
            f"{display.width}x{display.height}, scale={display.scale_factor}x"
        )

        message = None
        prompts = 0
        try:
            while self.max_prompts is None or prompts < self.max_prompts:
                prompts += 1
                drag = self.selector.prompt_selection(self.min_size, message)

                if drag is None:
                    self.logger.info("Region selection cancelled")
                    return None

                if drag.width < self.min_size or drag.height < self.min_size:
                    message = (
                        f"Selected region is too small. Minimum size is "
                        f"{self.min_size}x{self.min_size} pixels."
                    )
                    self.logger.info(
                        f"Selection {drag.width}x{drag.height} below minimum, re-prompting"
                    )
                    continue

                try:
                    rect = validate_region(self._to_physical(drag, display), self.min_size)
                except RegionTooSmallError as e:
                    message = str(e)
                    self.logger.info(f"{e} Re-prompting")
                    continue

                self.logger.info(
                    f"Region selected: x={rect.x}, y={rect.y}, "
                    f"width={rect.width}, height={rect.height}"
                )
                return rect

            self.logger.warning(f"No valid region after {prompts} prompts, giving up")
            return None

        finally:
            self.selector.close()

    def validate(self, rect: Rect) -> Rect:
        """Validate a caller-supplied rectangle with this negotiator's minimum."""
        return validate_region(rect, self.min_size)

    @staticmethod
    def _to_physical(drag: DragSelection, display: DisplayInfo) -> Rect:
        """Offset by display origin and apply the scale factor."""
        x = drag.left + display.x
        y = drag.top + display.y
        width = drag.width
        height = drag.height

        scale = display.scale_factor
        if scale != 1:
            x = int(math.floor(x * scale + 0.5))
            y = int(math.floor(y * scale + 0.5))
            width = int(math.floor(width * scale + 0.5))
            height = int(math.floor(height * scale + 0.5))

        return Rect(x=x, y=y, width=width, height=height)
