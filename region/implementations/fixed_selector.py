"""
Fixed Region Selector

Non-interactive selector that answers with a rectangle chosen up front
(e.g. from the command line). Useful for scripted recordings and hosts
without an overlay.
"""

import logging
from typing import Optional

from region.interfaces.region_selector_interface import (
    DisplayInfo,
    DragSelection,
    Rect,
    RegionSelectorInterface,
)


class FixedRegionSelector(RegionSelectorInterface):
    """
    Reports one predetermined drag, then cancels.

    Because the answer cannot change, a re-prompt (selection too small)
    is reported as a cancellation instead of looping forever.

    Usage:
        selector = FixedRegionSelector(Rect(100, 100, 640, 480))
        rect = RegionNegotiator(selector).select_region()
    """

    def __init__(self, rect: Rect, display: Optional[DisplayInfo] = None):
        self.logger = logging.getLogger(__name__)
        self.rect = rect
        self.display = display or DisplayInfo()
        self._answered = False

    def get_display_info(self) -> DisplayInfo:
        return self.display

    def prompt_selection(self, min_size: int, message: Optional[str] = None) -> Optional[DragSelection]:
        if self._answered:
            if message:
                self.logger.warning(f"Fixed region rejected: {message}")
            return None

        self._answered = True
        # The rect is given in virtual-desktop coordinates; the overlay
        # reports drags relative to the display origin.
        left = self.rect.x - self.display.x
        top = self.rect.y - self.display.y
        return DragSelection(
            start_x=left,
            start_y=top,
            end_x=left + self.rect.width,
            end_y=top + self.rect.height,
        )
