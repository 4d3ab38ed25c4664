"""
Mock Region Selector

Scripted region picker for tests. Replays a list of drags (None = user
cancelled) and records every prompt it was shown.
"""

import logging
from typing import List, Optional

from region.interfaces.region_selector_interface import (
    DisplayInfo,
    DragSelection,
    RegionSelectorInterface,
)


class MockRegionSelector(RegionSelectorInterface):
    """
    Mock region selector for testing.

    Usage:
        selector = MockRegionSelector([
            DragSelection(0, 0, 10, 10),      # too small, negotiator re-prompts
            DragSelection(0, 0, 301, 201),    # accepted
        ])
    """

    def __init__(
        self,
        drags: Optional[List[Optional[DragSelection]]] = None,
        display: Optional[DisplayInfo] = None,
    ):
        self.logger = logging.getLogger(__name__)
        self._drags = list(drags or [])
        self.display = display or DisplayInfo()

        # Track prompts for assertions
        self.prompts: List[Optional[str]] = []
        self.closed = False

    def get_display_info(self) -> DisplayInfo:
        return self.display

    def prompt_selection(self, min_size: int, message: Optional[str] = None) -> Optional[DragSelection]:
        self.prompts.append(message)

        if not self._drags:
            self.logger.debug("[MOCK] No scripted drags left, cancelling")
            return None

        drag = self._drags.pop(0)
        self.logger.debug(f"[MOCK] Prompt #{len(self.prompts)} -> {drag}")
        return drag

    def close(self) -> None:
        self.closed = True

    def get_prompt_count(self) -> int:
        """Number of times the overlay was shown"""
        return len(self.prompts)
