"""
Timeline Factory

Factory pattern for creating timeline integrations.
Follows the same pattern as recording/factory.py for consistency.
"""

import logging
from typing import Literal, Optional

from timeline.implementations.mock_timeline import MockTimeline
from timeline.implementations.resolve_timeline import ResolveTimeline
from timeline.interfaces.timeline_interface import TimelineInterface

# Type alias
TimelineMode = Literal["auto", "resolve", "mock", "none"]


class TimelineFactory:
    """
    Factory for creating timeline integrations.

    Usage:
        # Resolve if reachable, otherwise no integration
        timeline = TimelineFactory.create_timeline()

        # Force mock for testing
        timeline = TimelineFactory.create_timeline(mode="mock")
    """

    _logger = logging.getLogger(__name__)

    @classmethod
    def create_timeline(cls, mode: TimelineMode = "auto") -> Optional[TimelineInterface]:
        """
        Create a timeline integration.

        Args:
            mode: "auto" (detect Resolve), "resolve" (force), "mock", or
                  "none" (recordings are not added anywhere)

        Returns:
            TimelineInterface implementation, or None for no integration

        Raises:
            RuntimeError: If mode="resolve" but Resolve is not reachable
        """
        if mode == "none":
            cls._logger.info("Timeline integration disabled")
            return None

        if mode == "mock":
            cls._logger.info("Creating Mock Timeline (forced)")
            return MockTimeline()

        timeline = ResolveTimeline()

        if mode == "resolve":
            if not timeline.is_available():
                raise RuntimeError("DaVinci Resolve timeline requested but not available")
            cls._logger.info("Creating Resolve Timeline (forced)")
            return timeline

        # mode == "auto"
        if timeline.is_available():
            cls._logger.info("Creating Resolve Timeline (auto-detected)")
            return timeline

        cls._logger.warning(
            "DaVinci Resolve not available, recordings will not be added to a timeline"
        )
        return None
