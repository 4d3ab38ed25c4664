"""
Mock Timeline Implementation

Simulated timeline integration for testing without DaVinci Resolve.
"""

import logging
import threading
import time
from typing import List, Optional

from config.settings import TIMELINE_NAME_PREFIX
from timeline.interfaces.timeline_interface import (
    TimelineError,
    TimelineInterface,
    TimelineResult,
)


class MockTimeline(TimelineInterface):
    """
    Mock timeline for testing.

    Usage:
        # Always succeeds, creates a timeline on first add
        timeline = MockTimeline()

        # Append to an already open timeline
        timeline = MockTimeline(current_timeline="Edit 1")

        # Test error handling
        timeline = MockTimeline(fail_with="No project is open")
    """

    def __init__(
        self,
        current_timeline: Optional[str] = None,
        fail_with: Optional[str] = None,
        delay: float = 0.0,
    ):
        """
        Initialize mock timeline.

        Args:
            current_timeline: Name of the open timeline (None = none open)
            fail_with: If set, every add fails with this error
            delay: Seconds each add takes
        """
        self.logger = logging.getLogger(__name__)
        self.current_timeline = current_timeline
        self.fail_with = fail_with
        self.delay = delay

        # Track calls for testing
        self.added_files: List[str] = []
        self.call_threads: List[str] = []
        self._lock = threading.Lock()

    def add_recording_to_timeline(self, file_path: str) -> TimelineResult:
        with self._lock:
            self.added_files.append(file_path)
            self.call_threads.append(threading.current_thread().name)

        if self.delay:
            time.sleep(self.delay)

        if self.fail_with:
            self.logger.error(f"[MOCK] Timeline add failed: {self.fail_with}")
            return TimelineResult(success=False, error=self.fail_with)

        if self.current_timeline is None:
            self.current_timeline = f"{TIMELINE_NAME_PREFIX} - mock {len(self.added_files)}"
            self.logger.info(f"[MOCK] Created timeline {self.current_timeline}")
            return TimelineResult(
                success=True,
                timeline_name=self.current_timeline,
                created_new_timeline=True,
                message=f'Recording added to new timeline "{self.current_timeline}"',
            )

        self.logger.info(f"[MOCK] Appended {file_path} to {self.current_timeline}")
        return TimelineResult(
            success=True,
            timeline_name=self.current_timeline,
            created_new_timeline=False,
            message=f'Recording added to existing timeline "{self.current_timeline}"',
        )

    def is_available(self) -> bool:
        return self.fail_with is None

    def get_add_count(self) -> int:
        return len(self.added_files)


class RaisingTimeline(MockTimeline):
    """Mock whose add raises instead of returning a failed result."""

    def add_recording_to_timeline(self, file_path: str) -> TimelineResult:
        with self._lock:
            self.added_files.append(file_path)
        raise TimelineError(self.fail_with or "Simulated timeline crash")
