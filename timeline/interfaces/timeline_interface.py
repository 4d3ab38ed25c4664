"""
Timeline Interface

Abstract interface for the editing-application integration that receives
finished recordings.

High-level code (CompletionRelay) depends on this abstraction, not on the
DaVinci Resolve scripting API directly.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class TimelineResult:
    """
    Result of adding a recording to a timeline.

    Attributes:
        success: True if the clip is on a timeline
        timeline_name: Timeline the clip went to
        created_new_timeline: True if no timeline was open and one was created
        message: Human-readable summary
        error: Error description (if failed)
    """

    success: bool
    timeline_name: Optional[str] = None
    created_new_timeline: bool = False
    message: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        if not self.success:
            return {"success": False, "error": self.error}
        return {
            "success": True,
            "timelineName": self.timeline_name,
            "createdNewTimeline": self.created_new_timeline,
            "message": self.message,
        }


class TimelineInterface(ABC):
    """
    Abstract base class for timeline integrations.
    """

    @abstractmethod
    def add_recording_to_timeline(self, file_path: str) -> TimelineResult:
        """
        Import a recording and put it on a timeline.

        Appends to the current timeline, or creates a new one when no
        timeline is open. May block for several seconds; callers run it
        off their control thread.

        Args:
            file_path: Finished recording

        Returns:
            TimelineResult; failures are reported, not raised

        Example:
            result = timeline.add_recording_to_timeline("/recordings/rec.mp4")
            if not result.success:
                print(f"Import manually: {result.error}")
        """

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check if the editing application can be reached.

        Returns:
            True if a connection could be made
        """


class TimelineError(Exception):
    """
    Exception raised inside timeline integrations.

    Examples:
    - Scripting module not installed
    - Application not running / no project open
    - Import rejected the file
    """
