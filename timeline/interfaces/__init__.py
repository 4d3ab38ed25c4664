"""
Timeline Interfaces Package
"""

from timeline.interfaces.timeline_interface import (
    TimelineError,
    TimelineInterface,
    TimelineResult,
)

__all__ = [
    "TimelineError",
    "TimelineInterface",
    "TimelineResult",
]
