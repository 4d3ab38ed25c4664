"""
Timeline Implementations Package
"""

from timeline.implementations.mock_timeline import MockTimeline, RaisingTimeline
from timeline.implementations.resolve_timeline import ResolveTimeline

__all__ = [
    "MockTimeline",
    "RaisingTimeline",
    "ResolveTimeline",
]
