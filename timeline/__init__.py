"""
Timeline Module

Hands finished recordings to the editing application.

Public API:
    - TimelineFactory: Pick Resolve, mock, or no integration
    - TimelineInterface / TimelineResult: Integration contract
    - TimelineError: Raised inside integrations, never past CompletionRelay

Usage:
    from timeline import TimelineFactory

    timeline = TimelineFactory.create_timeline()
    if timeline:
        print(timeline.add_recording_to_timeline("rec.mp4").message)
"""

from timeline.factory import TimelineFactory
from timeline.implementations.mock_timeline import MockTimeline
from timeline.implementations.resolve_timeline import ResolveTimeline
from timeline.interfaces.timeline_interface import (
    TimelineError,
    TimelineInterface,
    TimelineResult,
)

__all__ = [
    "MockTimeline",
    "ResolveTimeline",
    "TimelineError",
    "TimelineFactory",
    "TimelineInterface",
    "TimelineResult",
]
