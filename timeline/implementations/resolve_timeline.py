"""
DaVinci Resolve Timeline Implementation

Adds recordings to the current DaVinci Resolve project through Resolve's
Python scripting API.

The scripting module ships with Resolve itself (not on PyPI) and is only
importable while RESOLVE_SCRIPT_API / PYTHONPATH point at it, so it is
imported on first use rather than at module import.
"""

import importlib
import logging
from datetime import datetime
from typing import Any, Optional

from config.settings import RESOLVE_SCRIPT_MODULE, TIMELINE_NAME_PREFIX
from timeline.interfaces.timeline_interface import (
    TimelineError,
    TimelineInterface,
    TimelineResult,
)


class ResolveTimeline(TimelineInterface):
    """
    Timeline integration for DaVinci Resolve.

    Usage:
        timeline = ResolveTimeline()
        result = timeline.add_recording_to_timeline("/recordings/rec.mp4")
        print(result.message)
    """

    def __init__(self, module_name: str = RESOLVE_SCRIPT_MODULE):
        self.logger = logging.getLogger(__name__)
        self.module_name = module_name

        # Cached API objects
        self._resolve: Optional[Any] = None

    def add_recording_to_timeline(self, file_path: str) -> TimelineResult:
        self.logger.info(f"Adding recording to timeline: {file_path}")

        try:
            resolve = self._get_resolve()

            media_storage = resolve.GetMediaStorage()
            if not media_storage:
                raise TimelineError("Failed to get media storage")

            project = self._get_current_project(resolve)

            media_pool = project.GetMediaPool()
            if not media_pool:
                raise TimelineError("Failed to get media pool")

            clips = media_storage.AddItemListToMediaPool([file_path])
            if not clips:
                raise TimelineError("Failed to import media file")

            timeline = project.GetCurrentTimeline()
            if not timeline:
                timeline_name = f"{TIMELINE_NAME_PREFIX} - {datetime.now():%Y-%m-%d %H:%M:%S}"
                timeline = media_pool.CreateTimelineFromClips(timeline_name, clips)
                if not timeline:
                    raise TimelineError("Failed to create timeline")
                if not project.SetCurrentTimeline(timeline):
                    raise TimelineError("Failed to set current timeline")

                self.logger.info(f"Created new timeline: {timeline_name}")
                return TimelineResult(
                    success=True,
                    timeline_name=timeline_name,
                    created_new_timeline=True,
                    message=f'Recording added to new timeline "{timeline_name}"',
                )

            timeline_name = timeline.GetName()
            self.logger.info(f"Using existing timeline: {timeline_name}")
            self._append_clip(media_pool, clips[0])

            return TimelineResult(
                success=True,
                timeline_name=timeline_name,
                created_new_timeline=False,
                message=f'Recording added to existing timeline "{timeline_name}"',
            )

        except TimelineError as e:
            self.logger.error(f"Error adding recording to timeline: {e}")
            return TimelineResult(success=False, error=str(e))

        except Exception as e:
            # Scripting bridge errors surface as arbitrary exception types
            self.logger.error(f"Unexpected Resolve API error: {e}", exc_info=True)
            self.reset_cache()
            return TimelineResult(success=False, error=str(e))

    def is_available(self) -> bool:
        try:
            self._get_resolve()
            return True
        except TimelineError as e:
            self.logger.debug(f"Resolve not available: {e}")
            return False

    def reset_cache(self) -> None:
        """Forget the cached connection (e.g. after Resolve restarted)"""
        self._resolve = None

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _get_resolve(self) -> Any:
        if self._resolve is not None:
            return self._resolve

        try:
            module = importlib.import_module(self.module_name)
        except ImportError as e:
            raise TimelineError(
                f"DaVinci Resolve scripting module '{self.module_name}' not found: {e}"
            ) from e

        resolve = module.scriptapp("Resolve")
        if not resolve:
            raise TimelineError("Failed to connect to DaVinci Resolve (is it running?)")

        self.logger.info("Resolve interface initialized successfully")
        self._resolve = resolve
        return resolve

    def _get_current_project(self, resolve: Any) -> Any:
        project_manager = resolve.GetProjectManager()
        if not project_manager:
            raise TimelineError("Failed to get project manager")

        project = project_manager.GetCurrentProject()
        if not project:
            raise TimelineError("No project is open in DaVinci Resolve")
        return project

    def _append_clip(self, media_pool: Any, clip: Any) -> None:
        """Append a clip to the current timeline, trying both call forms."""
        attempts = [
            ("AppendToTimeline (items)", lambda: media_pool.AppendToTimeline([clip])),
            ("AppendToTimeline (clip info)", lambda: media_pool.AppendToTimeline([{"mediaPoolItem": clip}])),
        ]

        for name, attempt in attempts:
            try:
                if attempt():
                    self.logger.info(f"Clip added successfully using {name}")
                    return
            except Exception as e:
                self.logger.warning(f"{name} failed: {e}")

        raise TimelineError("Failed to add clip to timeline using any available method")
