"""
Capture Models

Data classes describing what to record, how the capture tool is invoked,
and what the caller gets back.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from config.settings import DEFAULT_FRAMERATE
from recording.constants import RecordingError, SourceType
from region.interfaces.region_selector_interface import Rect


@dataclass
class CaptureRequest:
    """
    A request to start recording.

    Attributes:
        source_type: What to capture
        framerate: Requested frames per second (1-120)
        resolution: "WxH" output size, "desktop" for native, None for default
        window_title: Required for SourceType.WINDOW
        camera_name: Required for SourceType.CAMERA (display name)
        audio_device_name: Optional microphone (display name)
        region: Pre-selected rectangle for SourceType.REGION; None means
                ask the region selector interactively
    """

    source_type: SourceType
    framerate: int = DEFAULT_FRAMERATE
    resolution: Optional[str] = None
    window_title: Optional[str] = None
    camera_name: Optional[str] = None
    audio_device_name: Optional[str] = None
    region: Optional[Rect] = None

    def __post_init__(self):
        """Accept plain strings for source_type (e.g. from a CLI or JSON)"""
        if not isinstance(self.source_type, SourceType):
            self.source_type = SourceType(self.source_type)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CaptureRequest":
        """
        Build a request from a loosely-typed mapping.

        Accepts both snake_case and the camelCase keys used by front-ends.

        Example:
            CaptureRequest.from_dict({"sourceType": "window", "windowTitle": "My App"})
        """
        def pick(*keys):
            for key in keys:
                if key in data and data[key] is not None:
                    return data[key]
            return None

        region = pick("region")
        if isinstance(region, dict):
            fields = ("x", "y", "width", "height")
            missing = [k for k in fields if region.get(k) is None]
            if missing:
                raise ValueError(f"Region is missing {', '.join(missing)}")
            region = Rect(**{k: int(region[k]) for k in fields})

        framerate = pick("framerate")
        return cls(
            source_type=pick("source_type", "sourceType") or SourceType.DESKTOP,
            framerate=int(framerate) if framerate is not None else DEFAULT_FRAMERATE,
            resolution=pick("resolution"),
            window_title=pick("window_title", "windowTitle"),
            camera_name=pick("camera_name", "cameraName"),
            audio_device_name=pick("audio_device_name", "audioDeviceName", "audioDevice"),
            region=region,
        )


@dataclass
class CommandSpec:
    """
    A fully built capture-tool invocation.

    Exactly one of ``args`` or ``shell_command`` is set:
    - args: argument vector for a direct (shell-less) spawn
    - shell_command: one composed string for a shell spawn (camera capture,
      where device names with spaces/parentheses/Unicode must be quoted)

    The output path is always the last token of either form.
    """

    output_path: Path
    args: Optional[List[str]] = None
    shell_command: Optional[str] = None
    label: str = "capture"

    def __post_init__(self):
        if (self.args is None) == (self.shell_command is None):
            raise ValueError("CommandSpec needs exactly one of args or shell_command")

    @property
    def is_shell(self) -> bool:
        """True if this command must be run through a shell"""
        return self.shell_command is not None

    def display(self) -> str:
        """Printable form of the command for logs"""
        if self.shell_command is not None:
            return self.shell_command
        return " ".join(self.args or [])


@dataclass
class CompletionResult:
    """
    Final outcome of one capture session. Produced exactly once.

    Attributes:
        success: True if a usable recording exists at output_path
        output_path: The recording (never a failed attempt's file)
        timeline_result: What the timeline integration returned, if called
        error: Failure reason, or advisory text when success=True
               (e.g. timeline import failed - import manually)
        warning: Non-fatal note (e.g. stopped by user, unusual exit code)
        error_code: Machine-readable error for failures
        attempts: Number of capture processes launched
    """

    success: bool
    output_path: Optional[Path] = None
    timeline_result: Optional[Any] = None
    error: Optional[str] = None
    warning: Optional[str] = None
    error_code: Optional[RecordingError] = None
    attempts: int = 0

    def with_timeline_result(self, timeline_result: Any) -> "CompletionResult":
        """Copy of this result with the timeline outcome attached."""
        error = self.error
        error_code = self.error_code
        if timeline_result is not None and not getattr(timeline_result, "success", False):
            reason = getattr(timeline_result, "error", None) or "unknown error"
            error = (
                f"Recording saved but could not be added to the timeline "
                f"({reason}). Import {self.output_path} manually."
            )
            error_code = RecordingError.INTEGRATION_FAILURE
        return CompletionResult(
            success=self.success,
            output_path=self.output_path,
            timeline_result=timeline_result,
            error=error,
            warning=self.warning,
            error_code=error_code,
            attempts=self.attempts,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Plain mapping for front-ends"""
        timeline = self.timeline_result
        if timeline is not None and hasattr(timeline, "to_dict"):
            timeline = timeline.to_dict()
        return {
            "success": self.success,
            "filePath": str(self.output_path) if self.output_path else None,
            "timelineResult": timeline,
            "error": self.error,
            "warning": self.warning,
        }


@dataclass
class StartResult:
    """Synchronous answer to start_recording()."""

    success: bool
    file_path: Optional[Path] = None
    error: Optional[RecordingError] = None
    message: Optional[str] = None

    def to_dict(self) -> Dict[str, Union[bool, str, None]]:
        if self.success:
            return {"success": True, "filePath": str(self.file_path)}
        return {
            "success": False,
            "error": self.error.value if self.error else None,
            "message": self.message,
        }


@dataclass
class StopResult:
    """Synchronous answer to stop_recording()."""

    success: bool
    error: Optional[RecordingError] = None
    message: Optional[str] = None

    def to_dict(self) -> Dict[str, Union[bool, str, None]]:
        if self.success:
            return {"success": True}
        return {
            "success": False,
            "error": self.error.value if self.error else None,
            "message": self.message,
        }


@dataclass
class RecorderStatus:
    """Snapshot returned by get_state()."""

    is_recording: bool
    current_recording_path: Optional[Path] = None
    has_process: bool = False
    state: Optional[str] = None
    attempt_index: int = 0
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isRecording": self.is_recording,
            "currentRecordingPath": (
                str(self.current_recording_path) if self.current_recording_path else None
            ),
            "hasProcess": self.has_process,
        }
