"""
Command Builder

Translates a CaptureRequest into capture-tool invocations.

Screen sources (desktop, window, region) become an argument vector for a
direct spawn, with or without an audio device. Window titles come from
other programs and never reach a shell. Camera sources become one shell
string: dshow device names with spaces, parentheses or accents are only
passed through reliably when quoted on a command line. Every value in that
string is quoted for the shell that runs it (cmd.exe on Windows, sh
elsewhere).

Command layout (every form):
    ffmpeg [audio input] <video input> <encoding> [audio encoding]
           [-flush_packets 1] [-vf scale=WxH] <output path>

The audio input goes first because the dshow source only accepts the
audio device when it precedes the video input.
"""

import logging
import os
import re
import shlex
from pathlib import Path
from typing import List, Literal, Optional, Tuple

from config.settings import (
    AUDIO_BITRATE,
    AUDIO_CODEC,
    CAMERA_RESOLUTION_LADDER,
    DEFAULT_RESOLUTION,
    DESKTOP_RESOLUTION,
    DEVICE_INPUT_FORMAT,
    FFMPEG_PATH,
    MAX_FALLBACK_ATTEMPTS,
    MAX_FRAMERATE,
    MAX_RESOLUTION,
    MIN_FRAMERATE,
    MIN_REGION_SIZE,
    MIN_RESOLUTION,
    REGION_ANALYZE_DURATION,
    REGION_PROBE_SIZE,
    SCREEN_INPUT_FORMAT,
    VIDEO_CODEC,
    VIDEO_CRF,
    VIDEO_PIXEL_FORMAT,
    VIDEO_PRESET,
    VIRTUAL_CAMERA_FRAMERATE,
    VIRTUAL_CAMERA_PATTERNS,
)
from recording.constants import SourceType
from recording.interfaces.capture_process_interface import InvalidRequestError
from recording.models.capture_models import CaptureRequest, CommandSpec
from recording.utils.recording_utils import attempt_name, attempt_output_path
from region.controllers.region_negotiator import validate_region
from region.interfaces.region_selector_interface import Rect

# Type alias
ShellStyle = Literal["cmd", "posix"]

_RESOLUTION_PATTERN = re.compile(r"^(\d+)x(\d+)$")

# Token prefixes whose value is a device name
_NAMED_INPUT_PREFIXES = ("video=", "audio=")

# cmd.exe ends a quoted token at " and expands %VAR% even inside quotes
_CMD_UNQUOTABLE = ('"', "%")
_CMD_SPECIAL = re.compile(r"[\s'()&|<>^!]")


def clean_camera_name(name: str) -> str:
    """
    Normalize a camera name for the command line.

    Square brackets confuse the dshow name lookup and some enumeration
    output wraps names in them.

    Example:
        clean_camera_name(" [Integrated Camera] ") -> "Integrated Camera"
    """
    return re.sub(r"[\[\]]", "", name).strip()


def is_virtual_camera(name: str) -> bool:
    """True for virtual-class cameras that only run at their native rate"""
    lowered = name.lower()
    return any(pattern in lowered for pattern in VIRTUAL_CAMERA_PATTERNS)


def parse_resolution(value: str) -> Tuple[int, int]:
    """
    Parse a "WxH" string.

    Raises:
        InvalidRequestError: If the format is wrong or the size is outside
                             the supported range
    """
    match = _RESOLUTION_PATTERN.match(value.strip())
    if not match:
        raise InvalidRequestError(
            f"Invalid resolution '{value}'. Use WIDTHxHEIGHT (e.g. 1920x1080) or 'desktop'."
        )

    width, height = int(match.group(1)), int(match.group(2))
    min_width, min_height = MIN_RESOLUTION
    max_width, max_height = MAX_RESOLUTION
    if not (min_width <= width <= max_width and min_height <= height <= max_height):
        raise InvalidRequestError(
            f"Resolution {width}x{height} out of range "
            f"({min_width}x{min_height} - {max_width}x{max_height})"
        )
    return width, height


def default_shell_style() -> ShellStyle:
    """Shell that runs composed commands on this host"""
    return "cmd" if os.name == "nt" else "posix"


def quote_shell_value(value: str, style: ShellStyle, force: bool = False) -> str:
    """
    Quote one value so the shell passes it through as a single literal.

    Args:
        value: Raw value (device name, path, option)
        style: "cmd" (Windows cmd.exe) or "posix" (/bin/sh)
        force: Quote even when the value needs no quoting

    Raises:
        InvalidRequestError: If cmd.exe cannot carry the value literally

    Example:
        quote_shell_value("Docs $(id)", "posix") -> "'Docs $(id)'"
        quote_shell_value("HD Webcam", "cmd")    -> '"HD Webcam"'
    """
    if style == "cmd":
        if any(char in value for char in _CMD_UNQUOTABLE):
            raise InvalidRequestError(
                f"Value {value!r} contains characters cmd.exe cannot pass literally"
            )
        if force or not value or _CMD_SPECIAL.search(value):
            return f'"{value}"'
        return value

    quoted = shlex.quote(value)
    if force and not quoted.startswith("'"):
        quoted = f"'{quoted}'"
    return quoted


def _shell_token(token: str, style: ShellStyle) -> str:
    for prefix in _NAMED_INPUT_PREFIXES:
        if token.startswith(prefix):
            return prefix + quote_shell_value(token[len(prefix):], style, force=True)
    return quote_shell_value(token, style)


class CommandBuilder:
    """
    Builds capture commands.

    Pure: building never touches the filesystem or spawns anything.

    Usage:
        builder = CommandBuilder()
        command = builder.build(request, Path("out.mp4"))
        ladder = builder.build_fallback_ladder(camera_request, Path("out.mp4"))
    """

    def __init__(
        self,
        ffmpeg_path: str = FFMPEG_PATH,
        max_attempts: int = MAX_FALLBACK_ATTEMPTS,
        min_region_size: int = MIN_REGION_SIZE,
        shell_style: Optional[ShellStyle] = None,
    ):
        """
        Initialize builder.

        Args:
            ffmpeg_path: Capture tool executable (first token of every command)
            max_attempts: Camera ladder length
            min_region_size: Minimum region edge in pixels
            shell_style: Quoting for camera shell strings (default: this host's shell)
        """
        self.logger = logging.getLogger(__name__)
        self.ffmpeg_path = ffmpeg_path
        self.max_attempts = max_attempts
        self.min_region_size = min_region_size
        self.shell_style = shell_style or default_shell_style()

    # =========================================================================
    # VALIDATION
    # =========================================================================

    def validate_request(self, request: CaptureRequest) -> None:
        """
        Check required fields and ranges.

        Raises:
            InvalidRequestError: On the first problem found
        """
        if request.source_type == SourceType.WINDOW and not (request.window_title or "").strip():
            raise InvalidRequestError("Window recording requires a window title")

        if request.source_type == SourceType.CAMERA:
            if not clean_camera_name(request.camera_name or ""):
                raise InvalidRequestError("Camera recording requires a camera name")

        if not isinstance(request.framerate, int) or isinstance(request.framerate, bool):
            raise InvalidRequestError(f"Framerate must be an integer, got {request.framerate!r}")
        if not MIN_FRAMERATE <= request.framerate <= MAX_FRAMERATE:
            raise InvalidRequestError(
                f"Framerate {request.framerate} out of range ({MIN_FRAMERATE}-{MAX_FRAMERATE})"
            )

        if request.resolution and request.resolution != DESKTOP_RESOLUTION:
            parse_resolution(request.resolution)

    # =========================================================================
    # BUILDING
    # =========================================================================

    def build(
        self,
        request: CaptureRequest,
        output_path: Path,
        region: Optional[Rect] = None,
        audio_device: Optional[str] = None,
    ) -> CommandSpec:
        """
        Build the command for a request.

        For cameras this is the first rung of the fallback ladder.

        Args:
            request: What to record
            output_path: Where the recording goes (always the last token)
            region: Rectangle for region capture (falls back to request.region)
            audio_device: Display name of the microphone to add, if any

        Returns:
            CommandSpec (argument vector for screen sources, shell string
            for cameras)

        Raises:
            InvalidRequestError: Missing window title / camera name, bad
                                 framerate or resolution, region capture
                                 without a region
            RegionTooSmallError: Region below the minimum size
        """
        self.validate_request(request)

        if request.source_type == SourceType.CAMERA:
            return self.build_fallback_ladder(request, output_path, audio_device)[0]

        region = region or request.region
        if request.source_type == SourceType.REGION and region is None:
            raise InvalidRequestError("Region recording requires a selected region")
        if request.source_type == SourceType.WINDOW:
            region = None

        if region is not None:
            region = validate_region(region, self.min_region_size)
            video_input = self._region_input(request, region)
            label = "Region capture"
        elif request.source_type == SourceType.WINDOW:
            video_input = [
                "-f", SCREEN_INPUT_FORMAT,
                "-framerate", str(request.framerate),
                "-i", f"title={request.window_title}",
            ]
            label = "Window capture"
        else:
            video_input = [
                "-f", SCREEN_INPUT_FORMAT,
                "-framerate", str(request.framerate),
                "-i", "desktop",
            ]
            label = "Desktop capture"

        scale = None
        if request.resolution and request.resolution != DESKTOP_RESOLUTION and region is None:
            scale = request.resolution

        tokens = self._assemble(video_input, output_path, audio_device, scale=scale)
        return CommandSpec(output_path=output_path, args=tokens, label=label)

    def build_fallback_ladder(
        self,
        request: CaptureRequest,
        output_path: Path,
        audio_device: Optional[str] = None,
    ) -> List[CommandSpec]:
        """
        Build the ordered camera commands, one per attempt.

        Each attempt declares a different capture size and writes to its own
        file (attempt 0 uses output_path, attempt i uses "<stem>_attempt<i>").
        Virtual-class cameras get a single command at their native rate.

        Returns:
            List of shell-string CommandSpecs
        """
        self.validate_request(request)
        if request.source_type != SourceType.CAMERA:
            return [self.build(request, output_path, audio_device=audio_device)]

        camera = clean_camera_name(request.camera_name or "")
        target = request.resolution or DEFAULT_RESOLUTION
        if target == DESKTOP_RESOLUTION:
            target = None

        if is_virtual_camera(camera):
            self.logger.info(
                f"Virtual camera '{camera}': forcing {VIRTUAL_CAMERA_FRAMERATE} fps"
            )
            video_input = [
                "-f", DEVICE_INPUT_FORMAT,
                "-framerate", str(VIRTUAL_CAMERA_FRAMERATE),
                "-i", f"video={camera}",
            ]
            tokens = self._assemble(
                video_input, output_path, audio_device,
                scale=target, flush_packets=True,
            )
            return [CommandSpec(
                output_path=output_path,
                shell_command=self._to_shell(tokens),
                label=attempt_name(0),
            )]

        ladder = []
        for index, capture_size in enumerate(CAMERA_RESOLUTION_LADDER[:self.max_attempts]):
            attempt_path = attempt_output_path(output_path, index)

            video_input = ["-f", DEVICE_INPUT_FORMAT, "-framerate", str(request.framerate)]
            if capture_size:
                video_input += ["-video_size", capture_size]
            video_input += ["-i", f"video={camera}"]

            # Scale only when the device delivers a different size
            delivered = capture_size or DEFAULT_RESOLUTION
            scale = target if target and target != delivered else None

            tokens = self._assemble(
                video_input, attempt_path, audio_device,
                scale=scale, flush_packets=True,
            )
            ladder.append(CommandSpec(
                output_path=attempt_path,
                shell_command=self._to_shell(tokens),
                label=attempt_name(index),
            ))

        return ladder

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _region_input(self, request: CaptureRequest, region: Rect) -> List[str]:
        self.logger.debug(f"Recording region: {region.size} at ({region.x}, {region.y})")
        return [
            "-f", SCREEN_INPUT_FORMAT,
            "-video_size", region.size,
            "-framerate", str(request.framerate),
            "-offset_x", str(region.x),
            "-offset_y", str(region.y),
            "-i", "desktop",
            "-draw_mouse", "1",
            "-probesize", REGION_PROBE_SIZE,
            "-analyzeduration", REGION_ANALYZE_DURATION,
        ]

    def _assemble(
        self,
        video_input: List[str],
        output_path: Path,
        audio_device: Optional[str],
        scale: Optional[str] = None,
        flush_packets: bool = False,
    ) -> List[str]:
        tokens = [self.ffmpeg_path]

        if audio_device:
            tokens += ["-f", DEVICE_INPUT_FORMAT, "-i", f"audio={audio_device}"]

        tokens += video_input
        tokens += [
            "-c:v", VIDEO_CODEC,
            "-preset", VIDEO_PRESET,
            "-crf", str(VIDEO_CRF),
            "-pix_fmt", VIDEO_PIXEL_FORMAT,
        ]

        if audio_device:
            tokens += ["-c:a", AUDIO_CODEC, "-b:a", AUDIO_BITRATE]

        # Keeps files readable when the process is killed mid-write
        if flush_packets:
            tokens += ["-flush_packets", "1"]

        if scale:
            tokens += ["-vf", f"scale={scale}"]

        tokens.append(str(output_path))
        return tokens

    def _to_shell(self, tokens: List[str]) -> str:
        # Output path is always quoted, even without spaces
        body = [_shell_token(token, self.shell_style) for token in tokens[:-1]]
        output = quote_shell_value(tokens[-1], self.shell_style, force=True)
        return " ".join(body + [output])
