"""
DirectShow Enumerator

Real source discovery on Windows:
- windows: PowerShell Get-Process, JSON output
- cameras and audio inputs: ``ffmpeg -list_devices true -f dshow -i dummy``

ffmpeg prints the device list on stderr and then exits with an error
(there is no "dummy" input), so the exit code is ignored.
"""

import json
import logging
import re
import shutil
import subprocess
from typing import List, Tuple

from config.settings import (
    DEVICE_ENUMERATION_TIMEOUT,
    DEVICE_INPUT_FORMAT,
    FFMPEG_PATH,
    MICROPHONE_PATTERNS,
    POWERSHELL_LIST_WINDOWS,
    VIRTUAL_CAMERA_PATTERNS,
)
from sources.interfaces.device_enumerator_interface import (
    Device,
    DeviceEnumeratorInterface,
    EnumerationError,
    WindowSource,
)

logger = logging.getLogger(__name__)

_QUOTED_NAME = re.compile(r'"([^"]+)"')
_ALTERNATIVE_NAME = re.compile(r'Alternative name "([^"]+)"')


def _matches(name: str, patterns: List[str]) -> bool:
    lowered = name.lower()
    return any(pattern in lowered for pattern in patterns)


def parse_dshow_devices(output: str) -> Tuple[List[Device], List[Device]]:
    """
    Parse the device listing printed by ffmpeg's dshow input.

    Handles both layouts ffmpeg has used:
    - section headers ("DirectShow video devices" / "DirectShow audio
      devices") followed by quoted names
    - one line per device with a "(video)" / "(audio)" suffix

    An 'Alternative name "..."' line belongs to the device above it.

    Args:
        output: Captured stderr of the listing command

    Returns:
        Tuple of (video devices, audio devices)

    Example:
        [dshow @ 0000] "Integrated Camera" (video)
        [dshow @ 0000]   Alternative name "@device_pnp_\\\\?\\usb#vid..."
        [dshow @ 0000] "Microphone (Realtek Audio)" (audio)
    """
    video: List[dict] = []
    audio: List[dict] = []
    section = None
    last = None

    for line in output.splitlines():
        if "DirectShow video devices" in line:
            section = "video"
            continue
        if "DirectShow audio devices" in line:
            section = "audio"
            continue

        alt_match = _ALTERNATIVE_NAME.search(line)
        if alt_match:
            if last is not None:
                last["alternate_name"] = alt_match.group(1)
            continue

        name_match = _QUOTED_NAME.search(line)
        if not name_match:
            continue

        if "(video)" in line:
            kind = "video"
        elif "(audio)" in line:
            kind = "audio"
        elif "(none)" in line:
            last = None
            continue
        else:
            kind = section

        if kind is None:
            continue

        entry = {"display_name": name_match.group(1), "alternate_name": None}
        (video if kind == "video" else audio).append(entry)
        last = entry

    cameras = [
        Device(
            display_name=entry["display_name"],
            alternate_name=entry["alternate_name"],
            is_virtual=_matches(entry["display_name"], VIRTUAL_CAMERA_PATTERNS),
        )
        for entry in video
    ]
    microphones = [
        Device(
            display_name=entry["display_name"],
            alternate_name=entry["alternate_name"],
            is_default=_matches(entry["display_name"], MICROPHONE_PATTERNS),
        )
        for entry in audio
    ]
    return cameras, microphones


def parse_window_list(output: str) -> List[WindowSource]:
    """
    Parse PowerShell's ConvertTo-Json process list.

    A single process is serialized as an object, several as an array.
    Entries without a window title are dropped.

    Raises:
        EnumerationError: If the output is not valid JSON
    """
    if not output.strip():
        return []

    try:
        parsed = json.loads(output)
    except json.JSONDecodeError as e:
        raise EnumerationError(f"Could not parse window list: {e}") from e

    processes = parsed if isinstance(parsed, list) else [parsed]
    windows = []
    for process in processes:
        title = (process.get("MainWindowTitle") or "").strip()
        if not title:
            continue
        windows.append(WindowSource(
            title=process["MainWindowTitle"],
            process_name=process.get("ProcessName") or "Unknown",
            pid=process.get("Id") or 0,
        ))
    return windows


class DirectShowEnumerator(DeviceEnumeratorInterface):
    """
    Windows source discovery through PowerShell and ffmpeg/dshow.

    Usage:
        enumerator = DirectShowEnumerator()
        cameras = enumerator.list_video_devices()
    """

    def __init__(
        self,
        ffmpeg_path: str = FFMPEG_PATH,
        timeout: float = DEVICE_ENUMERATION_TIMEOUT,
    ):
        self.logger = logging.getLogger(__name__)
        self.ffmpeg_path = ffmpeg_path
        self.timeout = timeout

    def list_windows(self) -> List[WindowSource]:
        output = self._run(
            ["powershell", "-NoProfile", "-Command", POWERSHELL_LIST_WINDOWS],
            use_stderr=False,
        )
        windows = parse_window_list(output)
        self.logger.info(f"Found {len(windows)} windows with titles")
        return windows

    def list_video_devices(self) -> List[Device]:
        cameras, _ = parse_dshow_devices(self._list_dshow())
        self.logger.info(f"Found cameras: {[c.display_name for c in cameras]}")
        return cameras

    def list_audio_devices(self) -> List[Device]:
        _, microphones = parse_dshow_devices(self._list_dshow())
        self.logger.info(f"Found audio devices: {[d.display_name for d in microphones]}")
        return microphones

    def is_available(self) -> bool:
        return shutil.which(self.ffmpeg_path) is not None and shutil.which("powershell") is not None

    def _list_dshow(self) -> str:
        return self._run(
            [self.ffmpeg_path, "-hide_banner", "-list_devices", "true",
             "-f", DEVICE_INPUT_FORMAT, "-i", "dummy"],
            use_stderr=True,
        )

    def _run(self, command: List[str], use_stderr: bool) -> str:
        try:
            result = subprocess.run(
                command,
                capture_output=True,
                timeout=self.timeout,
                encoding="utf-8",
                errors="replace",
            )
        except FileNotFoundError as e:
            raise EnumerationError(f"{command[0]} not found: {e}") from e
        except subprocess.TimeoutExpired as e:
            raise EnumerationError(f"{command[0]} timed out after {self.timeout}s") from e

        if use_stderr:
            return result.stderr or result.stdout or ""

        if result.returncode != 0:
            raise EnumerationError(
                f"{command[0]} exited with {result.returncode}: {result.stderr.strip()}"
            )
        return result.stdout
