"""
Recording Utilities

Shared helpers for output files: naming, validity checks, listing, and
checking that the capture tool is installed.
"""

import logging
import subprocess
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from config.settings import (
    ATTEMPT_SUFFIX_FORMAT,
    FFMPEG_PATH,
    MIN_VALID_RECORDING_BYTES,
    RECORDINGS_DIR,
    VIDEO_FILENAME_EXTENSION,
    VIDEO_FILENAME_PREFIX,
    VIDEO_FILENAME_TIMESTAMP,
)

logger = logging.getLogger(__name__)


def generate_filename(
    base_path: Path,
    now: Optional[datetime] = None,
    extension: str = VIDEO_FILENAME_EXTENSION,
) -> Path:
    """
    Generate timestamped filename for a recording.

    A numeric suffix is added if a file with the same timestamp exists.

    Args:
        base_path: Directory where file will be saved
        now: Timestamp to use (default: current time)
        extension: File extension including the dot

    Returns:
        Complete file path

    Example:
        path = generate_filename(Path("/recordings"))
        # Returns: /recordings/screen-recording-2025-01-15T14-30-22.mp4
    """
    timestamp = (now or datetime.now()).strftime(VIDEO_FILENAME_TIMESTAMP)
    stem = f"{VIDEO_FILENAME_PREFIX}-{timestamp}"

    candidate = base_path / f"{stem}{extension}"
    counter = 1
    while candidate.exists():
        candidate = base_path / f"{stem}-{counter}{extension}"
        counter += 1

    return candidate


def attempt_output_path(base_path: Path, attempt_index: int) -> Path:
    """
    Output path for one attempt of the camera fallback ladder.

    The first attempt writes to the base path; later attempts get their own
    file so a half-written file from a failed attempt is never reused.

    Example:
        attempt_output_path(Path("rec.mp4"), 0) -> rec.mp4
        attempt_output_path(Path("rec.mp4"), 2) -> rec_attempt2.mp4
    """
    if attempt_index == 0:
        return base_path

    suffix = ATTEMPT_SUFFIX_FORMAT.format(index=attempt_index)
    return base_path.with_name(f"{base_path.stem}{suffix}{base_path.suffix}")


def attempt_name(attempt_index: int) -> str:
    """Label used in logs: "Primary approach", "Fallback 1", ..."""
    if attempt_index == 0:
        return "Primary approach"
    return f"Fallback {attempt_index}"


def get_file_size(path: Optional[Path]) -> int:
    """Size in bytes, 0 if the file is missing or unreadable"""
    if path is None:
        return 0
    try:
        return path.stat().st_size
    except OSError:
        return 0


def file_has_content(path: Optional[Path]) -> bool:
    """True if the file exists and is not empty"""
    return get_file_size(path) > 0


def is_valid_recording(
    path: Optional[Path],
    min_bytes: int = MIN_VALID_RECORDING_BYTES,
) -> bool:
    """
    Check whether a finished recording is usable.

    A file at or below the threshold is what the capture tool leaves
    behind when it was stopped before writing any frames.

    Args:
        path: Output file
        min_bytes: Size the file must exceed

    Returns:
        True if the file exists and is larger than min_bytes
    """
    size = get_file_size(path)
    if size <= min_bytes:
        logger.debug(f"Recording {path} not valid ({size} bytes <= {min_bytes})")
        return False
    return True


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in human-readable format.

    Example:
        format_file_size(45000000)  # "42.9 MB"
    """
    if size_bytes <= 0:
        return "0 B"

    units = ['B', 'KB', 'MB', 'GB', 'TB']
    unit_index = 0
    size = float(size_bytes)

    while size >= 1024.0 and unit_index < len(units) - 1:
        size /= 1024.0
        unit_index += 1

    if unit_index == 0:
        return f"{int(size)} {units[unit_index]}"
    return f"{size:.1f} {units[unit_index]}"


def list_recordings(directory: Path = RECORDINGS_DIR) -> List[Dict[str, Any]]:
    """
    List finished recordings, newest first.

    Args:
        directory: Recordings directory

    Returns:
        List of dicts with name, path, size and modified (datetime)

    Example:
        for rec in list_recordings():
            print(rec["name"], format_file_size(rec["size"]))
    """
    if not directory.exists():
        return []

    recordings = []
    for path in directory.glob(f"*{VIDEO_FILENAME_EXTENSION}"):
        try:
            stat = path.stat()
        except OSError as e:
            logger.warning(f"Skipping unreadable recording {path.name}: {e}")
            continue
        recordings.append({
            "name": path.name,
            "path": path,
            "size": stat.st_size,
            "modified": datetime.fromtimestamp(stat.st_mtime),
        })

    recordings.sort(key=lambda r: r["modified"], reverse=True)
    return recordings


def check_ffmpeg_available(ffmpeg_path: str = FFMPEG_PATH, timeout: float = 10.0) -> bool:
    """
    Check that the capture tool can be executed.

    Runs ``ffmpeg -version`` and looks at the exit code.

    Returns:
        True if the command ran and exited with 0
    """
    try:
        result = subprocess.run(
            [ffmpeg_path, "-version"],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            timeout=timeout,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.warning(f"FFmpeg not available at '{ffmpeg_path}': {e}")
        return False

    return result.returncode == 0


def get_recording_settings(
    recordings_dir: Path = RECORDINGS_DIR,
    ffmpeg_path: str = FFMPEG_PATH,
) -> Dict[str, Any]:
    """
    Summary of where recordings go and whether they can be made.

    Returns:
        {"recordings_dir": str, "ffmpeg_path": str, "ffmpeg_available": bool}
    """
    return {
        "recordings_dir": str(recordings_dir),
        "ffmpeg_path": ffmpeg_path,
        "ffmpeg_available": check_ffmpeg_available(ffmpeg_path),
    }
