"""
Recording Utilities Package

Exposes shared utility functions for recording operations.
"""

from recording.utils.recording_utils import (
    attempt_name,
    attempt_output_path,
    check_ffmpeg_available,
    file_has_content,
    format_file_size,
    generate_filename,
    get_file_size,
    get_recording_settings,
    is_valid_recording,
    list_recordings,
)

# Public API
__all__ = [
    "attempt_name",
    "attempt_output_path",
    "check_ffmpeg_available",
    "file_has_content",
    "format_file_size",
    "generate_filename",
    "get_file_size",
    "get_recording_settings",
    "is_valid_recording",
    "list_recordings",
]
