"""
Central Configuration File

ALL configuration values live here. This is the single source of truth.

Guidelines:
- Machine-specific paths (recordings dir, ffmpeg binary) belong in .env
- Import these settings in modules: from config.settings import FORCE_KILL_TIMEOUT
- config/recorder.yaml (see config/recorder_config.py) may override a subset
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# =============================================================================
# CAPTURE TOOL
# =============================================================================

# Executable used for every capture command (PATH lookup if not absolute)
FFMPEG_PATH = os.getenv("FFMPEG_PATH", "ffmpeg")

# Input formats understood by the capture tool on the host platform
SCREEN_INPUT_FORMAT = "gdigrab"  # Desktop / window grabbing
DEVICE_INPUT_FORMAT = "dshow"  # Cameras and microphones

# Token written to the capture tool's stdin to ask it to finish the file
GRACEFUL_QUIT_TOKEN = b"q"

# =============================================================================
# RECORDING CONFIGURATION
# =============================================================================

# Recording defaults
DEFAULT_FRAMERATE = 30
MIN_FRAMERATE = 1
MAX_FRAMERATE = 120
DEFAULT_RESOLUTION = "1920x1080"
DESKTOP_RESOLUTION = "desktop"  # Keep native size, no scale filter

# Resolution bounds accepted in a request
MIN_RESOLUTION = (320, 240)
MAX_RESOLUTION = (7680, 4320)

# Region selection
MIN_REGION_SIZE = 16  # pixels, both dimensions
REGION_PROBE_SIZE = "10M"  # Offset capture is slow to detect its stream
REGION_ANALYZE_DURATION = "0"

# Camera fallback ladder
MAX_FALLBACK_ATTEMPTS = 3
FALLBACK_RETRY_DELAY = 1.0  # seconds between attempts
# Declared capture size per attempt (None = let the device choose)
CAMERA_RESOLUTION_LADDER = ["1920x1080", None, "1280x720"]

# Virtual-class cameras run at a fixed native rate
VIRTUAL_CAMERA_PATTERNS = ["obs virtual"]
VIRTUAL_CAMERA_FRAMERATE = 60

# Stop / termination timing
FORCE_KILL_TIMEOUT = 3.0  # seconds after stop() before unconditional kill
GRACEFUL_STOP_TIMEOUT = 2.0  # shell processes: wait for "q" before tree kill

# Output validation
MIN_VALID_RECORDING_BYTES = 1024  # a stopped recording must exceed this

# Substrings in the capture tool's stderr that doom the current attempt
IO_ERROR_MARKERS = [
    "Error during demuxing: I/O error",
    "No filtered frames for output stream",
]

# =============================================================================
# ENCODING CONFIGURATION
# =============================================================================

VIDEO_CODEC = "libx264"
VIDEO_PRESET = "ultrafast"
VIDEO_CRF = 22
VIDEO_PIXEL_FORMAT = "yuv420p"

AUDIO_CODEC = "aac"
AUDIO_BITRATE = "128k"

# =============================================================================
# DEVICE DISCOVERY
# =============================================================================

# Audio devices whose name matches one of these are preferred
MICROPHONE_PATTERNS = ["microphone", "réseau"]

# PowerShell query listing top-level windows with a title
POWERSHELL_LIST_WINDOWS = (
    "Get-Process | Where-Object {$_.MainWindowHandle -ne 0 -and "
    "$_.MainWindowTitle -ne ''} | Select-Object ProcessName, MainWindowTitle, Id "
    "| ConvertTo-Json -Depth 2"
)
DEVICE_ENUMERATION_TIMEOUT = 10.0  # seconds

# =============================================================================
# STORAGE CONFIGURATION
# =============================================================================

RECORDINGS_DIR = Path(
    os.getenv("RECORDINGS_DIR", str(Path.home() / "Videos" / "ResolveRecordings")),
)

# Video File Naming
VIDEO_FILENAME_PREFIX = "screen-recording"
VIDEO_FILENAME_EXTENSION = ".mp4"
VIDEO_FILENAME_TIMESTAMP = "%Y-%m-%dT%H-%M-%S"
ATTEMPT_SUFFIX_FORMAT = "_attempt{index}"

# =============================================================================
# TIMELINE INTEGRATION
# =============================================================================

TIMELINE_NAME_PREFIX = "Screen Recording"
RESOLVE_SCRIPT_MODULE = "DaVinciResolveScript"

# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

LOG_DIR = os.getenv("LOG_DIR", "logs")
LOG_FILE = "recorder.log"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Optional YAML overrides
RECORDER_CONFIG_PATH = Path(os.getenv("RECORDER_CONFIG", "config/recorder.yaml"))
