"""
Recorder Configuration Handler

Manages the optional YAML configuration file for recording settings.
Provides defaults from config/settings.py and validation.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from config.settings import (
    FALLBACK_RETRY_DELAY,
    FFMPEG_PATH,
    FORCE_KILL_TIMEOUT,
    GRACEFUL_STOP_TIMEOUT,
    MAX_FALLBACK_ATTEMPTS,
    MIN_REGION_SIZE,
    MIN_VALID_RECORDING_BYTES,
    RECORDER_CONFIG_PATH,
    RECORDINGS_DIR,
)


class RecorderConfig:
    """
    Recorder configuration with YAML file support.

    Reads from config/recorder.yaml if it exists,
    otherwise uses defaults from config/settings.py.

    Usage:
        config = RecorderConfig()
        recordings_dir = config.recordings_dir
        timeout = config.force_kill_timeout

        # Tests / embedding: skip the file entirely
        config = RecorderConfig.from_dict({"fallback_retry_delay": 0.01})
    """

    DEFAULT_CONFIG_PATH = RECORDER_CONFIG_PATH

    def __init__(self, config_path: Optional[Path] = None, overrides: Optional[Dict[str, Any]] = None):
        """
        Initialize configuration.

        Args:
            config_path: Path to YAML config file (None = use default)
            overrides: Values applied on top of file and defaults
        """
        self.logger = logging.getLogger(__name__)
        self.config_path = Path(config_path) if config_path else self.DEFAULT_CONFIG_PATH

        self._config = self._load_config(overrides or {})

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> "RecorderConfig":
        """Build a config from defaults plus ``values``, ignoring any YAML file."""
        config = cls.__new__(cls)
        config.logger = logging.getLogger(__name__)
        config.config_path = None
        merged = config._get_defaults()
        merged.update(values)
        config._validate_config(merged)
        config._config = merged
        return config

    def _get_defaults(self) -> Dict[str, Any]:
        """Get default configuration values from settings"""
        return {
            'recordings_dir': str(RECORDINGS_DIR),
            'ffmpeg_path': FFMPEG_PATH,
            'max_fallback_attempts': MAX_FALLBACK_ATTEMPTS,
            'fallback_retry_delay': FALLBACK_RETRY_DELAY,
            'force_kill_timeout': FORCE_KILL_TIMEOUT,
            'graceful_stop_timeout': GRACEFUL_STOP_TIMEOUT,
            'min_region_size': MIN_REGION_SIZE,
            'min_valid_recording_bytes': MIN_VALID_RECORDING_BYTES,
        }

    def _load_config(self, overrides: Dict[str, Any]) -> Dict[str, Any]:
        """Load configuration from YAML file or use defaults"""
        config = self._get_defaults()

        if self.config_path.exists():
            with open(self.config_path, 'r', encoding='utf-8') as f:
                file_config = yaml.safe_load(f) or {}

            if not isinstance(file_config, dict):
                raise ValueError(
                    f"{self.config_path} must contain a mapping, "
                    f"got {type(file_config).__name__}"
                )

            unknown = set(file_config) - set(config)
            if unknown:
                self.logger.warning(
                    f"Ignoring unknown config keys in {self.config_path}: "
                    f"{', '.join(sorted(unknown))}"
                )
                for key in unknown:
                    file_config.pop(key)

            config.update(file_config)
            self.logger.info(f"Loaded config from {self.config_path}")
        else:
            self.logger.debug(
                f"Config file not found at {self.config_path}, using defaults"
            )

        config.update(overrides)
        self._validate_config(config)
        return config

    def _validate_config(self, config: Dict[str, Any]) -> None:
        """Validate configuration values"""
        if config['max_fallback_attempts'] < 1:
            raise ValueError("max_fallback_attempts must be at least 1")

        for key in ('fallback_retry_delay', 'force_kill_timeout', 'graceful_stop_timeout'):
            if config[key] < 0:
                raise ValueError(f"{key} cannot be negative")

        if config['min_region_size'] < 2:
            raise ValueError("min_region_size must be at least 2")

        if config['min_valid_recording_bytes'] < 0:
            raise ValueError("min_valid_recording_bytes cannot be negative")

        if not config['ffmpeg_path']:
            raise ValueError("ffmpeg_path cannot be empty")

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save configuration to YAML file"""
        target = Path(config_path) if config_path else self.config_path
        if target is None:
            raise ValueError("No config path to save to")

        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, 'w', encoding='utf-8') as f:
            yaml.dump(
                self._config,
                f,
                default_flow_style=False,
                sort_keys=False,
                indent=2
            )

        self.logger.info(f"Config saved to {target}")

    # =========================================================================
    # PROPERTY ACCESSORS
    # =========================================================================

    @property
    def recordings_dir(self) -> Path:
        """Directory where recordings are written"""
        return Path(self._config['recordings_dir'])

    @property
    def ffmpeg_path(self) -> str:
        """Capture tool executable"""
        return self._config['ffmpeg_path']

    @property
    def max_fallback_attempts(self) -> int:
        """Number of camera commands tried before giving up"""
        return self._config['max_fallback_attempts']

    @property
    def fallback_retry_delay(self) -> float:
        """Delay before the next camera attempt"""
        return self._config['fallback_retry_delay']

    @property
    def force_kill_timeout(self) -> float:
        """Seconds between stop request and unconditional kill"""
        return self._config['force_kill_timeout']

    @property
    def graceful_stop_timeout(self) -> float:
        """Seconds a shell-style process gets to honour the quit token"""
        return self._config['graceful_stop_timeout']

    @property
    def min_region_size(self) -> int:
        """Smallest accepted region edge in pixels"""
        return self._config['min_region_size']

    @property
    def min_valid_recording_bytes(self) -> int:
        """A stopped recording must be larger than this to count"""
        return self._config['min_valid_recording_bytes']

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key."""
        return self._config.get(key, default)

    def to_dict(self) -> Dict[str, Any]:
        """Get a copy of the full configuration"""
        return dict(self._config)
