"""
Recorder Config Tests

Tests for RecorderConfig showing:
- Defaults when no file exists
- YAML overrides and unknown keys
- Validation
- Save / reload

To run:
    pytest tests/config/test_recorder_config.py -v
"""

from pathlib import Path

import pytest
import yaml

from config.recorder_config import RecorderConfig
from config.settings import FORCE_KILL_TIMEOUT, MAX_FALLBACK_ATTEMPTS


@pytest.mark.unit
def test_defaults_without_file(tmp_path):
    config = RecorderConfig(config_path=tmp_path / "missing.yaml")

    assert config.force_kill_timeout == FORCE_KILL_TIMEOUT
    assert config.max_fallback_attempts == MAX_FALLBACK_ATTEMPTS
    assert isinstance(config.recordings_dir, Path)


@pytest.mark.unit
def test_yaml_overrides(tmp_path):
    path = tmp_path / "recorder.yaml"
    path.write_text(yaml.dump({
        "recordings_dir": str(tmp_path / "videos"),
        "force_kill_timeout": 5.5,
        "max_fallback_attempts": 2,
    }))

    config = RecorderConfig(config_path=path)

    assert config.recordings_dir == tmp_path / "videos"
    assert config.force_kill_timeout == 5.5
    assert config.max_fallback_attempts == 2


@pytest.mark.unit
def test_unknown_keys_ignored(tmp_path):
    path = tmp_path / "recorder.yaml"
    path.write_text(yaml.dump({"colour": "blue", "min_region_size": 32}))

    config = RecorderConfig(config_path=path)

    assert config.get("colour") is None
    assert config.min_region_size == 32


@pytest.mark.unit
def test_non_mapping_file_rejected(tmp_path):
    path = tmp_path / "recorder.yaml"
    path.write_text("- just\n- a list\n")

    with pytest.raises(ValueError):
        RecorderConfig(config_path=path)


@pytest.mark.unit
@pytest.mark.parametrize(
    "values",
    [
        {"max_fallback_attempts": 0},
        {"force_kill_timeout": -1},
        {"min_region_size": 1},
        {"min_valid_recording_bytes": -5},
        {"ffmpeg_path": ""},
    ],
)
def test_invalid_values_rejected(values):
    with pytest.raises(ValueError):
        RecorderConfig.from_dict(values)


@pytest.mark.unit
def test_overrides_win_over_file(tmp_path):
    path = tmp_path / "recorder.yaml"
    path.write_text(yaml.dump({"fallback_retry_delay": 2.0}))

    config = RecorderConfig(config_path=path, overrides={"fallback_retry_delay": 0.5})

    assert config.fallback_retry_delay == 0.5


@pytest.mark.unit
def test_save_and_reload(tmp_path):
    config = RecorderConfig.from_dict({"graceful_stop_timeout": 0.75})
    target = tmp_path / "saved.yaml"

    config.save(target)
    reloaded = RecorderConfig(config_path=target)

    assert reloaded.graceful_stop_timeout == 0.75
    assert reloaded.to_dict() == config.to_dict()
