"""
Recording Test Configuration and Fixtures

Shared fixtures for recording module tests.
"""

import shutil
import tempfile
import threading
import time
from pathlib import Path

import pytest

from config.recorder_config import RecorderConfig
from recording.controllers.session_supervisor import SessionSupervisor
from recording.implementations.mock_process import MockProcessLauncher, MockRun
from sources.controllers.device_catalog import DeviceCatalog
from sources.implementations.mock_enumerator import MockDeviceEnumerator
from sources.interfaces.device_enumerator_interface import Device
from timeline.implementations.mock_timeline import MockTimeline

# Output size written by mock processes: comfortably above the validity threshold
VALID_OUTPUT_BYTES = 4096

# =============================================================================
# TEMPORARY FILE/DIRECTORY FIXTURES
# =============================================================================


@pytest.fixture
def temp_recording_dir():
    """
    Provide temporary directory for recordings.

    Directory is automatically cleaned up after test.
    """
    temp_dir = Path(tempfile.mkdtemp())

    yield temp_dir

    # Cleanup
    if temp_dir.exists():
        shutil.rmtree(temp_dir)


@pytest.fixture
def temp_video_file(temp_recording_dir):
    """Provide temporary file path for video output."""
    return temp_recording_dir / "test_recording.mp4"


# =============================================================================
# CONFIG FIXTURES
# =============================================================================


@pytest.fixture
def fast_config(temp_recording_dir):
    """
    RecorderConfig with short timers, writing into the temp directory.

    Usage:
        def test_retry(fast_config):
            assert fast_config.fallback_retry_delay < 0.1
    """
    return RecorderConfig.from_dict({
        "recordings_dir": str(temp_recording_dir),
        "fallback_retry_delay": 0.01,
        "force_kill_timeout": 0.3,
        "graceful_stop_timeout": 0.05,
    })


# =============================================================================
# COLLABORATOR FIXTURES
# =============================================================================


@pytest.fixture
def mock_launcher():
    """
    Provide MockProcessLauncher whose processes run until stopped.

    Usage:
        def test_launch(mock_launcher):
            mock_launcher.simulate_spawn_failure()
    """
    return MockProcessLauncher(default_run=MockRun(output_bytes=VALID_OUTPUT_BYTES))


@pytest.fixture
def mock_timeline():
    """Provide MockTimeline with no timeline open."""
    return MockTimeline()


@pytest.fixture
def mock_enumerator():
    """Provide MockDeviceEnumerator with one camera and two audio inputs."""
    return MockDeviceEnumerator(
        cameras=[Device("Integrated Camera")],
        audio_devices=[
            Device("Stereo Mix (Realtek Audio)"),
            Device("Microphone (Realtek Audio)", is_default=True),
        ],
    )


@pytest.fixture
def device_catalog(mock_enumerator):
    return DeviceCatalog(mock_enumerator)


# =============================================================================
# SUPERVISOR FIXTURES
# =============================================================================


@pytest.fixture
def supervisor(mock_launcher, fast_config, mock_timeline):
    """
    Provide SessionSupervisor wired to mocks.

    Usage:
        def test_start(supervisor):
            supervisor.start_recording({"source_type": "desktop"})
    """
    recorder = SessionSupervisor(
        launcher=mock_launcher,
        timeline=mock_timeline,
        config=fast_config,
    )
    yield recorder
    recorder.cleanup(timeout=2.0)


# =============================================================================
# CALLBACK TRACKING FIXTURES
# =============================================================================


@pytest.fixture
def callback_tracker():
    """
    Provide helper for tracking callback calls.

    Usage:
        def test_callback(supervisor, callback_tracker):
            supervisor.on_completion(callback_tracker.track)
            # ... finish a recording ...
            assert callback_tracker.wait_for_call()
    """

    class CallbackTracker:
        def __init__(self):
            self.calls = []
            self._called = threading.Event()

        def track(self, *args, **kwargs):
            """Record a callback invocation"""
            self.calls.append({"args": args, "kwargs": kwargs})
            self._called.set()

        def wait_for_call(self, timeout: float = 5.0) -> bool:
            """Block until the callback was called at least once"""
            return self._called.wait(timeout)

        def was_called(self) -> bool:
            """Check if callback was called"""
            return len(self.calls) > 0

        def get_call_count(self) -> int:
            """Get number of times callback was called"""
            return len(self.calls)

        def get_last_call(self):
            """Get arguments from last call"""
            return self.calls[-1] if self.calls else None

        def get_last_result(self):
            """First positional argument of the last call"""
            last = self.get_last_call()
            return last["args"][0] if last else None

    return CallbackTracker()


def wait_until(predicate, timeout: float = 5.0, interval: float = 0.01) -> bool:
    """Poll predicate until it returns True or timeout expires."""
    deadline = time.time() + timeout
    while time.time() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


@pytest.fixture
def wait_for():
    """Expose wait_until() to tests."""
    return wait_until


# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_configure(config):
    """
    Configure pytest with custom markers for recording tests.
    """
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "unit_integration: Integration tests")
    config.addinivalue_line("markers", "slow: Slow tests")
