"""
Mock Process Tests

Tests for MockCaptureProcess / MockProcessLauncher showing:
- Scripted runs (immediate exit, stderr lines, output file)
- Quit token, terminate and kill behaviour
- Spawn failure simulation

To run:
    pytest tests/recording/implementations/test_mock_process.py -v
"""

import signal

import pytest

from recording.implementations.mock_process import (
    MockCaptureProcess,
    MockProcessLauncher,
    MockRun,
)
from recording.interfaces.capture_process_interface import SpawnFailureError
from recording.models.capture_models import CommandSpec


@pytest.fixture
def direct_command(temp_video_file):
    return CommandSpec(output_path=temp_video_file, args=["ffmpeg", str(temp_video_file)])


@pytest.fixture
def shell_command(temp_video_file):
    return CommandSpec(output_path=temp_video_file, shell_command=f'ffmpeg "{temp_video_file}"')


@pytest.mark.unit
def test_quit_token_writes_output_and_exits(direct_command):
    process = MockCaptureProcess(direct_command, MockRun(output_bytes=2048))

    assert process.poll() is None
    assert process.write_stdin(b"q") is True

    assert process.wait(timeout=1.0) == 0
    assert direct_command.output_path.stat().st_size == 2048


@pytest.mark.unit
def test_unresponsive_process_ignores_quit_and_terminate(direct_command):
    process = MockCaptureProcess(direct_command, MockRun(responsive=False))

    process.write_stdin(b"q")
    process.terminate()

    assert process.is_running() is True
    assert process.terminate_calls == 1

    process.kill()
    assert process.wait(timeout=1.0) == -signal.SIGKILL


@pytest.mark.unit
def test_write_after_exit_fails(direct_command):
    process = MockCaptureProcess(direct_command)
    process.simulate_exit(0)

    assert process.write_stdin(b"q") is False


@pytest.mark.unit
def test_stderr_ends_when_process_exits(direct_command):
    process = MockCaptureProcess(direct_command)
    process.simulate_stderr("frame=1")
    process.simulate_stderr("frame=2")
    process.simulate_exit(0)

    assert list(process.iter_stderr()) == ["frame=1", "frame=2"]


@pytest.mark.unit
def test_first_exit_code_wins(direct_command):
    process = MockCaptureProcess(direct_command)
    process.simulate_exit(3)
    process.simulate_exit(0)

    assert process.returncode == 3


@pytest.mark.unit
def test_is_shell_follows_command(direct_command, shell_command):
    assert MockCaptureProcess(direct_command).is_shell is False
    assert MockCaptureProcess(shell_command).is_shell is True


@pytest.mark.unit
def test_launcher_consumes_runs_then_default(direct_command):
    launcher = MockProcessLauncher(
        runs=[MockRun(exit_code=1)],
        default_run=MockRun(),
    )

    first = launcher.launch(direct_command)
    second = launcher.launch(direct_command)

    assert first.poll() == 1
    assert second.poll() is None
    assert launcher.launch_count == 2
    assert launcher.last_process is second


@pytest.mark.unit
def test_launcher_emits_scripted_stderr(direct_command):
    launcher = MockProcessLauncher(runs=[MockRun(exit_code=0, stderr_lines=["a", "b"])])

    process = launcher.launch(direct_command)

    assert list(process.iter_stderr()) == ["a", "b"]


@pytest.mark.unit
def test_launcher_spawn_failure(direct_command):
    launcher = MockProcessLauncher()
    launcher.simulate_spawn_failure("no ffmpeg")

    with pytest.raises(SpawnFailureError):
        launcher.launch(direct_command)

    launcher.reset_test_config()
    assert launcher.launch(direct_command) is not None


@pytest.mark.unit
def test_wait_for_launches(direct_command):
    launcher = MockProcessLauncher()
    launcher.launch(direct_command)

    assert launcher.wait_for_launches(1, timeout=0.1) is True
    assert launcher.wait_for_launches(2, timeout=0.05) is False
