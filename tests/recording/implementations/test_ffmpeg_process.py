"""
FFmpeg Process Tests

Tests for the real subprocess launcher. The Python interpreter running the
tests stands in for ffmpeg: it reads "q" from stdin, writes the output
file named by its last argument and prints progress on stderr.

To run:
    pytest tests/recording/implementations/test_ffmpeg_process.py -v
"""

import sys

import pytest

from recording.implementations.ffmpeg_process import FFmpegLauncher
from recording.interfaces.capture_process_interface import SpawnFailureError
from recording.models.capture_models import CommandSpec

FAKE_CAPTURE = (
    "import sys\n"
    "sys.stderr.write('frame=    1 fps=30\\n')\n"
    "sys.stderr.flush()\n"
    "while True:\n"
    "    data = sys.stdin.read(1)\n"
    "    if data in ('q', ''):\n"
    "        break\n"
    "open(sys.argv[-1], 'wb').write(b'\\0' * 4096)\n"
    "sys.stderr.write('exiting normally\\n')\n"
)

SLEEPER = "import time\ntime.sleep(60)\n"


@pytest.fixture
def launcher():
    return FFmpegLauncher(ffmpeg_path=sys.executable)


@pytest.mark.unit_integration
def test_quit_token_finishes_recording(launcher, temp_video_file):
    command = CommandSpec(
        output_path=temp_video_file,
        args=[sys.executable, "-c", FAKE_CAPTURE, str(temp_video_file)],
    )

    process = launcher.launch(command)
    assert process.is_shell is False
    assert process.pid is not None

    assert process.write_stdin(b"q") is True
    assert process.wait(timeout=10.0) == 0

    lines = list(process.iter_stderr())
    assert "frame=    1 fps=30" in lines
    assert "exiting normally" in lines
    assert temp_video_file.stat().st_size == 4096


@pytest.mark.unit_integration
def test_kill_tree_ends_process(launcher, temp_video_file):
    command = CommandSpec(
        output_path=temp_video_file,
        args=[sys.executable, "-c", SLEEPER, str(temp_video_file)],
    )
    process = launcher.launch(command)
    assert process.wait(timeout=0.2) is None

    process.kill_tree()

    returncode = process.wait(timeout=10.0)
    assert returncode is not None
    assert returncode != 0
    assert process.write_stdin(b"q") is False


@pytest.mark.unit_integration
def test_terminate_ends_process(launcher, temp_video_file):
    command = CommandSpec(
        output_path=temp_video_file,
        args=[sys.executable, "-c", SLEEPER, str(temp_video_file)],
    )
    process = launcher.launch(command)

    process.terminate()

    assert process.wait(timeout=10.0) is not None


@pytest.mark.unit_integration
def test_shell_command_runs_through_shell(launcher, temp_video_file):
    command = CommandSpec(
        output_path=temp_video_file,
        shell_command=f'"{sys.executable}" -c "import sys; sys.exit(3)" "{temp_video_file}"',
    )

    process = launcher.launch(command)

    assert process.is_shell is True
    assert process.wait(timeout=10.0) == 3


@pytest.mark.unit
def test_missing_executable_is_spawn_failure(launcher, temp_video_file):
    command = CommandSpec(
        output_path=temp_video_file,
        args=["definitely-not-ffmpeg-binary", str(temp_video_file)],
    )

    with pytest.raises(SpawnFailureError):
        launcher.launch(command)


@pytest.mark.unit
def test_availability():
    assert FFmpegLauncher(ffmpeg_path=sys.executable).is_available() is True
    assert FFmpegLauncher(ffmpeg_path="definitely-not-ffmpeg-binary").is_available() is False
