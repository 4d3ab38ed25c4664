"""
Command Builder Tests

Tests for CommandBuilder showing:
- Desktop, window and region argument vectors
- Camera fallback ladder (sizes, scaling, per-attempt files)
- Virtual camera profile
- Audio input ordering and shell quoting (cmd.exe and sh)
- Catalog device names reaching the command line
- Request validation

To run:
    pytest tests/recording/controllers/test_command_builder.py -v
"""

import shlex
from pathlib import Path

import pytest

from recording.constants import SourceType
from recording.controllers.command_builder import (
    CommandBuilder,
    clean_camera_name,
    is_virtual_camera,
    parse_resolution,
    quote_shell_value,
)
from recording.interfaces.capture_process_interface import InvalidRequestError
from recording.models.capture_models import CaptureRequest
from region.interfaces.region_selector_interface import Rect, RegionTooSmallError
from sources.controllers.device_catalog import DeviceCatalog
from sources.implementations.mock_enumerator import MockDeviceEnumerator
from sources.interfaces.device_enumerator_interface import Device

OUTPUT = Path("recordings") / "screen-recording-2025-01-15T14-30-22.mp4"


@pytest.fixture
def builder():
    return CommandBuilder(ffmpeg_path="ffmpeg", shell_style="cmd")


@pytest.fixture
def posix_builder():
    return CommandBuilder(ffmpeg_path="ffmpeg", shell_style="posix")


def _value_after(tokens, flag):
    return tokens[tokens.index(flag) + 1]


# =============================================================================
# SCREEN SOURCES
# =============================================================================


@pytest.mark.unit
def test_desktop_command(builder):
    """Desktop capture is a direct argument vector."""
    command = builder.build(CaptureRequest(SourceType.DESKTOP, framerate=25), OUTPUT)

    assert command.is_shell is False
    assert command.args[0] == "ffmpeg"
    assert _value_after(command.args, "-f") == "gdigrab"
    assert _value_after(command.args, "-framerate") == "25"
    assert _value_after(command.args, "-i") == "desktop"
    assert _value_after(command.args, "-c:v") == "libx264"
    assert _value_after(command.args, "-preset") == "ultrafast"
    assert _value_after(command.args, "-crf") == "22"
    assert _value_after(command.args, "-pix_fmt") == "yuv420p"
    assert command.args[-1] == str(OUTPUT)
    assert command.output_path == OUTPUT


@pytest.mark.unit
def test_desktop_scaled_to_requested_resolution(builder):
    command = builder.build(
        CaptureRequest(SourceType.DESKTOP, resolution="1280x720"), OUTPUT,
    )

    assert _value_after(command.args, "-vf") == "scale=1280x720"
    assert command.args[-1] == str(OUTPUT)


@pytest.mark.unit
def test_desktop_native_resolution_has_no_scale(builder):
    command = builder.build(CaptureRequest(SourceType.DESKTOP, resolution="desktop"), OUTPUT)

    assert "-vf" not in command.args


@pytest.mark.unit
def test_window_command_uses_title(builder):
    request = CaptureRequest(SourceType.WINDOW, window_title="Untitled - Notepad")

    command = builder.build(request, OUTPUT)

    assert command.is_shell is False
    assert _value_after(command.args, "-i") == "title=Untitled - Notepad"
    assert command.label == "Window capture"


@pytest.mark.unit
def test_region_command_has_offsets_and_probesize(builder):
    request = CaptureRequest(SourceType.REGION)

    command = builder.build(request, OUTPUT, region=Rect(100, 50, 641, 481))

    args = command.args
    # Odd dimensions are floored to even
    assert _value_after(args, "-video_size") == "640x480"
    assert _value_after(args, "-offset_x") == "100"
    assert _value_after(args, "-offset_y") == "50"
    assert _value_after(args, "-draw_mouse") == "1"
    assert _value_after(args, "-probesize") == "10M"
    assert _value_after(args, "-analyzeduration") == "0"
    assert "-vf" not in args
    assert args[-1] == str(OUTPUT)


@pytest.mark.unit
def test_desktop_with_region_becomes_region_capture(builder):
    request = CaptureRequest(SourceType.DESKTOP, region=Rect(0, 0, 320, 240))

    command = builder.build(request, OUTPUT)

    assert _value_after(command.args, "-video_size") == "320x240"
    assert command.label == "Region capture"


@pytest.mark.unit
def test_region_source_without_region_is_rejected(builder):
    with pytest.raises(InvalidRequestError):
        builder.build(CaptureRequest(SourceType.REGION), OUTPUT)


@pytest.mark.unit
def test_region_below_minimum_is_rejected(builder):
    with pytest.raises(RegionTooSmallError):
        builder.build(CaptureRequest(SourceType.REGION), OUTPUT, region=Rect(0, 0, 10, 300))


# =============================================================================
# AUDIO
# =============================================================================


@pytest.mark.unit
def test_screen_audio_stays_argument_vector_with_audio_first(builder):
    request = CaptureRequest(SourceType.DESKTOP)

    command = builder.build(request, OUTPUT, audio_device="Microphone (Realtek Audio)")

    assert command.is_shell is False
    args = command.args
    assert args.index("audio=Microphone (Realtek Audio)") < args.index("desktop")
    assert _value_after(args, "-c:a") == "aac"
    assert _value_after(args, "-b:a") == "128k"
    assert args[-1] == str(OUTPUT)


@pytest.mark.unit
@pytest.mark.parametrize("title", [
    'Docs $(touch pwned) - Browser',
    'Inbox `id` - Mail',
    '" & calc & "',
])
def test_window_title_with_shell_syntax_is_one_argument(builder, title):
    request = CaptureRequest(SourceType.WINDOW, window_title=title)

    command = builder.build(request, OUTPUT, audio_device="Microphone (USB)")

    assert command.is_shell is False
    assert command.shell_command is None
    assert f"title={title}" in command.args


@pytest.mark.unit
def test_posix_camera_string_keeps_names_literal(posix_builder):
    request = CaptureRequest(SourceType.CAMERA, camera_name='Cam $(touch pwned) `id` "x"')
    output = Path("/tmp/my videos/out.mp4")

    command = posix_builder.build(request, output, audio_device="Mic; rm -rf ~")

    tokens = shlex.split(command.shell_command)
    assert 'video=Cam $(touch pwned) `id` "x"' in tokens
    assert "audio=Mic; rm -rf ~" in tokens
    assert tokens[-1] == str(output)
    assert command.shell_command.endswith(f"'{output}'")


@pytest.mark.unit
def test_cmd_style_rejects_unquotable_device_names(builder):
    for name in ('Cam" & calc & "', "Cam %PATH%"):
        with pytest.raises(InvalidRequestError):
            builder.build(CaptureRequest(SourceType.CAMERA, camera_name=name), OUTPUT)


@pytest.mark.unit
def test_quote_shell_value():
    assert quote_shell_value("Docs $(id)", "posix") == "'Docs $(id)'"
    assert quote_shell_value("1920x1080", "posix") == "1920x1080"
    assert quote_shell_value("out.mp4", "posix", force=True) == "'out.mp4'"
    assert quote_shell_value("HD Webcam", "cmd") == '"HD Webcam"'
    assert quote_shell_value("a&b", "cmd") == '"a&b"'
    assert quote_shell_value("-c:v", "cmd") == "-c:v"


# =============================================================================
# CAMERA LADDER
# =============================================================================


@pytest.mark.unit
def test_camera_ladder_has_three_attempts(builder):
    request = CaptureRequest(SourceType.CAMERA, camera_name="HD Pro Webcam C920")

    ladder = builder.build_fallback_ladder(request, OUTPUT)

    assert len(ladder) == 3
    assert [c.label for c in ladder] == ["Primary approach", "Fallback 1", "Fallback 2"]
    assert all(c.is_shell for c in ladder)


@pytest.mark.unit
def test_camera_ladder_attempts_write_distinct_files(builder):
    request = CaptureRequest(SourceType.CAMERA, camera_name="HD Pro Webcam C920")

    ladder = builder.build_fallback_ladder(request, OUTPUT)

    paths = [c.output_path for c in ladder]
    assert paths[0] == OUTPUT
    assert paths[1].name == "screen-recording-2025-01-15T14-30-22_attempt1.mp4"
    assert paths[2].name == "screen-recording-2025-01-15T14-30-22_attempt2.mp4"
    for command in ladder:
        assert command.shell_command.endswith(f'"{command.output_path}"')


@pytest.mark.unit
def test_camera_ladder_sizes_and_scaling(builder):
    request = CaptureRequest(SourceType.CAMERA, camera_name="HD Pro Webcam C920")

    primary, fallback1, fallback2 = builder.build_fallback_ladder(request, OUTPUT)

    assert "-video_size 1920x1080" in primary.shell_command
    assert "-vf" not in primary.shell_command

    assert "-video_size" not in fallback1.shell_command
    assert "-vf" not in fallback1.shell_command

    # Device delivers 1280x720, output is scaled back to the target
    assert "-video_size 1280x720" in fallback2.shell_command
    assert "-vf scale=1920x1080" in fallback2.shell_command


@pytest.mark.unit
def test_camera_command_quotes_device_and_flushes_packets(builder):
    request = CaptureRequest(SourceType.CAMERA, camera_name="[Caméra intégrée (USB)]")

    command = builder.build(request, OUTPUT)

    assert 'video="Caméra intégrée (USB)"' in command.shell_command
    assert "-f dshow" in command.shell_command
    assert "-flush_packets 1" in command.shell_command


@pytest.mark.unit
def test_camera_ladder_truncated_to_max_attempts():
    builder = CommandBuilder(ffmpeg_path="ffmpeg", max_attempts=2, shell_style="cmd")
    request = CaptureRequest(SourceType.CAMERA, camera_name="Webcam")

    ladder = builder.build_fallback_ladder(request, OUTPUT)

    assert len(ladder) == 2


@pytest.mark.unit
def test_camera_with_audio_puts_audio_before_video(builder):
    request = CaptureRequest(SourceType.CAMERA, camera_name="Webcam")

    ladder = builder.build_fallback_ladder(request, OUTPUT, audio_device="Microphone (USB)")

    for command in ladder:
        shell = command.shell_command
        assert shell.index('audio="Microphone (USB)"') < shell.index('video="Webcam"')


@pytest.mark.unit
def test_catalog_devices_reach_command_by_display_name(builder):
    """Names discovered by the catalog appear verbatim; internal ids never do."""
    catalog = DeviceCatalog(MockDeviceEnumerator(
        cameras=[Device("Integrated Camera", alternate_name="@device_pnp_\\\\?\\usb#vid_04f2&pid_b6dd")],
        audio_devices=[Device("Microphone (Realtek Audio)", alternate_name="@device_cm_{33D9A762}\\wave_{A1B2}")],
    ))
    camera = catalog.list_cameras()[0]
    microphone = catalog.get_best_audio_device()

    ladder = builder.build_fallback_ladder(
        CaptureRequest(SourceType.CAMERA, camera_name=camera.display_name),
        OUTPUT,
        audio_device=microphone.display_name,
    )

    for command in ladder:
        assert 'video="Integrated Camera"' in command.shell_command
        assert 'audio="Microphone (Realtek Audio)"' in command.shell_command
        assert "@device_" not in command.shell_command


@pytest.mark.unit
def test_virtual_camera_single_command_at_60fps(builder):
    request = CaptureRequest(
        SourceType.CAMERA, camera_name="OBS Virtual Camera", framerate=30, resolution="1280x720",
    )

    ladder = builder.build_fallback_ladder(request, OUTPUT)

    assert len(ladder) == 1
    shell = ladder[0].shell_command
    assert "-framerate 60" in shell
    assert "-vf scale=1280x720" in shell
    assert ladder[0].output_path == OUTPUT


# =============================================================================
# VALIDATION
# =============================================================================


@pytest.mark.unit
def test_window_without_title_rejected(builder):
    with pytest.raises(InvalidRequestError):
        builder.build(CaptureRequest(SourceType.WINDOW, window_title="  "), OUTPUT)


@pytest.mark.unit
def test_camera_without_name_rejected(builder):
    with pytest.raises(InvalidRequestError):
        builder.build(CaptureRequest(SourceType.CAMERA, camera_name="[]"), OUTPUT)


@pytest.mark.unit
@pytest.mark.parametrize("framerate", [0, 121, -5])
def test_framerate_out_of_range_rejected(builder, framerate):
    with pytest.raises(InvalidRequestError):
        builder.validate_request(CaptureRequest(SourceType.DESKTOP, framerate=framerate))


@pytest.mark.unit
@pytest.mark.parametrize("resolution", ["1080p", "100x100", "9000x9000", "1920*1080"])
def test_bad_resolution_rejected(builder, resolution):
    with pytest.raises(InvalidRequestError):
        builder.validate_request(CaptureRequest(SourceType.DESKTOP, resolution=resolution))


# =============================================================================
# HELPERS
# =============================================================================


@pytest.mark.unit
def test_clean_camera_name():
    assert clean_camera_name(" [Integrated Camera] ") == "Integrated Camera"
    assert clean_camera_name("USB Camera (2)") == "USB Camera (2)"


@pytest.mark.unit
def test_is_virtual_camera():
    assert is_virtual_camera("OBS Virtual Camera") is True
    assert is_virtual_camera("Integrated Camera") is False


@pytest.mark.unit
def test_parse_resolution():
    assert parse_resolution("1280x720") == (1280, 720)
