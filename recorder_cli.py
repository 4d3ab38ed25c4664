"""
Recorder CLI

Command-line host for the recording system. Wires the source catalog,
the session supervisor and the timeline integration together.

Commands:
    sources      List windows, cameras and audio devices
    record       Record until Ctrl+C (or --duration seconds)
    recordings   List finished recordings, newest first
    check        Show capture tool and timeline availability

Examples:
    python recorder_cli.py sources
    python recorder_cli.py record --source window --window "Untitled - Notepad"
    python recorder_cli.py record --source camera --camera "Integrated Camera"
    python recorder_cli.py record --source region --region 100,100,1280,720 --duration 30
"""

import argparse
import logging
import logging.handlers
import signal
import sys
import threading
from pathlib import Path
from typing import List, Optional

from config.recorder_config import RecorderConfig
from config.settings import LOG_DIR, LOG_FILE, LOG_LEVEL
from recording import (
    CaptureRequest,
    CompletionResult,
    RecordingFactory,
    SessionSupervisor,
    SourceType,
)
from recording.utils.recording_utils import (
    format_file_size,
    get_recording_settings,
    list_recordings,
)
from region import FixedRegionSelector, Rect, RegionNegotiator
from sources import DeviceCatalog, SourcesFactory
from timeline import TimelineFactory


def setup_logging(level: str = LOG_LEVEL) -> None:
    """
    Setup logging with rotation.

    Logs to both console and file with rotation:
    - Daily rotation
    - Keep 7 days of logs
    """
    logger = logging.getLogger()
    logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(message)s | %(name)s"))
    logger.addHandler(console_handler)

    file_format = logging.Formatter("%(asctime)s %(levelname)s %(message)s | %(name)s")

    log_file = Path(LOG_DIR) / LOG_FILE
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.TimedRotatingFileHandler(
            str(log_file),
            when="midnight",
            interval=1,
            backupCount=7,
            encoding="utf-8",
        )
    except OSError:
        # Fallback to local logs directory if LOG_DIR is not writable
        fallback_log = Path("logs") / LOG_FILE
        fallback_log.parent.mkdir(exist_ok=True)
        logger.warning(f"Cannot write to {log_file}, using fallback: {fallback_log}")

        file_handler = logging.handlers.TimedRotatingFileHandler(
            str(fallback_log),
            when="midnight",
            interval=1,
            backupCount=7,
            encoding="utf-8",
        )

    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(file_format)
    logger.addHandler(file_handler)


def parse_region(value: str) -> Rect:
    """argparse type for "x,y,width,height"."""
    parts = value.split(",")
    if len(parts) != 4:
        raise argparse.ArgumentTypeError("region must be x,y,width,height")
    try:
        x, y, width, height = (int(part) for part in parts)
    except ValueError:
        raise argparse.ArgumentTypeError("region values must be integers") from None
    return Rect(x=x, y=y, width=width, height=height)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Screen, window and camera recorder")
    parser.add_argument("--config", type=Path, help="YAML config file (default: config/recorder.yaml)")
    parser.add_argument("--mock", action="store_true", help="Use mock capture and devices")
    parser.add_argument("--log-level", default=LOG_LEVEL, help="Console log level")

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("sources", help="List windows, cameras and audio devices")

    record = commands.add_parser("record", help="Record until Ctrl+C")
    record.add_argument(
        "--source",
        choices=[source.value for source in SourceType],
        default=SourceType.DESKTOP.value,
    )
    record.add_argument("--window", help="Window title (window source)")
    record.add_argument("--camera", help="Camera display name (camera source)")
    record.add_argument("--audio", help="Audio device display name")
    record.add_argument("--region", type=parse_region, help="x,y,width,height (region source)")
    record.add_argument("--framerate", type=int, default=None)
    record.add_argument("--resolution", help="WIDTHxHEIGHT or 'desktop'")
    record.add_argument(
        "--timeline",
        choices=["auto", "resolve", "mock", "none"],
        default="auto",
        help="Where successful recordings are added",
    )
    record.add_argument("--duration", type=float, help="Stop automatically after N seconds")

    commands.add_parser("recordings", help="List finished recordings")
    commands.add_parser("check", help="Check capture tool and timeline availability")

    return parser


# =============================================================================
# COMMANDS
# =============================================================================


def cmd_sources(catalog: DeviceCatalog) -> int:
    sources = catalog.refresh()

    print("Windows:")
    for window in sources["windows"]:
        print(f"  {window.title}  [{window.process_name}, PID {window.pid}]")

    print("Cameras:")
    for camera in sources["cameras"]:
        virtual = " (virtual)" if camera.is_virtual else ""
        print(f"  {camera.display_name}{virtual}")

    print("Audio devices:")
    best = catalog.get_best_audio_device()
    for device in sources["audio_devices"]:
        marker = " *" if best is not None and device == best else ""
        print(f"  {device.display_name}{marker}")

    return 0


def cmd_record(args: argparse.Namespace, config: RecorderConfig, catalog: DeviceCatalog) -> int:
    logger = logging.getLogger(__name__)

    launcher = RecordingFactory.create_launcher(
        mode="mock" if args.mock else "auto",
        ffmpeg_path=config.ffmpeg_path,
    )
    timeline = TimelineFactory.create_timeline("mock" if args.mock and args.timeline == "auto" else args.timeline)

    negotiator = None
    request_region = None
    if args.region is not None:
        if args.source == SourceType.REGION.value:
            negotiator = RegionNegotiator(
                FixedRegionSelector(args.region),
                min_size=config.min_region_size,
                max_prompts=1,
            )
        else:
            request_region = args.region

    supervisor = SessionSupervisor(
        launcher=launcher,
        catalog=catalog,
        region_negotiator=negotiator,
        timeline=timeline,
        config=config,
    )

    finished = threading.Event()
    outcome: List[CompletionResult] = []

    def on_complete(result: CompletionResult) -> None:
        outcome.append(result)
        finished.set()

    supervisor.on_completion(on_complete)

    request = {
        "source_type": args.source,
        "framerate": args.framerate,
        "resolution": args.resolution,
        "window_title": args.window,
        "camera_name": args.camera,
        "audio_device_name": args.audio,
        "region": request_region.to_dict() if request_region else None,
    }
    started = supervisor.start_recording(request)
    if not started.success:
        print(f"Could not start recording: {started.message} ({started.error.value})")
        supervisor.cleanup()
        return 1

    print(f"Recording to {started.file_path}. Press Ctrl+C to stop.")

    stop_requested = threading.Event()
    previous_handler = signal.signal(signal.SIGINT, lambda signum, frame: stop_requested.set())
    try:
        waited = 0.0
        while not finished.is_set() and not stop_requested.is_set():
            finished.wait(0.5)
            waited += 0.5
            if args.duration is not None and waited >= args.duration:
                logger.info(f"Duration of {args.duration}s reached")
                break
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    if not finished.is_set():
        supervisor.stop_recording()
        finished.wait(config.force_kill_timeout + 30.0)

    supervisor.cleanup()

    if not outcome:
        print("Recording did not report a result")
        return 1

    result = outcome[0]
    if result.warning:
        print(f"Warning: {result.warning}")
    if result.success:
        print(f"Saved {result.output_path}")
        if result.error:
            print(result.error)
        return 0

    print(f"Recording failed: {result.error}")
    return 1


def cmd_recordings(config: RecorderConfig) -> int:
    recordings = list_recordings(config.recordings_dir)
    if not recordings:
        print(f"No recordings in {config.recordings_dir}")
        return 0

    for recording in recordings:
        modified = recording["modified"].strftime("%Y-%m-%d %H:%M")
        print(f"{modified}  {format_file_size(recording['size']):>9}  {recording['name']}")
    return 0


def cmd_check(config: RecorderConfig) -> int:
    settings = get_recording_settings(config.recordings_dir, config.ffmpeg_path)
    timeline = TimelineFactory.create_timeline("auto")

    print(f"Recordings directory: {settings['recordings_dir']}")
    print(f"ffmpeg: {settings['ffmpeg_path']} "
          f"({'available' if settings['ffmpeg_available'] else 'NOT available'})")
    print(f"DaVinci Resolve: {'available' if timeline is not None else 'not available'}")
    return 0 if settings["ffmpeg_available"] else 1


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Sets up logging, loads configuration and runs one command.
    """
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level.upper())

    logger = logging.getLogger(__name__)
    try:
        config = RecorderConfig(config_path=args.config)
        catalog = DeviceCatalog(
            SourcesFactory.create_enumerator(
                mode="mock" if args.mock else "auto",
                ffmpeg_path=config.ffmpeg_path,
            )
        )

        if args.command == "sources":
            return cmd_sources(catalog)
        if args.command == "record":
            return cmd_record(args, config, catalog)
        if args.command == "recordings":
            return cmd_recordings(config)
        return cmd_check(config)

    except Exception as e:
        logger.critical(f"Fatal error in main: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
