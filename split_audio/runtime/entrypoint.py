from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from split_audio.core.config.settings import (
    DEFAULT_SETTINGS_PATH,
    SplitSettings,
    load_settings,
    write_default_settings,
)
from split_audio.core.domain.errors import ConfigurationError
from split_audio.core.events.event_bus import EventBus
from split_audio.core.events.event_sink import EventSink
from split_audio.core.events.sinks.file_recorder import FileRecorderSink
from split_audio.core.events.sinks.sink_logging import LoggingEventSink
from split_audio.runtime.pipeline import SplitPipeline
from split_audio.runtime.prometheus_metrics import PrometheusMetricsClient
from split_audio.runtime.summary import RunSummary, print_run_summary
from split_audio.splitting.ffmpeg_splitter import FfmpegSplitter

LOGGER = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _build_event_bus(*, settings: SplitSettings, input_dir: Path) -> EventBus:
    sinks: list[EventSink] = [LoggingEventSink(logging.getLogger("split_audio.diagnostics"))]

    if settings.log_enabled:
        log_path = input_dir / settings.log_path
        try:
            sinks.append(FileRecorderSink(log_path))
        except OSError as exc:
            raise ConfigurationError(f"cannot open log file {log_path}: {exc}") from exc

    return EventBus(sinks=sinks)


def _push_metrics(summary: RunSummary) -> None:
    metrics = PrometheusMetricsClient()

    if not metrics.is_enabled():
        return

    try:
        metrics.push_run_summary(summary)
    except Exception:
        LOGGER.exception("Prometheus push failed")


def _wait_for_acknowledgement(no_wait: bool) -> None:
    if no_wait or not sys.stdin.isatty():
        return
    try:
        input("Press Enter to exit...")
    except EOFError:
        return


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description=(
            "Split every audio file in a folder into fixed-duration segments "
            "named after their recording time."
        )
    )

    parser.add_argument(
        "--settings",
        type=Path,
        default=DEFAULT_SETTINGS_PATH,
        help="Settings file (created with defaults if missing).",
    )

    parser.add_argument(
        "--input-dir",
        type=Path,
        default=Path.cwd(),
        help="Folder holding the audio files (default: current directory).",
    )

    parser.add_argument(
        "--no-wait",
        action="store_true",
        help="Exit without waiting for Enter.",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # ------------------------------------------------------------------
    # Load config
    # ------------------------------------------------------------------

    input_dir: Path = args.input_dir

    if not args.settings.exists():
        try:
            write_default_settings(args.settings)
        except ConfigurationError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            _wait_for_acknowledgement(args.no_wait)
            return 1
        print(
            f"Created {args.settings} with default settings. "
            "Edit it and run the program again."
        )
        return 0

    try:
        settings = load_settings(args.settings)
        splitter = FfmpegSplitter.resolve(settings.ffmpeg_path)
        event_bus = _build_event_bus(settings=settings, input_dir=input_dir)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        _wait_for_acknowledgement(args.no_wait)
        return 1

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    try:
        pipeline = SplitPipeline(
            settings=settings,
            splitter=splitter,
            event_bus=event_bus,
            show_progress=sys.stdout.isatty(),
        )
        summary = pipeline.run(input_dir)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        _wait_for_acknowledgement(args.no_wait)
        return 1
    finally:
        event_bus.close()

    print()
    print_run_summary(summary)
    _push_metrics(summary)

    print()
    print("Done.")
    _wait_for_acknowledgement(args.no_wait)
    return 0


if __name__ == "__main__":
    sys.exit(main())
