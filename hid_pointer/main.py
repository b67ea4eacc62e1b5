"""Command-line entry point for replaying pointer traces.

Replays a recorded JSONL cursor trace through the pointer-motion
pipeline with a chosen smoothing filter and prints what would have been
sent to the device.

Usage::

    python -m hid_pointer.main --trace cursor.jsonl --filter kalman
    python -m hid_pointer.main --trace cursor.jsonl --filter-config kalman.json -v
    python -m hid_pointer.main --list-filters
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from hid_pointer.config.settings import Settings, get_default_settings
from hid_pointer.core.filter_factory import (
    FilterType,
    create_filter_from_settings,
    filter_from_dict,
    filter_to_dict,
    get_parameter_info,
)
from hid_pointer.core.filters import PointerMotionFilter
from hid_pointer.core.pointer_processor import PointerInputProcessor
from hid_pointer.core.trace_replay import ReplaySummary, load_samples, replay
from hid_pointer.sinks.interface import MovementSink
from hid_pointer.sinks.recording import LoggingSink, RecordingSink

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pipeline construction
# ---------------------------------------------------------------------------


def build_settings(args: argparse.Namespace) -> Settings:
    """Overlay CLI options on top of the default settings."""
    overrides = get_default_settings().to_dict()
    if args.filter:
        overrides["filter_type"] = args.filter
    if args.sensitivity:
        overrides["horizontal_sensitivity"] = args.sensitivity[0]
        overrides["vertical_sensitivity"] = args.sensitivity[1]
    if args.scale is not None:
        overrides["global_scale"] = args.scale
    if args.flip_y:
        overrides["flip_y"] = True
    return Settings.from_dict(overrides)


def build_filter(args: argparse.Namespace, settings: Settings) -> PointerMotionFilter:
    """Load the filter from ``--filter-config`` or build it from settings.

    Raises:
        ValueError: If the filter definition is invalid.
        OSError: If the config file cannot be read.
    """
    if args.filter_config:
        with Path(args.filter_config).open(encoding="utf-8") as fh:
            try:
                data = json.load(fh)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Invalid filter config: {exc}") from exc
        return filter_from_dict(data)
    return create_filter_from_settings(settings)


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="hid-pointer",
        description=(
            "Replay a recorded pointer trace through the smoothing and "
            "quantization pipeline."
        ),
    )
    parser.add_argument(
        "--trace",
        "-t",
        help="JSONL trace with one {x, y, timestamp} object per line.",
    )
    parser.add_argument(
        "--filter",
        "-f",
        choices=[t.value for t in FilterType],
        help="Smoothing filter to use (default: identity).",
    )
    parser.add_argument(
        "--filter-config",
        help="JSON filter definition ({\"type\": ..., \"params\": {...}}).",
    )
    parser.add_argument(
        "--sensitivity",
        nargs=2,
        type=float,
        metavar=("H", "V"),
        help="Horizontal and vertical sensitivity.",
    )
    parser.add_argument(
        "--scale",
        type=float,
        help="Global scale applied after sensitivity.",
    )
    parser.add_argument(
        "--flip-y",
        action="store_true",
        help="Negate vertical deltas.",
    )
    parser.add_argument(
        "--list-filters",
        action="store_true",
        help="List the available filters and their parameters.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging and log every report.",
    )
    args = parser.parse_args(argv)
    if not args.list_filters and not args.trace:
        parser.error("--trace is required unless --list-filters is given")
    return args


def main(argv: list[str] | None = None) -> int:
    """Parse CLI arguments, replay the trace and print a summary.

    Returns:
        Process exit status.
    """
    args = _parse_args(argv)

    # -- Logging setup ---------------------------------------------------
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if args.list_filters:
        _print_filters()
        return 0

    # -- Build and run ---------------------------------------------------
    try:
        settings = build_settings(args)
        smoothing = build_filter(args, settings)
        samples = load_samples(args.trace)
    except (ValueError, OSError) as exc:
        logger.error("%s", exc)
        return 1

    sink: MovementSink = LoggingSink(source="replay") if args.verbose else RecordingSink()
    processor = PointerInputProcessor(sink, smoothing, settings)

    logger.info("Replaying %d samples with %r", len(samples), smoothing)
    summary = replay(samples, processor)

    _print_summary(args.trace, smoothing, summary)
    return 0


def _print_filters() -> None:
    """Print every filter type with its parameter ranges."""
    for filter_type in FilterType:
        print(filter_type.value)
        for info in get_parameter_info(filter_type):
            print(
                f"    {info.name:<18} {info.label:<18} "
                f"[{info.minimum:g} .. {info.maximum:g}] default {info.default:g}"
            )


def _print_summary(
    trace: str,
    smoothing: PointerMotionFilter,
    summary: ReplaySummary,
) -> None:
    """Print a human-readable summary of a replay."""
    separator = "-" * 60
    print(separator)
    print(f"Trace:      {trace}")
    print(f"Filter:     {json.dumps(filter_to_dict(smoothing))}")
    print(f"Samples:    {summary.samples}")
    print(f"Reports:    {summary.reports_sent} sent, {summary.reports_rejected} rejected")
    print(f"Total:      ({summary.total_dx}, {summary.total_dy})")
    print(separator)


if __name__ == "__main__":
    sys.exit(main())
