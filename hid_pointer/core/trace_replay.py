"""Offline replay of recorded pointer traces.

Traces are JSON Lines files with one cursor sample per line::

    {"x": 412, "y": 300, "timestamp": 1718000000.016, "frame": 1}

``x``, ``y`` and ``timestamp`` are required; other keys (such as
``frame``) are ignored.  Replaying a trace through a processor with a
``RecordingSink`` makes it easy to compare how the different filters
shape the same motion.

Typical usage::

    from hid_pointer.core.trace_replay import load_samples, replay

    samples = load_samples("sessions/session_x/cursor.jsonl")
    summary = replay(samples, processor)
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from hid_pointer.core.pointer_processor import PointerInputProcessor
from hid_pointer.models.motion import Sample
from hid_pointer.sinks.interface import MovementSink, clamp_delta


@dataclass
class ReplaySummary:
    """Outcome of replaying a trace.

    Attributes:
        samples: Number of samples fed to the processor.
        reports_sent: Samples that produced an accepted report.
        reports_rejected: Samples whose non-zero report the sink
            rejected.
        total_dx: Sum of horizontal deltas across accepted reports,
            after clamping to the report range.
        total_dy: Sum of vertical deltas across accepted reports.
    """

    samples: int = 0
    reports_sent: int = 0
    reports_rejected: int = 0
    total_dx: int = 0
    total_dy: int = 0


class _TallyingSink(MovementSink):
    """Wraps a sink to tally what passes through it."""

    def __init__(self, inner: MovementSink, summary: ReplaySummary) -> None:
        self._inner = inner
        self._summary = summary

    def accept(self, dx: int, dy: int) -> bool:
        accepted = self._inner.accept(dx, dy)
        if accepted:
            self._summary.reports_sent += 1
            delta = clamp_delta(dx, dy)
            self._summary.total_dx += delta.dx
            self._summary.total_dy += delta.dy
        else:
            self._summary.reports_rejected += 1
        return accepted


def _parse_line(line: str, line_number: int) -> Sample:
    try:
        record = json.loads(line)
        return Sample(
            position=(float(record["x"]), float(record["y"])),
            timestamp=float(record["timestamp"]),
        )
    except (json.JSONDecodeError, KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Malformed trace line {line_number}: {exc}") from exc


def load_samples(path: str | Path) -> list[Sample]:
    """Read a JSONL trace file.

    Args:
        path: File to read.

    Returns:
        The samples in file order.

    Raises:
        ValueError: If a non-blank line is not a JSON object with
            numeric ``x``, ``y`` and ``timestamp``.
        OSError: If the file cannot be read.
    """
    samples: list[Sample] = []
    with Path(path).open(encoding="utf-8") as fh:
        for line_number, line in enumerate(fh, start=1):
            if not line.strip():
                continue
            samples.append(_parse_line(line, line_number))
    return samples


def replay(
    samples: Iterable[Sample],
    processor: PointerInputProcessor,
) -> ReplaySummary:
    """Feed samples through *processor* in order and tally the reports.

    The processor's sink is temporarily wrapped so the totals reflect
    exactly what the sink was asked to send; the processor's baseline
    and filter state are left as the trace leaves them.
    """
    summary = ReplaySummary()
    original_sink = processor.sink
    processor.sink = _TallyingSink(original_sink, summary)
    try:
        for sample in samples:
            summary.samples += 1
            processor.update_position(sample.position, sample.timestamp)
    finally:
        processor.sink = original_sink
    return summary
