"""Tests for hid_pointer.core.trace_replay."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from hid_pointer.config.settings import Settings
from hid_pointer.core.filters import IdentityFilter, KalmanFilter
from hid_pointer.core.pointer_processor import PointerInputProcessor
from hid_pointer.core.trace_replay import ReplaySummary, load_samples, replay
from hid_pointer.models.motion import Sample
from hid_pointer.sinks.recording import RecordingSink

# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------


def _write_trace(path: Path, records: list[dict]) -> Path:
    path.write_text("\n".join(json.dumps(r) for r in records) + "\n", encoding="utf-8")
    return path


@pytest.fixture()
def trace_file(tmp_path: Path) -> Path:
    records = [
        {"x": 100, "y": 100, "timestamp": 1.00, "frame": 1},
        {"x": 101, "y": 100, "timestamp": 1.02, "frame": 2},
        {"x": 103, "y": 99, "timestamp": 1.04, "frame": 3},
        {"x": 103, "y": 99, "timestamp": 1.06, "frame": 4},
    ]
    return _write_trace(tmp_path / "cursor.jsonl", records)


# ==================================================================
# load_samples
# ==================================================================


class TestLoadSamples:
    def test_reads_samples_in_order(self, trace_file: Path) -> None:
        samples = load_samples(trace_file)
        assert len(samples) == 4
        assert samples[0] == Sample(position=(100.0, 100.0), timestamp=1.0)
        assert samples[2].position == (103.0, 99.0)

    def test_accepts_string_path(self, trace_file: Path) -> None:
        assert len(load_samples(str(trace_file))) == 4

    def test_skips_blank_lines(self, tmp_path: Path) -> None:
        path = tmp_path / "t.jsonl"
        path.write_text(
            '{"x": 1, "y": 2, "timestamp": 0.5}\n\n   \n{"x": 3, "y": 4, "timestamp": 0.6}\n',
            encoding="utf-8",
        )
        assert [s.position for s in load_samples(path)] == [(1.0, 2.0), (3.0, 4.0)]

    def test_missing_key_reports_line(self, tmp_path: Path) -> None:
        path = _write_trace(
            tmp_path / "t.jsonl",
            [{"x": 1, "y": 2, "timestamp": 0.1}, {"x": 1, "timestamp": 0.2}],
        )
        with pytest.raises(ValueError, match="line 2"):
            load_samples(path)

    def test_invalid_json_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "t.jsonl"
        path.write_text("{not json\n", encoding="utf-8")
        with pytest.raises(ValueError, match="line 1"):
            load_samples(path)

    def test_non_numeric_value_raises(self, tmp_path: Path) -> None:
        path = _write_trace(tmp_path / "t.jsonl", [{"x": "left", "y": 2, "timestamp": 0.1}])
        with pytest.raises(ValueError):
            load_samples(path)

    def test_missing_file_raises_oserror(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            load_samples(tmp_path / "absent.jsonl")


# ==================================================================
# replay
# ==================================================================


class TestReplay:
    def test_identity_totals(self, trace_file: Path) -> None:
        sink = RecordingSink()
        processor = PointerInputProcessor(sink, IdentityFilter(), Settings())
        summary = replay(load_samples(trace_file), processor)
        # deltas (1, 0) and (2, -1), scaled by 3
        assert summary == ReplaySummary(
            samples=4, reports_sent=2, reports_rejected=0, total_dx=9, total_dy=-3,
        )
        assert sink.total == (9, -3)

    def test_totals_match_recorded_deltas(self, trace_file: Path) -> None:
        sink = RecordingSink()
        processor = PointerInputProcessor(sink, KalmanFilter())
        summary = replay(load_samples(trace_file), processor)
        assert (summary.total_dx, summary.total_dy) == sink.total
        assert summary.reports_sent == len(sink.deltas)

    def test_counts_rejections(self, trace_file: Path) -> None:
        sink = RecordingSink(accepting=False)
        processor = PointerInputProcessor(sink)
        summary = replay(load_samples(trace_file), processor)
        assert summary.reports_sent == 0
        assert summary.reports_rejected == 2
        assert (summary.total_dx, summary.total_dy) == (0, 0)

    def test_restores_original_sink(self, trace_file: Path) -> None:
        sink = RecordingSink()
        processor = PointerInputProcessor(sink)
        replay(load_samples(trace_file), processor)
        assert processor.sink is sink

    def test_clamped_totals(self) -> None:
        sink = RecordingSink()
        processor = PointerInputProcessor(sink)
        samples = [Sample((0.0, 0.0), 1.0), Sample((100.0, 0.0), 2.0)]
        summary = replay(samples, processor)
        assert summary.total_dx == 127

    def test_empty_trace(self) -> None:
        processor = PointerInputProcessor(RecordingSink())
        assert replay([], processor) == ReplaySummary()
