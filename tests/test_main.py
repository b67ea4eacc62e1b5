"""Tests for the hid_pointer command-line entry point."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from hid_pointer.main import main


@pytest.fixture()
def trace_file(tmp_path: Path) -> Path:
    records = [
        {"x": 0, "y": 0, "timestamp": 1.0},
        {"x": 2, "y": 1, "timestamp": 1.1},
        {"x": 4, "y": 2, "timestamp": 1.2},
    ]
    path = tmp_path / "cursor.jsonl"
    path.write_text("\n".join(json.dumps(r) for r in records), encoding="utf-8")
    return path


class TestMain:
    def test_list_filters(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["--list-filters"]) == 0
        out = capsys.readouterr().out
        for name in ("identity", "mute", "exponential_ma", "double_exponential",
                     "kalman", "predictive"):
            assert name in out
        assert "measurement_noise" in out

    def test_replay_summary(
        self, trace_file: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        assert main(["--trace", str(trace_file)]) == 0
        out = capsys.readouterr().out
        assert "Samples:    3" in out
        assert "Reports:    2 sent, 0 rejected" in out
        assert "Total:      (12, 6)" in out

    def test_sensitivity_and_flip(
        self, trace_file: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        args = ["--trace", str(trace_file), "--sensitivity", "1", "1", "--scale", "2", "--flip-y"]
        assert main(args) == 0
        assert "Total:      (8, -4)" in capsys.readouterr().out

    def test_filter_choice(
        self, trace_file: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        assert main(["--trace", str(trace_file), "--filter", "mute"]) == 0
        out = capsys.readouterr().out
        assert '"type": "mute"' in out
        assert "Reports:    0 sent" in out

    def test_filter_config_file(
        self, trace_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        config = tmp_path / "filter.json"
        config.write_text(
            json.dumps({"type": "exponential_ma", "params": {"alpha": 0.25}}),
            encoding="utf-8",
        )
        assert main(["--trace", str(trace_file), "--filter-config", str(config)]) == 0
        assert '"alpha": 0.25' in capsys.readouterr().out

    def test_invalid_filter_config(self, trace_file: Path, tmp_path: Path) -> None:
        config = tmp_path / "filter.json"
        config.write_text(json.dumps({"type": "one_euro"}), encoding="utf-8")
        assert main(["--trace", str(trace_file), "--filter-config", str(config)]) == 1

    def test_missing_trace_file(self, tmp_path: Path) -> None:
        assert main(["--trace", str(tmp_path / "absent.jsonl")]) == 1

    def test_trace_required(self) -> None:
        with pytest.raises(SystemExit):
            main([])
