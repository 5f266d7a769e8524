"""Unit tests for the keep/discard decision."""

import logging
import os
from pathlib import Path

import pytest

from vshrink.domain.enums import ConversionOutcome
from vshrink.executor.outcome import OutcomeEvaluator, evaluate, improvement_percent


class TestEvaluate:
    """Tests for evaluate() threshold semantics."""

    def test_smaller_output_kept(self) -> None:
        result = evaluate(1000, 500, 10)
        assert result.keep
        assert result.outcome is ConversionOutcome.CONVERTED
        assert result.improvement == pytest.approx(50.0)

    def test_insufficient_reduction_discarded(self) -> None:
        result = evaluate(1000, 950, 10)
        assert not result.keep
        assert result.outcome is ConversionOutcome.DISCARDED
        assert result.improvement == pytest.approx(5.0)

    def test_exactly_on_threshold_kept(self) -> None:
        assert evaluate(1000, 900, 10).keep

    def test_one_byte_over_threshold_discarded(self) -> None:
        assert not evaluate(1000, 901, 10).keep

    def test_zero_threshold_keeps_equal_size(self) -> None:
        assert evaluate(1000, 1000, 0).keep

    def test_zero_threshold_discards_growth(self) -> None:
        result = evaluate(1000, 1001, 0)
        assert not result.keep
        assert result.improvement < 0

    def test_fifty_percent_boundary(self) -> None:
        assert evaluate(1000, 500, 50).keep
        assert not evaluate(1000, 501, 50).keep

    def test_empty_original(self) -> None:
        assert improvement_percent(0, 10) == 0.0


class TestOutcomeEvaluator:
    """Tests for OutcomeEvaluator.finalize() file handling."""

    def _output(self, tmp_path: Path, size: int) -> Path:
        path = tmp_path / "movie.20260101-120000.mkv"
        path.write_bytes(b"y" * size)
        return path

    def test_kept_output_gets_original_mtime(self, tmp_path: Path) -> None:
        output = self._output(tmp_path, 400)

        result = OutcomeEvaluator(10).finalize(output, 1000, 1_600_000_000.0)

        assert result.keep
        assert output.exists()
        assert output.stat().st_mtime == pytest.approx(1_600_000_000.0)

    def test_discarded_output_deleted(self, tmp_path: Path) -> None:
        output = self._output(tmp_path, 990)

        result = OutcomeEvaluator(10).finalize(output, 1000, 1_600_000_000.0)

        assert not result.keep
        assert not output.exists()

    def test_timestamps_left_alone_when_disabled(self, tmp_path: Path) -> None:
        output = self._output(tmp_path, 400)
        before = output.stat().st_mtime

        OutcomeEvaluator(10, match_timestamps=False).finalize(output, 1000, 1.0)

        assert output.stat().st_mtime == pytest.approx(before)

    def test_timestamp_failure_is_warning(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        output = self._output(tmp_path, 400)

        with caplog.at_level(logging.WARNING):
            result = OutcomeEvaluator(10).finalize(output, 1000, -5.0)

        assert result.keep
        assert "Could not match timestamp" in caplog.text

    def test_missing_output_raises(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            OutcomeEvaluator(10, match_timestamps=False).finalize(
                tmp_path / "missing.mkv", 1000, 0.0
            )

    def test_access_time_preserved(self, tmp_path: Path) -> None:
        output = self._output(tmp_path, 100)
        os.utime(output, (1_500_000_000.0, 1_500_000_000.0))

        OutcomeEvaluator(10).finalize(output, 1000, 1_600_000_000.0)

        assert output.stat().st_atime == pytest.approx(1_500_000_000.0)
