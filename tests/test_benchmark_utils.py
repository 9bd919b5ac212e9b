"""Unit tests for benchmark utilities.

Tests cover:
    - Nanosecond to millisecond truncation
    - Single-call phase timing
    - Pydantic model validation and immutability
    - Combined time as the sum of truncated phase times
    - Report block formatting
    - JSON serialization of the results table
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from scripts.benchmark_utils import (
    BenchmarkConfig,
    BenchmarkRun,
    FormatResult,
    Phase,
    TimingSample,
    format_report_block,
    measure_ns,
    ns_to_ms,
    run_to_json,
)


def _result(
    encode_ns: int = 3_999_999,
    decode_ns: int = 2_500_000,
    record_count: int = 1000,
    diagnostics: tuple[str, ...] = (),
) -> FormatResult:
    return FormatResult(
        codec="msgpack",
        encode=TimingSample(phase=Phase.ENCODE, duration_ns=encode_ns),
        decode=TimingSample(phase=Phase.DECODE, duration_ns=decode_ns),
        encoded_size=12345,
        record_count=record_count,
        expected_count=1000,
        artifact_path=Path("msgpack.txt"),
        diagnostics=diagnostics,
    )


# -----------------------------------------------------------------------
# Millisecond Truncation
# -----------------------------------------------------------------------


class TestNsToMs:
    """Tests for whole-millisecond truncation."""

    @pytest.mark.parametrize(
        "duration_ns,expected",
        [(0, 0), (999_999, 0), (1_000_000, 1), (2_999_999, 2), (1_500_000_000, 1500)],
    )
    def test_truncates(self, duration_ns: int, expected: int) -> None:
        assert ns_to_ms(duration_ns) == expected


# -----------------------------------------------------------------------
# Timing
# -----------------------------------------------------------------------


class TestMeasureNs:
    """Tests for single-call timing."""

    def test_returns_value_and_duration(self) -> None:
        value, elapsed = measure_ns(sum, [1, 2, 3])
        assert value == 6
        assert elapsed >= 0

    def test_exception_propagates(self) -> None:
        def fail() -> None:
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            measure_ns(fail)


class TestTimingSample:
    """Tests for TimingSample model."""

    def test_duration_ms(self) -> None:
        sample: TimingSample = TimingSample(phase=Phase.DECODE, duration_ns=7_654_321)
        assert sample.duration_ms == 7

    def test_negative_duration_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TimingSample(phase=Phase.ENCODE, duration_ns=-1)

    def test_immutability(self) -> None:
        sample: TimingSample = TimingSample(phase=Phase.ENCODE, duration_ns=1)
        with pytest.raises(ValidationError):
            sample.duration_ns = 2  # type: ignore[misc]


# -----------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------


class TestBenchmarkConfig:
    """Tests for BenchmarkConfig validation."""

    def test_defaults(self) -> None:
        """Default config matches the fixed benchmark shape."""
        config: BenchmarkConfig = BenchmarkConfig()
        assert config.record_count == 1000
        assert config.field_length == 1000
        assert config.seed is None
        assert config.output_dir == Path(".")
        assert config.log_filename == "benchmark.txt"
        assert config.reencode_artifact is False

    def test_log_path(self, tmp_path: Path) -> None:
        config: BenchmarkConfig = BenchmarkConfig(output_dir=tmp_path, log_filename="run.txt")
        assert config.log_path == tmp_path / "run.txt"

    def test_zero_sizes_allowed(self) -> None:
        config: BenchmarkConfig = BenchmarkConfig(record_count=0, field_length=0)
        assert config.record_count == 0

    @pytest.mark.parametrize("field", ["record_count", "field_length"])
    def test_negative_sizes_rejected(self, field: str) -> None:
        with pytest.raises(ValidationError):
            BenchmarkConfig(**{field: -1})

    def test_empty_log_filename_rejected(self) -> None:
        with pytest.raises(ValidationError):
            BenchmarkConfig(log_filename="")

    def test_unknown_option_rejected(self) -> None:
        with pytest.raises(ValidationError):
            BenchmarkConfig(iterations=5)  # type: ignore[call-arg]


# -----------------------------------------------------------------------
# Format Result
# -----------------------------------------------------------------------


class TestFormatResult:
    """Tests for FormatResult derived values."""

    def test_total_is_sum_of_truncated_phases(self) -> None:
        """3.999999 ms + 2.5 ms reports 3 + 2 = 5, not 6."""
        result: FormatResult = _result()
        assert result.encode.duration_ms == 3
        assert result.decode.duration_ms == 2
        assert result.total_ms == 5

    def test_count_matches(self) -> None:
        assert _result().count_matches is True
        assert _result(record_count=999).count_matches is False

    def test_default_diagnostics_empty(self) -> None:
        assert _result().diagnostics == ()


# -----------------------------------------------------------------------
# Report Formatting
# -----------------------------------------------------------------------


class TestFormatReportBlock:
    """Tests for the fixed-format report block."""

    def test_lines(self) -> None:
        assert format_report_block(_result()) == [
            "MSGPACK",
            "Serialization time: 3 ms",
            "Deserialization time: 2 ms",
            "Overall time: 5 ms",
            "Serialized size in bytes: 12345",
        ]

    def test_zero_times(self) -> None:
        block: list[str] = format_report_block(_result(encode_ns=0, decode_ns=999_999))
        assert block[1:4] == [
            "Serialization time: 0 ms",
            "Deserialization time: 0 ms",
            "Overall time: 0 ms",
        ]


# -----------------------------------------------------------------------
# JSON Serialization
# -----------------------------------------------------------------------


class TestRunToJson:
    """Tests for run_to_json."""

    def test_roundtrip(self) -> None:
        run: BenchmarkRun = BenchmarkRun(
            config=BenchmarkConfig(record_count=1000, seed=7),
            dataset_size=1000,
            results=[_result(), _result(record_count=999, diagnostics=("short",))],
        )
        restored: BenchmarkRun = BenchmarkRun.model_validate_json(run_to_json(run))
        assert restored == run
        assert restored.results[1].diagnostics == ("short",)
        assert restored.results[0].encode.phase is Phase.ENCODE
