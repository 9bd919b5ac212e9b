"""Shared benchmark utilities for serialization timing and reporting.

This module provides the configuration, result models, and timing
helpers used by :mod:`scripts.benchmark_serialization`. It includes:

- Validated benchmark configuration (record count, field length, seed)
- Nanosecond phase timing with ``time.perf_counter_ns()``
- Immutable per-format results kept in memory as a table
- Fixed-format report block rendering
- JSON serialization of the whole results table

Design principles:
    - Pydantic models for all config and result data structures
    - Timing is measured in nanoseconds; only the displayed value is
      truncated to whole milliseconds
    - A format's combined time is the sum of its *truncated* encode and
      decode milliseconds, so the three reported numbers always add up
    - Single measurement per phase: no warmup, no repeated trials

Example:
    >>> from scripts.benchmark_utils import Phase, TimingSample, ns_to_ms
    >>> ns_to_ms(2_999_999)
    2
    >>> TimingSample(phase=Phase.ENCODE, duration_ns=5_400_000).duration_ms
    5
"""

import time
from enum import Enum
from pathlib import Path
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field

from core.records import DEFAULT_FIELD_LENGTH, DEFAULT_RECORD_COUNT

_NS_PER_MS: int = 1_000_000


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class Phase(str, Enum):
    """Timed benchmark phase.

    Attributes:
        ENCODE: Dataset to bytes.
        DECODE: Reloaded bytes to dataset.
    """

    ENCODE = "ENCODE"
    DECODE = "DECODE"


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class BenchmarkConfig(BaseModel):
    """Configuration for a benchmark run.

    Attributes:
        record_count: Number of records in the canonical dataset.
        field_length: Length of each record's text field and integer
            sequence. Coupled to ``record_count`` by default (both
            1000) but independently configurable.
        seed: Fixed random seed. ``None`` seeds from the clock so
            every run produces fresh data.
        output_dir: Directory for artifact files and the log file.
        log_filename: Combined log file name inside ``output_dir``.
        reencode_artifact: If True, re-encode the decoded copy and
            write it over the artifact after decoding, reporting a
            diagnostic when the second encode differs from the first.

    Example:
        >>> config = BenchmarkConfig(record_count=10, field_length=5)
        >>> config.log_path.name
        'benchmark.txt'
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    record_count: int = Field(
        default=DEFAULT_RECORD_COUNT,
        ge=0,
        description="Records in the canonical dataset",
    )
    field_length: int = Field(
        default=DEFAULT_FIELD_LENGTH,
        ge=0,
        description="Text length and integer sequence length per record",
    )
    seed: int | None = Field(
        default=None,
        description="Fixed random seed (None = seed from time.time_ns())",
    )
    output_dir: Path = Field(
        default=Path("."),
        description="Directory for artifact files and the log file",
    )
    log_filename: str = Field(
        default="benchmark.txt",
        min_length=1,
        description="Combined log file name",
    )
    reencode_artifact: bool = Field(
        default=False,
        description=(
            "Re-encode the decoded dataset into the artifact after "
            "decoding and flag any byte difference."
        ),
    )

    @property
    def log_path(self) -> Path:
        """Full path of the combined log file."""
        return self.output_dir / self.log_filename


# ---------------------------------------------------------------------------
# Result Models
# ---------------------------------------------------------------------------


class TimingSample(BaseModel):
    """Duration of one phase.

    Attributes:
        phase: Which phase was timed.
        duration_ns: Elapsed wall-clock time in nanoseconds.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    phase: Phase = Field(description="Timed phase")
    duration_ns: int = Field(ge=0, description="Elapsed time in nanoseconds")

    @property
    def duration_ms(self) -> int:
        """Elapsed time truncated to whole milliseconds."""
        return ns_to_ms(self.duration_ns)


class FormatResult(BaseModel):
    """Outcome of one codec's encode/persist/reload/decode cycle.

    Attributes:
        codec: Codec name.
        encode: Encode phase timing.
        decode: Decode phase timing.
        encoded_size: Size of the encoded output in bytes.
        record_count: Records produced by decoding the reloaded bytes.
        expected_count: Records in the canonical dataset.
        artifact_path: Artifact file written for this codec.
        diagnostics: Soft, non-fatal findings for this format.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    codec: str = Field(description="Codec name")
    encode: TimingSample = Field(description="Encode timing")
    decode: TimingSample = Field(description="Decode timing")
    encoded_size: int = Field(ge=0, description="Encoded size in bytes")
    record_count: int = Field(ge=0, description="Decoded record count")
    expected_count: int = Field(ge=0, description="Canonical record count")
    artifact_path: Path = Field(description="Artifact file path")
    diagnostics: tuple[str, ...] = Field(
        default=(),
        description="Soft diagnostics (never fatal)",
    )

    @property
    def total_ms(self) -> int:
        """Combined time: truncated encode ms + truncated decode ms."""
        return self.encode.duration_ms + self.decode.duration_ms

    @property
    def count_matches(self) -> bool:
        """True if the reloaded dataset has the canonical length."""
        return self.record_count == self.expected_count


class BenchmarkRun(BaseModel):
    """All per-format results of one process run, in run order.

    Attributes:
        config: Configuration used.
        dataset_size: Canonical dataset record count.
        results: One :class:`FormatResult` per codec.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    config: BenchmarkConfig = Field(description="Configuration used")
    dataset_size: int = Field(ge=0, description="Canonical record count")
    results: list[FormatResult] = Field(description="Per-format results")


# ---------------------------------------------------------------------------
# Timing
# ---------------------------------------------------------------------------


def ns_to_ms(duration_ns: int) -> int:
    """Truncate a nanosecond duration to whole milliseconds."""
    return duration_ns // _NS_PER_MS


def measure_ns(fn: Callable[..., Any], *args: Any) -> tuple[Any, int]:
    """Call ``fn(*args)`` once and time it.

    Only the call itself is inside the timed window; exceptions
    propagate untimed.

    Returns:
        Tuple of (return value, elapsed nanoseconds).
    """
    start: int = time.perf_counter_ns()
    value: Any = fn(*args)
    elapsed: int = time.perf_counter_ns() - start
    return value, elapsed


# ---------------------------------------------------------------------------
# Report Formatting
# ---------------------------------------------------------------------------


def format_report_block(result: FormatResult) -> list[str]:
    """Render the fixed-format report block for one codec.

    Lines, in order: format name, encode ms, decode ms, combined ms,
    encoded size in bytes.

    Example:
        >>> block = format_report_block(result)  # doctest: +SKIP
        >>> block[0]  # doctest: +SKIP
        'MSGPACK'
    """
    return [
        result.codec.upper(),
        f"Serialization time: {result.encode.duration_ms} ms",
        f"Deserialization time: {result.decode.duration_ms} ms",
        f"Overall time: {result.total_ms} ms",
        f"Serialized size in bytes: {result.encoded_size}",
    ]


# ---------------------------------------------------------------------------
# JSON Serialization
# ---------------------------------------------------------------------------


def run_to_json(run: BenchmarkRun) -> str:
    """Serialize a :class:`BenchmarkRun` to a JSON string."""
    return run.model_dump_json(indent=2)

