"""Serialization benchmark runner: msgpack vs JSON vs XML.

For each codec, strictly in sequence, this script runs:

    ENCODE (timed) → PERSIST → RELOAD → DECODE (timed) → VERIFY → REPORT

over one canonical dataset generated at startup:

- ENCODE: ``codec.encode(dataset)`` timed with ``perf_counter_ns``.
- PERSIST: bytes written to ``<output_dir>/<codec>.txt`` (truncated).
- RELOAD: the artifact is read back; *these* bytes are decoded, so
  every format pays the same disk round trip before decode.
- DECODE: ``codec.decode(reloaded)`` timed.
- VERIFY: decoded record count vs canonical count. A mismatch is a
  soft diagnostic: reported, recorded, and the run continues.
- REPORT: fixed-format block through the console + file sink.

Failure policy:
    Any :class:`core.errors.SerializationBenchmarkError` (encode,
    decode, or artifact I/O) aborts the whole run at once. No report is
    emitted for the failing format and later formats are not attempted.
    ``main()`` logs the error with its format and operation and exits
    with status 1.

Re-encode mode:
    With ``BenchmarkConfig.reencode_artifact`` set, the decoded copy is
    encoded again and written over the artifact after decode (outside
    the timed windows). A byte difference from the first encode is
    reported as a diagnostic.

Usage:
    python -m scripts.benchmark_serialization
    serialization-benchmark

Output:
    ``Array size: N`` once on stdout, then one report block per codec on
    stdout and in ``benchmark.txt``. Artifacts ``msgpack.txt``,
    ``json.txt`` and ``xml.txt`` are left in the working directory.
"""

import logging
import random
import sys
from pathlib import Path
from typing import Sequence

from core.errors import ArtifactIOError, CodecError, SerializationBenchmarkError
from core.records import Dataset, generate_dataset, make_random_source
from infra.artifacts import artifact_path, read_artifact, write_artifact
from infra.codec import Codec, default_codecs
from infra.report_sink import ReportSink, configure_report_sink
from scripts.benchmark_utils import (
    BenchmarkConfig,
    BenchmarkRun,
    FormatResult,
    Phase,
    TimingSample,
    format_report_block,
    measure_ns,
    run_to_json,
)

logger: logging.Logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Context
# ---------------------------------------------------------------------------


class BenchmarkContext:
    """Everything a run needs, passed explicitly.

    Attributes:
        config: Benchmark configuration.
        dataset: Canonical dataset. Read-only for the whole run.
        codecs: Codecs to benchmark, in run order.
        sink: Report destination.
    """

    __slots__ = ("config", "dataset", "codecs", "sink")

    def __init__(
        self,
        config: BenchmarkConfig,
        dataset: Dataset,
        codecs: list[Codec],
        sink: ReportSink,
    ) -> None:
        self.config: BenchmarkConfig = config
        self.dataset: Dataset = dataset
        self.codecs: list[Codec] = codecs
        self.sink: ReportSink = sink


def initialize(
    config: BenchmarkConfig,
    sink: ReportSink,
    codecs: Sequence[Codec] | None = None,
    rng: random.Random | None = None,
) -> BenchmarkContext:
    """Build the random source and the canonical dataset.

    Args:
        config: Benchmark configuration.
        sink: Report destination.
        codecs: Codecs to run. Defaults to :func:`infra.codec.default_codecs`.
        rng: Random source override. Defaults to one seeded from
            ``config.seed``.

    Returns:
        A ready :class:`BenchmarkContext`.

    Raises:
        GenerationError: If the configured sizes are invalid.
    """
    if rng is None:
        rng = make_random_source(seed=config.seed)
    dataset: Dataset = generate_dataset(
        count=config.record_count,
        field_length=config.field_length,
        rng=rng,
    )
    return BenchmarkContext(
        config=config,
        dataset=dataset,
        codecs=list(codecs) if codecs is not None else default_codecs(),
        sink=sink,
    )


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------


def run_codec(context: BenchmarkContext, codec: Codec) -> FormatResult:
    """Run one codec through encode → persist → reload → decode.

    Args:
        context: Benchmark context.
        codec: Codec under test.

    Returns:
        :class:`FormatResult` for this codec. Its report block has
        already been written to the sink.

    Raises:
        SerializationBenchmarkError: On any encode, decode, or
            artifact I/O failure.
    """
    expected_count: int = len(context.dataset)
    path: Path = artifact_path(output_dir=context.config.output_dir, codec_name=codec.name)
    diagnostics: list[str] = []

    encoded, encode_ns = measure_ns(codec.encode, context.dataset)
    write_artifact(path=path, data=encoded, codec_name=codec.name)
    reloaded: bytes = read_artifact(path=path, codec_name=codec.name)
    decoded, decode_ns = measure_ns(codec.decode, reloaded)

    if len(decoded) != expected_count:
        diagnostics.append(
            f"{codec.name}: record count mismatch after reload "
            f"(decoded {len(decoded)}, expected {expected_count})"
        )

    if context.config.reencode_artifact:
        reencoded: bytes = codec.encode(decoded)
        write_artifact(path=path, data=reencoded, codec_name=codec.name)
        if reencoded != encoded:
            diagnostics.append(
                f"{codec.name}: re-encoded artifact differs from first encode "
                f"({len(reencoded)} vs {len(encoded)} bytes)"
            )

    result: FormatResult = FormatResult(
        codec=codec.name,
        encode=TimingSample(phase=Phase.ENCODE, duration_ns=encode_ns),
        decode=TimingSample(phase=Phase.DECODE, duration_ns=decode_ns),
        encoded_size=len(encoded),
        record_count=len(decoded),
        expected_count=expected_count,
        artifact_path=path,
        diagnostics=tuple(diagnostics),
    )

    context.sink.report(format_report_block(result))
    for message in result.diagnostics:
        context.sink.diagnostic(message)
    return result


def run_benchmark(context: BenchmarkContext) -> BenchmarkRun:
    """Run every codec in sequence.

    The first fatal error propagates immediately; remaining codecs are
    not attempted.
    """
    results: list[FormatResult] = []
    for codec in context.codecs:
        logger.debug("Benchmarking %s", codec.name)
        results.append(run_codec(context=context, codec=codec))
    return BenchmarkRun(
        config=context.config,
        dataset_size=len(context.dataset),
        results=results,
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(config: BenchmarkConfig | None = None) -> int:
    """Run the benchmark with the default configuration.

    Takes no command-line flags and reads no environment variables.

    Returns:
        Process exit code: 0 on success, 1 on a fatal error.
    """
    if config is None:
        config = BenchmarkConfig()

    try:
        sink: ReportSink = configure_report_sink(log_path=config.log_path)
    except SerializationBenchmarkError as exc:
        print(f"Cannot open log file: {exc}", file=sys.stderr)
        return 1

    with sink:
        try:
            context: BenchmarkContext = initialize(config=config, sink=sink)
            print(f"Array size: {len(context.dataset)}")
            run: BenchmarkRun = run_benchmark(context=context)
            logger.debug("Run results:\n%s", run_to_json(run))
        except (CodecError, ArtifactIOError) as exc:
            logger.exception(
                "Benchmark aborted: %s %s failed", exc.codec, exc.operation,
            )
            return 1
        except SerializationBenchmarkError:
            logger.exception("Benchmark aborted")
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
