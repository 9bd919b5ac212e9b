"""Exception hierarchy for the serialization benchmark.

Two severities exist in this system and they never share a channel:

Hard failures:
    Every class in this module. Raised by the generator, the codec
    adapters and the artifact I/O helpers, propagated unchanged through
    the runner, and turned into a non-zero exit code by ``main()``.
    There is no retry and no fallback format.

Soft diagnostics:
    A reloaded record count that differs from the canonical dataset.
    Reported through :meth:`infra.report_sink.ReportSink.diagnostic`
    and recorded on the result; never raised.

Example:
    >>> from core.errors import DecodeError
    >>> err = DecodeError(codec="json", detail="unexpected end of input")
    >>> str(err)
    'json decode failed: unexpected end of input'
    >>> err.operation
    'decode'
"""

from pathlib import Path


class SerializationBenchmarkError(Exception):
    """Base class for all fatal benchmark errors."""


class GenerationError(SerializationBenchmarkError):
    """Invalid dataset generation parameters (e.g. negative count)."""


class CodecError(SerializationBenchmarkError):
    """A codec adapter failed to encode or decode.

    Attributes:
        codec: Name of the codec that failed (e.g. ``"msgpack"``).
        operation: ``"encode"`` or ``"decode"``.
        detail: Human-readable description of the failure.
    """

    operation: str = "codec"

    def __init__(self, codec: str, detail: str) -> None:
        self.codec: str = codec
        self.detail: str = detail
        super().__init__(f"{codec} {self.operation} failed: {detail}")


class EncodeError(CodecError):
    """Dataset could not be represented in the target format."""

    operation = "encode"


class DecodeError(CodecError):
    """Malformed, truncated, or schema-mismatched input bytes."""

    operation = "decode"


class ArtifactIOError(SerializationBenchmarkError):
    """Artifact or log file could not be opened, written, or read.

    Attributes:
        codec: Codec whose artifact was being accessed.
        operation: ``"write"`` or ``"read"``.
        path: Artifact file path.
    """

    def __init__(self, codec: str, operation: str, path: Path) -> None:
        self.codec: str = codec
        self.operation: str = operation
        self.path: Path = path
        super().__init__(f"{codec} artifact {operation} failed: {path}")
