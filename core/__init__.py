"""Core domain layer for the serialization benchmark.

This package provides the record model, the synthetic dataset
generator, and the exception hierarchy shared by every codec adapter.
Records are Pydantic-based with frozen configuration for immutability.
"""

from core.errors import (
    ArtifactIOError,
    CodecError,
    DecodeError,
    EncodeError,
    GenerationError,
    SerializationBenchmarkError,
)
from core.records import (
    CHARSET,
    Dataset,
    Int64,
    Record,
    generate_dataset,
    generate_record,
    make_random_source,
)

__all__: list[str] = [
    "ArtifactIOError",
    "CHARSET",
    "CodecError",
    "Dataset",
    "DecodeError",
    "EncodeError",
    "GenerationError",
    "Int64",
    "Record",
    "SerializationBenchmarkError",
    "generate_dataset",
    "generate_record",
    "make_random_source",
]
