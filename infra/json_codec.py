"""Structured-text codec: JSON through Pydantic's ``TypeAdapter``.

Encoding and decoding both run inside pydantic-core, the same
serializer the result models use for ``model_dump_json`` /
``model_validate_json``. The whole document is handled in one shot.

JSON has no representation for NaN or infinity, so a dataset holding a
non-finite float is rejected up front instead of being written as
``null`` and failing on the way back.

Decode is strict: malformed text, a truncated document, trailing data,
or a record with missing/extra/mistyped fields all raise
:class:`core.errors.DecodeError`.
"""

import math

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from core.errors import DecodeError, EncodeError
from core.records import Dataset, Record
from infra.codec import Codec

_DATASET_ADAPTER: TypeAdapter[list[Record]] = TypeAdapter(list[Record])


class JsonCodec(Codec):
    """Whole-document JSON encode/decode."""

    name = "json"

    def encode(self, dataset: Dataset) -> bytes:
        for index, record in enumerate(dataset):
            if not math.isfinite(record.float_value):
                raise EncodeError(
                    codec=self.name,
                    detail=f"record {index} float_value {record.float_value!r} is not finite",
                )
        try:
            return _DATASET_ADAPTER.dump_json(dataset)
        except PydanticSerializationError as exc:
            raise EncodeError(codec=self.name, detail=str(exc)) from exc

    def decode(self, data: bytes) -> Dataset:
        try:
            return _DATASET_ADAPTER.validate_json(data)
        except ValidationError as exc:
            raise DecodeError(codec=self.name, detail=str(exc)) from exc
