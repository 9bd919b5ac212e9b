"""Binary-tagged codec backed by ``msgpack``.

Wire layout:
    The dataset is one msgpack array. Each element is a 4-element
    array ``[text, numbers, int_value, float_value]``. Type tags are
    carried by msgpack itself, so no external schema is needed.

Decode strategy:
    A streaming :class:`msgpack.Unpacker` reads the outer array header
    first and the destination list is pre-sized to that count before
    any record is unpacked. The header is then a promise the payload
    must keep: fewer elements than announced is a truncation, bytes
    left over after the last element are trailing garbage. Both are
    :class:`core.errors.DecodeError`, never a shorter or longer list.

Example:
    >>> from core.records import generate_dataset, make_random_source
    >>> codec = MsgpackCodec()
    >>> dataset = generate_dataset(count=2, field_length=3, rng=make_random_source(1))
    >>> codec.decode(codec.encode(dataset)) == dataset
    True
"""

from typing import Any

import msgpack
from pydantic import ValidationError

from core.errors import DecodeError, EncodeError
from core.records import Dataset, Record
from infra.codec import Codec

_RECORD_ARITY: int = 4
"""Number of positional fields in an encoded record."""


class MsgpackCodec(Codec):
    """Whole-collection msgpack encode/decode."""

    name = "msgpack"

    def encode(self, dataset: Dataset) -> bytes:
        """Pack the dataset as a single msgpack array.

        Raises:
            EncodeError: If a value cannot be packed (e.g. an integer
                outside the 64-bit range).
        """
        rows: list[list[Any]] = [
            [record.text, record.numbers, record.int_value, record.float_value]
            for record in dataset
        ]
        try:
            return msgpack.packb(rows, use_bin_type=True)
        except (TypeError, ValueError, OverflowError) as exc:
            raise EncodeError(codec=self.name, detail=str(exc)) from exc

    def decode(self, data: bytes) -> Dataset:
        """Unpack a dataset, pre-sizing the result from the array header.

        Raises:
            DecodeError: On a non-array top level, truncated input,
                trailing bytes, or a record of the wrong shape.
        """
        unpacker: msgpack.Unpacker = msgpack.Unpacker(
            raw=False,
            use_list=False,
            max_buffer_size=max(len(data), 1),
        )
        unpacker.feed(data)

        try:
            count: int = unpacker.read_array_header()
        except msgpack.OutOfData as exc:
            raise DecodeError(codec=self.name, detail="empty or truncated input") from exc
        except (msgpack.UnpackException, ValueError) as exc:
            raise DecodeError(
                codec=self.name, detail=f"top level is not an array: {exc}",
            ) from exc

        # Every element occupies at least one byte.
        if count > len(data):
            raise DecodeError(
                codec=self.name,
                detail=f"header announces {count} records in {len(data)} bytes",
            )

        records: list[Record | None] = [None] * count
        for index in range(count):
            try:
                item: Any = unpacker.unpack()
            except msgpack.OutOfData as exc:
                raise DecodeError(
                    codec=self.name,
                    detail=f"truncated at record {index} of {count}",
                ) from exc
            except (msgpack.UnpackException, ValueError) as exc:
                raise DecodeError(
                    codec=self.name, detail=f"record {index}: {exc}",
                ) from exc
            records[index] = self._to_record(index=index, item=item)

        if unpacker.tell() != len(data):
            raise DecodeError(
                codec=self.name,
                detail=f"{len(data) - unpacker.tell()} trailing bytes after {count} records",
            )

        return records  # type: ignore[return-value]

    def _to_record(self, index: int, item: Any) -> Record:
        if not isinstance(item, tuple) or len(item) != _RECORD_ARITY:
            raise DecodeError(
                codec=self.name,
                detail=f"record {index} is not a {_RECORD_ARITY}-element array",
            )
        text, numbers, int_value, float_value = item
        try:
            return Record(
                text=text,
                numbers=numbers,
                int_value=int_value,
                float_value=float_value,
            )
        except ValidationError as exc:
            raise DecodeError(codec=self.name, detail=f"record {index}: {exc}") from exc
