"""Markup-text codec: XML via ``xml.etree.ElementTree``.

Wire layout:
    Records are written back-to-back as top-level elements with no
    enclosing root, one ``<record>`` per dataset entry::

        <record><text>aF9</text><number>1</number><number>2</number>
        <int_value>4</int_value><float_value>0.25</float_value></record>

    Floats are written with ``repr()`` so they parse back to the same
    value. Carriage returns in text are written as the character
    reference ``&#13;``, since a parser folds a literal ``\r`` into
    ``\n``. The encoded stream is therefore an XML *fragment*, not a
    document.

Streaming decode:
    Unlike the other two codecs, decode is record-by-record.
    :func:`iter_records` feeds the input in fixed-size chunks to an
    :class:`xml.etree.ElementTree.XMLPullParser` (behind a synthetic
    wrapper element so the fragment is parseable), yields one
    :class:`core.records.Record` per completed ``<record>``, and drops
    the element immediately afterwards. :meth:`XmlCodec.decode` keeps
    pulling until the iterator reports end-of-input; the record count
    plays no part in termination.

End-of-input rule:
    The stream ends when the input bytes are exhausted and the parser
    has closed cleanly. Whitespace between or after records is
    ignored. Any other character data between records, a top-level
    element that is not ``<record>``, a truncated element, or a
    malformed field raises :class:`core.errors.DecodeError`.

Example:
    >>> from core.records import Record
    >>> codec = XmlCodec()
    >>> data = codec.encode([Record(text="ab", numbers=(7,), int_value=1, float_value=0.5)])
    >>> data
    b'<record><text>ab</text><number>7</number><int_value>1</int_value><float_value>0.5</float_value></record>'
    >>> records = iter_records(data + b"\\n")
    >>> next(records).numbers
    [7]
    >>> next(records)
    Traceback (most recent call last):
        ...
    StopIteration
"""

import re
import xml.etree.ElementTree as ET
from typing import Iterator

from pydantic import ValidationError

from core.errors import DecodeError, EncodeError
from core.records import Dataset, Record
from infra.codec import Codec

_CODEC_NAME: str = "xml"

_RECORD_TAG: str = "record"
_TEXT_TAG: str = "text"
_NUMBER_TAG: str = "number"
_INT_TAG: str = "int_value"
_FLOAT_TAG: str = "float_value"
_SCALAR_TAGS: tuple[str, ...] = (_TEXT_TAG, _INT_TAG, _FLOAT_TAG)

_WRAPPER_OPEN: bytes = b"<records>"
_WRAPPER_CLOSE: bytes = b"</records>"

_CHUNK_SIZE: int = 64 * 1024
"""Bytes fed to the pull parser per step."""

_CR: bytes = b"\r"
_CR_REFERENCE: bytes = b"&#13;"

_INVALID_XML_CHARS: re.Pattern[str] = re.compile(
    r"[^\t\n\r\x20-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]"
)
"""Characters outside the XML 1.0 ``Char`` production."""


# ---------------------------------------------------------------------------
# Element conversion
# ---------------------------------------------------------------------------


def _record_to_element(record: Record) -> ET.Element:
    element: ET.Element = ET.Element(_RECORD_TAG)
    ET.SubElement(element, _TEXT_TAG).text = record.text
    for number in record.numbers:
        ET.SubElement(element, _NUMBER_TAG).text = str(number)
    ET.SubElement(element, _INT_TAG).text = str(record.int_value)
    ET.SubElement(element, _FLOAT_TAG).text = repr(record.float_value)
    return element


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _element_to_record(element: ET.Element, index: int) -> Record:
    """Convert one completed ``<record>`` element.

    Raises:
        DecodeError: On unknown or nested children, stray text, a
            missing or repeated scalar, or an unparseable number.
    """
    if not _is_blank(element.text):
        raise DecodeError(codec=_CODEC_NAME, detail=f"record {index}: stray text")

    numbers: list[int] = []
    fields: dict[str, str] = {}

    for child in element:
        if len(child) or not _is_blank(child.tail):
            raise DecodeError(
                codec=_CODEC_NAME,
                detail=f"record {index}: unexpected content in <{child.tag}>",
            )
        value: str = child.text or ""
        if child.tag == _NUMBER_TAG:
            try:
                numbers.append(int(value))
            except ValueError as exc:
                raise DecodeError(
                    codec=_CODEC_NAME,
                    detail=f"record {index}: bad <{child.tag}> value {value!r}",
                ) from exc
        elif child.tag in _SCALAR_TAGS:
            if child.tag in fields:
                raise DecodeError(
                    codec=_CODEC_NAME,
                    detail=f"record {index}: repeated <{child.tag}>",
                )
            fields[child.tag] = value
        else:
            raise DecodeError(
                codec=_CODEC_NAME,
                detail=f"record {index}: unknown element <{child.tag}>",
            )

    missing: list[str] = [tag for tag in _SCALAR_TAGS if tag not in fields]
    if missing:
        raise DecodeError(
            codec=_CODEC_NAME,
            detail=f"record {index}: missing {', '.join(missing)}",
        )

    try:
        return Record(
            text=fields[_TEXT_TAG],
            numbers=tuple(numbers),
            int_value=int(fields[_INT_TAG]),
            float_value=float(fields[_FLOAT_TAG]),
        )
    except (ValueError, ValidationError) as exc:
        raise DecodeError(codec=_CODEC_NAME, detail=f"record {index}: {exc}") from exc


# ---------------------------------------------------------------------------
# Streaming decode
# ---------------------------------------------------------------------------


def _chunks(data: bytes, chunk_size: int) -> Iterator[bytes]:
    view: memoryview = memoryview(data)
    for offset in range(0, len(data), chunk_size):
        yield bytes(view[offset:offset + chunk_size])
    yield _WRAPPER_CLOSE


def iter_records(data: bytes, chunk_size: int = _CHUNK_SIZE) -> Iterator[Record]:
    """Decode records one at a time from an XML record stream.

    Args:
        data: Back-to-back ``<record>`` elements as written by
            :meth:`XmlCodec.encode`.
        chunk_size: Bytes fed to the parser per step. Must be > 0.

    Yields:
        One :class:`Record` per top-level element, in stream order.
        Raises ``StopIteration`` once the input is exhausted.

    Raises:
        DecodeError: As described in the module docstring. Records
            already yielded are not retracted, so callers that need
            all-or-nothing semantics must collect through
            :meth:`XmlCodec.decode`.
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be > 0, got {chunk_size}")

    parser: ET.XMLPullParser = ET.XMLPullParser(events=("start", "end"))
    depth: int = 0
    index: int = 0
    root: ET.Element | None = None
    last: ET.Element | None = None

    try:
        parser.feed(_WRAPPER_OPEN)
        for chunk in _chunks(data, chunk_size):
            parser.feed(chunk)
            for event, element in parser.read_events():
                if event == "start":
                    depth += 1
                    if depth == 1:
                        root = element
                    elif depth == 2:
                        if element.tag != _RECORD_TAG:
                            raise DecodeError(
                                codec=_CODEC_NAME,
                                detail=f"unexpected top-level element <{element.tag}>",
                            )
                        _check_gap(root, last)
                    continue

                if depth == 2:
                    record: Record = _element_to_record(element, index=index)
                    # Detached but still referenced, so its tail is
                    # filled in once the following data is parsed.
                    root.remove(element)  # type: ignore[union-attr]
                    last = element
                    index += 1
                    yield record
                elif depth == 1:
                    _check_gap(root, last)
                depth -= 1
        parser.close()
    except ET.ParseError as exc:
        raise DecodeError(
            codec=_CODEC_NAME, detail=f"malformed input after {index} records: {exc}",
        ) from exc


def _check_gap(root: ET.Element | None, last: ET.Element | None) -> None:
    """Reject non-whitespace character data between top-level records."""
    gap: str | None = last.tail if last is not None else root.text  # type: ignore[union-attr]
    if not _is_blank(gap):
        raise DecodeError(
            codec=_CODEC_NAME, detail=f"unexpected character data {gap.strip()[:20]!r}",
        )


# ---------------------------------------------------------------------------
# Codec
# ---------------------------------------------------------------------------


class XmlCodec(Codec):
    """Whole-collection XML encode, record-by-record streaming decode."""

    name = _CODEC_NAME

    def encode(self, dataset: Dataset) -> bytes:
        """Serialize each record as a top-level ``<record>`` element.

        Raises:
            EncodeError: If a record's text holds characters XML 1.0
                cannot represent.
        """
        parts: list[bytes] = []
        for index, record in enumerate(dataset):
            if _INVALID_XML_CHARS.search(record.text):
                raise EncodeError(
                    codec=self.name,
                    detail=f"record {index} text contains characters not allowed in XML",
                )
            encoded: bytes = ET.tostring(_record_to_element(record), encoding="utf-8")
            parts.append(encoded.replace(_CR, _CR_REFERENCE))
        return b"".join(parts)

    def decode(self, data: bytes) -> Dataset:
        """Collect the streaming decoder until end-of-input."""
        records: Dataset = []
        stream: Iterator[Record] = iter_records(data)
        while True:
            try:
                record: Record = next(stream)
            except StopIteration:
                break
            records.append(record)
        return records
