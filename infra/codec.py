"""Uniform codec adapter interface.

Every wire format under test is wrapped in a :class:`Codec` subclass
exposing the same two operations, so the runner can drive all of them
through one code path:

    ``encode(dataset) -> bytes``
    ``decode(data) -> dataset``

Contract:
    - Adapters are stateless. Encoding the same dataset twice yields
      byte-identical output.
    - ``encode`` raises :class:`core.errors.EncodeError` and ``decode``
      raises :class:`core.errors.DecodeError`. Library exceptions never
      escape an adapter; they are chained with ``raise ... from exc``.
    - ``decode`` never returns a partial collection.

Example:
    >>> from infra.codec import default_codecs
    >>> [codec.name for codec in default_codecs()]
    ['msgpack', 'json', 'xml']
"""

import abc

from core.records import Dataset


class Codec(abc.ABC):
    """Abstract encode/decode pair for one wire format.

    Attributes:
        name: Short format name. Used as the report label and as the
            artifact file stem.
    """

    name: str = ""

    @abc.abstractmethod
    def encode(self, dataset: Dataset) -> bytes:
        """Encode the whole dataset into bytes."""

    @abc.abstractmethod
    def decode(self, data: bytes) -> Dataset:
        """Decode bytes produced by :meth:`encode` back into records."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


def default_codecs() -> list[Codec]:
    """Return the benchmarked codecs in run order.

    Order: binary-tagged (msgpack), structured-text (JSON),
    markup-text (XML).
    """
    # Local imports: the concrete adapters import this module.
    from infra.json_codec import JsonCodec
    from infra.msgpack_codec import MsgpackCodec
    from infra.xml_codec import XmlCodec

    return [MsgpackCodec(), JsonCodec(), XmlCodec()]
