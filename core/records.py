"""Synthetic record model and dataset generator.

This module defines the unit of test data (:class:`Record`) and the
generator that builds the canonical benchmark dataset. Records are
Pydantic models with ``frozen=True`` and ``strict=True`` so that a
decoded copy is only accepted when every field has exactly the type
the generator produced.

Record shape:
    - ``text``: ``field_length`` characters drawn uniformly from the
      62-symbol alphanumeric :data:`CHARSET`.
    - ``numbers``: ``field_length`` integers.
    - ``int_value``: one integer scalar.
    - ``float_value``: one float scalar in ``[0, 1)``.

Integer draws:
    All integers are drawn with ``rng.getrandbits(63)``, i.e. uniformly
    from ``[0, 2**63)``. The values are stored in signed 64-bit fields
    by every codec, so the upper bound always fits.

Random source:
    :func:`make_random_source` seeds from ``time.time_ns()`` unless a
    seed is given, so consecutive runs produce different data. Tests
    pass a fixed seed (or a scripted ``random.Random`` subclass) to get
    reproducible datasets.

Example:
    >>> from core.records import generate_dataset, make_random_source
    >>> dataset = generate_dataset(count=2, field_length=4, rng=make_random_source(7))
    >>> len(dataset)
    2
    >>> len(dataset[0].text), len(dataset[0].numbers)
    (4, 4)
"""

import logging
import random
import string
import time
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from core.errors import GenerationError

logger: logging.Logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

CHARSET: str = string.ascii_lowercase + string.ascii_uppercase + string.digits
"""62-symbol alphabet for the text field (lower, upper, digits)."""

DEFAULT_RECORD_COUNT: int = 1000
"""Number of records in the canonical dataset."""

DEFAULT_FIELD_LENGTH: int = 1000
"""Length of each record's text field and integer sequence."""

_INT_BITS: int = 63
"""Bits per integer draw. Values land in ``[0, 2**63)``."""

Int64 = Annotated[int, Field(ge=-(2**63), le=2**63 - 1)]
"""Signed 64-bit integer. Wider values are rejected on validation."""


# ---------------------------------------------------------------------------
# Record Model
# ---------------------------------------------------------------------------


class Record(BaseModel):
    """One synthetic test entity.

    A record has no identity beyond its position in the dataset.

    Attributes:
        text: Alphanumeric string of length ``field_length``.
        numbers: Signed 64-bit integer sequence of length
            ``field_length``. A tuple, so the record stays immutable.
        int_value: Single signed 64-bit integer scalar.
        float_value: Single float scalar in ``[0, 1)``.

    Example:
        >>> record = Record(text="ab", numbers=(1, 2), int_value=3, float_value=0.5)
        >>> str(record)
        '{"text":"ab","numbers":[1,2],"int_value":3,"float_value":0.5}'
    """

    model_config = ConfigDict(frozen=True, extra="forbid", strict=True)

    text: str = Field(description="Alphanumeric text field")
    numbers: tuple[Int64, ...] = Field(description="Signed 64-bit integer sequence")
    int_value: Int64 = Field(description="Signed 64-bit integer scalar")
    float_value: float = Field(description="Float scalar in [0, 1)")

    def __str__(self) -> str:
        return self.model_dump_json()


Dataset = list[Record]
"""Ordered record collection. Treated as read-only once generated."""


# ---------------------------------------------------------------------------
# Random Source
# ---------------------------------------------------------------------------


def make_random_source(seed: int | None = None) -> random.Random:
    """Create the benchmark's random source.

    Args:
        seed: Fixed seed for reproducible datasets. ``None`` (default)
            seeds from ``time.time_ns()`` so each run differs.

    Returns:
        A dedicated :class:`random.Random` instance (never the module
        global generator).
    """
    if seed is None:
        seed = time.time_ns()
    logger.debug("Random source seeded with %d", seed)
    return random.Random(seed)


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


def generate_record(field_length: int, rng: random.Random) -> Record:
    """Generate a single record.

    Draw order is fixed: text characters, then the integer sequence,
    then the integer scalar, then the float scalar. No two fields share
    a draw.

    Args:
        field_length: Length of the text field and of the integer
            sequence.
        rng: Random source consumed by the draws.

    Returns:
        A new :class:`Record`.
    """
    text: str = "".join(rng.choices(CHARSET, k=field_length))
    numbers: tuple[int, ...] = tuple(
        rng.getrandbits(_INT_BITS) for _ in range(field_length)
    )
    int_value: int = rng.getrandbits(_INT_BITS)
    float_value: float = rng.random()
    return Record(
        text=text,
        numbers=numbers,
        int_value=int_value,
        float_value=float_value,
    )


def generate_dataset(count: int, field_length: int, rng: random.Random) -> Dataset:
    """Generate the canonical dataset.

    Args:
        count: Number of records. Must be >= 0.
        field_length: Per-record text/sequence length. Must be >= 0.
        rng: Random source. Only its state is affected.

    Returns:
        List of exactly ``count`` records.

    Raises:
        GenerationError: If ``count`` or ``field_length`` is negative.

    Example:
        >>> generate_dataset(count=0, field_length=10, rng=make_random_source(1))
        []
    """
    if count < 0:
        raise GenerationError(f"count must be >= 0, got {count}")
    if field_length < 0:
        raise GenerationError(f"field_length must be >= 0, got {field_length}")

    return [generate_record(field_length=field_length, rng=rng) for _ in range(count)]
