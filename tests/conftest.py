"""Shared fixtures for the serialization benchmark tests."""

import itertools
import random
from pathlib import Path
from typing import Iterator

import pytest

from core.records import Dataset, generate_dataset, make_random_source
from infra.report_sink import ReportSink, configure_report_sink


class ScriptedRandom(random.Random):
    """Random source replaying a fixed script.

    ``random()`` cycles through ``floats``; ``getrandbits()`` returns
    1, 2, 3, ... regardless of the requested width.
    """

    def __init__(self, floats: list[float]) -> None:
        super().__init__(0)
        self._floats: Iterator[float] = itertools.cycle(floats)
        self._next_int: int = 0

    def random(self) -> float:
        return next(self._floats)

    def getrandbits(self, k: int) -> int:
        self._next_int += 1
        return self._next_int


@pytest.fixture
def scripted_rng() -> ScriptedRandom:
    """Scripted source: floats cycle 0.0, 0.5, 0.999; ints count from 1."""
    return ScriptedRandom(floats=[0.0, 0.5, 0.999])


@pytest.fixture
def small_dataset() -> Dataset:
    """Five records of field length 8 from a fixed seed."""
    return generate_dataset(count=5, field_length=8, rng=make_random_source(seed=42))


@pytest.fixture
def sink(tmp_path: Path) -> Iterator[ReportSink]:
    """Report sink writing to stdout and ``tmp_path/benchmark.txt``."""
    report_sink: ReportSink = configure_report_sink(log_path=tmp_path / "benchmark.txt")
    yield report_sink
    report_sink.close()
