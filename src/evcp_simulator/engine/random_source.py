"""Uniform [0, 1) random sources for the arrival process.

Two variants:
  - ``PlatformRandom``: NumPy's default generator, non-reproducible.
  - ``SeededRandom``: a pure function of an integer counter,
    ``frac(sin(counter) × 10000)``.  Not statistically strong, but
    deterministic and reproducible for regression tests.

The seeded generator's state is an immutable ``SeededState`` whose
``advance()`` returns the drawn value together with the next state, so a
sequence can be replayed from any point.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Protocol

import numpy as np


class RandomSource(Protocol):
    """Anything that yields uniform floats in [0, 1)."""

    def next(self) -> float: ...


@dataclass(frozen=True)
class SeededState:
    """Counter state of the sine-hash generator."""

    counter: int

    def advance(self) -> tuple[float, SeededState]:
        x = math.sin(self.counter) * 10_000
        return x - math.floor(x), SeededState(self.counter + 1)


class SeededRandom:
    """Deterministic generator — same seed and call sequence, same values."""

    def __init__(self, seed: int) -> None:
        self._state = SeededState(seed)

    @property
    def state(self) -> SeededState:
        return self._state

    def next(self) -> float:
        value, self._state = self._state.advance()
        return value


class PlatformRandom:
    """Non-reproducible generator backed by ``numpy.random.default_rng()``."""

    def __init__(self, rng: np.random.Generator | None = None) -> None:
        self._rng = rng if rng is not None else np.random.default_rng()

    def next(self) -> float:
        return float(self._rng.random())


def make_random_source(seed: int | None) -> RandomSource:
    """Seeded generator when ``seed`` is given (0 included), platform generator otherwise."""
    if seed is None:
        return PlatformRandom()
    return SeededRandom(seed)
