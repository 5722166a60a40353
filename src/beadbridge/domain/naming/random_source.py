"""Random sources used to draw name parts."""

from __future__ import annotations

import random
from typing import Iterable, Protocol

_UPPER_BOUND = 0.999999


class RandomSource(Protocol):
    def next(self) -> float:
        """Return a float in ``[0, 1)``."""


class SystemRandomSource:
    """Draws from the operating system entropy pool."""

    def __init__(self) -> None:
        self._random = random.SystemRandom()

    def next(self) -> float:
        return self._random.random()


class SequenceRandomSource:
    """Replays a fixed sequence of draws, wrapping around when exhausted.

    Values are clamped into ``[0, 0.999999]``. An empty sequence falls back
    to ``fallback`` so a misconfigured seed never stalls generation.
    """

    def __init__(self, values: Iterable[float], *, fallback: RandomSource | None = None) -> None:
        self._values = [min(max(float(value), 0.0), _UPPER_BOUND) for value in values]
        self._index = 0
        self._fallback = fallback or SystemRandomSource()

    @property
    def consumed(self) -> int:
        return self._index

    def next(self) -> float:
        if not self._values:
            return self._fallback.next()
        value = self._values[self._index % len(self._values)]
        self._index += 1
        return value


def pick_index(length: int, source: RandomSource) -> int:
    """Choose an index below ``length``; single-item pools consume no draw."""

    if length <= 1:
        return 0
    return min(int(source.next() * length), length - 1)


__all__ = ["RandomSource", "SequenceRandomSource", "SystemRandomSource", "pick_index"]
