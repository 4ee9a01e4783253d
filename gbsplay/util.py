"""Reproducible pseudo-random numbers and shuffling."""

from __future__ import annotations

from collections import deque
from typing import MutableSequence, TypeVar

T = TypeVar("T")

_MASK32 = 0xFFFFFFFF
_DEGREE = 31
_SEPARATION = 3


class CRandom:
    """Additive feedback generator matching the classic C library ``rand()``.

    Seeding with the same value always yields the same sequence, which keeps
    shuffled playlists reproducible.
    """

    RAND_MAX = 2147483647

    def __init__(self, seed: int = 1) -> None:
        self._state: deque[int] = deque(maxlen=_DEGREE + _SEPARATION)
        self.seed(seed)

    def seed(self, seed: int) -> None:
        """Reset the generator to the sequence belonging to ``seed``."""
        seed &= _MASK32
        if seed == 0:
            seed = 1
        values = [seed]
        word = seed
        for _ in range(1, _DEGREE):
            hi, lo = divmod(word, 127773)
            word = 16807 * lo - 2836 * hi
            if word < 0:
                word += 2147483647
            values.append(word)
        values.extend(values[:_SEPARATION])
        self._state.clear()
        self._state.extend(values)
        for _ in range(10 * _DEGREE):
            self._advance()

    def _advance(self) -> int:
        value = (self._state[-_DEGREE] + self._state[-_SEPARATION]) & _MASK32
        self._state.append(value)
        return value

    def rand(self) -> int:
        """Return the next value in ``[0, RAND_MAX]``."""
        return self._advance() >> 1


def rand_long(rng: CRandom, maximum: int) -> int:
    """Return a random integer from ``[0, maximum)``."""
    return int(float(maximum) * rng.rand() / (CRandom.RAND_MAX + 1.0))


def shuffle(rng: CRandom, items: MutableSequence[T]) -> None:
    """Shuffle ``items`` in place, walking from the end towards the front."""
    for i in range(len(items) - 1, 0, -1):
        j = rand_long(rng, i)
        items[i], items[j] = items[j], items[i]