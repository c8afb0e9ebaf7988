"""
Deterministic string hashing and a seeded PRNG.

Both mirror the browser implementation bit for bit (32-bit wraparound on
UTF-16 code units) so a seed key renders the same planet on every client.
Not cryptographic.
"""
from typing import Iterator

import numpy as np

_MASK32 = 0xFFFFFFFF
_GOLDEN_STEP = 0x6D2B79F5


def _utf16_code_units(text: str) -> Iterator[int]:
    data = text.encode("utf-16-le", errors="surrogatepass")
    for i in range(0, len(data), 2):
        yield data[i] | (data[i + 1] << 8)


def hash_seed(key: str) -> int:
    """Stable non-negative 32-bit hash (djb2 with xor). Total over all strings."""
    h = 5381
    for code in _utf16_code_units(key):
        h = ((h * 33) & _MASK32) ^ code
    return h & _MASK32


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK32


class SeededRandom:
    """
    Mulberry32 generator. Same seed, same sequence of floats in [0, 1).

    Iterating yields an endless stream; call the instance for the next value.
    """

    def __init__(self, seed: int):
        self._state = seed & _MASK32

    def __call__(self) -> float:
        return self.random()

    def __iter__(self) -> Iterator[float]:
        while True:
            yield self.random()

    def random(self) -> float:
        self._state = (self._state + _GOLDEN_STEP) & _MASK32
        a = self._state
        t = _imul(a ^ (a >> 15), 1 | a)
        t = ((t + _imul(t ^ (t >> 7), 61 | t)) & _MASK32) ^ t
        return ((t ^ (t >> 14)) & _MASK32) / 4294967296.0

    def take(self, count: int) -> np.ndarray:
        """
        The next ``count`` values as a float64 array.

        Same numbers as ``count`` calls to random(), computed with uint32
        arithmetic (which wraps like Math.imul) instead of a Python loop.
        """
        if count <= 0:
            return np.empty(0, dtype=np.float64)
        steps = np.arange(1, count + 1, dtype=np.uint32) * np.uint32(_GOLDEN_STEP)
        a = steps + np.uint32(self._state)
        t = (a ^ (a >> np.uint32(15))) * (a | np.uint32(1))
        t = (t + (t ^ (t >> np.uint32(7))) * (t | np.uint32(61))) ^ t
        t = t ^ (t >> np.uint32(14))
        self._state = (self._state + count * _GOLDEN_STEP) & _MASK32
        return t.astype(np.float64) / 4294967296.0

    def uniform(self, low: float, high: float) -> float:
        return low + self.random() * (high - low)

    def randint(self, low: int, span: int) -> int:
        """low + floor(random * span), i.e. an int in [low, low + span)."""
        return low + int(self.random() * span)


def seeded_random(key: str) -> SeededRandom:
    return SeededRandom(hash_seed(key))
