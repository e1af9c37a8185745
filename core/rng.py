"""Deterministic PRNG for reproducible keys and messages.

Use set_seed(n) at test start for reproducibility.
Default (no seed) uses os.urandom for cryptographic randomness.
"""

import os
import random as _random


class DeterministicRNG:
    """Seeded PRNG wrapper. When seed is None, uses os.urandom."""

    def __init__(self, seed=None):
        self._seed = seed
        if seed is not None:
            self._rng = _random.Random(seed)
        else:
            self._rng = None  # Use os-level randomness

    def randbelow(self, n: int) -> int:
        if self._rng is not None:
            return self._rng.randrange(n)
        # 16 spare bytes keep the modulo bias negligible for 253-bit bounds
        width = (n.bit_length() + 7) // 8 + 16
        return int.from_bytes(os.urandom(width), 'big') % n

    def random_bytes(self, length: int) -> bytes:
        if self._rng is not None:
            return self._rng.randbytes(length)
        return os.urandom(length)

    def random_bits(self, count: int) -> list[bool]:
        return [self.randbelow(2) == 1 for _ in range(count)]


# Global instance
_global_rng = DeterministicRNG(seed=None)


def set_seed(seed: int | None):
    """Set global seed for reproducibility. None = cryptographic randomness."""
    global _global_rng
    _global_rng = DeterministicRNG(seed=seed)


def randbelow(n: int) -> int:
    return _global_rng.randbelow(n)


def random_bytes(length: int) -> bytes:
    return _global_rng.random_bytes(length)


def random_bits(count: int) -> list[bool]:
    return _global_rng.random_bits(count)
