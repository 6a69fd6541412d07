"""Seeded shuffling sources so a run of cards can be reproduced."""

from __future__ import annotations

import hashlib
import random
import secrets
from dataclasses import dataclass
from typing import List, TypeVar

try:  # optional dependency
    import numpy as _np  # type: ignore
except ImportError:  # pragma: no cover - optional
    _np = None

T = TypeVar("T")


@dataclass
class RandomSource:
    engine: str

    def shuffle(self, arr: List[T]) -> None:
        raise NotImplementedError


class PyRandomSource(RandomSource):
    def __init__(self, seed: int):
        super().__init__(engine="py_random")
        self._rng = random.Random(seed)

    def shuffle(self, arr: List[T]) -> None:
        self._rng.shuffle(arr)


class NumpyPCG64Source(RandomSource):  # pragma: no cover - covered when numpy present
    def __init__(self, seed: int):
        if _np is None:
            raise RuntimeError("numpy is not installed; install bingo-cards[pcg]")
        super().__init__(engine="numpy_pcg64")
        self._rng = _np.random.Generator(_np.random.PCG64(seed))

    def shuffle(self, arr: List[T]) -> None:
        # permute indices so arbitrary objects (strings) keep their type
        order = self._rng.permutation(len(arr))
        arr[:] = [arr[int(i)] for i in order]


def create_rng(engine: str, seed: int) -> RandomSource:
    engine = (engine or "py_random").strip().lower()
    if engine == "py_random":
        return PyRandomSource(seed)
    if engine == "numpy_pcg64":
        return NumpyPCG64Source(seed)
    raise ValueError(f"Unsupported RNG engine: {engine}")


def fresh_seed() -> int:
    """Draw a random 63-bit seed for runs that did not configure one."""
    return secrets.randbits(63)


def derive_seed(base_seed: int, index: int, purpose: str) -> int:
    """Derive per-card seed from base seed, index, and purpose using sha256.

    Returns a 63-bit positive integer suitable for seeding common RNGs.
    """
    s = f"{base_seed}|{index}|{purpose}".encode("utf-8")
    digest = hashlib.sha256(s).digest()
    # first 8 bytes masked to 63 bits
    return int.from_bytes(digest[:8], byteorder="big") & ((1 << 63) - 1)
