"""Seed checksum functions.

Both variants walk the UTF-8 bytes of the seed (unsigned, 0-255) and wrap to a
signed 32-bit integer after every step, matching native int32 overflow.
"""
from __future__ import annotations

from typing import Callable

from .protocol import (
    STABLE_HASH_MULTIPLIER,
    STABLE_HASH_SEED,
    TEXT_ENCODING,
    TEXT_ERRORS,
)

HashFunc = Callable[[str], int]


def to_int32(value: int) -> int:
    """Wrap an arbitrary Python int to signed 32-bit."""
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _seed_bytes(text: str) -> bytes:
    return text.encode(TEXT_ENCODING, TEXT_ERRORS)


def stable_hash(text: str) -> int:
    """Double-accumulator hash: even bytes feed h1, odd bytes feed h2."""
    h1 = STABLE_HASH_SEED
    h2 = STABLE_HASH_SEED
    for i, c in enumerate(_seed_bytes(text)):
        if i % 2 == 0:
            h1 = to_int32(((h1 << 5) + h1) ^ c)
        else:
            h2 = to_int32(((h2 << 5) + h2) ^ c)
    return to_int32(h1 + h2 * STABLE_HASH_MULTIPLIER)


def polynomial_hash(text: str) -> int:
    """Multiply-by-31-then-add hash starting from zero."""
    h = 0
    for c in _seed_bytes(text):
        h = to_int32((h << 5) - h + c)
    return h


HASH_ALGORITHMS: dict[str, HashFunc] = {
    "stable": stable_hash,
    "polynomial": polynomial_hash,
}

AUTO = "auto"


def resolve_algorithms(name: str = AUTO) -> list[tuple[str, HashFunc]]:
    """Return the (name, func) pairs to try, in order.

    "auto" selects every registered algorithm, stable first.
    """
    if name == AUTO:
        return list(HASH_ALGORITHMS.items())
    try:
        return [(name, HASH_ALGORITHMS[name])]
    except KeyError:
        raise ValueError(f"Unknown checksum algorithm: {name!r}") from None
