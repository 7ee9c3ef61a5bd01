import ctypes

import pytest

from fwl_core.hashes import (
    HASH_ALGORITHMS,
    polynomial_hash,
    resolve_algorithms,
    stable_hash,
    to_int32,
)


def reference_stable(text: str) -> int:
    h1 = ctypes.c_int32(5381)
    h2 = ctypes.c_int32(5381)
    for i, c in enumerate(text.encode("utf-8", "surrogateescape")):
        acc = h1 if i % 2 == 0 else h2
        acc.value = (acc.value * 33) ^ c
    return ctypes.c_int32(h1.value + h2.value * 1566083941).value


def reference_polynomial(text: str) -> int:
    h = ctypes.c_int32(0)
    for c in text.encode("utf-8", "surrogateescape"):
        h.value = h.value * 31 + c
    return h.value


@pytest.mark.parametrize(
    "text, expected",
    [
        ("", 371857150),
        ("a", 372029373),
        ("é", 293709602),  # bytes c3 a9, unsigned
    ],
)
def test_stable_known_values(text, expected):
    assert stable_hash(text) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("", 0),
        ("a", 97),
        ("é", 6214),  # 0xc3 * 31 + 0xa9
        ("hello", 99162322),
        ("Hello World", -862545276),
    ],
)
def test_polynomial_known_values(text, expected):
    assert polynomial_hash(text) == expected


SAMPLES = [
    "",
    "Q",
    "OldSeed123",
    "NewSeed456",
    "ÿþý",
    "世界种子",
    "seed with spaces and a long tail " * 8,
]


@pytest.mark.parametrize("text", SAMPLES)
def test_matches_reference(text):
    assert stable_hash(text) == reference_stable(text)
    assert polynomial_hash(text) == reference_polynomial(text)


@pytest.mark.parametrize("text", SAMPLES)
def test_results_fit_int32(text):
    for func in HASH_ALGORITHMS.values():
        assert -(2**31) <= func(text) < 2**31


def test_to_int32_wraps():
    assert to_int32(2**31) == -(2**31)
    assert to_int32(2**32 + 5) == 5
    assert to_int32(-1) == -1


def test_resolve_algorithms():
    assert [name for name, _ in resolve_algorithms()] == ["stable", "polynomial"]
    assert resolve_algorithms("polynomial") == [("polynomial", polynomial_hash)]
    with pytest.raises(ValueError):
        resolve_algorithms("crc32")
