"""Descriptor record reader and VarString codec."""
from __future__ import annotations

import struct
from dataclasses import dataclass
from pathlib import Path

from .errors import MalformedDescriptor
from .protocol import (
    AUX_LEN,
    CHECKSUM_FMT,
    TEXT_ENCODING,
    TEXT_ERRORS,
    VARINT_MAX_BYTES,
    VARINT_MAX_VALUE,
    VERSION_FMT,
    VERSION_LEN,
)


@dataclass(frozen=True)
class DescriptorHeader:
    version: int
    aux: bytes
    world_name: str
    header_end: int  # split point: bytes before this are never rewritten
    seed: str
    seed_end: int  # first byte after the seed string


def read_7bit_int(data: bytes, pos: int) -> tuple[int, int]:
    """Decode a little-endian base-128 integer starting at pos.

    Returns (value, next_pos).
    """
    value = 0
    shift = 0
    for i in range(VARINT_MAX_BYTES):
        if pos + i >= len(data):
            raise MalformedDescriptor(f"Truncated 7-bit integer at offset {pos}", offset=pos)
        b = data[pos + i]
        value |= (b & 0x7F) << shift
        shift += 7
        if not b & 0x80:
            if value > VARINT_MAX_VALUE:
                raise MalformedDescriptor(f"7-bit integer at offset {pos} overflows 32 bits", offset=pos)
            return value, pos + i + 1
    raise MalformedDescriptor(
        f"7-bit integer at offset {pos} exceeds {VARINT_MAX_BYTES} bytes", offset=pos
    )


def encode_7bit_int(value: int) -> bytes:
    if value < 0 or value > VARINT_MAX_VALUE:
        raise ValueError(f"7-bit integer out of range: {value}")
    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def _take(data: bytes, pos: int, n: int, what: str) -> bytes:
    end = pos + n
    if end > len(data):
        raise MalformedDescriptor(
            f"{what} at offset {pos} needs {n} bytes, only {len(data) - pos} left", offset=pos
        )
    return data[pos:end]


def read_var_string(data: bytes, pos: int) -> tuple[str, int]:
    n, pos = read_7bit_int(data, pos)
    raw = _take(data, pos, n, "String")
    return raw.decode(TEXT_ENCODING, TEXT_ERRORS), pos + n


def encode_var_string(text: str) -> bytes:
    raw = text.encode(TEXT_ENCODING, TEXT_ERRORS)
    return encode_7bit_int(len(raw)) + raw


def read_descriptor(data: bytes) -> DescriptorHeader:
    """Walk the header and seed of a descriptor buffer.

    The layout has no random access; every field is consumed in order.
    """
    (version,) = struct.unpack(VERSION_FMT, _take(data, 0, VERSION_LEN, "Version"))
    pos = VERSION_LEN
    aux = _take(data, pos, AUX_LEN, "Aux field")
    pos += AUX_LEN

    world_name, pos = read_var_string(data, pos)
    header_end = pos

    seed, pos = read_var_string(data, pos)
    return DescriptorHeader(
        version=int(version),
        aux=aux,
        world_name=world_name,
        header_end=header_end,
        seed=seed,
        seed_end=pos,
    )


def read_seed(path: Path) -> str:
    return read_descriptor(Path(path).read_bytes()).seed


def build_descriptor(
    world_name: str,
    seed: str,
    checksum: int,
    version: int = 0,
    aux: bytes = b"\x00" * AUX_LEN,
    gap: bytes = b"",
    trailing: bytes = b"",
) -> bytes:
    """Assemble a descriptor from its parts. Used to generate fixtures."""
    if len(aux) != AUX_LEN:
        raise ValueError(f"Aux field must be {AUX_LEN} bytes, got {len(aux)}")
    return b"".join(
        [
            struct.pack(VERSION_FMT, version),
            aux,
            encode_var_string(world_name),
            encode_var_string(seed),
            gap,
            struct.pack(CHECKSUM_FMT, checksum),
            trailing,
        ]
    )
