from __future__ import annotations

import struct
from dataclasses import dataclass
from warnings import warn

from fwl_core.codec import DescriptorHeader, encode_var_string, read_descriptor
from fwl_core.errors import ChecksumNotFound
from fwl_core.hashes import AUTO, HASH_ALGORITHMS, resolve_algorithms
from fwl_core.protocol import (
    CHECKSUM_FMT,
    CHECKSUM_LEN,
    MAX_CHECKSUM_SCAN,
)


@dataclass(frozen=True)
class PatchResult:
    data: bytes
    algorithm: str
    old_seed: str
    new_seed: str
    gap: bytes
    checksum_offset: int  # offset of the old checksum in the source buffer
    old_checksum: int
    new_checksum: int


def locate_checksum(data: bytes, start: int, expected: int, max_scan: int = MAX_CHECKSUM_SCAN) -> int:
    """Scan forward one byte at a time for a little-endian int32 equal to expected.

    Returns the absolute offset where the checksum starts, or -1 if not found
    within max_scan candidate offsets.
    """
    for skipped in range(max_scan):
        pos = start + skipped
        if pos + CHECKSUM_LEN > len(data):
            return -1
        (candidate,) = struct.unpack_from(CHECKSUM_FMT, data, pos)
        if candidate == expected:
            return pos
    return -1


def locate_seed_checksum(data: bytes, header: DescriptorHeader, algorithm: str = AUTO) -> tuple[str, int]:
    """Find the checksum of the current seed, trying each algorithm in order.

    Returns (algorithm name, checksum offset).
    """
    candidates = resolve_algorithms(algorithm)
    for i, (name, func) in enumerate(candidates):
        off = locate_checksum(data, header.seed_end, func(header.seed))
        if off == -1:
            continue
        if i > 0:
            warn(f"Seed checksum matched fallback algorithm {name!r}")
        return name, off

    tried = ", ".join(name for name, _ in candidates)
    raise ChecksumNotFound(
        f"Could not locate checksum of seed {header.seed!r} within {MAX_CHECKSUM_SCAN} bytes "
        f"of offset {header.seed_end} (tried: {tried}). Unrecognized structure.",
        offset=header.seed_end,
    )


def patch_seed(data: bytes, target_seed: str, algorithm: str = AUTO) -> PatchResult:
    """Build a new descriptor buffer carrying target_seed.

    Layout of the result:
      data[:header_end] | VarString(target) | gap | int32(checksum(target)) | trailing
    Nothing outside the seed, gap and checksum is examined or changed.
    """
    header = read_descriptor(data)
    name, hash_off = locate_seed_checksum(data, header, algorithm)
    func = HASH_ALGORITHMS[name]

    gap = data[header.seed_end:hash_off]
    if gap:
        warn(f"Checksum found {len(gap)} bytes past seed end at offset {hash_off}. Preserving gap.")

    (old_checksum,) = struct.unpack_from(CHECKSUM_FMT, data, hash_off)
    new_checksum = func(target_seed)

    out = b"".join(
        [
            data[: header.header_end],
            encode_var_string(target_seed),
            gap,
            struct.pack(CHECKSUM_FMT, new_checksum),
            data[hash_off + CHECKSUM_LEN:],
        ]
    )

    return PatchResult(
        data=out,
        algorithm=name,
        old_seed=header.seed,
        new_seed=target_seed,
        gap=gap,
        checksum_offset=hash_off,
        old_checksum=int(old_checksum),
        new_checksum=int(new_checksum),
    )
