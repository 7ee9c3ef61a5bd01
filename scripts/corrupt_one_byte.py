import sys
from pathlib import Path

from fwl_core.codec import read_descriptor
from fwl_patch.patcher import locate_seed_checksum

def main():
    if len(sys.argv) not in (2, 3):
        print("Usage: corrupt_one_byte.py <file> [offset]")
        raise SystemExit(2)

    p = Path(sys.argv[1])
    b = bytearray(p.read_bytes())

    if len(sys.argv) == 3:
        idx = int(sys.argv[2], 0)
    else:
        # Default: first byte of the located seed checksum.
        data = bytes(b)
        _, idx = locate_seed_checksum(data, read_descriptor(data))

    if idx < 0 or idx >= len(b):
        print("Offset outside file.")
        raise SystemExit(2)

    b[idx] ^= 0x01
    p.write_bytes(bytes(b))
    print(f"Corrupted 1 byte at offset {idx} in {p}")

if __name__ == "__main__":
    main()
