import random, struct, sys
from pathlib import Path

from fwl_core.codec import build_descriptor
from fwl_core.hashes import HASH_ALGORITHMS
from fwl_core.protocol import BACKUP_MARKER, DATABASE_SUFFIX, DESCRIPTOR_SUFFIX, WORLDS_DIR

# --- CONFIGURATION ---
FORMAT_VERSION = 34
WORLDGEN_VERSION = 2
DB_SIZE = 64 * 1024  # stand-in for terrain data


def make_trailer(rng: random.Random) -> bytes:
    """Unique id (int64) + worldgen version (int32), as the game writes them."""
    return struct.pack("<qi", rng.getrandbits(63), WORLDGEN_VERSION)


def generate_world(out_dir, world, seed, gap=0, algorithm="stable", backups=0, db=True):
    rng = random.Random(f"{world}:{seed}")
    local = Path(out_dir) / WORLDS_DIR
    local.mkdir(parents=True, exist_ok=True)

    data = build_descriptor(
        world,
        seed,
        HASH_ALGORITHMS[algorithm](seed),
        version=FORMAT_VERSION,
        aux=struct.pack("<i", 0),
        gap=bytes(rng.getrandbits(8) | 0x01 for _ in range(gap)),
        trailing=make_trailer(rng),
    )

    (local / f"{world}{DESCRIPTOR_SUFFIX}").write_bytes(data)
    # Backup names embed zero-padded timestamps
    for i in range(backups):
        name = f"{world}{BACKUP_MARKER}20260101-{i:06d}{DESCRIPTOR_SUFFIX}"
        (local / name).write_bytes(data)
    if db:
        (local / f"{world}{DATABASE_SUFFIX}").write_bytes(rng.randbytes(DB_SIZE))

    print(f"GENERATED: {local / (world + DESCRIPTOR_SUFFIX)}")
    return local


if __name__ == "__main__":
    # Usage:
    #   python tools/make_world.py OUT_DIR [--world NAME] [--seed SEED] [--gap N]
    #                              [--hash stable|polynomial] [--backups K] [--no-db]

    args = [a for a in sys.argv[1:] if a]

    def pop_flag(arg_list: list[str], flag: str) -> tuple[bool, list[str]]:
        """Remove a boolean flag from an argv-style list."""
        if flag in arg_list:
            return True, [a for a in arg_list if a != flag]
        return False, arg_list

    def pop_value(arg_list: list[str], flag: str, default: str) -> tuple[str, list[str]]:
        """Remove a flag and its value from an argv-style list."""
        if flag not in arg_list:
            return default, arg_list
        i = arg_list.index(flag)
        if i + 1 >= len(arg_list):
            raise SystemExit(f"{flag} requires a value")
        return arg_list[i + 1], arg_list[:i] + arg_list[i + 2:]

    no_db, args = pop_flag(args, "--no-db")
    world, args = pop_value(args, "--world", "Dedicated")
    seed, args = pop_value(args, "--seed", "OldSeed123")
    gap, args = pop_value(args, "--gap", "0")
    algorithm, args = pop_value(args, "--hash", "stable")
    backups, args = pop_value(args, "--backups", "0")

    if algorithm not in HASH_ALGORITHMS:
        raise SystemExit(f"--hash must be one of: {', '.join(HASH_ALGORITHMS)}")

    out = args[0] if len(args) > 0 else "saves"
    generate_world(out, world, seed, gap=int(gap), algorithm=algorithm, backups=int(backups), db=not no_db)
