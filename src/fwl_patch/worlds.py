"""World save discovery and the seed patch procedure."""
from __future__ import annotations

import glob
import os
import shutil
from pathlib import Path
from typing import NamedTuple

from fwl_core.codec import read_descriptor
from fwl_core.hashes import AUTO
from fwl_core.protocol import (
    BACKUP_MARKER,
    DATABASE_SUFFIX,
    DESCRIPTOR_SUFFIX,
    WORLDS_DIR,
)
from fwl_patch.patcher import patch_seed


class WorldPaths(NamedTuple):
    local_dir: Path
    descriptor: Path
    database: Path


def world_paths(save_dir: Path, world: str) -> WorldPaths:
    local_dir = Path(save_dir) / WORLDS_DIR
    return WorldPaths(
        local_dir=local_dir,
        descriptor=local_dir / f"{world}{DESCRIPTOR_SUFFIX}",
        database=local_dir / f"{world}{DATABASE_SUFFIX}",
    )


def find_backups(paths: WorldPaths, world: str) -> list[Path]:
    """Automatic backups of a world, oldest first.

    Backup names embed zero-padded timestamps, so name order is time order.
    """
    if not paths.local_dir.is_dir():
        return []
    return sorted(
        (p for p in paths.local_dir.glob(f"{glob.escape(world)}*{DESCRIPTOR_SUFFIX}") if BACKUP_MARKER in p.name),
        key=lambda p: p.name,
    )


def select_source(paths: WorldPaths, world: str) -> Path | None:
    backups = find_backups(paths, world)
    if backups:
        return backups[-1]
    if paths.descriptor.exists():
        return paths.descriptor
    return None


def write_atomic(path: Path, data: bytes) -> None:
    """Replace path with data; the target is either fully old or fully new.

    An existing target keeps its mode and owner.
    """
    tmp = path.with_name(path.name + ".tmp")
    try:
        with open(tmp, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        if path.exists():
            st = path.stat()
            tmp_st = tmp.stat()
            shutil.copymode(path, tmp)
            if hasattr(os, "chown") and (st.st_uid, st.st_gid) != (tmp_st.st_uid, tmp_st.st_gid):
                os.chown(tmp, st.st_uid, st.st_gid)
        os.replace(tmp, path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


def invalidate_database(paths: WorldPaths) -> bool:
    try:
        paths.database.unlink()
    except FileNotFoundError:
        return False
    return True


def apply_seed(
    world: str,
    save_dir: Path,
    seed: str,
    algorithm: str = AUTO,
    dry_run: bool = False,
) -> dict:
    """Make the world's descriptor carry seed.

    Returns a result dict whose "status" is one of SKIPPED, NO_WORLD,
    UNCHANGED, DRY_RUN or PATCHED. Structural and I/O failures raise before
    any file is written.
    """
    if seed == "":
        print("[Patcher] No target seed provided. Skipping.")
        return {"status": "SKIPPED"}

    paths = world_paths(save_dir, world)
    source = select_source(paths, world)
    if source is None:
        print("[Patcher] No existing world files found. Ready for random generation.")
        return {"status": "NO_WORLD"}

    if source == paths.descriptor:
        print(f"[Patcher] No backup found. Analyzing main file: {source.name}")
    else:
        print(f"[Patcher] Analyzing backup file: {source.name}")

    raw = source.read_bytes()
    current = read_descriptor(raw).seed
    result = {"source": str(source), "current_seed": current, "target_seed": seed}

    if current == seed:
        print(f"[Patcher] Verification passed: seed matches ({current}). No action taken.")
        return {"status": "UNCHANGED", **result}

    print(f"[Patcher] Seed mismatch! Current: [{current}] vs Target: [{seed}]")
    patched = patch_seed(raw, seed, algorithm)
    result.update(
        {
            "algorithm": patched.algorithm,
            "gap_length": len(patched.gap),
            "checksum_offset": patched.checksum_offset,
        }
    )

    if dry_run:
        print(f"[Patcher] Dry run: {source.name} would be rewritten ({patched.algorithm} checksum).")
        return {"status": "DRY_RUN", **result}

    write_atomic(source, patched.data)
    print(f"[Patcher] Updated source file: {source.name}")

    if source != paths.descriptor:
        write_atomic(paths.descriptor, patched.data)
        print(f"[Patcher] Synchronized main file: {paths.descriptor.name}")

    if invalidate_database(paths):
        print(f"[Patcher] DB file ({paths.database.name}) deleted. World will regenerate on start.")
        result["database_removed"] = True
    else:
        print("[Patcher] No DB file found (fresh start?).")
        result["database_removed"] = False

    return {"status": "PATCHED", **result}
