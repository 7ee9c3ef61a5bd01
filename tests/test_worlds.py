import os
import stat

import pytest

from fwl_core.codec import build_descriptor, read_descriptor
from fwl_core.errors import ChecksumNotFound
from fwl_core.hashes import stable_hash
from fwl_patch.worlds import (
    apply_seed,
    find_backups,
    invalidate_database,
    select_source,
    world_paths,
    write_atomic,
)


def descriptor(seed, world="Dedicated"):
    return build_descriptor(world, seed, stable_hash(seed), version=34, trailing=b"\x55" * 12)


@pytest.fixture
def saves(tmp_path):
    local = tmp_path / "worlds_local"
    local.mkdir()
    return tmp_path


def put(saves, name, data):
    p = saves / "worlds_local" / name
    p.write_bytes(data)
    return p


def test_world_paths(tmp_path):
    paths = world_paths(tmp_path, "Dedicated")
    assert paths.descriptor == tmp_path / "worlds_local" / "Dedicated.fwl"
    assert paths.database == tmp_path / "worlds_local" / "Dedicated.db"


def test_select_source_prefers_newest_backup(saves):
    put(saves, "Dedicated.fwl", descriptor("main"))
    put(saves, "Dedicated_backup_auto-20260101120000.fwl", descriptor("older"))
    newest = put(saves, "Dedicated_backup_auto-20260102090000.fwl", descriptor("newer"))
    put(saves, "Other_backup_auto-20270101000000.fwl", descriptor("other", world="Other"))

    paths = world_paths(saves, "Dedicated")
    assert [p.name for p in find_backups(paths, "Dedicated")] == [
        "Dedicated_backup_auto-20260101120000.fwl",
        "Dedicated_backup_auto-20260102090000.fwl",
    ]
    assert select_source(paths, "Dedicated") == newest


def test_select_source_falls_back_to_main(saves):
    main = put(saves, "Dedicated.fwl", descriptor("main"))
    assert select_source(world_paths(saves, "Dedicated"), "Dedicated") == main


def test_select_source_none(tmp_path):
    assert select_source(world_paths(tmp_path, "Dedicated"), "Dedicated") is None


def test_empty_seed_skips(saves):
    main = put(saves, "Dedicated.fwl", descriptor("OldSeed123"))
    before = main.read_bytes()
    assert apply_seed("Dedicated", saves, "")["status"] == "SKIPPED"
    assert main.read_bytes() == before


def test_no_world(saves, capsys):
    assert apply_seed("Dedicated", saves, "NewSeed456")["status"] == "NO_WORLD"
    assert "Ready for random generation" in capsys.readouterr().out


def test_matching_seed_is_noop(saves):
    main = put(saves, "Dedicated.fwl", descriptor("OldSeed123"))
    db = put(saves, "Dedicated.db", b"terrain")
    before = main.read_bytes()

    result = apply_seed("Dedicated", saves, "OldSeed123")

    assert result["status"] == "UNCHANGED"
    assert main.read_bytes() == before
    assert db.exists()


def test_patch_main_only(saves):
    main = put(saves, "Dedicated.fwl", descriptor("OldSeed123"))
    db = put(saves, "Dedicated.db", b"terrain")

    result = apply_seed("Dedicated", saves, "NewSeed456")

    assert result["status"] == "PATCHED"
    assert result["database_removed"] is True
    assert main.read_bytes() == descriptor("NewSeed456")
    assert not db.exists()
    assert not list((saves / "worlds_local").glob("*.tmp"))


def test_patch_from_backup_syncs_main(saves, capsys):
    main = put(saves, "Dedicated.fwl", descriptor("Stale"))
    backup = put(saves, "Dedicated_backup_auto-20260102090000.fwl", descriptor("OldSeed123"))

    result = apply_seed("Dedicated", saves, "NewSeed456")

    assert result["status"] == "PATCHED"
    assert result["source"] == str(backup)
    assert result["current_seed"] == "OldSeed123"
    assert result["database_removed"] is False
    assert backup.read_bytes() == descriptor("NewSeed456")
    assert main.read_bytes() == descriptor("NewSeed456")
    out = capsys.readouterr().out
    assert "Synchronized main file" in out
    assert "No DB file found" in out

    # Applying again is a no-op
    assert apply_seed("Dedicated", saves, "NewSeed456")["status"] == "UNCHANGED"


def test_dry_run_writes_nothing(saves):
    main = put(saves, "Dedicated.fwl", descriptor("OldSeed123"))
    db = put(saves, "Dedicated.db", b"terrain")
    before = main.read_bytes()

    result = apply_seed("Dedicated", saves, "NewSeed456", dry_run=True)

    assert result["status"] == "DRY_RUN"
    assert result["algorithm"] == "stable"
    assert main.read_bytes() == before
    assert db.exists()


def test_unrecognized_structure_leaves_files_untouched(saves):
    data = bytearray(descriptor("OldSeed123"))
    data[read_descriptor(bytes(data)).seed_end + 2] ^= 0xFF
    main = put(saves, "Dedicated.fwl", bytes(data))
    db = put(saves, "Dedicated.db", b"terrain")

    with pytest.raises(ChecksumNotFound):
        apply_seed("Dedicated", saves, "NewSeed456")

    assert main.read_bytes() == bytes(data)
    assert db.exists()


def test_write_atomic_replaces(tmp_path):
    target = tmp_path / "x.fwl"
    target.write_bytes(b"old")
    write_atomic(target, b"new")
    assert target.read_bytes() == b"new"
    assert not (tmp_path / "x.fwl.tmp").exists()


def test_write_atomic_failure_keeps_target(tmp_path):
    target = tmp_path / "missing_dir" / "x.fwl"
    with pytest.raises(OSError):
        write_atomic(target, b"new")
    assert not target.exists()


def test_invalidate_database(saves):
    paths = world_paths(saves, "Dedicated")
    assert invalidate_database(paths) is False
    put(saves, "Dedicated.db", b"terrain")
    assert invalidate_database(paths) is True
    assert not paths.database.exists()


@pytest.mark.skipif(os.name != "posix", reason="POSIX permissions")
def test_patch_keeps_file_mode(saves):
    main = put(saves, "Dedicated.fwl", descriptor("Stale"))
    backup = put(saves, "Dedicated_backup_auto-20260102090000.fwl", descriptor("OldSeed123"))
    main.chmod(0o600)
    backup.chmod(0o640)

    assert apply_seed("Dedicated", saves, "NewSeed456")["status"] == "PATCHED"

    assert stat.S_IMODE(main.stat().st_mode) == 0o600
    assert stat.S_IMODE(backup.stat().st_mode) == 0o640


def test_write_atomic_new_file(tmp_path):
    target = tmp_path / "fresh.fwl"
    write_atomic(target, b"data")
    assert target.read_bytes() == b"data"


def test_world_name_with_glob_characters(saves):
    put(saves, "W[1]_backup_auto-20260101000000.fwl", descriptor("mine", world="W[1]"))
    put(saves, "W1_backup_auto-20270101000000.fwl", descriptor("other", world="W1"))
    put(saves, "Wx_backup_auto-20280101000000.fwl", descriptor("other", world="Wx"))

    paths = world_paths(saves, "W[1]")
    assert [p.name for p in find_backups(paths, "W[1]")] == ["W[1]_backup_auto-20260101000000.fwl"]
