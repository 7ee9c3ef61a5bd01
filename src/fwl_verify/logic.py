from pathlib import Path

from fwl_core.codec import read_descriptor
from fwl_core.errors import DescriptorError
from fwl_core.hashes import AUTO
from fwl_core.protocol import CHECKSUM_LEN
from fwl_patch.patcher import locate_seed_checksum
from .const import ERRORS


def _fail(code: str, **extra) -> dict:
    err = {"code": code, "message": ERRORS[code], **extra}
    return {"status": "FAIL", "error_count": 1, "errors": [err]}


def verify_descriptor(path: Path, algorithm: str = AUTO) -> dict:
    if not path.exists():
        return _fail("E_LAYOUT_MISSING", path=str(path))

    data = path.read_bytes()
    try:
        header = read_descriptor(data)
        name, hash_off = locate_seed_checksum(data, header, algorithm)
    except DescriptorError as e:
        return _fail(e.code, detail=str(e), offset=e.offset)

    return {
        "status": "PASS",
        "error_count": 0,
        "errors": [],
        "descriptor": {
            "version": header.version,
            "world_name": header.world_name,
            "seed": header.seed,
            "header_end": header.header_end,
            "algorithm": name,
            "gap_length": hash_off - header.seed_end,
            "checksum_offset": hash_off,
            "trailing_length": len(data) - hash_off - CHECKSUM_LEN,
        },
    }
