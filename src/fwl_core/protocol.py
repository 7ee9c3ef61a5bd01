"""World descriptor protocol constants.

Single source of truth for the .fwl record layout and save-directory naming.
Reader, patcher and verifier must stay synchronized with these values.
"""

# Header: [Version(4) | Aux(4) | WorldName(VarString)]
VERSION_FMT = "<i"
VERSION_LEN = 4
AUX_LEN = 4

# Seed checksum follows the seed string, possibly after a gap
CHECKSUM_FMT = "<i"
CHECKSUM_LEN = 4

# 7-bit varint: 32-bit value, at most 5 groups
VARINT_MAX_BYTES = 5
VARINT_MAX_VALUE = 0xFFFFFFFF

# Checksum relocation bounds
MAX_CHECKSUM_SCAN = 256  # candidate offsets tried after the seed string

# Text encoding of VarString payloads
TEXT_ENCODING = "utf-8"
TEXT_ERRORS = "surrogateescape"

# Stable (double accumulator) hash
STABLE_HASH_SEED = 5381
STABLE_HASH_MULTIPLIER = 1566083941

# Save directory layout
WORLDS_DIR = "worlds_local"
DESCRIPTOR_SUFFIX = ".fwl"
DATABASE_SUFFIX = ".db"
BACKUP_MARKER = "_backup_auto-"
