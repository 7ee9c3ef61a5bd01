"""FWL Core - descriptor layout, codec and seed checksums."""
from .codec import DescriptorHeader, build_descriptor, read_descriptor, read_seed, encode_var_string
from .errors import DescriptorError, MalformedDescriptor, ChecksumNotFound
from .hashes import HASH_ALGORITHMS, stable_hash, polynomial_hash, resolve_algorithms

__all__ = [
    "DescriptorHeader",
    "build_descriptor",
    "read_descriptor",
    "read_seed",
    "encode_var_string",
    "DescriptorError",
    "MalformedDescriptor",
    "ChecksumNotFound",
    "HASH_ALGORITHMS",
    "stable_hash",
    "polynomial_hash",
    "resolve_algorithms",
]
