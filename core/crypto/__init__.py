"""
Core cryptographic utilities.

Provides the digest function used for leaf hashing and for the
order-independent combination of child digests.
"""
from .hashing import (
    DIGEST_HEX_LENGTH,
    sha256_hex,
    to_bytes,
    hash_leaf,
    combine_hashes,
    is_digest,
)

__all__ = [
    "DIGEST_HEX_LENGTH",
    "sha256_hex",
    "to_bytes",
    "hash_leaf",
    "combine_hashes",
    "is_digest",
]
