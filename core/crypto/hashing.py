"""
Hashing Utilities
Digest primitives for Merkle commitments over review records.

This module provides:
- SHA-256 hex digests for raw bytes and text
- Leaf hashing for canonical record encodings
- Order-independent combination of two child digests

Determinism Notes:
- Digests are lowercase hex strings (64 characters)
- Text is always encoded as UTF-8 before hashing
- combine_hashes(a, b) == combine_hashes(b, a) for all a, b
"""
from __future__ import annotations

import hashlib


DIGEST_HEX_LENGTH = 64


def sha256_hex(data: bytes) -> str:
    """
    Compute the SHA-256 digest of raw bytes as lowercase hex.

    Args:
        data: Raw bytes to hash

    Returns:
        64-character hex digest

    Example:
        >>> sha256_hex(b"hello")
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).hexdigest()


def to_bytes(encoding: bytes | str) -> bytes:
    """Return the UTF-8 bytes of a text encoding, passing bytes through."""
    if isinstance(encoding, bytes):
        return encoding
    return encoding.encode("utf-8")


def hash_leaf(encoding: bytes | str) -> str:
    """
    Hash a record's canonical encoding into a leaf digest.

    Rule: leaf = sha256(encoding)

    Args:
        encoding: Canonical record encoding (text is UTF-8 encoded)

    Returns:
        64-character hex digest
    """
    return sha256_hex(to_bytes(encoding))


def combine_hashes(h1: str, h2: str) -> str:
    """
    Combine two child digests into their parent digest.

    The children are ordered lexicographically on their hex values before
    concatenation, so swapping them never changes the result:
    parent = sha256(min(h1, h2) + max(h1, h2))

    Args:
        h1: First child digest (hex)
        h2: Second child digest (hex)

    Returns:
        64-character hex digest of the parent
    """
    if h1 <= h2:
        return sha256_hex((h1 + h2).encode("ascii"))
    return sha256_hex((h2 + h1).encode("ascii"))


def is_digest(value: str) -> bool:
    """Check whether a string looks like a hex SHA-256 digest."""
    if len(value) != DIGEST_HEX_LENGTH:
        return False
    try:
        bytes.fromhex(value)
    except ValueError:
        return False
    return True


__all__ = [
    "DIGEST_HEX_LENGTH",
    "sha256_hex",
    "to_bytes",
    "hash_leaf",
    "combine_hashes",
    "is_digest",
]
