"""
Hashing functions for TinySketch.

This module provides the hash family shared by the Bloom filter and the
Count-Min Sketch. Both structures need several roughly independent positions
per key; instead of one hash function per position, a single 64-bit FNV-1a
hash is salted with the round (or row) index.

These functions are pure, keep no state, and are not cryptographically secure.
"""

from typing import Any

FNV64_OFFSET_BASIS = 0xCBF29CE484222325
FNV64_PRIME = 0x100000001B3
MASK_64 = 0xFFFFFFFFFFFFFFFF


def key_to_bytes(key: Any) -> bytes:
    """
    Convert a key to the bytes that get hashed.

    Strings are UTF-8 encoded and bytes-like objects are used as-is. Any
    other object is hashed through its repr(), so equal keys must have equal
    reprs.

    Args:
        key: The key to convert.

    Returns:
        The byte representation of the key.
    """
    if isinstance(key, str):
        return key.encode("utf-8")
    if isinstance(key, (bytes, bytearray)):
        return bytes(key)
    return repr(key).encode("utf-8")


def fnv1a_64(data: bytes) -> int:
    """
    Pure Python implementation of FNV-1a hash (64-bit variant).

    Args:
        data: The bytes to hash.

    Returns:
        64-bit hash value
    """
    h = FNV64_OFFSET_BASIS
    for byte in data:
        h ^= byte
        h = (h * FNV64_PRIME) & MASK_64
    return h


def hash64(key: Any, round_index: int) -> int:
    """
    Hash a key for a given round.

    The round index is encoded as 8 little-endian bytes and prefixed to the
    key bytes, and the result is hashed in one FNV-1a pass.

    Args:
        key: The key to hash.
        round_index: The hash round (Bloom filter) or row (Count-Min Sketch).

    Returns:
        64-bit hash value
    """
    prefix = (round_index & MASK_64).to_bytes(8, "little")
    return fnv1a_64(prefix + key_to_bytes(key))


def hash_position(key: Any, round_index: int, size: int) -> int:
    """Map a key to a slot in [0, size) for the given round."""
    return hash64(key, round_index) % size
