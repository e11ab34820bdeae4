"""
Core cryptographic utilities.

Keccak-256 hashing, sorted-pair node hashing and hex helpers.
"""
from .hashing import (
    HASH_LENGTH,
    keccak256,
    hash_pair,
    to_hex,
    from_hex,
    hash_from_hex,
    uint_to_hex,
    uint_from_hex,
)

__all__ = [
    "HASH_LENGTH",
    "keccak256",
    "hash_pair",
    "to_hex",
    "from_hex",
    "hash_from_hex",
    "uint_to_hex",
    "uint_from_hex",
]
