"""
Hashing Utilities
Keccak-256 hashing and hex helpers for Merkle commitments.

This module provides:
- Keccak-256 hashing for raw bytes (the hash the settlement chain uses)
- Order-independent pair hashing for internal tree nodes
- Hex encoding/decoding with 0x prefix for hashes and unsigned integers

Security/Determinism Notes:
- Always hash raw bytes exactly as specified
- Keccak-256 is NOT hashlib.sha3_256 (different padding); eth_utils is the
  only hash backend used here
- All operations are deterministic
"""
from __future__ import annotations

from eth_utils import keccak


HASH_LENGTH = 32


def keccak256(data: bytes) -> bytes:
    """
    Compute the Keccak-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte Keccak-256 digest

    Example:
        >>> keccak256(b"").hex()
        'c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470'
    """
    return keccak(primitive=data)


def hash_pair(a: bytes, b: bytes) -> bytes:
    """
    Hash two sibling nodes into their parent.

    The pair is sorted before concatenation so the result does not depend
    on which child sits on the left:
    parent = keccak256(min(a, b) + max(a, b))

    Args:
        a: One child hash (32 bytes)
        b: The other child hash (32 bytes)

    Returns:
        32-byte parent hash
    """
    if a <= b:
        return keccak256(a + b)
    return keccak256(b + a)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters

    Example:
        >>> from_hex("0xdeadbeef").hex()
        'deadbeef'
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


def hash_from_hex(hex_string: str) -> bytes:
    """Decode a 0x-prefixed 32-byte hash, rejecting any other length."""
    data = from_hex(hex_string)
    if len(data) != HASH_LENGTH:
        raise ValueError(
            f"Expected a {HASH_LENGTH}-byte hash, got {len(data)} bytes"
        )
    return data


def uint_to_hex(value: int) -> str:
    """
    Encode a non-negative integer as minimal even-length hex.

    Matches the quantity format of the published artifact
    (75 -> '0x4b', 10 -> '0x0a', 0 -> '0x00').
    """
    if value < 0:
        raise ValueError(f"Cannot hex-encode negative integer {value}")
    digits = format(value, "x")
    if len(digits) % 2:
        digits = "0" + digits
    return "0x" + digits


def uint_from_hex(hex_string: str) -> int:
    """Decode a 0x-prefixed hex quantity (odd length allowed)."""
    if not hex_string.startswith("0x") or len(hex_string) == 2:
        raise ValueError(f"Not a 0x-prefixed hex quantity: {hex_string!r}")
    return int(hex_string[2:], 16)


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
