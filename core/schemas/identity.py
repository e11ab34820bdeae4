"""
Schemas & Canonicalization
File: identity.py

Purpose: Fixed-width identity handling for claimants.

Identities are 20-byte account addresses. They are accepted either as
0x-prefixed hex (lowercase, uppercase, or a valid EIP-55 checksum) or
as raw 20 bytes. Internally the canonical form is the 20 raw bytes; the
display form (artifact keys, events, logs) is the EIP-55 checksum string.
"""

from __future__ import annotations

from typing import Union

from eth_utils import is_address, to_canonical_address, to_checksum_address

from .errors import InvalidIdentityException


ADDRESS_LENGTH = 20
ZERO_ADDRESS: bytes = b"\x00" * ADDRESS_LENGTH

AddressLike = Union[str, bytes]


def parse_address(value: AddressLike) -> bytes:
    """
    Parse an address into its canonical 20-byte form.

    Args:
        value: 0x-prefixed hex string or 20 raw bytes

    Returns:
        20-byte canonical address

    Raises:
        InvalidIdentityException: If the value is not a valid address.
            Mixed-case strings must carry a correct EIP-55 checksum.
    """
    if isinstance(value, (bytes, bytearray)):
        if len(value) != ADDRESS_LENGTH:
            raise InvalidIdentityException(
                f"Address must be {ADDRESS_LENGTH} bytes, got {len(value)}",
                details={"length": len(value)},
            )
        return bytes(value)

    if not isinstance(value, str):
        raise InvalidIdentityException(
            f"Address must be a hex string or bytes, got {type(value).__name__}",
            details={"type": type(value).__name__},
        )

    candidate = value.strip()
    if not candidate.startswith("0x") or not is_address(candidate):
        raise InvalidIdentityException(
            f"Invalid address: {value!r}",
            details={"value": value},
        )
    return to_canonical_address(candidate)


def checksum_address(value: AddressLike) -> str:
    """Return the EIP-55 checksum form of an address."""
    return to_checksum_address(parse_address(value))


def is_zero_address(value: AddressLike) -> bool:
    return parse_address(value) == ZERO_ADDRESS


__all__ = [
    "ADDRESS_LENGTH",
    "ZERO_ADDRESS",
    "AddressLike",
    "parse_address",
    "checksum_address",
    "is_zero_address",
]
