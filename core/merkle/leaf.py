"""
Leaf Encoding
Deterministic encoding of one entitlement into a 32-byte leaf hash.

Canonical leaf rule (hard contract, shared with on-chain verifiers):
    leaf = keccak256(abi.encodePacked(uint256 index, address account, uint256 amount))

The packed preimage is always 32 + 20 + 32 = 84 bytes. Internal nodes
always hash exactly 64 bytes (two sorted 32-byte children). Because claims
are checked by re-deriving the leaf from typed fields, an internal node can
never be presented as a leaf without a Keccak-256 collision.
"""
from __future__ import annotations

from eth_abi.packed import encode_packed
from eth_utils import to_checksum_address

from core.crypto.hashing import keccak256
from core.schemas.entitlement import UINT256_MAX, Entitlement
from core.schemas.errors import InvalidAmountException, OverflowException
from core.schemas.identity import AddressLike, parse_address


LEAF_ABI_TYPES = ("uint256", "address", "uint256")
LEAF_PREIMAGE_LENGTH = 84


def encode_leaf_preimage(index: int, account: AddressLike, amount: int) -> bytes:
    """
    Pack (index, account, amount) into the fixed 84-byte leaf preimage.

    Raises:
        OverflowException: If index or amount does not fit in uint256
        InvalidAmountException: If amount is not a non-negative int
        InvalidIdentityException: If account is not a valid address
    """
    if isinstance(index, bool) or not isinstance(index, int) or index < 0:
        raise OverflowException(
            f"Leaf index must be a non-negative integer, got {index!r}",
            field_path="index",
        )
    if index > UINT256_MAX:
        raise OverflowException("Leaf index does not fit in uint256", field_path="index")
    if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
        raise InvalidAmountException(f"Leaf amount must be a non-negative integer, got {amount!r}")
    if amount > UINT256_MAX:
        raise OverflowException("Leaf amount does not fit in uint256", field_path="amount")

    address = to_checksum_address(parse_address(account))
    return encode_packed(LEAF_ABI_TYPES, (index, address, amount))


def encode_leaf(index: int, account: AddressLike, amount: int) -> bytes:
    """
    Compute the leaf hash of one entitlement.

    Pure and total over valid inputs; invalid inputs raise rather than
    being truncated into some other leaf.

    Example:
        >>> leaf = encode_leaf(0, "0x" + "11" * 20, 10)
        >>> len(leaf)
        32
    """
    return keccak256(encode_leaf_preimage(index, account, amount))


def entitlement_leaf(entitlement: Entitlement) -> bytes:
    return encode_leaf(entitlement.index, entitlement.account, entitlement.amount)


__all__ = [
    "LEAF_ABI_TYPES",
    "LEAF_PREIMAGE_LENGTH",
    "encode_leaf_preimage",
    "encode_leaf",
    "entitlement_leaf",
]
