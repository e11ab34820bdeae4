"""
Merkle Proofs Convenience Wrappers
Class-based interface over core.merkle.merkle_tree and core.merkle.leaf.

MerkleVerifier checks entitlement fields, or the hex strings found in a
published artifact, against a root. The leaf is always re-derived.
"""
from __future__ import annotations

from typing import Sequence

from core.crypto.hashing import hash_from_hex
from core.merkle.leaf import encode_leaf
from core.merkle.merkle_tree import verify_proof
from core.schemas.errors import DistributorException
from core.schemas.identity import AddressLike


class MerkleVerifier:
    """
    Convenience class for verifying Merkle proofs.

    Example:
        >>> MerkleVerifier.verify_entitlement(0, account, 10, proof, root)
        True
    """

    @staticmethod
    def verify_entitlement(
        index: int,
        account: AddressLike,
        amount: int,
        siblings: Sequence[bytes],
        root: bytes,
    ) -> bool:
        """
        Verify an (index, account, amount) triple against a root.

        The leaf is always re-derived from the typed fields. Fields that
        cannot be encoded (negative index, invalid address, amount out of
        range) make the claim unverifiable and return False.
        """
        try:
            leaf = encode_leaf(index, account, amount)
        except DistributorException:
            return False
        return verify_proof(leaf, siblings, root)

    @staticmethod
    def verify_hex(
        index: int,
        account: AddressLike,
        amount: int,
        proof_hex: Sequence[str],
        root_hex: str,
    ) -> bool:
        """Same as verify_entitlement, with proof and root as 0x-hex strings."""
        try:
            siblings = [hash_from_hex(p) for p in proof_hex]
            root = hash_from_hex(root_hex)
        except ValueError:
            return False
        return MerkleVerifier.verify_entitlement(index, account, amount, siblings, root)


__all__ = [
    "MerkleVerifier",
]
