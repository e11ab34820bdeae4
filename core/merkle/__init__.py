"""
Merkle Tree and Commitments
Deterministic leaf encoding, tree construction, proof generation/verification.

This module provides:
- encode_leaf: Hash one (index, account, amount) entitlement
- MerkleTree / build_merkle_root / build_merkle_proof: Build roots and proofs
- verify_proof: Check a leaf + proof against a published root
- MerkleVerifier: Verify entitlement fields or artifact hex against a root

Canonical Commitment Rules:
1. Leaf hashing: keccak256(abi.encodePacked(uint256, address, uint256))
2. Parent hashing: keccak256(min(a, b) + max(a, b))
3. Odd count: carry the last node up unchanged
4. Empty tree: EmptyInputException
5. Single leaf: root = leaf

Usage:
    from core.merkle import encode_leaf, MerkleTree, verify_proof

    leaves = [encode_leaf(i, account, amount) for i, (account, amount) in enumerate(rows)]
    tree = MerkleTree(leaves)
    assert verify_proof(leaves[2], tree.proof(2), tree.root)
"""
from .leaf import (
    LEAF_PREIMAGE_LENGTH,
    encode_leaf,
    encode_leaf_preimage,
    entitlement_leaf,
)

from .merkle_tree import (
    MerkleProof,
    MerkleTree,
    merkle_parent,
    build_levels,
    build_merkle_root,
    build_merkle_proof,
    verify_proof,
    verify_merkle_proof,
    compute_tree_depth,
)

from .merkle_proofs import MerkleVerifier


__all__ = [
    # Leaves
    "LEAF_PREIMAGE_LENGTH",
    "encode_leaf",
    "encode_leaf_preimage",
    "entitlement_leaf",
    # Core types
    "MerkleProof",
    "MerkleTree",
    # Core functions
    "merkle_parent",
    "build_levels",
    "build_merkle_root",
    "build_merkle_proof",
    "verify_proof",
    "verify_merkle_proof",
    "compute_tree_depth",
    # Convenience class
    "MerkleVerifier",
]
