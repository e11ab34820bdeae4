"""
Merkle Tree Implementation
Deterministic Merkle tree construction, proof generation, and verification.

This module provides:
- Deterministic Merkle root computation
- Merkle proof generation for any leaf index
- Merkle proof verification, independent of any built tree
- Carry-forward rule for odd node counts

Canonical Commitment Rules (Hard Contracts):
1. Leaf hashing: see core.merkle.leaf.encode_leaf()
2. Parent hashing: parent = keccak256(min(a, b) + max(a, b))
   - Sorted pairs make the parent independent of child order, so proofs
     carry no left/right flags
3. Odd rule: an unpaired trailing node is carried up unchanged; it is
   never duplicated, so no phantom leaf gains a valid proof
4. Empty leaves: EmptyInputException (no sentinel root)
5. Single leaf: root = leaf, proof = []

Determinism Notes:
- No randomness or non-deterministic ordering
- Leaf ordering is defined upstream (distribution.indexer)
- This module never sorts leaves - it trusts input order
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from core.crypto.hashing import HASH_LENGTH, hash_pair
from core.schemas.errors import EmptyInputException


@dataclass(frozen=True)
class MerkleProof:
    """
    A Merkle proof for a single leaf in a Merkle tree.

    Attributes:
        leaf: The leaf hash being proven (32 bytes)
        index: The 0-based index of the leaf in the original leaf list
        siblings: Sibling hashes from bottom to top of tree, carried
                  levels omitted
        root: The Merkle root this proof is against
    """
    leaf: bytes
    index: int
    siblings: list[bytes] = field(default_factory=list)
    root: bytes = b""

    def __post_init__(self) -> None:
        """Validate proof structure."""
        if self.index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.index}")


def merkle_parent(a: bytes, b: bytes) -> bytes:
    """
    Compute the parent hash of two child nodes.

    parent = keccak256(min(a, b) + max(a, b))
    """
    return hash_pair(a, b)


def _next_level(level: Sequence[bytes]) -> list[bytes]:
    """Pair adjacent nodes; a trailing unpaired node is carried up as-is."""
    next_level: list[bytes] = []
    for i in range(0, len(level), 2):
        if i + 1 < len(level):
            next_level.append(merkle_parent(level[i], level[i + 1]))
        else:
            next_level.append(level[i])
    return next_level


def build_levels(leaves: Sequence[bytes]) -> list[list[bytes]]:
    """
    Build every level of the tree, leaves first, root last.

    Raises:
        EmptyInputException: If leaves is empty
    """
    if len(leaves) == 0:
        raise EmptyInputException("Cannot build a Merkle tree from an empty leaf list")

    levels: list[list[bytes]] = [list(leaves)]
    while len(levels[-1]) > 1:
        levels.append(_next_level(levels[-1]))
    return levels


def _proof_from_levels(levels: Sequence[Sequence[bytes]], index: int) -> list[bytes]:
    siblings: list[bytes] = []
    current_index = index
    for level in levels[:-1]:
        sibling_index = current_index ^ 1
        # Carried node at this level: nothing to record
        if sibling_index < len(level):
            siblings.append(level[sibling_index])
        current_index //= 2
    return siblings


class MerkleTree:
    """
    A fully materialised Merkle tree over an ordered leaf list.

    Levels are computed once at construction; each proof is then an
    O(log N) walk. Use this when proofs are needed for many indices
    (a whole distribution round). For a one-off root or proof the
    module-level functions are enough.

    Example:
        >>> tree = MerkleTree(leaves)
        >>> proof = tree.proof(2)
        >>> verify_proof(leaves[2], proof, tree.root)
        True
    """

    def __init__(self, leaves: Sequence[bytes]) -> None:
        self._levels = build_levels(leaves)

    @property
    def root(self) -> bytes:
        return self._levels[-1][0]

    @property
    def leaves(self) -> list[bytes]:
        return list(self._levels[0])

    @property
    def leaf_count(self) -> int:
        return len(self._levels[0])

    @property
    def depth(self) -> int:
        """Number of levels from leaves to root (inclusive)."""
        return len(self._levels)

    def proof(self, index: int) -> list[bytes]:
        """
        Sibling hashes for the leaf at `index`, leaf level first.

        Raises:
            IndexError: If index is out of range
        """
        if index < 0 or index >= self.leaf_count:
            raise IndexError(
                f"Leaf index {index} out of range for {self.leaf_count} leaves"
            )
        return _proof_from_levels(self._levels, index)

    def merkle_proof(self, index: int) -> MerkleProof:
        siblings = self.proof(index)
        return MerkleProof(
            leaf=self._levels[0][index],
            index=index,
            siblings=siblings,
            root=self.root,
        )


def build_merkle_root(leaves: Sequence[bytes]) -> bytes:
    """
    Build a Merkle root from a sequence of leaf hashes.

    Example: [a, b, c] -> [parent(a, b), c] -> parent(parent(a, b), c)

    Raises:
        EmptyInputException: If leaves is empty
    """
    current_level: list[bytes] = list(leaves)
    if not current_level:
        raise EmptyInputException("Cannot build a Merkle tree from an empty leaf list")

    while len(current_level) > 1:
        current_level = _next_level(current_level)
    return current_level[0]


def build_merkle_proof(leaves: Sequence[bytes], index: int) -> MerkleProof:
    """
    Generate a Merkle proof for the leaf at the given index.

    Raises:
        EmptyInputException: If leaves is empty
        IndexError: If index is out of range
    """
    return MerkleTree(leaves).merkle_proof(index)


def verify_proof(leaf: bytes, proof: Sequence[bytes], root: bytes) -> bool:
    """
    Recompute a root from a leaf and its proof and compare to `root`.

    Needs nothing from the tree that produced the proof. Any malformed
    entry (not 32 bytes) or mismatch yields False.

    Args:
        leaf: The leaf hash
        proof: Sibling hashes, leaf level first
        root: The expected (published) root

    Returns:
        True only if the folded hash equals root exactly
    """
    if len(leaf) != HASH_LENGTH or len(root) != HASH_LENGTH:
        return False

    computed = leaf
    for sibling in proof:
        if len(sibling) != HASH_LENGTH:
            return False
        computed = merkle_parent(computed, sibling)
    return computed == root


def verify_merkle_proof(proof: MerkleProof) -> bool:
    """Verify a MerkleProof against the root it carries."""
    return verify_proof(proof.leaf, proof.siblings, proof.root)


def compute_tree_depth(num_leaves: int) -> int:
    """
    Compute the depth of a Merkle tree with given number of leaves.

    Depth is the number of levels from leaves to root (inclusive).
    A single leaf has depth 1, two leaves have depth 2, etc. The longest
    proof in a tree has depth - 1 entries.
    """
    if num_leaves == 0:
        return 0

    depth = 1
    n = num_leaves
    while n > 1:
        n = (n + 1) // 2
        depth += 1
    return depth


__all__ = [
    "MerkleProof",
    "MerkleTree",
    "merkle_parent",
    "build_levels",
    "build_merkle_root",
    "build_merkle_proof",
    "verify_proof",
    "verify_merkle_proof",
    "compute_tree_depth",
]
