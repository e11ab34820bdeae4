"""
Merkle Tree Unit Tests
Tests for core/merkle/merkle_tree.py and core/merkle/merkle_proofs.py

1. Root determinism - same leaves -> same root across runs
2. Carry-forward - an unpaired node moves up unchanged, never duplicated
3. Proof verification - every index of every size verifies
4. Tamper detection - tampered sibling/leaf/root fails verification
5. Empty leaves raise; single leaf is its own root
6. Proof length bounds: exactly k for 2^k leaves, at most ceil(log2 N)
"""
import math

import pytest

from core.crypto.hashing import hash_pair, keccak256
from core.merkle.leaf import encode_leaf
from core.merkle.merkle_proofs import MerkleVerifier
from core.merkle.merkle_tree import (
    MerkleProof,
    MerkleTree,
    build_merkle_proof,
    build_merkle_root,
    compute_tree_depth,
    merkle_parent,
    verify_merkle_proof,
    verify_proof,
)
from core.schemas.entitlement import Entitlement
from core.schemas.errors import EmptyInputException


def make_leaves(n: int) -> list[bytes]:
    return [keccak256(f"leaf-{i}".encode()) for i in range(n)]


def flip_byte(data: bytes, pos: int = 0) -> bytes:
    return data[:pos] + bytes([data[pos] ^ 0x01]) + data[pos + 1:]


class TestEmptyTree:
    """Tests for empty tree behavior."""

    def test_empty_root_raises(self):
        with pytest.raises(EmptyInputException):
            build_merkle_root([])

    def test_empty_tree_raises(self):
        with pytest.raises(EmptyInputException):
            MerkleTree([])

    def test_build_proof_empty_raises(self):
        with pytest.raises(EmptyInputException):
            build_merkle_proof([], 0)


class TestSingleLeaf:
    """Tests for single leaf tree behavior."""

    def test_single_leaf_root_equals_leaf(self):
        leaf = keccak256(b"single leaf")
        assert build_merkle_root([leaf]) == leaf

    def test_single_leaf_proof_no_siblings(self):
        leaf = keccak256(b"only one")
        proof = build_merkle_proof([leaf], 0)

        assert proof.leaf == leaf
        assert proof.index == 0
        assert proof.siblings == []
        assert proof.root == leaf
        assert verify_merkle_proof(proof)


class TestStructure:
    """Tests for the exact tree shape."""

    def test_two_leaves(self):
        a, b = make_leaves(2)
        assert build_merkle_root([a, b]) == hash_pair(a, b)

    def test_three_leaves_carry_forward(self):
        a, b, c = make_leaves(3)
        assert build_merkle_root([a, b, c]) == hash_pair(hash_pair(a, b), c)

    def test_three_leaves_proofs(self):
        a, b, c = make_leaves(3)
        tree = MerkleTree([a, b, c])
        assert tree.proof(0) == [b, c]
        assert tree.proof(1) == [a, c]
        # c is carried past level 0, so its proof has a single entry
        assert tree.proof(2) == [hash_pair(a, b)]

    def test_five_leaves_last_leaf(self):
        leaves = make_leaves(5)
        tree = MerkleTree(leaves)
        assert tree.proof(4) == [build_merkle_root(leaves[:4])]
        assert tree.root == hash_pair(build_merkle_root(leaves[:4]), leaves[4])

    def test_last_leaf_is_not_duplicated(self):
        a, b, c = make_leaves(3)
        root = build_merkle_root([a, b, c])
        assert root != build_merkle_root([a, b, c, c])
        # A proof that pairs c with itself does not verify
        assert not verify_proof(c, [c, hash_pair(a, b)], root)

    def test_merkle_parent_is_hash_pair(self):
        a, b = make_leaves(2)
        assert merkle_parent(a, b) == merkle_parent(b, a) == hash_pair(a, b)


class TestRootDeterminism:
    """Tests for deterministic root computation."""

    def test_same_leaves_same_root(self):
        leaves = make_leaves(11)
        assert build_merkle_root(leaves) == build_merkle_root(list(leaves))
        assert MerkleTree(leaves).root == build_merkle_root(leaves)

    def test_leaf_order_matters(self):
        leaves = make_leaves(4)
        swapped = [leaves[0], leaves[2], leaves[1], leaves[3]]
        assert build_merkle_root(leaves) != build_merkle_root(swapped)


class TestProofVerification:
    """Every proof of every tree size verifies."""

    @pytest.mark.parametrize("n", list(range(1, 34)))
    def test_all_indices_verify(self, n):
        leaves = make_leaves(n)
        tree = MerkleTree(leaves)
        for i, leaf in enumerate(leaves):
            assert verify_proof(leaf, tree.proof(i), tree.root), f"index {i} of {n}"

    def test_out_of_range_index(self):
        tree = MerkleTree(make_leaves(4))
        with pytest.raises(IndexError):
            tree.proof(4)
        with pytest.raises(IndexError):
            tree.proof(-1)
        with pytest.raises(IndexError):
            tree.merkle_proof(9)

    def test_negative_merkle_proof_index(self):
        with pytest.raises(ValueError):
            MerkleProof(leaf=b"\x00" * 32, index=-1)


class TestTamperDetection:
    """Any tampering fails verification."""

    def setup_method(self):
        self.leaves = make_leaves(8)
        self.tree = MerkleTree(self.leaves)
        self.proof = self.tree.proof(3)

    def test_tampered_sibling(self):
        for pos in range(len(self.proof)):
            tampered = list(self.proof)
            tampered[pos] = flip_byte(tampered[pos], 31)
            assert not verify_proof(self.leaves[3], tampered, self.tree.root)

    def test_wrong_leaf(self):
        assert not verify_proof(self.leaves[4], self.proof, self.tree.root)

    def test_wrong_root(self):
        assert not verify_proof(self.leaves[3], self.proof, flip_byte(self.tree.root))

    def test_extra_sibling(self):
        assert not verify_proof(self.leaves[3], self.proof + [self.leaves[0]], self.tree.root)

    def test_missing_sibling(self):
        assert not verify_proof(self.leaves[3], self.proof[:-1], self.tree.root)

    def test_empty_proof(self):
        assert not verify_proof(self.leaves[3], [], self.tree.root)

    def test_malformed_lengths(self):
        assert not verify_proof(self.leaves[3][:31], self.proof, self.tree.root)
        assert not verify_proof(self.leaves[3], self.proof, self.tree.root + b"\x00")
        assert not verify_proof(self.leaves[3], [self.proof[0][:16]] + self.proof[1:], self.tree.root)


class TestProofLength:
    """Proof length bounds."""

    @pytest.mark.parametrize("k", range(1, 8))
    def test_power_of_two_exact(self, k):
        tree = MerkleTree(make_leaves(2 ** k))
        assert all(len(tree.proof(i)) == k for i in range(2 ** k))

    @pytest.mark.parametrize("n", [3, 5, 6, 7, 9, 100, 257])
    def test_bounded_by_ceil_log2(self, n):
        tree = MerkleTree(make_leaves(n))
        bound = math.ceil(math.log2(n))
        lengths = [len(tree.proof(i)) for i in range(n)]
        assert max(lengths) == bound
        assert all(length <= bound for length in lengths)

    @pytest.mark.parametrize(
        "num_leaves,expected",
        [(0, 0), (1, 1), (2, 2), (3, 3), (4, 3), (5, 4), (8, 4), (10000, 15)],
    )
    def test_compute_tree_depth(self, num_leaves, expected):
        assert compute_tree_depth(num_leaves) == expected

    def test_tree_depth_matches(self):
        for n in (1, 2, 3, 17, 64):
            assert MerkleTree(make_leaves(n)).depth == compute_tree_depth(n)


class TestMerkleVerifier:
    """Tests for the class-based verifier."""

    def test_verifies_every_entitlement(self):
        accounts = ["0x" + format(i + 1, "040x") for i in range(5)]
        entitlements = [
            Entitlement(index=i, account=a, amount=10 * (i + 1))
            for i, a in enumerate(accounts)
        ]
        tree = MerkleTree([encode_leaf(e.index, e.account, e.amount) for e in entitlements])

        for e in entitlements:
            assert MerkleVerifier.verify_entitlement(e.index, e.account, e.amount, tree.proof(e.index), tree.root)
            assert not MerkleVerifier.verify_entitlement(e.index, e.account, e.amount + 1, tree.proof(e.index), tree.root)

    def test_verify_entitlement_rejects_unencodable_fields(self):
        root = keccak256(b"root")
        assert not MerkleVerifier.verify_entitlement(-1, "0x" + "11" * 20, 1, [], root)
        assert not MerkleVerifier.verify_entitlement(0, "not-an-address", 1, [], root)

    def test_verify_hex_rejects_malformed_hex(self):
        account = "0x" + "11" * 20
        leaf = encode_leaf(0, account, 5)
        root_hex = "0x" + leaf.hex()
        assert MerkleVerifier.verify_hex(0, account, 5, [], root_hex)
        assert not MerkleVerifier.verify_hex(0, account, 5, ["0x1234"], root_hex)
        assert not MerkleVerifier.verify_hex(0, account, 5, [], "0xnothex")
