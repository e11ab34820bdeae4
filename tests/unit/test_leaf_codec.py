"""
Leaf Encoding Unit Tests
Tests for core/merkle/leaf.py

1. Preimage layout: uint256 index | address | uint256 amount (84 bytes)
2. Leaf = keccak256(preimage)
3. Address spelling does not change the leaf
4. Every field is bound into the leaf
5. Out-of-range fields raise instead of being truncated
"""
import pytest
from eth_utils import to_checksum_address

from core.crypto.hashing import keccak256
from core.merkle.leaf import (
    LEAF_PREIMAGE_LENGTH,
    encode_leaf,
    encode_leaf_preimage,
    entitlement_leaf,
)
from core.schemas.entitlement import UINT256_MAX, Entitlement
from core.schemas.errors import (
    InvalidAmountException,
    InvalidIdentityException,
    OverflowException,
)


ACCOUNT = "0x" + "ab" * 20


def manual_preimage(index: int, account_hex: str, amount: int) -> bytes:
    return (
        index.to_bytes(32, "big")
        + bytes.fromhex(account_hex[2:])
        + amount.to_bytes(32, "big")
    )


class TestPreimage:
    """Tests for the packed preimage."""

    def test_length_is_fixed(self):
        assert len(encode_leaf_preimage(0, ACCOUNT, 1)) == LEAF_PREIMAGE_LENGTH == 84
        assert len(encode_leaf_preimage(UINT256_MAX, ACCOUNT, UINT256_MAX)) == 84

    def test_layout_matches_packed_abi(self):
        assert encode_leaf_preimage(7, ACCOUNT, 1500) == manual_preimage(7, ACCOUNT, 1500)

    def test_leaf_is_keccak_of_preimage(self):
        expected = keccak256(manual_preimage(3, ACCOUNT, 42))
        assert encode_leaf(3, ACCOUNT, 42) == expected


class TestAddressForms:
    """Any accepted spelling of an address yields the same leaf."""

    def test_lower_checksum_and_bytes_agree(self):
        checksum = to_checksum_address(ACCOUNT)
        raw = bytes.fromhex(ACCOUNT[2:])
        leaf = encode_leaf(0, ACCOUNT, 10)
        assert encode_leaf(0, checksum, 10) == leaf
        assert encode_leaf(0, raw, 10) == leaf

    def test_bad_checksum_rejected(self):
        checksum = to_checksum_address(ACCOUNT)
        # Flip the case of the first letter to break EIP-55
        pos = next(i for i, ch in enumerate(checksum) if i > 1 and ch.isalpha())
        broken = checksum[:pos] + checksum[pos].swapcase() + checksum[pos + 1:]
        with pytest.raises(InvalidIdentityException):
            encode_leaf(0, broken, 10)

    @pytest.mark.parametrize(
        "bad",
        ["0x1234", "ab" * 20, "0x" + "zz" * 20, b"\x01" * 19, 12345],
    )
    def test_malformed_address_rejected(self, bad):
        with pytest.raises(InvalidIdentityException):
            encode_leaf(0, bad, 10)


class TestFieldBinding:
    """Changing any field changes the leaf."""

    def test_index_bound(self):
        assert encode_leaf(0, ACCOUNT, 10) != encode_leaf(1, ACCOUNT, 10)

    def test_account_bound(self):
        assert encode_leaf(0, ACCOUNT, 10) != encode_leaf(0, "0x" + "cd" * 20, 10)

    def test_amount_bound(self):
        assert encode_leaf(0, ACCOUNT, 10) != encode_leaf(0, ACCOUNT, 11)

    def test_entitlement_leaf(self):
        entitlement = Entitlement(index=2, account=ACCOUNT, amount=99)
        assert entitlement_leaf(entitlement) == encode_leaf(2, ACCOUNT, 99)


class TestRangeChecks:
    """Out-of-range values raise."""

    def test_negative_index(self):
        with pytest.raises(OverflowException):
            encode_leaf(-1, ACCOUNT, 10)

    def test_index_too_large(self):
        with pytest.raises(OverflowException):
            encode_leaf(UINT256_MAX + 1, ACCOUNT, 10)

    def test_amount_too_large(self):
        with pytest.raises(OverflowException):
            encode_leaf(0, ACCOUNT, UINT256_MAX + 1)

    def test_negative_amount(self):
        with pytest.raises(InvalidAmountException):
            encode_leaf(0, ACCOUNT, -5)

    @pytest.mark.parametrize("amount", [True, 1.0, "10"])
    def test_non_int_amount(self, amount):
        with pytest.raises(InvalidAmountException):
            encode_leaf(0, ACCOUNT, amount)
