"""
Entitlement Indexer
Turns a finalized identity -> amount mapping into one distribution round.

Steps:
1. Canonicalise identities (20-byte addresses) and amounts (uint256)
   - zero/negative/float amounts        -> InvalidAmountException
   - same address twice (any spelling)  -> DuplicateIdentityException
   - empty mapping                      -> EmptyInputException
2. Order by canonical address bytes ascending; index = position
3. Sum amounts exactly; a total above uint256 -> OverflowException
4. Encode one leaf per entitlement, build the tree, collect every proof

The build is a pure function of the input set: the same mapping yields the
same indices, root and proofs on every run, whatever the input order.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Tuple, Union

from eth_utils import to_checksum_address

from core.crypto.hashing import to_hex, uint_to_hex
from core.merkle.leaf import entitlement_leaf
from core.merkle.merkle_tree import MerkleTree
from core.schemas.entitlement import (
    UINT256_MAX,
    ClaimInfo,
    DistributionArtifact,
    Entitlement,
    parse_amount,
)
from core.schemas.errors import (
    DuplicateIdentityException,
    EmptyInputException,
    OverflowException,
)
from core.schemas.identity import AddressLike, checksum_address, parse_address


logger = logging.getLogger(__name__)

BalanceInput = Union[Mapping[AddressLike, Any], Iterable[Tuple[AddressLike, Any]]]


@dataclass(frozen=True)
class Distribution:
    """
    One computed distribution round.

    Attributes:
        entitlements: Entitlements ordered by index (0..N-1)
        merkle_root: Root committing to the ordered leaves
        proofs: Proof per index, leaf level first
        token_total: Exact sum of all amounts
    """
    entitlements: tuple[Entitlement, ...]
    merkle_root: bytes
    proofs: tuple[tuple[bytes, ...], ...]
    token_total: int
    _positions: dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "_positions", {e.account: e.index for e in self.entitlements}
        )

    def __len__(self) -> int:
        return len(self.entitlements)

    @property
    def merkle_root_hex(self) -> str:
        return to_hex(self.merkle_root)

    @property
    def proofs_by_identity(self) -> dict[str, list[bytes]]:
        return {e.account: list(self.proofs[e.index]) for e in self.entitlements}

    def entitlement_for(self, account: AddressLike) -> Entitlement | None:
        index = self._positions.get(checksum_address(account))
        return None if index is None else self.entitlements[index]

    def proof_for(self, index: int) -> list[bytes]:
        return list(self.proofs[index])

    def to_artifact(self) -> DistributionArtifact:
        """Render the round in the published {merkleRoot, tokenTotal, claims} form."""
        claims = {
            e.account: ClaimInfo(
                index=e.index,
                amount=uint_to_hex(e.amount),
                proof=[to_hex(p) for p in self.proofs[e.index]],
            )
            for e in self.entitlements
        }
        return DistributionArtifact(
            merkle_root=self.merkle_root_hex,
            token_total=uint_to_hex(self.token_total),
            claims=claims,
        )


def _items(balances: BalanceInput) -> Iterable[Tuple[AddressLike, Any]]:
    if isinstance(balances, Mapping):
        return balances.items()
    return balances


class EntitlementIndexer:
    """
    Builds Distribution rounds.

    Stateless; an instance exists so callers can hold and inject one
    (CLI commands, API routes).
    """

    def normalize(self, balances: BalanceInput) -> dict[bytes, int]:
        """
        Canonicalise and validate the raw mapping.

        Returns:
            canonical address bytes -> amount

        Raises:
            InvalidIdentityException, InvalidAmountException,
            DuplicateIdentityException, EmptyInputException, OverflowException
        """
        normalized: dict[bytes, int] = {}
        for raw_identity, raw_amount in _items(balances):
            address = parse_address(raw_identity)
            display = to_checksum_address(address)
            if address in normalized:
                raise DuplicateIdentityException(
                    f"Identity appears more than once: {display}",
                    identity=display,
                )
            normalized[address] = parse_amount(raw_amount, identity=display)

        if not normalized:
            raise EmptyInputException("Cannot build a distribution from an empty mapping")
        return normalized

    def assign_indices(self, normalized: Mapping[bytes, int]) -> tuple[Entitlement, ...]:
        """Index entitlements by canonical address bytes, ascending."""
        return tuple(
            Entitlement(index=i, account=address, amount=normalized[address])
            for i, address in enumerate(sorted(normalized))
        )

    @staticmethod
    def total(entitlements: Iterable[Entitlement]) -> int:
        total = 0
        for entitlement in entitlements:
            total += entitlement.amount
            if total > UINT256_MAX:
                raise OverflowException(
                    "Entitlement total does not fit in uint256",
                    field_path="tokenTotal",
                    details={"at_index": entitlement.index},
                )
        return total

    def build(self, balances: BalanceInput) -> Distribution:
        entitlements = self.assign_indices(self.normalize(balances))
        token_total = self.total(entitlements)

        tree = MerkleTree([entitlement_leaf(e) for e in entitlements])
        proofs = tuple(tuple(tree.proof(e.index)) for e in entitlements)

        distribution = Distribution(
            entitlements=entitlements,
            merkle_root=tree.root,
            proofs=proofs,
            token_total=token_total,
        )
        logger.info(
            "Built distribution: %d entitlements, total=%d, root=%s",
            len(entitlements), token_total, distribution.merkle_root_hex,
        )
        return distribution


def build_distribution(balances: BalanceInput) -> Distribution:
    """Build a distribution round from an identity -> amount mapping."""
    return EntitlementIndexer().build(balances)


__all__ = [
    "BalanceInput",
    "Distribution",
    "EntitlementIndexer",
    "build_distribution",
]
