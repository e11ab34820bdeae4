"""
Schemas & Canonicalization
File: entitlement.py

Purpose: Entitlement and distribution-artifact models.

- Entitlement: one (index, account, amount) triple of a distribution round
- ClaimInfo: the per-claimant record of the published artifact
- DistributionArtifact: the persisted round ({merkleRoot, tokenTotal, claims})

Amounts are unsigned 256-bit integers. Floats are never accepted at any
stage: a float amount is rejected rather than rounded.
"""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import InvalidAmountException, OverflowException
from .identity import checksum_address


UINT256_MAX = 2**256 - 1

_HEX_QUANTITY_RE = re.compile(r"^0x[0-9a-fA-F]+$")
_HASH_HEX_RE = re.compile(r"^0x[0-9a-fA-F]{64}$")
_DECIMAL_RE = re.compile(r"^[0-9]+$")


def parse_amount(value: Any, identity: str | None = None) -> int:
    """
    Parse an entitlement amount into an integer.

    Accepted forms: int, decimal string ("1500"), 0x-hex string ("0x05dc").

    Raises:
        InvalidAmountException: For floats, bools, malformed strings, or
            values <= 0.
        OverflowException: For values that do not fit in uint256.
    """
    # bool is a subclass of int
    if isinstance(value, bool) or isinstance(value, float):
        raise InvalidAmountException(
            f"Amount must be an integer, got {type(value).__name__}",
            identity=identity,
            details={"value": repr(value)},
        )

    if isinstance(value, int):
        amount = value
    elif isinstance(value, str):
        text = value.strip()
        if _HEX_QUANTITY_RE.match(text):
            amount = int(text[2:], 16)
        elif _DECIMAL_RE.match(text):
            amount = int(text)
        else:
            raise InvalidAmountException(
                f"Amount string is not a decimal or 0x-hex integer: {value!r}",
                identity=identity,
                details={"value": value},
            )
    else:
        raise InvalidAmountException(
            f"Unsupported amount type {type(value).__name__}",
            identity=identity,
            details={"value": repr(value)},
        )

    if amount <= 0:
        raise InvalidAmountException(
            f"Amount must be positive, got {amount}",
            identity=identity,
            details={"value": amount},
        )
    if amount > UINT256_MAX:
        raise OverflowException(
            "Amount does not fit in uint256",
            field_path="amount",
            details={"identity": identity} if identity else None,
        )
    return amount


class Entitlement(BaseModel):
    """One recipient's entitlement in a distribution round."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    index: int = Field(..., ge=0, le=UINT256_MAX, description="Stable leaf index")
    account: str = Field(..., description="EIP-55 checksum address of the recipient")
    amount: int = Field(..., gt=0, le=UINT256_MAX, description="Token amount (base units)")

    @field_validator("account", mode="before")
    @classmethod
    def _normalize_account(cls, v: Any) -> str:
        return checksum_address(v)


class ClaimInfo(BaseModel):
    """Per-claimant record in the published artifact."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    index: int = Field(..., ge=0)
    amount: str = Field(..., description="Amount as 0x-hex quantity")
    proof: list[str] = Field(default_factory=list, description="Sibling hashes, leaf to root")

    @field_validator("amount")
    @classmethod
    def _check_amount(cls, v: str) -> str:
        if not _HEX_QUANTITY_RE.match(v):
            raise ValueError(f"amount must be a 0x-hex quantity, got {v!r}")
        return v

    @field_validator("proof")
    @classmethod
    def _check_proof(cls, v: list[str]) -> list[str]:
        for entry in v:
            if not _HASH_HEX_RE.match(entry):
                raise ValueError(f"proof entry is not a 32-byte hex hash: {entry!r}")
        return v

    @property
    def amount_int(self) -> int:
        return int(self.amount[2:], 16)


class DistributionArtifact(BaseModel):
    """
    The persisted artifact for one distribution round.

    Serialises with the camelCase keys consumers of the published
    proofs file expect (merkleRoot, tokenTotal, claims).
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    merkle_root: str = Field(..., alias="merkleRoot")
    token_total: str = Field(..., alias="tokenTotal")
    claims: dict[str, ClaimInfo] = Field(default_factory=dict)

    @field_validator("merkle_root")
    @classmethod
    def _check_root(cls, v: str) -> str:
        if not _HASH_HEX_RE.match(v):
            raise ValueError(f"merkleRoot must be a 32-byte hex hash, got {v!r}")
        return v.lower()

    @field_validator("token_total")
    @classmethod
    def _check_total(cls, v: str) -> str:
        if not _HEX_QUANTITY_RE.match(v):
            raise ValueError(f"tokenTotal must be a 0x-hex quantity, got {v!r}")
        return v

    @field_validator("claims", mode="before")
    @classmethod
    def _normalize_keys(cls, v: Any) -> Any:
        if not isinstance(v, dict):
            return v
        normalized: dict[str, Any] = {}
        for key, claim in v.items():
            account = checksum_address(key)
            if account in normalized:
                raise ValueError(f"claims list {account} more than once")
            normalized[account] = claim
        return normalized

    @property
    def token_total_int(self) -> int:
        return int(self.token_total[2:], 16)

    def get_claim(self, account: str) -> ClaimInfo | None:
        """Look up a claimant by address in any accepted form."""
        return self.claims.get(checksum_address(account))

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


__all__ = [
    "UINT256_MAX",
    "parse_amount",
    "Entitlement",
    "ClaimInfo",
    "DistributionArtifact",
]
