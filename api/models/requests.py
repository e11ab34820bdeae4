"""
API Request Models

Pydantic models for API request validation.

Amounts may be sent as JSON integers or as decimal / 0x-hex strings, since
uint256 values exceed what many JSON clients represent exactly.
"""

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, Field, StrictInt


def _coerce_int(value: Any) -> Any:
    # bool is a subclass of int; floats never become amounts
    if isinstance(value, (bool, float)):
        raise ValueError(f"amount must be an integer, got {type(value).__name__}")
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text, 16) if text.lower().startswith("0x") else int(text, 10)
        except ValueError:
            raise ValueError(f"not an integer: {value!r}")
    return value


AmountInt = Annotated[StrictInt, BeforeValidator(_coerce_int)]


class DistributionRequest(BaseModel):
    """Request body for POST /distributions."""

    balances: dict[str, Any] = Field(
        ...,
        description="Claimant address -> amount (integer, decimal string or 0x-hex string)",
    )


class ProofVerifyRequest(BaseModel):
    """Request body for POST /proofs/verify."""

    index: StrictInt = Field(..., description="Entitlement index")
    account: str = Field(..., description="Claimant address")
    amount: AmountInt = Field(..., description="Entitlement amount")
    proof: list[str] = Field(default_factory=list, description="Sibling hashes, leaf level first")
    merkle_root: str = Field(..., description="0x-prefixed 32-byte root")


class ClaimRequest(BaseModel):
    """Request body for POST /claims."""

    index: StrictInt = Field(..., description="Entitlement index")
    account: str = Field(..., description="Claimant address (recipient of the payout)")
    amount: AmountInt = Field(..., description="Entitlement amount")
    proof: list[str] = Field(default_factory=list, description="Sibling hashes, leaf level first")


class RecoverRequest(BaseModel):
    """Request body for POST /recover."""

    caller: str = Field(..., description="Address making the request; must be the admin")
    asset: str = Field(..., description="Asset to recover")
    amount: AmountInt = Field(..., description="Amount to send to the admin")
