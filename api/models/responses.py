"""
API Response Models

Pydantic models for API response serialization. Amounts are rendered as
decimal strings.
"""

from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    ok: bool = True
    service: str = "merkle-distributor-api"
    version: str = "v1"
    ledger_ready: bool = False


class DistributionResponse(BaseModel):
    """Response for POST /distributions."""

    ok: bool = True
    merkle_root: str = Field(..., description="Root committing to every entitlement")
    token_total: str = Field(..., description="Sum of all amounts (decimal)")
    claim_count: int = Field(..., description="Number of entitlements")
    artifact: dict[str, Any] = Field(
        ...,
        description="Published {merkleRoot, tokenTotal, claims} artifact",
    )


class ProofVerifyResponse(BaseModel):
    """Response for POST /proofs/verify."""

    ok: bool = Field(..., description="Whether the proof verifies against the root")


class ClaimResponse(BaseModel):
    """Response for POST /claims."""

    ok: bool = True
    index: int
    account: str
    amount: str


class ClaimStatusResponse(BaseModel):
    """Response for GET /claims/{index}."""

    index: int
    claimed: bool


class LedgerInfoResponse(BaseModel):
    """Response for GET /ledger."""

    admin: str
    token: str
    merkle_root: str
    claimed_count: int


class RecoverResponse(BaseModel):
    """Response for POST /recover."""

    ok: bool = True
    asset: str
    recipient: str
    amount: str


class ErrorDetail(BaseModel):
    """Error detail structure."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response."""

    ok: bool = False
    error: ErrorDetail
