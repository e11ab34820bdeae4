"""API request and response models."""

from api.models.requests import (
    ClaimRequest,
    DistributionRequest,
    ProofVerifyRequest,
    RecoverRequest,
)
from api.models.responses import (
    ClaimResponse,
    ClaimStatusResponse,
    DistributionResponse,
    ErrorDetail,
    ErrorResponse,
    HealthResponse,
    LedgerInfoResponse,
    ProofVerifyResponse,
    RecoverResponse,
)

__all__ = [
    "ClaimRequest",
    "DistributionRequest",
    "ProofVerifyRequest",
    "RecoverRequest",
    "ClaimResponse",
    "ClaimStatusResponse",
    "DistributionResponse",
    "ErrorDetail",
    "ErrorResponse",
    "HealthResponse",
    "LedgerInfoResponse",
    "ProofVerifyResponse",
    "RecoverResponse",
]
