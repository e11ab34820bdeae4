"""
Distribution Routes

Build a distribution from a balances mapping, and check single proofs
against any root. Both are stateless.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from api.models.requests import DistributionRequest, ProofVerifyRequest
from api.models.responses import DistributionResponse, ProofVerifyResponse
from core.merkle.merkle_proofs import MerkleVerifier
from distribution.indexer import build_distribution


logger = logging.getLogger(__name__)

router = APIRouter(tags=["distributions"])


@router.post("/distributions", response_model=DistributionResponse)
def create_distribution(request: DistributionRequest) -> DistributionResponse:
    """
    Index the balances, build the tree and return the proofs artifact.

    Invalid input surfaces as a 400 with the indexer's error code
    (EMPTY_INPUT, DUPLICATE_IDENTITY, INVALID_AMOUNT, INVALID_IDENTITY, OVERFLOW).
    """
    distribution = build_distribution(request.balances)
    return DistributionResponse(
        merkle_root=distribution.merkle_root_hex,
        token_total=str(distribution.token_total),
        claim_count=len(distribution),
        artifact=distribution.to_artifact().to_json_dict(),
    )


@router.post("/proofs/verify", response_model=ProofVerifyResponse)
def verify_proof(request: ProofVerifyRequest) -> ProofVerifyResponse:
    ok = MerkleVerifier.verify_hex(
        request.index,
        request.account,
        request.amount,
        request.proof,
        request.merkle_root,
    )
    return ProofVerifyResponse(ok=ok)
