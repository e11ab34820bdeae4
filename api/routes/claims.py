"""
Claim Routes

Operate on the service's claim ledger:
- POST /claims - redeem an entitlement (409 ALREADY_CLAIMED, 400 INVALID_PROOF)
- GET /claims/{index} - whether an index has been redeemed
- GET /ledger - ledger identity and progress
- POST /recover - admin-only recovery of stray assets (403 UNAUTHORIZED)
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from api.deps import get_ledger
from api.models.requests import ClaimRequest, RecoverRequest
from api.models.responses import (
    ClaimResponse,
    ClaimStatusResponse,
    LedgerInfoResponse,
    RecoverResponse,
)
from core.ledger import ClaimLedger


router = APIRouter(tags=["claims"])


@router.post("/claims", response_model=ClaimResponse)
def claim(request: ClaimRequest, ledger: ClaimLedger = Depends(get_ledger)) -> ClaimResponse:
    event = ledger.claim(request.index, request.account, request.amount, request.proof)
    return ClaimResponse(index=event.index, account=event.account, amount=str(event.amount))


@router.get("/claims/{index}", response_model=ClaimStatusResponse)
def claim_status(index: int, ledger: ClaimLedger = Depends(get_ledger)) -> ClaimStatusResponse:
    return ClaimStatusResponse(index=index, claimed=ledger.is_claimed(index))


@router.get("/ledger", response_model=LedgerInfoResponse)
def ledger_info(ledger: ClaimLedger = Depends(get_ledger)) -> LedgerInfoResponse:
    return LedgerInfoResponse(
        admin=ledger.admin,
        token=ledger.token,
        merkle_root=ledger.merkle_root_hex,
        claimed_count=ledger.claimed_count(),
    )


@router.post("/recover", response_model=RecoverResponse)
def recover(request: RecoverRequest, ledger: ClaimLedger = Depends(get_ledger)) -> RecoverResponse:
    event = ledger.recover_token(request.caller, request.asset, request.amount)
    return RecoverResponse(asset=event.asset, recipient=event.recipient, amount=str(event.amount))
