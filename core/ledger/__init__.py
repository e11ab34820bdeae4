"""
Claim Ledger

Consumes verified proofs: each index of a published round is paid out at
most once.

Usage:
    from core.ledger import ClaimLedger, InMemoryVault

    vault = InMemoryVault()
    ledger = ClaimLedger(admin, token, root, transport=vault)
    event = ledger.claim(index, account, amount, proof)
"""
from .bitmap import WORD_BITS, ClaimBitmap
from .claim_ledger import ZERO_ROOT, ClaimLedger
from .events import ClaimedEvent, EventListener, LedgerEvent, RecoveredEvent
from .transport import InMemoryVault, InsufficientBalanceError, PayoutTransport

__all__ = [
    "WORD_BITS",
    "ClaimBitmap",
    "ZERO_ROOT",
    "ClaimLedger",
    "ClaimedEvent",
    "EventListener",
    "LedgerEvent",
    "RecoveredEvent",
    "InMemoryVault",
    "InsufficientBalanceError",
    "PayoutTransport",
]
