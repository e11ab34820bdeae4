"""
Ledger Events

Notifications emitted by ClaimLedger after a state change commits.
"""

from typing import Callable, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class ClaimedEvent(BaseModel):
    """Claimed(index, account, amount)"""

    model_config = ConfigDict(extra="forbid", frozen=True)

    event: Literal["Claimed"] = "Claimed"
    index: int = Field(..., ge=0)
    account: str = Field(..., description="EIP-55 checksum address paid")
    amount: int = Field(..., ge=0)


class RecoveredEvent(BaseModel):
    """An admin recovered an asset from the holding account."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    event: Literal["Recovered"] = "Recovered"
    asset: str
    recipient: str
    amount: int = Field(..., gt=0)


LedgerEvent = Union[ClaimedEvent, RecoveredEvent]
EventListener = Callable[[LedgerEvent], None]
