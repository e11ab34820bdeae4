"""
Payout Transport

The settlement side of a claim: moving `amount` of an asset from the
ledger's holding account to a recipient.

PayoutTransport is the interface a real settlement layer implements
(a token transfer inside a ledger commit). InMemoryVault is the
process-local implementation used by the HTTP service and tests.
"""
from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from collections import defaultdict

from eth_utils import to_checksum_address


logger = logging.getLogger(__name__)


class InsufficientBalanceError(Exception):
    """The holding account cannot cover a transfer."""

    def __init__(self, asset: bytes, requested: int, available: int):
        self.asset = asset
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient balance of {to_checksum_address(asset)}: "
            f"requested {requested}, available {available}"
        )


class PayoutTransport(ABC):
    """
    Interface for transferring assets out of the ledger's holding account.

    transfer() must either complete fully or raise; a raised exception
    means nothing moved.
    """

    @abstractmethod
    def transfer(self, asset: bytes, recipient: bytes, amount: int) -> None:
        """Move `amount` of `asset` (20-byte id) to `recipient` (20-byte address)."""
        raise NotImplementedError


class InMemoryVault(PayoutTransport):
    """
    Process-local holding account.

    Tracks the ledger's own balance per asset and the amounts credited to
    each recipient. All mutations happen under one vault lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._holdings: dict[bytes, int] = defaultdict(int)
        self._credited: dict[tuple[bytes, bytes], int] = defaultdict(int)

    def deposit(self, asset: bytes, amount: int) -> None:
        """Credit the holding account (e.g. funding a round, or a mistaken send)."""
        if amount < 0:
            raise ValueError(f"Deposit amount must be non-negative, got {amount}")
        with self._lock:
            self._holdings[asset] += amount

    def holding(self, asset: bytes) -> int:
        with self._lock:
            return self._holdings.get(asset, 0)

    def balance_of(self, asset: bytes, recipient: bytes) -> int:
        with self._lock:
            return self._credited.get((asset, recipient), 0)

    def transfer(self, asset: bytes, recipient: bytes, amount: int) -> None:
        with self._lock:
            available = self._holdings.get(asset, 0)
            if amount > available:
                raise InsufficientBalanceError(asset, amount, available)
            self._holdings[asset] = available - amount
            self._credited[(asset, recipient)] += amount
        logger.debug(
            "Transferred %d of %s to %s",
            amount, to_checksum_address(asset), to_checksum_address(recipient),
        )
