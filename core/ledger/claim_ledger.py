"""
Claim Ledger
The claim state machine: each index goes Unclaimed -> Claimed exactly once.

claim(index, account, amount, proof):
1. Re-derive the leaf from (index, account, amount)
2. Verify the proof against the published root  -> InvalidProofException
3. Under the index's stripe lock, check the bit   -> AlreadyClaimedException
4. Pay out, then set the bit, still under the lock -> PayoutFailedException
   (a failed payout leaves the bit unset)
5. Emit Claimed(index, account, amount) to subscribers

Proof verification happens outside the lock; only the check-pay-set
sequence is serialised, and only against claims sharing a stripe.
"""
from __future__ import annotations

import logging
from typing import Sequence, Union

from eth_utils import to_checksum_address

from core.config.runtime import LedgerConfig
from core.crypto.hashing import HASH_LENGTH, hash_from_hex, to_hex
from core.ledger.bitmap import ClaimBitmap
from core.ledger.events import ClaimedEvent, EventListener, LedgerEvent, RecoveredEvent
from core.ledger.transport import PayoutTransport
from core.merkle.leaf import encode_leaf
from core.merkle.merkle_tree import verify_proof
from core.schemas.errors import (
    AlreadyClaimedException,
    DistributorException,
    InvalidParameterException,
    InvalidProofException,
    PayoutFailedException,
    UnauthorizedException,
)
from core.schemas.identity import AddressLike, ZERO_ADDRESS, parse_address


logger = logging.getLogger(__name__)

ZERO_ROOT = b"\x00" * HASH_LENGTH

ProofEntry = Union[bytes, str]


def _parse_nonzero_address(value: AddressLike, parameter: str) -> bytes:
    try:
        address = parse_address(value)
    except DistributorException as e:
        raise InvalidParameterException(
            f"Invalid {parameter} address: {e.message}", parameter=parameter
        ) from e
    if address == ZERO_ADDRESS:
        raise InvalidParameterException(f"{parameter} must not be the zero address", parameter=parameter)
    return address


def _parse_root(value: Union[bytes, str]) -> bytes:
    try:
        root = hash_from_hex(value) if isinstance(value, str) else bytes(value)
    except ValueError as e:
        raise InvalidParameterException(f"Invalid merkle root: {e}", parameter="merkle_root") from e
    if len(root) != HASH_LENGTH:
        raise InvalidParameterException(
            f"Merkle root must be {HASH_LENGTH} bytes, got {len(root)}",
            parameter="merkle_root",
        )
    if root == ZERO_ROOT:
        raise InvalidParameterException("Merkle root must not be zero", parameter="merkle_root")
    return root


def _parse_proof(proof: Sequence[ProofEntry], index: int) -> list[bytes]:
    siblings: list[bytes] = []
    for entry in proof:
        if isinstance(entry, str):
            try:
                siblings.append(hash_from_hex(entry))
            except ValueError as e:
                raise InvalidProofException(
                    f"Malformed proof entry: {e}", leaf_index=index
                ) from e
        else:
            siblings.append(bytes(entry))
    return siblings


class ClaimLedger:
    """
    Pays out each entitlement of one published round at most once.

    Args:
        admin: Administrative identity (may recover stray assets)
        token: The distributed asset
        merkle_root: Published root of the round (bytes or 0x-hex)
        transport: Settlement for payouts; must raise on failure
        config: Lock striping and timeout settings

    Raises:
        InvalidParameterException: Zero admin, zero token, or zero root
    """

    def __init__(
        self,
        admin: AddressLike,
        token: AddressLike,
        merkle_root: Union[bytes, str],
        transport: PayoutTransport,
        config: LedgerConfig | None = None,
    ) -> None:
        self._admin = _parse_nonzero_address(admin, "admin")
        self._token = _parse_nonzero_address(token, "token")
        self._root = _parse_root(merkle_root)
        self._transport = transport
        self._config = config or LedgerConfig()
        self._claimed = ClaimBitmap(
            stripes=self._config.lock_stripes,
            lock_timeout_s=self._config.lock_timeout_s,
        )
        self._listeners: list[EventListener] = []

        logger.info(
            "Claim ledger ready: token=%s root=%s",
            to_checksum_address(self._token), to_hex(self._root),
        )

    @property
    def admin(self) -> str:
        return to_checksum_address(self._admin)

    @property
    def token(self) -> str:
        return to_checksum_address(self._token)

    @property
    def merkle_root(self) -> bytes:
        return self._root

    @property
    def merkle_root_hex(self) -> str:
        return to_hex(self._root)

    def subscribe(self, listener: EventListener) -> None:
        """Register a callback for Claimed / Recovered notifications."""
        self._listeners.append(listener)

    def _emit(self, event: LedgerEvent) -> None:
        # Runs after commit: a failing listener must not undo a payout
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Ledger event listener failed for %s", event.event)

    def is_claimed(self, index: int) -> bool:
        if index < 0:
            return False
        return self._claimed.is_set(index)

    def claimed_indices(self) -> list[int]:
        return self._claimed.indices()

    def claimed_count(self) -> int:
        return self._claimed.count()

    def claim(
        self,
        index: int,
        account: AddressLike,
        amount: int,
        proof: Sequence[ProofEntry],
    ) -> ClaimedEvent:
        """
        Redeem one entitlement.

        Raises:
            InvalidProofException: The tuple does not verify against the root
            AlreadyClaimedException: The index was already redeemed
            PayoutFailedException: The transport rejected the transfer
            ClaimTimeoutException: The index's lock was not acquired in time
        """
        siblings = _parse_proof(proof, index)
        try:
            leaf = encode_leaf(index, account, amount)
        except DistributorException as e:
            raise InvalidProofException(
                f"Claim fields cannot be encoded: {e.message}",
                leaf_index=index if isinstance(index, int) else None,
                details={"cause": e.code},
            ) from e

        if not verify_proof(leaf, siblings, self._root):
            logger.warning("Rejected claim for index %d: invalid proof", index)
            raise InvalidProofException("Invalid proof", leaf_index=index)

        recipient = parse_address(account)

        with self._claimed.locked(index):
            if self._claimed.is_set(index):
                logger.warning("Rejected claim for index %d: already claimed", index)
                raise AlreadyClaimedException("Already claimed", leaf_index=index)

            try:
                self._transport.transfer(self._token, recipient, amount)
            except DistributorException:
                raise
            except Exception as e:
                raise PayoutFailedException(
                    f"Payout for index {index} failed: {e}",
                    details={"leaf_index": index, "error_type": type(e).__name__},
                ) from e

            self._claimed.mark(index)

        event = ClaimedEvent(
            index=index,
            account=to_checksum_address(recipient),
            amount=amount,
        )
        logger.info("Claimed index=%d account=%s amount=%d", index, event.account, amount)
        self._emit(event)
        return event

    def recover_token(self, caller: AddressLike, asset: AddressLike, amount: int) -> RecoveredEvent:
        """
        Send `amount` of a stray `asset` from the holding account to the admin.

        Raises:
            UnauthorizedException: caller is not the admin
            InvalidParameterException: zero asset, the distributed token
                itself, or a non-positive amount
            PayoutFailedException: The transport rejected the transfer
        """
        caller_address = parse_address(caller)
        if caller_address != self._admin:
            raise UnauthorizedException(
                "Only the admin can recover tokens",
                caller=to_checksum_address(caller_address),
            )

        asset_address = _parse_nonzero_address(asset, "asset")
        if asset_address == self._token:
            raise InvalidParameterException(
                "The distributed token cannot be recovered", parameter="asset"
            )
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise InvalidParameterException(
                f"Recovery amount must be a positive integer, got {amount!r}",
                parameter="amount",
            )

        try:
            self._transport.transfer(asset_address, self._admin, amount)
        except DistributorException:
            raise
        except Exception as e:
            raise PayoutFailedException(
                f"Recovery of {amount} failed: {e}",
                details={"asset": to_checksum_address(asset_address)},
            ) from e

        event = RecoveredEvent(
            asset=to_checksum_address(asset_address),
            recipient=self.admin,
            amount=amount,
        )
        logger.info("Recovered %d of %s to admin", amount, event.asset)
        self._emit(event)
        return event
