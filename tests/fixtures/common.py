"""
Common test fixtures shared by all modules.

Provides addresses and factory functions for core distributor objects:
- balance mappings
- Distribution rounds
- funded InMemoryVault + ClaimLedger pairs
"""

from typing import Any, Optional

from core.config.runtime import LedgerConfig
from core.ledger import ClaimLedger, InMemoryVault
from core.schemas.identity import parse_address
from distribution.indexer import Distribution, build_distribution


ADMIN = "0x" + "ad" * 20
TOKEN = "0x" + "70" * 20
OTHER_ASSET = "0x" + "0e" * 20

# The three-claimant round used throughout the ledger tests
ALICE = "0x" + "11" * 20
BOB = "0x" + "22" * 20
CAROL = "0x" + "33" * 20
OUTSIDER = "0x" + "99" * 20

THREE_USER_BALANCES = {ALICE: 10, BOB: 50, CAROL: 15}


def make_address(n: int) -> str:
    """Deterministic distinct address for small integers (n >= 1)."""
    return "0x" + format(n, "040x")


def make_balances(count: int, base_amount: int = 100) -> dict[str, int]:
    """`count` claimants with amounts base_amount + i."""
    return {make_address(i + 1): base_amount + i for i in range(count)}


def make_distribution(balances: Optional[dict[str, Any]] = None) -> Distribution:
    return build_distribution(balances if balances is not None else THREE_USER_BALANCES)


def make_ledger(
    distribution: Optional[Distribution] = None,
    funding: Optional[int] = None,
    config: Optional[LedgerConfig] = None,
) -> tuple[ClaimLedger, InMemoryVault]:
    """
    Build a ClaimLedger over `distribution` paying from a fresh vault.

    The vault holds `funding` of TOKEN (default: exactly the round total).
    """
    distribution = distribution or make_distribution()
    vault = InMemoryVault()
    amount = distribution.token_total if funding is None else funding
    if amount:
        vault.deposit(parse_address(TOKEN), amount)
    ledger = ClaimLedger(
        admin=ADMIN,
        token=TOKEN,
        merkle_root=distribution.merkle_root,
        transport=vault,
        config=config,
    )
    return ledger, vault
