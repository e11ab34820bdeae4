"""
Distribution Rounds (Batch Side)

One-shot, deterministic computation of a distribution round from a
finalized identity -> amount mapping, plus persistence of the resulting
artifact.

Public API:
- EntitlementIndexer / build_distribution: mapping -> Distribution
- Distribution: ordered entitlements, root, proofs, total
- load_balances: read a JSON or CSV balances file
- save_artifact / load_artifact / verify_artifact: artifact IO
"""

from distribution.indexer import (
    BalanceInput,
    Distribution,
    EntitlementIndexer,
    build_distribution,
)
from distribution.sources import load_balances
from distribution.artifacts.io import (
    load_artifact,
    save_artifact,
    verify_artifact,
)


__all__ = [
    "BalanceInput",
    "Distribution",
    "EntitlementIndexer",
    "build_distribution",
    "load_balances",
    "load_artifact",
    "save_artifact",
    "verify_artifact",
]
