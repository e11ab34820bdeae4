"""
CLI Verify Command

Re-check a proofs artifact offline: rebuild the tree from its claims and
compare root, total, indices and every proof.

Usage:
    distributor verify proofs.json [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from typing import Any

from core.schemas.errors import ArtifactException
from distribution.artifacts.io import load_artifact, verify_artifact


logger = logging.getLogger(__name__)

# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class VerifySummary:
    """Summary of verification for CLI output."""
    artifact_path: str = ""
    merkle_root: str = ""
    claim_count: int = 0
    ok: bool = False
    checks: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def print_summary_human(summary: VerifySummary) -> None:
    """Print summary in human-readable format."""
    print(f"artifact: {summary.artifact_path}")
    print(f"merkle_root: {summary.merkle_root}")
    print(f"claims: {summary.claim_count}")
    print(f"ok: {str(summary.ok).lower()}")
    for check in summary.checks:
        status = "✓" if check["ok"] else "✗"
        print(f"  {status} {check['check_id']}: {check['message']}")


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Returns:
        EXIT_SUCCESS, EXIT_VERIFICATION_FAILED when any check fails, or
        EXIT_RUNTIME_ERROR when the artifact cannot be read
    """
    try:
        artifact = load_artifact(args.artifact, verify=False)
    except ArtifactException as e:
        print(f"Error loading artifact: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    result = verify_artifact(artifact)
    summary = VerifySummary(
        artifact_path=str(args.artifact),
        merkle_root=artifact.merkle_root,
        claim_count=len(artifact.claims),
        ok=result.ok,
        checks=result.to_report(),
    )

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    if summary.ok:
        logger.info("Verification passed")
        return EXIT_SUCCESS
    logger.warning("Verification failed")
    return EXIT_VERIFICATION_FAILED
