"""
Artifact Packaging & IO
File: io.py

Purpose: Save, load and verify distribution artifacts on disk.

Writes are atomic: the artifact is written to a temporary file in the
target directory and moved into place with os.replace, so a failed run
never leaves a partial artifact behind.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Union

from pydantic import ValidationError

from core.crypto.hashing import from_hex
from core.merkle.leaf import encode_leaf
from core.merkle.merkle_proofs import MerkleVerifier
from core.merkle.merkle_tree import build_merkle_root
from core.schemas.entitlement import DistributionArtifact
from core.schemas.errors import ArtifactException, DistributorException
from core.schemas.verification import ArtifactChecks, CheckResult, VerificationResult

from distribution.indexer import Distribution


logger = logging.getLogger(__name__)

# Cap on per-account details reported by a failed check
MAX_REPORTED_FAILURES = 20


def _unique_keys(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    obj: dict[str, Any] = {}
    for key, value in pairs:
        if key in obj:
            raise ValueError(f"repeated key {key!r}")
        obj[key] = value
    return obj


def dump_json(artifact: DistributionArtifact) -> str:
    return json.dumps(artifact.to_json_dict(), indent=2) + "\n"


def save_artifact(
    artifact: Union[DistributionArtifact, Distribution],
    path: str | Path,
) -> Path:
    """
    Atomically write an artifact as JSON.

    Args:
        artifact: A DistributionArtifact, or a Distribution to render
        path: Destination file

    Returns:
        Path to the written file
    """
    if isinstance(artifact, Distribution):
        artifact = artifact.to_artifact()

    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    content = dump_json(artifact).encode("utf-8")

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{out_path.name}.", suffix=".tmp", dir=str(out_path.parent)
    )
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, out_path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.info("Wrote artifact with %d claims to %s", len(artifact.claims), out_path)
    return out_path


def parse_artifact(data: Any, source: str | None = None) -> DistributionArtifact:
    """Validate raw JSON data as a DistributionArtifact."""
    try:
        return DistributionArtifact.model_validate(data)
    except ValidationError as e:
        raise ArtifactException(
            f"Artifact does not match the expected schema: {e.error_count()} error(s)",
            path=source,
            details={"errors": [err["msg"] for err in e.errors()][:MAX_REPORTED_FAILURES]},
        ) from e
    except DistributorException as e:
        raise ArtifactException(f"Artifact contains an invalid value: {e.message}", path=source) from e


def load_artifact(path: str | Path, *, verify: bool = True) -> DistributionArtifact:
    """
    Load an artifact from disk.

    Args:
        path: Artifact file
        verify: Also run verify_artifact and fail on any failed check

    Raises:
        ArtifactException: Unreadable, malformed, or (with verify) inconsistent
    """
    artifact_path = Path(path)
    if not artifact_path.exists():
        raise ArtifactException(f"Artifact not found: {artifact_path}", path=str(artifact_path))

    try:
        data = json.loads(artifact_path.read_text(encoding="utf-8"), object_pairs_hook=_unique_keys)
    except ValueError as e:
        # JSONDecodeError is a ValueError
        raise ArtifactException(f"Artifact is not valid JSON: {e}", path=str(artifact_path)) from e

    artifact = parse_artifact(data, source=str(artifact_path))

    if verify:
        result = verify_artifact(artifact)
        if not result.ok:
            raise ArtifactException(
                "Artifact failed verification: " + "; ".join(result.get_error_messages()),
                path=str(artifact_path),
                details={"failed_checks": result.failed_ids},
            )
    return artifact


def _check_indices(artifact: DistributionArtifact) -> CheckResult:
    indices = sorted(claim.index for claim in artifact.claims.values())
    if indices != list(range(len(indices))):
        return CheckResult.failed(
            ArtifactChecks.INDICES_CONTIGUOUS,
            "Claim indices are not unique and contiguous from 0",
            details={"count": len(indices)},
        )
    return CheckResult.passed(ArtifactChecks.INDICES_CONTIGUOUS, f"Indices 0..{len(indices) - 1} present once each")


def _check_total(artifact: DistributionArtifact) -> CheckResult:
    total = sum(claim.amount_int for claim in artifact.claims.values())
    if total != artifact.token_total_int:
        return CheckResult.failed(
            ArtifactChecks.TOTAL_MATCHES,
            f"Sum of amounts {total} != tokenTotal {artifact.token_total_int}",
            details={"sum": str(total), "token_total": str(artifact.token_total_int)},
        )
    return CheckResult.passed(ArtifactChecks.TOTAL_MATCHES, f"tokenTotal {total} matches sum of amounts")


def _check_root(artifact: DistributionArtifact) -> CheckResult:
    ordered = sorted(artifact.claims.items(), key=lambda kv: kv[1].index)
    try:
        leaves = [encode_leaf(c.index, account, c.amount_int) for account, c in ordered]
        root = build_merkle_root(leaves)
    except DistributorException as e:
        return CheckResult.failed(ArtifactChecks.ROOT_MATCHES, f"Cannot rebuild tree: {e.message}")

    if root != from_hex(artifact.merkle_root):
        return CheckResult.failed(
            ArtifactChecks.ROOT_MATCHES,
            "Rebuilt root does not match merkleRoot",
            details={"expected": artifact.merkle_root, "actual": "0x" + root.hex()},
        )
    return CheckResult.passed(ArtifactChecks.ROOT_MATCHES, "Rebuilt root matches merkleRoot")


def _check_proofs(artifact: DistributionArtifact) -> CheckResult:
    failures = [
        account
        for account, claim in artifact.claims.items()
        if not MerkleVerifier.verify_hex(
            claim.index, account, claim.amount_int, claim.proof, artifact.merkle_root
        )
    ]
    if failures:
        return CheckResult.failed(
            ArtifactChecks.PROOFS_VALID,
            f"{len(failures)} of {len(artifact.claims)} proofs do not verify",
            details={"accounts": failures[:MAX_REPORTED_FAILURES]},
        )
    return CheckResult.passed(ArtifactChecks.PROOFS_VALID, f"All {len(artifact.claims)} proofs verify")


def verify_artifact(artifact: DistributionArtifact) -> VerificationResult:
    """
    Check an artifact for internal consistency.

    Checks: claims_present, indices_contiguous, total_matches,
    root_matches, proofs_valid.
    """
    if not artifact.claims:
        return VerificationResult.from_checks(
            [CheckResult.failed(ArtifactChecks.CLAIMS_PRESENT, "Artifact has no claims")]
        )

    checks = [
        CheckResult.passed(ArtifactChecks.CLAIMS_PRESENT, f"{len(artifact.claims)} claims"),
        _check_indices(artifact),
        _check_total(artifact),
        _check_root(artifact),
        _check_proofs(artifact),
    ]
    result = VerificationResult.from_checks(checks)
    if not result.ok:
        logger.warning(
            "Artifact verification failed: %s",
            ", ".join(result.failed_ids),
        )
    return result


__all__ = [
    "dump_json",
    "save_artifact",
    "parse_artifact",
    "load_artifact",
    "verify_artifact",
]
