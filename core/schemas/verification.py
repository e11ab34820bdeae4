"""
Schemas & Canonicalization
File: verification.py

Purpose: Named consistency checks over a published distribution artifact.

A check never raises; it reports pass/fail with a message and optional
details. verify_artifact (distribution.artifacts.io) runs the checks below
and the CLI `verify` command and the service ledger act on the outcome.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ArtifactChecks:
    """Identifiers of the artifact consistency checks, in run order."""

    CLAIMS_PRESENT = "claims_present"
    INDICES_CONTIGUOUS = "indices_contiguous"
    TOTAL_MATCHES = "total_matches"
    ROOT_MATCHES = "root_matches"
    PROOFS_VALID = "proofs_valid"

    ALL = (
        CLAIMS_PRESENT,
        INDICES_CONTIGUOUS,
        TOTAL_MATCHES,
        ROOT_MATCHES,
        PROOFS_VALID,
    )


class CheckResult(BaseModel):
    """Outcome of one named check."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    check_id: str = Field(..., min_length=1)
    ok: bool
    message: str
    details: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def passed(cls, check_id: str, message: str = "Check passed") -> "CheckResult":
        return cls(check_id=check_id, ok=True, message=message)

    @classmethod
    def failed(
        cls,
        check_id: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> "CheckResult":
        return cls(check_id=check_id, ok=False, message=message, details=details or {})


class VerificationResult(BaseModel):
    """
    All checks run against one artifact.

    `ok` holds only when every check passed.
    """

    model_config = ConfigDict(extra="forbid")

    ok: bool
    checks: list[CheckResult] = Field(default_factory=list)

    @classmethod
    def from_checks(cls, checks: list[CheckResult]) -> "VerificationResult":
        return cls(ok=all(c.ok for c in checks), checks=checks)

    @property
    def failed_checks(self) -> list[CheckResult]:
        return [c for c in self.checks if not c.ok]

    @property
    def failed_ids(self) -> list[str]:
        return [c.check_id for c in self.failed_checks]

    def get_error_messages(self) -> list[str]:
        return [f"{c.check_id}: {c.message}" for c in self.failed_checks]

    def to_report(self) -> list[dict[str, Any]]:
        """Flat per-check rows for CLI and JSON output."""
        return [
            {"check_id": c.check_id, "ok": c.ok, "message": c.message}
            for c in self.checks
        ]
