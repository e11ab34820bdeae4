"""
Schemas & Errors
File: errors.py

Purpose: Standard error taxonomy for the distributor.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the distributor."""

    # Ledger construction & administration
    INVALID_PARAMETER = "INVALID_PARAMETER"
    UNAUTHORIZED = "UNAUTHORIZED"

    # Claim processing
    INVALID_PROOF = "INVALID_PROOF"
    ALREADY_CLAIMED = "ALREADY_CLAIMED"
    PAYOUT_FAILED = "PAYOUT_FAILED"
    CLAIM_TIMEOUT = "CLAIM_TIMEOUT"

    # Distribution building
    EMPTY_INPUT = "EMPTY_INPUT"
    OVERFLOW = "OVERFLOW"
    DUPLICATE_IDENTITY = "DUPLICATE_IDENTITY"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    INVALID_IDENTITY = "INVALID_IDENTITY"

    # Artifact persistence
    ARTIFACT_INVALID = "ARTIFACT_INVALID"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class DistributorError(BaseModel):
    """
    Base error model for structured error communication.

    Used by the HTTP layer and the CLI's JSON output to report a failure
    without raising.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.INVALID_PROOF],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "DistributorException":
        """Convert this error model to a raised exception."""
        return DistributorException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class DistributorException(Exception):
    """
    Base exception for all distributor errors.

    Carries structured error information and can be converted
    to/from DistributorError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "DISTRIBUTOR_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> DistributorError:
        """Convert this exception to a DistributorError model."""
        return DistributorError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class InvalidParameterException(DistributorException):
    """Raised when ledger construction or admin arguments are zero or malformed."""

    def __init__(
        self,
        message: str,
        parameter: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if parameter:
            full_details["parameter"] = parameter
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_PARAMETER,
            details=full_details,
            retryable=False,
        )


class UnauthorizedException(DistributorException):
    """Raised when a non-admin identity calls an admin-only operation."""

    def __init__(
        self,
        message: str,
        caller: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if caller:
            full_details["caller"] = caller
        super().__init__(
            message=message,
            code=ErrorCodes.UNAUTHORIZED,
            details=full_details,
            retryable=False,
        )


class InvalidProofException(DistributorException):
    """Raised when a claim does not verify against the published root."""

    def __init__(
        self,
        message: str,
        leaf_index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if leaf_index is not None:
            full_details["leaf_index"] = leaf_index
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_PROOF,
            details=full_details,
            retryable=False,
        )


class AlreadyClaimedException(DistributorException):
    """Raised when the claim bit for an index is already set."""

    def __init__(
        self,
        message: str,
        leaf_index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if leaf_index is not None:
            full_details["leaf_index"] = leaf_index
        super().__init__(
            message=message,
            code=ErrorCodes.ALREADY_CLAIMED,
            details=full_details,
            retryable=False,
        )


class PayoutFailedException(DistributorException):
    """Raised when the payout transport rejects a transfer."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.PAYOUT_FAILED,
            details=details,
            retryable=False,
        )


class ClaimTimeoutException(DistributorException):
    """Raised when the claim lock for an index cannot be acquired in time."""

    def __init__(
        self,
        message: str,
        leaf_index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if leaf_index is not None:
            full_details["leaf_index"] = leaf_index
        super().__init__(
            message=message,
            code=ErrorCodes.CLAIM_TIMEOUT,
            details=full_details,
            retryable=True,
        )


class EmptyInputException(DistributorException):
    """Raised when a tree or distribution is built from nothing."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.EMPTY_INPUT,
            details=details,
            retryable=False,
        )


class OverflowException(DistributorException):
    """Raised when a value does not fit its fixed-width encoding."""

    def __init__(
        self,
        message: str,
        field_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if field_path:
            full_details["field_path"] = field_path
        super().__init__(
            message=message,
            code=ErrorCodes.OVERFLOW,
            details=full_details,
            retryable=False,
        )


class DuplicateIdentityException(DistributorException):
    """Raised when an identity appears more than once in one round."""

    def __init__(
        self,
        message: str,
        identity: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if identity:
            full_details["identity"] = identity
        super().__init__(
            message=message,
            code=ErrorCodes.DUPLICATE_IDENTITY,
            details=full_details,
            retryable=False,
        )


class InvalidAmountException(DistributorException):
    """Raised when an amount is zero, negative or not an integer."""

    def __init__(
        self,
        message: str,
        identity: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if identity:
            full_details["identity"] = identity
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_AMOUNT,
            details=full_details,
            retryable=False,
        )


class InvalidIdentityException(DistributorException):
    """Raised when an identity is not a valid 20-byte address."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_IDENTITY,
            details=details,
            retryable=False,
        )


class ArtifactException(DistributorException):
    """Raised when a persisted distribution artifact is malformed or inconsistent."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if path:
            full_details["path"] = path
        super().__init__(
            message=message,
            code=ErrorCodes.ARTIFACT_INVALID,
            details=full_details,
            retryable=False,
        )
