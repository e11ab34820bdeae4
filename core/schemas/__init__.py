"""
Schemas
File: __init__.py

Purpose: Export the public API for the schemas module.
"""

# Error models and exceptions
from .errors import (
    AlreadyClaimedException,
    ArtifactException,
    ClaimTimeoutException,
    DistributorError,
    DistributorException,
    DuplicateIdentityException,
    EmptyInputException,
    ErrorCodes,
    InvalidAmountException,
    InvalidIdentityException,
    InvalidParameterException,
    InvalidProofException,
    OverflowException,
    PayoutFailedException,
    UnauthorizedException,
)

# Identities
from .identity import (
    ADDRESS_LENGTH,
    ZERO_ADDRESS,
    AddressLike,
    checksum_address,
    is_zero_address,
    parse_address,
)

# Entitlements and artifacts
from .entitlement import (
    UINT256_MAX,
    ClaimInfo,
    DistributionArtifact,
    Entitlement,
    parse_amount,
)

# Verification results
from .verification import (
    ArtifactChecks,
    CheckResult,
    VerificationResult,
)

__all__ = [
    # Errors
    "AlreadyClaimedException",
    "ArtifactException",
    "ClaimTimeoutException",
    "DistributorError",
    "DistributorException",
    "DuplicateIdentityException",
    "EmptyInputException",
    "ErrorCodes",
    "InvalidAmountException",
    "InvalidIdentityException",
    "InvalidParameterException",
    "InvalidProofException",
    "OverflowException",
    "PayoutFailedException",
    "UnauthorizedException",
    # Identities
    "ADDRESS_LENGTH",
    "ZERO_ADDRESS",
    "AddressLike",
    "checksum_address",
    "is_zero_address",
    "parse_address",
    # Entitlements
    "UINT256_MAX",
    "ClaimInfo",
    "DistributionArtifact",
    "Entitlement",
    "parse_amount",
    # Verification
    "ArtifactChecks",
    "CheckResult",
    "VerificationResult",
]
