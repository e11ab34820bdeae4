"""
API Error Handling

Standardized error handling for the API. DistributorException codes are
mapped onto HTTP statuses by distributor_error_handler.
"""

import logging
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from api.models.responses import ErrorDetail, ErrorResponse
from core.schemas.errors import DistributorException, ErrorCodes


logger = logging.getLogger(__name__)

# Codes not listed here map to 400
STATUS_BY_CODE = {
    ErrorCodes.ALREADY_CLAIMED: 409,
    ErrorCodes.UNAUTHORIZED: 403,
    ErrorCodes.PAYOUT_FAILED: 502,
    ErrorCodes.CLAIM_TIMEOUT: 503,
}


class APIError(Exception):
    """Base API error with structured response."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=self.code,
                message=self.message,
                details=self.details,
            ),
        )


class LedgerNotConfiguredError(APIError):
    """The service has no claim ledger to act on."""

    def __init__(self, message: str = "Claim ledger is not configured"):
        super().__init__(
            code="LEDGER_NOT_CONFIGURED",
            message=message,
            status_code=503,
        )


def status_for(exc: DistributorException) -> int:
    return STATUS_BY_CODE.get(exc.code, 400)


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(),
    )


async def distributor_error_handler(request: Request, exc: DistributorException) -> JSONResponse:
    """Handle domain exceptions raised by the indexer or ledger."""
    headers = {"Retry-After": "1"} if exc.retryable else None
    return JSONResponse(
        status_code=status_for(exc),
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(code=exc.code, message=exc.message, details=exc.details),
        ).model_dump(),
        headers=headers,
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code="INTERNAL_ERROR",
                message="An unexpected error occurred",
                details={"type": type(exc).__name__},
            ),
        ).model_dump(),
    )
