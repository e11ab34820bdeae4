"""
Health Check Route

Liveness probe. Reports whether the claim ledger has been built, without
building it.
"""

from fastapi import APIRouter

from api.deps import ledger_ready
from api.models.responses import HealthResponse


router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    return HealthResponse(ok=True, ledger_ready=ledger_ready())


@router.get("/", response_model=HealthResponse)
async def root() -> HealthResponse:
    """Root endpoint - same as health check."""
    return HealthResponse(ok=True, ledger_ready=ledger_ready())
