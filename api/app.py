"""
FastAPI Application

Main application setup and configuration.

Usage:
    uvicorn api.app:app --reload

    # Or run directly
    python -m api.app
"""

import json
import logging
import os
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.errors import (
    APIError,
    api_error_handler,
    distributor_error_handler,
    generic_error_handler,
)
from api.routes import claims, distributions, health
from core.schemas.errors import DistributorException


# Configure logging; respects DISTRIBUTOR_LOG_LEVEL and distributor.json log_level
def _resolve_log_level() -> int:
    """Resolve log level from env var or distributor.json, defaulting to INFO."""
    raw = os.getenv("DISTRIBUTOR_LOG_LEVEL")
    if raw is None:
        cfg_path = Path.cwd() / "distributor.json"
        if cfg_path.exists():
            try:
                with open(cfg_path) as f:
                    raw = json.load(f).get("log_level")
            except (OSError, ValueError):
                raw = None
    return getattr(logging, (raw or "INFO").upper(), logging.INFO)


logging.basicConfig(
    level=_resolve_log_level(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Merkle Distributor API",
        description="""
HTTP API for building Merkle distributions and redeeming claims.

## Endpoints

- **POST /distributions** - Build a proofs artifact from balances
- **POST /proofs/verify** - Check one proof against a root
- **POST /claims** - Redeem an entitlement on the service ledger
- **GET /claims/{index}** - Claim status
- **GET /ledger** - Service ledger details
- **POST /recover** - Admin recovery of stray assets
- **GET /health** - Health check

## Errors

Errors are returned as `{"ok": false, "error": {"code", "message", "details"}}`.
`ALREADY_CLAIMED` is a 409, `UNAUTHORIZED` a 403, other domain errors 400.
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(DistributorException, distributor_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(distributions.router)
    app.include_router(claims.router)

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
