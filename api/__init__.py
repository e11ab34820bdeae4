"""
Distributor HTTP API (FastAPI)

- POST /distributions - Build a distribution from balances
- POST /proofs/verify - Check one proof against a root
- POST /claims - Redeem an entitlement on the service ledger
- GET /claims/{index} - Claim status
- POST /recover - Admin recovery of stray assets
- GET /health - Health check

Usage:
    uvicorn api.app:app --reload
"""

__version__ = "0.1.0"
