"""
Distributor CLI

Command-line interface for building and checking Merkle distributions.

Usage:
    python -m distributor_cli generate balances.json --out proofs.json
    python -m distributor_cli verify proofs.json
    python -m distributor_cli proof proofs.json 0xAbc...
"""

__version__ = "0.1.0"
