"""
CLI command modules.
"""

from distributor_cli.commands import generate, verify, proof

__all__ = ["generate", "verify", "proof"]
