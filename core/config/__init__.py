"""
Runtime Configuration Module

Provides configuration loading and management for the distributor.
"""

from .runtime import (
    ArtifactConfig,
    LedgerConfig,
    RuntimeConfig,
    ServiceConfig,
    get_default_config,
    set_default_config,
)

__all__ = [
    "ArtifactConfig",
    "LedgerConfig",
    "RuntimeConfig",
    "ServiceConfig",
    "get_default_config",
    "set_default_config",
]
