"""
API Dependencies

Dependency injection for the API.
Provides the process-wide claim ledger the claim routes act on.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Optional

from api.errors import LedgerNotConfiguredError
from core.config.runtime import RuntimeConfig
from core.ledger import ClaimLedger, InMemoryVault
from core.schemas.errors import DistributorException
from core.schemas.identity import parse_address
from distribution.artifacts.io import load_artifact

logger = logging.getLogger(__name__)

_ledger: Optional[ClaimLedger] = None
_ledger_lock = threading.Lock()


def _load_runtime_config() -> RuntimeConfig:
    """Load RuntimeConfig from config file, then overlay environment variables.

    Search order for config file:
      1. ./distributor.json
      2. ./.distributor.json
      3. ~/.config/distributor/config.json

    Environment variables ALWAYS override config file values.
    The .env file is loaded automatically by core.config.runtime on import.
    """
    search_paths = [
        Path.cwd() / "distributor.json",
        Path.cwd() / ".distributor.json",
        Path.home() / ".config" / "distributor" / "config.json",
    ]

    config: RuntimeConfig | None = None

    for path in search_paths:
        if path.exists():
            try:
                config = RuntimeConfig.from_json(path)
                logger.info("Loaded config from %s", path)
                break
            except (ValueError, TypeError) as e:
                logger.warning("Failed to parse %s: %s", path, e)

    if config is None:
        config = RuntimeConfig()

    return config.with_env_overrides()


def build_service_ledger(config: RuntimeConfig) -> ClaimLedger:
    """
    Build the service ledger from ServiceConfig.

    The root comes from service.merkle_root, or else from the artifact at
    service.artifact_path. The ledger pays out of an InMemoryVault funded
    with service.initial_balance of the token.

    Raises:
        LedgerNotConfiguredError: Missing or invalid service settings
    """
    service = config.service
    if not service.admin or not service.token:
        raise LedgerNotConfiguredError(
            "Claim ledger needs DISTRIBUTOR_ADMIN and DISTRIBUTOR_TOKEN"
        )

    try:
        root = service.merkle_root
        if root is None and service.artifact_path:
            artifact = load_artifact(
                service.artifact_path, verify=config.artifact.verify_on_load
            )
            root = artifact.merkle_root
        if root is None:
            raise LedgerNotConfiguredError(
                "Claim ledger needs DISTRIBUTOR_MERKLE_ROOT or DISTRIBUTOR_ARTIFACT_PATH"
            )

        vault = InMemoryVault()
        ledger = ClaimLedger(
            admin=service.admin,
            token=service.token,
            merkle_root=root,
            transport=vault,
            config=config.ledger,
        )
        if service.initial_balance:
            vault.deposit(parse_address(service.token), service.initial_balance)
    except DistributorException as e:
        raise LedgerNotConfiguredError(f"Invalid ledger configuration: {e.message}") from e

    logger.info("Service ledger funded with %d of %s", service.initial_balance, ledger.token)
    return ledger


def get_ledger() -> ClaimLedger:
    """FastAPI dependency: the process-wide claim ledger, built on first use."""
    global _ledger
    with _ledger_lock:
        if _ledger is None:
            _ledger = build_service_ledger(_load_runtime_config())
        return _ledger


def set_ledger(ledger: ClaimLedger | None) -> None:
    """Install (or with None, drop) the process-wide ledger."""
    global _ledger
    with _ledger_lock:
        _ledger = ledger


def ledger_ready() -> bool:
    """Whether a ledger is installed, without trying to build one."""
    return _ledger is not None
