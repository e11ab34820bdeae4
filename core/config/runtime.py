"""
Runtime Configuration

Central configuration for claim processing, artifact handling and the
HTTP service.
"""

from __future__ import annotations

import copy
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

load_dotenv()


ENV_PREFIX = "DISTRIBUTOR_"


def _env(name: str) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}")


@dataclass
class LedgerConfig:
    """Configuration for the claim ledger."""
    # Claim bitmap words are guarded by lock_stripes locks (word % stripes)
    lock_stripes: int = 64
    lock_timeout_s: float = 5.0

    def __post_init__(self):
        if self.lock_stripes < 1:
            raise ValueError(f"lock_stripes must be >= 1, got {self.lock_stripes}")
        if self.lock_timeout_s <= 0:
            raise ValueError(f"lock_timeout_s must be > 0, got {self.lock_timeout_s}")


@dataclass
class ArtifactConfig:
    """Configuration for distribution artifacts on disk."""
    output_path: str = "proofs.json"
    verify_on_load: bool = True


@dataclass
class ServiceConfig:
    """Configuration for the HTTP claim service ledger."""
    admin: Optional[str] = None
    token: Optional[str] = None
    merkle_root: Optional[str] = None
    artifact_path: Optional[str] = None
    # Balance of `token` credited to the in-memory holding vault at startup
    initial_balance: int = 0


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration for the distributor.

    Can be loaded from:
    - Environment variables (DISTRIBUTOR_* prefix, .env supported)
    - JSON file
    - Programmatic construction
    """
    ledger: LedgerConfig = field(default_factory=LedgerConfig)
    artifact: ArtifactConfig = field(default_factory=ArtifactConfig)
    service: ServiceConfig = field(default_factory=ServiceConfig)
    log_level: str = "INFO"
    log_file: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        This is the SINGLE source of truth for all env var reading.

        Supported variables:
        - DISTRIBUTOR_LOCK_STRIPES: Number of claim lock stripes
        - DISTRIBUTOR_LOCK_TIMEOUT_S: Max seconds to wait for a claim lock
        - DISTRIBUTOR_OUTPUT_PATH: Default artifact output path
        - DISTRIBUTOR_VERIFY_ON_LOAD: Re-verify artifacts when loading (true/false)
        - DISTRIBUTOR_ADMIN / DISTRIBUTOR_TOKEN / DISTRIBUTOR_MERKLE_ROOT: Service ledger
        - DISTRIBUTOR_ARTIFACT_PATH: Artifact the service ledger publishes
        - DISTRIBUTOR_INITIAL_BALANCE: Token balance of the service vault
        - DISTRIBUTOR_LOG_LEVEL / DISTRIBUTOR_LOG_FILE: Logging
        """
        overrides: dict[str, Any] = {}

        # Ledger settings
        if _env("LOCK_STRIPES"):
            overrides.setdefault("ledger", {})["lock_stripes"] = int(_env("LOCK_STRIPES"))
        if _env("LOCK_TIMEOUT_S"):
            overrides.setdefault("ledger", {})["lock_timeout_s"] = float(_env("LOCK_TIMEOUT_S"))

        # Artifact settings
        if _env("OUTPUT_PATH"):
            overrides.setdefault("artifact", {})["output_path"] = _env("OUTPUT_PATH")
        if _env("VERIFY_ON_LOAD"):
            overrides.setdefault("artifact", {})["verify_on_load"] = (
                _env("VERIFY_ON_LOAD").lower() == "true"
            )

        # Service settings
        for key in ("admin", "token", "merkle_root", "artifact_path"):
            value = _env(key.upper())
            if value:
                overrides.setdefault("service", {})[key] = value
        if _env("INITIAL_BALANCE"):
            overrides.setdefault("service", {})["initial_balance"] = int(_env("INITIAL_BALANCE"), 0)

        # Logging
        if _env("LOG_LEVEL"):
            overrides["log_level"] = _env("LOG_LEVEL")
        if _env("LOG_FILE"):
            overrides["log_file"] = _env("LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_json(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = json.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        ledger_data = data.get("ledger", {})
        artifact_data = data.get("artifact", {})
        service_data = data.get("service", {})

        ledger = LedgerConfig(**ledger_data) if ledger_data else LedgerConfig()
        artifact = ArtifactConfig(**artifact_data) if artifact_data else ArtifactConfig()
        service = ServiceConfig(**service_data) if service_data else ServiceConfig()

        return cls(
            ledger=ledger,
            artifact=artifact,
            service=service,
            log_level=data.get("log_level", "INFO"),
            log_file=data.get("log_file"),
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)

        for section in ("ledger", "artifact", "service"):
            for key, value in overrides.get(section, {}).items():
                setattr(getattr(new_config, section), key, value)

        if "log_level" in overrides:
            new_config.log_level = overrides["log_level"]
        if "log_file" in overrides:
            new_config.log_file = overrides["log_file"]

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "ledger": {
                "lock_stripes": self.ledger.lock_stripes,
                "lock_timeout_s": self.ledger.lock_timeout_s,
            },
            "artifact": {
                "output_path": self.artifact.output_path,
                "verify_on_load": self.artifact.verify_on_load,
            },
            "service": {
                "admin": self.service.admin,
                "token": self.service.token,
                "merkle_root": self.service.merkle_root,
                "artifact_path": self.service.artifact_path,
                "initial_balance": self.service.initial_balance,
            },
            "log_level": self.log_level,
            "log_file": self.log_file,
            "extra": self.extra,
        }


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: RuntimeConfig) -> None:
    """Set the default runtime configuration."""
    global _default_config
    _default_config = config
