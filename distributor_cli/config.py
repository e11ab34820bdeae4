"""
CLI Configuration

Locates the distributor config file and overlays DISTRIBUTOR_* environment
variables on top of it.
"""

from __future__ import annotations

import json
from pathlib import Path

from core.config.runtime import RuntimeConfig


def default_config_paths() -> list[Path]:
    return [
        Path.cwd() / "distributor.json",
        Path.cwd() / ".distributor.json",
        Path.home() / ".config" / "distributor" / "config.json",
    ]


def load_config(config_path: Path | None = None) -> RuntimeConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings. Without an explicit
    path the first existing default location is used.

    Raises:
        FileNotFoundError: An explicit config_path does not exist
    """
    config = RuntimeConfig()

    if config_path is not None:
        config = RuntimeConfig.from_json(config_path)
    else:
        for default_path in default_config_paths():
            if default_path.exists():
                config = RuntimeConfig.from_json(default_path)
                break

    return config.with_env_overrides()


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return json.dumps(RuntimeConfig().to_dict(), indent=2) + "\n"
