"""
Artifact Packaging

Persist and verify the published {merkleRoot, tokenTotal, claims} file.
"""

from distribution.artifacts.io import (
    dump_json,
    load_artifact,
    parse_artifact,
    save_artifact,
    verify_artifact,
)

__all__ = [
    "dump_json",
    "load_artifact",
    "parse_artifact",
    "save_artifact",
    "verify_artifact",
]
