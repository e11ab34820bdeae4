"""
CLI Generate Command

Build a distribution from a balances file and write the proofs artifact.

Usage:
    distributor generate balances.json --out proofs.json
    distributor generate balances.csv --json
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from core.schemas.errors import DistributorException
from distribution.artifacts.io import save_artifact
from distribution.indexer import build_distribution
from distribution.sources import load_balances


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


@dataclass
class GenerateSummary:
    """Summary of artifact generation for CLI output."""
    input_path: str = ""
    output_path: str = ""
    merkle_root: str = ""
    token_total: str = ""
    claim_count: int = 0
    success: bool = False
    error: str | None = None
    error_code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        for key in ("error", "error_code"):
            if d[key] is None:
                del d[key]
        return d


def print_summary_human(summary: GenerateSummary) -> None:
    if not summary.success:
        print(f"Error: {summary.error}", file=sys.stderr)
        return
    print(f"input: {summary.input_path}")
    print(f"output: {summary.output_path}")
    print(f"claims: {summary.claim_count}")
    print(f"merkle_root: {summary.merkle_root}")
    print(f"token_total: {summary.token_total}")


def generate_cmd(args: Namespace) -> int:
    """
    Execute the generate command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    config = getattr(args, "cli_config", None)
    out = args.out or (config.artifact.output_path if config else "proofs.json")
    summary = GenerateSummary(input_path=str(args.input), output_path=str(out))

    try:
        balances = load_balances(args.input)
        distribution = build_distribution(balances)
        written = save_artifact(distribution, Path(out))
    except DistributorException as e:
        summary.error = e.message
        summary.error_code = e.code
    except (FileNotFoundError, ValueError) as e:
        summary.error = str(e)
    else:
        summary.output_path = str(written)
        summary.merkle_root = distribution.merkle_root_hex
        summary.token_total = str(distribution.token_total)
        summary.claim_count = len(distribution)
        summary.success = True

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    return EXIT_SUCCESS if summary.success else EXIT_RUNTIME_ERROR
