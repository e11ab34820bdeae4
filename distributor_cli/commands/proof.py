"""
CLI Proof Command

Look up one claimant in a proofs artifact and check their proof locally.

Usage:
    distributor proof proofs.json 0xAbc... [--json]
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace

from core.merkle.merkle_proofs import MerkleVerifier
from core.schemas.errors import DistributorException
from distribution.artifacts.io import load_artifact


EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def proof_cmd(args: Namespace) -> int:
    try:
        artifact = load_artifact(args.artifact, verify=False)
        claim = artifact.get_claim(args.address)
    except DistributorException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if claim is None:
        print(f"Error: {args.address} has no entitlement in {args.artifact}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    ok = MerkleVerifier.verify_hex(
        claim.index, args.address, claim.amount_int, claim.proof, artifact.merkle_root
    )

    if args.json:
        print(json.dumps({
            "account": args.address,
            "index": claim.index,
            "amount": str(claim.amount_int),
            "proof": claim.proof,
            "merkle_root": artifact.merkle_root,
            "valid": ok,
        }, indent=2))
    else:
        print(f"account: {args.address}")
        print(f"index: {claim.index}")
        print(f"amount: {claim.amount_int}")
        print(f"proof ({len(claim.proof)}):")
        for node in claim.proof:
            print(f"  {node}")
        print(f"valid: {str(ok).lower()}")

    return EXIT_SUCCESS if ok else EXIT_VERIFICATION_FAILED
