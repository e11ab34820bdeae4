"""
Balance Sources
Read a finalized identity -> amount mapping from disk.

Supported formats:
- JSON object: {"0xabc...": "1500", "0xdef...": 250, ...}
  (amounts as integers, decimal strings or 0x-hex strings)
- CSV with an `address,amount` header

Rows are returned as (identity, raw amount) pairs in file order. Nothing
is merged or validated here; the indexer rejects duplicates and bad
amounts.
"""
from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any

from core.schemas.errors import EmptyInputException, InvalidAmountException


def _reject_float(value: str) -> Any:
    raise InvalidAmountException(f"Amount must be an integer, got float literal {value!r}")


class _JsonObject(list):
    """Key/value pairs of one JSON object, in file order, repeats kept."""


def load_json_balances(path: Path) -> list[tuple[str, Any]]:
    # Objects stay as pair lists so a repeated address reaches the indexer
    # as a duplicate instead of being overwritten by json
    with open(path, encoding="utf-8") as f:
        data = json.load(f, parse_float=_reject_float, object_pairs_hook=_JsonObject)
    if not isinstance(data, _JsonObject):
        raise ValueError(f"Expected a JSON object of address -> amount in {path}")
    return list(data)


def load_csv_balances(path: Path) -> list[tuple[str, str]]:
    rows: list[tuple[str, str]] = []
    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        fields = [name.strip().lower() for name in (reader.fieldnames or [])]
        if "address" not in fields or "amount" not in fields:
            raise ValueError(f"CSV needs an 'address,amount' header: {path}")
        reader.fieldnames = fields
        for row in reader:
            address = (row.get("address") or "").strip()
            amount = (row.get("amount") or "").strip()
            if address or amount:
                rows.append((address, amount))
    return rows


def load_balances(path: str | Path) -> list[tuple[str, Any]]:
    """
    Load (identity, amount) pairs from a .json or .csv file.

    Raises:
        FileNotFoundError: Missing file
        ValueError: Unsupported extension or malformed structure
        EmptyInputException: The file holds no rows
    """
    source = Path(path)
    if not source.exists():
        raise FileNotFoundError(f"Balances file not found: {source}")

    suffix = source.suffix.lower()
    if suffix == ".json":
        rows = load_json_balances(source)
    elif suffix == ".csv":
        rows = load_csv_balances(source)
    else:
        raise ValueError(f"Unsupported balances format {suffix!r} (use .json or .csv)")

    if not rows:
        raise EmptyInputException(f"No balances found in {source}")
    return rows


__all__ = [
    "load_balances",
    "load_json_balances",
    "load_csv_balances",
]
