"""CSV export helpers for ledger reports."""

from __future__ import annotations

import csv
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Iterable

from ..models.transaction import Transaction

EXPORT_HEADERS = [
    "Date",
    "Description",
    "Type",
    "Category",
    "Amount",
    "Donor Name",
    "Donor Contact",
]


def _serialize_value(value):
    if value is None:
        return ""
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return str(value)


def export_transactions_csv(*, transactions: Iterable[Transaction], output_path: Path) -> Path:
    """Write transactions to CSV at `output_path` and return the path.

    Text columns are quoted as needed, so the file is meant for spreadsheets
    rather than for round-tripping through the plain-comma importer.
    """

    output_path.parent.mkdir(parents=True, exist_ok=True)

    # Use newline='' for csv on Windows
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(
            fh, fieldnames=EXPORT_HEADERS, extrasaction="ignore", quoting=csv.QUOTE_MINIMAL
        )
        writer.writeheader()
        for tx in transactions:
            writer.writerow(
                {
                    "Date": _serialize_value(tx.date),
                    "Description": _serialize_value(tx.description),
                    "Type": _serialize_value(tx.type),
                    "Category": _serialize_value(tx.category),
                    "Amount": _serialize_value(tx.amount),
                    "Donor Name": _serialize_value(tx.donor_name),
                    "Donor Contact": _serialize_value(tx.donor_contact),
                }
            )

    return output_path
