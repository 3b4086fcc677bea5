"""CSV ingestion: parse raw text, guess column mapping, coerce rows.

Only plain comma-separated text is supported. Quoted fields, embedded commas
and multi-line cells are not; a cell containing a comma will shift columns.
Rows are validated independently and a bad row only bumps the failure count.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, fields
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Iterable, Mapping, Optional, Sequence

from ..constants.categories import (
    EXPENSE_CATEGORIES,
    FALLBACK_CATEGORY,
    INCOME_CATEGORIES,
    all_categories,
)
from ..errors import RowError, StructuralError
from ..models.transaction import Transaction, TransactionType, to_cents

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("date", "description", "amount")

# Ordered rule table: field -> header keywords. First matching header wins.
AUTO_MAP_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("date", ("date",)),
    ("description", ("desc", "details", "memo")),
    ("amount", ("amount", "value", "total")),
    ("category", ("category", "group")),
    ("type", ("type",)),
)

DATE_FORMATS = (
    "%Y-%m-%d",
    "%m/%d/%Y",
    "%Y/%m/%d",
    "%m-%d-%Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
)

_LINE_SPLIT = re.compile(r"\r\n|\n")
_AMOUNT_STRIP = re.compile(r"[^0-9.\-]+")
_LEADING_NUMBER = re.compile(r"-?(?:\d+\.?\d*|\.\d+)")
INCOME_MARKERS = ("income", "credit")
EXPENSE_MARKERS = ("expense", "debit")


@dataclass(slots=True)
class ColumnMapping:
    """Maps canonical transaction fields to CSV headers."""

    date: Optional[str] = None
    description: Optional[str] = None
    amount: Optional[str] = None
    category: Optional[str] = None
    type: Optional[str] = None

    @classmethod
    def from_dict(cls, values: Mapping[str, Optional[str]]) -> "ColumnMapping":
        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise StructuralError(f"Unknown mapping fields: {sorted(unknown)}")
        return cls(**{k: v for k, v in values.items() if v})

    def as_dict(self) -> dict[str, str]:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name)}

    def merged(self, overrides: Optional[Mapping[str, Optional[str]]]) -> "ColumnMapping":
        """Return a copy with user-chosen headers taking precedence."""

        if not overrides:
            return ColumnMapping(**self.as_dict())
        combined = self.as_dict()
        combined.update({k: v for k, v in overrides.items() if v})
        return ColumnMapping.from_dict(combined)

    def missing_required(self) -> list[str]:
        return [name for name in REQUIRED_FIELDS if not getattr(self, name)]


@dataclass(frozen=True, slots=True)
class ParsedCsv:
    headers: list[str]
    rows: list[list[str]]


@dataclass(slots=True)
class IngestionResult:
    """Accepted transactions (no ids yet) plus how many rows were skipped."""

    accepted: list[Transaction] = field(default_factory=list)
    failed_count: int = 0

    @property
    def success_count(self) -> int:
        return len(self.accepted)


def parse_csv_text(raw_text: str) -> ParsedCsv:
    """Split raw text into a header row and data rows.

    Raises:
        StructuralError: fewer than two non-blank lines.
    """

    lines = _LINE_SPLIT.split((raw_text or "").strip())
    if len(lines) < 2:
        raise StructuralError("CSV must have a header row and at least one data row.")

    headers = [h.strip() for h in lines[0].split(",")]
    rows = [[cell.strip() for cell in line.split(",")] for line in lines[1:]]
    return ParsedCsv(headers=headers, rows=rows)


def match_header(headers: Sequence[str], keywords: Iterable[str]) -> Optional[str]:
    """First header (in order) whose lowercase text contains any keyword."""

    keywords = tuple(keywords)
    for header in headers:
        lowered = header.lower()
        if any(kw in lowered for kw in keywords):
            return header
    return None


def auto_map_columns(headers: Sequence[str]) -> ColumnMapping:
    """Guess a mapping from header names; unmatched fields stay unmapped."""

    mapping = ColumnMapping()
    for field_name, keywords in AUTO_MAP_RULES:
        header = match_header(headers, keywords)
        if header is not None:
            setattr(mapping, field_name, header)
    return mapping


def parse_date(raw: str) -> date:
    """Parse a date cell in any of the supported formats."""

    value = (raw or "").strip()
    if not value:
        raise RowError("Missing date")
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    except ValueError:
        raise RowError(f"Could not parse date '{value}'") from None


def parse_amount(raw: str) -> Decimal:
    """Return the signed amount rounded to cents, ignoring currency symbols and separators."""

    cleaned = _AMOUNT_STRIP.sub("", raw or "")
    match = _LEADING_NUMBER.match(cleaned)
    if match is None:
        raise RowError(f"Could not parse amount '{raw}'")
    try:
        return to_cents(Decimal(match.group(0)))
    except InvalidOperation:
        raise RowError(f"Could not parse amount '{raw}'") from None


def infer_type(type_cell: Optional[str], signed_amount: Decimal) -> TransactionType:
    """Use the type column when it is explicit, otherwise the amount's sign."""

    lowered = (type_cell or "").lower()
    if any(marker in lowered for marker in INCOME_MARKERS):
        return TransactionType.INCOME
    if any(marker in lowered for marker in EXPENSE_MARKERS):
        return TransactionType.EXPENSE
    return TransactionType.INCOME if signed_amount >= 0 else TransactionType.EXPENSE


def resolve_category(cell: Optional[str], known_categories: Iterable[str]) -> str:
    if not cell:
        return FALLBACK_CATEGORY
    lowered = cell.lower()
    if any(lowered == name.lower() for name in known_categories):
        return cell
    return FALLBACK_CATEGORY


def _column_indexes(headers: Sequence[str], mapping: ColumnMapping) -> dict[str, int]:
    missing = mapping.missing_required()
    if missing:
        raise StructuralError(f"Required columns are not mapped: {', '.join(missing)}")

    indexes: dict[str, int] = {}
    for field_name, header in mapping.as_dict().items():
        try:
            indexes[field_name] = list(headers).index(header)
        except ValueError:
            raise StructuralError(
                f"Mapped header '{header}' for {field_name} is not in the CSV"
            ) from None
    return indexes


def _cell(row: Sequence[str], index: Optional[int]) -> str:
    if index is None or index >= len(row):
        return ""
    return row[index]


def _row_to_transaction(
    row: Sequence[str], indexes: Mapping[str, int], known_categories: Sequence[str]
) -> Transaction:
    occurred = parse_date(_cell(row, indexes["date"]))

    description = _cell(row, indexes["description"]).strip()
    if not description:
        raise RowError("Missing description")

    signed = parse_amount(_cell(row, indexes["amount"]))
    txn_type = infer_type(_cell(row, indexes.get("type")), signed)
    category = resolve_category(_cell(row, indexes.get("category")), known_categories)

    return Transaction(
        date=occurred,
        description=description,
        category=category,
        amount=abs(signed),
        type=txn_type,
    )


def ingest_rows(
    rows: Iterable[Sequence[str]],
    *,
    headers: Sequence[str],
    mapping: ColumnMapping,
    income_categories: Optional[Sequence[str]] = None,
    expense_categories: Optional[Sequence[str]] = None,
) -> IngestionResult:
    """Convert data rows to transactions, counting rows that fail validation.

    Raises:
        StructuralError: a required field is unmapped or a mapped header is
            absent; raised before any row is looked at.
    """

    indexes = _column_indexes(headers, mapping)
    known = all_categories(
        list(income_categories) if income_categories is not None else INCOME_CATEGORIES,
        list(expense_categories) if expense_categories is not None else EXPENSE_CATEGORIES,
    )

    result = IngestionResult()
    for row_num, row in enumerate(rows, start=2):
        try:
            result.accepted.append(_row_to_transaction(row, indexes, known))
        except RowError as exc:
            result.failed_count += 1
            logger.debug(f"Row {row_num}: skipped ({exc})")

    logger.info(
        f"CSV ingestion complete: {result.success_count} accepted, {result.failed_count} failed"
    )
    return result


def import_csv_text(
    raw_text: str,
    *,
    income_categories: Optional[Sequence[str]] = None,
    expense_categories: Optional[Sequence[str]] = None,
    mapping_overrides: Optional[Mapping[str, Optional[str]]] = None,
) -> IngestionResult:
    """Parse, auto-map (with optional overrides) and ingest in one call."""

    parsed = parse_csv_text(raw_text)
    logger.info(f"CSV headers found: {parsed.headers}")

    mapping = auto_map_columns(parsed.headers).merged(mapping_overrides)
    logger.info(f"Column mapping: {mapping.as_dict()}")

    return ingest_rows(
        parsed.rows,
        headers=parsed.headers,
        mapping=mapping,
        income_categories=income_categories,
        expense_categories=expense_categories,
    )
