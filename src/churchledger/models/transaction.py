"""SQLModel definitions for ledger transactions."""

from __future__ import annotations

import datetime as dt
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

ZERO = Decimal("0")
CENTS = Decimal("0.01")


class TransactionType(str, Enum):
    """Direction of money movement; amounts themselves are never signed."""

    INCOME = "Income"
    EXPENSE = "Expense"


class Transaction(SQLModel, table=True):
    """A single ledger entry, hand-entered or imported from CSV."""

    __tablename__: ClassVar[str] = "transaction"

    id: Optional[int] = Field(default=None, primary_key=True)
    date: dt.date = Field(nullable=False, index=True)
    description: str = Field(nullable=False, max_length=255)
    category: str = Field(default="Other", nullable=False, index=True, max_length=64)
    amount: Decimal = Field(
        default=ZERO,
        max_digits=14,
        decimal_places=2,
        nullable=False,
        description="Always positive; direction lives in type",
    )
    type: TransactionType = Field(default=TransactionType.INCOME, nullable=False)
    donor_name: Optional[str] = Field(default=None, index=True, max_length=128)
    donor_contact: Optional[str] = Field(default=None, max_length=255)

    @property
    def month(self) -> str:
        """Calendar month bucket key (``YYYY-MM``)."""
        return self.date.isoformat()[:7]

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME

    @property
    def is_expense(self) -> bool:
        return self.type == TransactionType.EXPENSE


def as_money(value: object) -> Decimal:
    """Coerce a stored amount (Decimal, int, float or str) to Decimal.

    Floats go through ``str`` so 0.1 stays 0.1 rather than its binary expansion.
    Unparseable values count as zero.
    """

    if isinstance(value, Decimal):
        return value
    if value is None:
        return ZERO
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return ZERO


def to_cents(value: object) -> Decimal:
    """Round an amount half-up to the two places the amount column stores."""

    return as_money(value).quantize(CENTS, rounding=ROUND_HALF_UP)
