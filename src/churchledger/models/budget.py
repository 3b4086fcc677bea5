"""Budgeting tables."""

from __future__ import annotations

from decimal import Decimal
from typing import ClassVar, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


class BudgetAllocation(SQLModel, table=True):
    """Planned spend for one category in one calendar month.

    Rows only exist for positive amounts; a missing row means "no budget".
    """

    __tablename__: ClassVar[str] = "budget_allocation"
    __table_args__ = (UniqueConstraint("month", "category", name="uq_budget_month_category"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    month: str = Field(nullable=False, index=True, max_length=7)
    category: str = Field(nullable=False, max_length=64)
    amount: Decimal = Field(nullable=False, max_digits=14, decimal_places=2)
