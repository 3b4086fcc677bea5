"""SQLModel implementation of the budget store."""

from __future__ import annotations

import re
from decimal import Decimal
from typing import Callable, ContextManager, Mapping

from sqlmodel import Session, select

from ...models.budget import BudgetAllocation
from ...services.budgeting import filter_allocations

SessionFactory = Callable[[], ContextManager[Session]]

_MONTH_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def _check_month(month: str) -> str:
    if not _MONTH_PATTERN.match(month or ""):
        raise ValueError(f"Budget month must look like YYYY-MM, got {month!r}")
    return month


class SQLModelBudgetStore:
    """Budget allocations stored one row per (month, category)."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get(self, month: str) -> dict[str, Decimal]:
        """Allocations for a month; empty when none are set."""
        _check_month(month)
        with self.session_factory() as session:
            rows = session.exec(
                select(BudgetAllocation)
                .where(BudgetAllocation.month == month)
                .order_by(BudgetAllocation.category)
            ).all()
            return {row.category: row.amount for row in rows}

    def set(self, month: str, allocations: Mapping[str, object]) -> dict[str, Decimal]:
        """Replace a month's allocations; zero/negative entries are not stored.

        Setting only zeros clears the month entirely.
        """
        _check_month(month)
        kept = filter_allocations(allocations)
        with self.session_factory() as session:
            existing = session.exec(
                select(BudgetAllocation).where(BudgetAllocation.month == month)
            ).all()
            for row in existing:
                session.delete(row)
            session.flush()
            for category, amount in kept.items():
                session.add(BudgetAllocation(month=month, category=category, amount=amount))
            session.commit()
        return kept

    def months(self) -> list[str]:
        """Months that have at least one allocation, ascending."""
        with self.session_factory() as session:
            rows = session.exec(select(BudgetAllocation.month).distinct()).all()
            return sorted(rows)
