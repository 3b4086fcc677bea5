"""Budgeting domain services."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Mapping

from ..models.transaction import ZERO, Transaction, as_money, to_cents

logger = logging.getLogger(__name__)

NEAR_LIMIT_PERCENT = 75.0
OVER_BUDGET_PERCENT = 100.0


@dataclass(frozen=True, slots=True)
class BudgetVariance:
    """Lightweight DTO for reporting budget vs actual."""

    category: str
    budgeted: Decimal
    actual: Decimal

    @property
    def variance(self) -> Decimal:
        """Positive when under budget, negative when overspent."""
        return self.budgeted - self.actual

    @property
    def variance_percentage(self) -> float:
        if self.budgeted == 0:
            return 0.0
        return float(self.variance / self.budgeted * 100)

    @property
    def percent_used(self) -> float:
        """Share of the budget already spent; 0 when nothing is budgeted."""
        if self.budgeted == 0:
            return 0.0
        return float(self.actual / self.budgeted * 100)

    @property
    def status(self) -> str:
        used = self.percent_used
        if used > OVER_BUDGET_PERCENT:
            return "Over Budget"
        if used > NEAR_LIMIT_PERCENT:
            return "Near Limit"
        return "On Track"


def filter_allocations(allocations: Mapping[str, object]) -> dict[str, Decimal]:
    """Drop zero/negative entries; an unset budget and a zero budget are the same."""

    kept: dict[str, Decimal] = {}
    for category, raw in allocations.items():
        amount = to_cents(raw)
        if amount > 0:
            kept[category] = amount
    return kept


def actual_spend(transactions: Iterable[Transaction], *, month: str) -> dict[str, Decimal]:
    """Sum expense amounts per category for one ``YYYY-MM`` month."""

    totals: dict[str, Decimal] = {}
    for tx in transactions:
        if not tx.is_expense or tx.month != month:
            continue
        totals[tx.category] = totals.get(tx.category, ZERO) + as_money(tx.amount)
    return totals


def compute_variances(
    *,
    transactions: Iterable[Transaction],
    allocations: Mapping[str, object],
    month: str,
) -> list[BudgetVariance]:
    """Compare a month's allocations with actual spend, largest deviation first.

    Only budgeted categories are reported; unbudgeted spend does not appear.
    """

    spend = actual_spend(transactions, month=month)
    variances = [
        BudgetVariance(
            category=category,
            budgeted=as_money(budgeted),
            actual=spend.get(category, ZERO),
        )
        for category, budgeted in allocations.items()
    ]
    variances.sort(key=lambda v: abs(v.variance), reverse=True)

    logger.debug("Computed budget variances", extra={"month": month, "lines": len(variances)})
    return variances
