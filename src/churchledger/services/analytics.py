"""Ledger-wide totals, monthly trends and category breakdowns."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence, Union

from ..models.transaction import ZERO, Transaction, TransactionType, as_money

logger = logging.getLogger(__name__)

DateBound = Union[date, str]

DEFAULT_TREND_MONTHS = 12
DEFAULT_TOP_CATEGORIES = 10


@dataclass(frozen=True, slots=True)
class DateRange:
    """Inclusive date window; bounds may be dates or ISO ``YYYY-MM-DD`` strings."""

    start: DateBound
    end: DateBound

    @property
    def is_complete(self) -> bool:
        """False when either bound is blank; an incomplete range filters nothing."""
        return not _is_blank(self.start) and not _is_blank(self.end)

    def bounds(self) -> tuple[date, date]:
        return _to_date(self.start), _to_date(self.end)

    def contains(self, day: date) -> bool:
        start, end = self.bounds()
        return start <= day <= end


@dataclass(frozen=True, slots=True)
class MonthlyBucket:
    """Income/expense totals for one ``YYYY-MM`` month."""

    month: str
    income: Decimal
    expenses: Decimal
    net: Decimal
    transaction_count: int


@dataclass(frozen=True, slots=True)
class CategoryShare:
    category: str
    amount: Decimal
    type: TransactionType
    percentage: float


@dataclass(frozen=True, slots=True)
class GrowthRate:
    """Month-over-month percentage change between the two latest buckets."""

    income: float = 0.0
    expenses: float = 0.0
    net: float = 0.0


@dataclass(frozen=True, slots=True)
class TrendPoint:
    period: str
    income: Decimal
    expenses: Decimal
    net: Decimal


@dataclass(frozen=True, slots=True)
class LedgerSummary:
    """Everything the dashboard needs, recomputed from a full snapshot."""

    total_income: Decimal = ZERO
    total_expenses: Decimal = ZERO
    net_income: Decimal = ZERO
    transaction_count: int = 0
    average_transaction: Decimal = ZERO
    monthly_trends: list[MonthlyBucket] = field(default_factory=list)
    category_breakdown: list[CategoryShare] = field(default_factory=list)
    top_categories: list[CategoryShare] = field(default_factory=list)
    growth_rate: GrowthRate = field(default_factory=GrowthRate)
    trends: list[TrendPoint] = field(default_factory=list)


def _is_blank(value: Optional[DateBound]) -> bool:
    if isinstance(value, date):
        return False
    return not (value or "").strip()


def _to_date(value: DateBound) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(value.strip()[:10])


def filter_by_date_range(
    transactions: Iterable[Transaction], date_range: Optional[DateRange]
) -> list[Transaction]:
    """Return transactions whose date falls inside the inclusive window."""

    if date_range is None or not date_range.is_complete:
        return list(transactions)
    start, end = date_range.bounds()
    return [t for t in transactions if start <= t.date <= end]


def monthly_buckets(
    transactions: Iterable[Transaction], *, limit: int = DEFAULT_TREND_MONTHS
) -> list[MonthlyBucket]:
    """Bucket transactions by month, ascending, keeping the latest ``limit`` months."""

    totals: dict[str, list] = {}
    for tx in transactions:
        current = totals.setdefault(tx.month, [ZERO, ZERO, 0])
        if tx.is_income:
            current[0] += as_money(tx.amount)
        else:
            current[1] += as_money(tx.amount)
        current[2] += 1

    buckets = [
        MonthlyBucket(
            month=month,
            income=income,
            expenses=expenses,
            net=income - expenses,
            transaction_count=count,
        )
        for month, (income, expenses, count) in sorted(totals.items())
    ]
    return buckets[-limit:] if limit > 0 else []


def category_breakdown(
    transactions: Iterable[Transaction], *, grand_total: Decimal
) -> list[CategoryShare]:
    """Roll up amounts per category, largest first.

    A category's type is taken from the first transaction seen in it.
    """

    totals: dict[str, Decimal] = {}
    types: dict[str, TransactionType] = {}
    for tx in transactions:
        types.setdefault(tx.category, tx.type)
        totals[tx.category] = totals.get(tx.category, ZERO) + as_money(tx.amount)

    shares = [
        CategoryShare(
            category=category,
            amount=amount,
            type=types[category],
            percentage=float(amount / grand_total * 100) if grand_total > 0 else 0.0,
        )
        for category, amount in totals.items()
    ]
    # sorted() is stable, so ties keep first-seen order
    return sorted(shares, key=lambda share: share.amount, reverse=True)


def _percent_change(current: Decimal, previous: Decimal) -> float:
    if previous <= 0:
        return 0.0
    return float((current - previous) / previous * 100)


def growth_rate(buckets: Sequence[MonthlyBucket]) -> GrowthRate:
    """Compare the two most recent buckets; zero when there is nothing to compare."""

    if len(buckets) < 2:
        return GrowthRate()
    previous, current = buckets[-2], buckets[-1]
    return GrowthRate(
        income=_percent_change(current.income, previous.income),
        expenses=_percent_change(current.expenses, previous.expenses),
        net=_percent_change(current.net, previous.net),
    )


def compute_summary(
    transactions: Iterable[Transaction],
    date_range: Optional[DateRange] = None,
    *,
    trend_months: int = DEFAULT_TREND_MONTHS,
    top_limit: int = DEFAULT_TOP_CATEGORIES,
) -> LedgerSummary:
    """Compute totals, trends and breakdowns for a ledger snapshot.

    ``average_transaction`` is net income divided by the transaction count,
    not the mean transaction size. Every division that could hit zero
    resolves to zero, so this is safe on an empty ledger.
    """

    filtered = filter_by_date_range(transactions, date_range)

    total_income = sum((as_money(t.amount) for t in filtered if t.is_income), ZERO)
    total_expenses = sum((as_money(t.amount) for t in filtered if t.is_expense), ZERO)
    net_income = total_income - total_expenses
    count = len(filtered)
    average = net_income / count if count else ZERO

    trends = monthly_buckets(filtered, limit=trend_months)
    breakdown = category_breakdown(filtered, grand_total=total_income + total_expenses)

    trend_points = (
        [TrendPoint(b.month, b.income, b.expenses, b.net) for b in trends]
        if len(trends) >= 2
        else []
    )

    logger.debug(
        "Computed ledger summary",
        extra={"transactions": count, "months": len(trends), "categories": len(breakdown)},
    )

    return LedgerSummary(
        total_income=total_income,
        total_expenses=total_expenses,
        net_income=net_income,
        transaction_count=count,
        average_transaction=average,
        monthly_trends=trends,
        category_breakdown=breakdown,
        top_categories=breakdown[:top_limit],
        growth_rate=growth_rate(trends),
        trends=trend_points,
    )
