"""Donor profiles, giving trends and retention built from income transactions."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable

from ..models.member import Member
from ..models.transaction import ZERO, Transaction, as_money
from .clock import Clock, shift_months
from .identity import DonorIdentity, donor_display_name, resolve_donor_identity

logger = logging.getLogger(__name__)

REGULAR_DONOR_MONTHS = 3
DEFAULT_ACTIVE_MONTHS = 6
DEFAULT_TREND_MONTHS = 12
DEFAULT_TOP_DONORS = 10


@dataclass(frozen=True, slots=True)
class DonorProfile:
    """Giving history for one donor identity."""

    identity: DonorIdentity
    contact: str
    total_given: Decimal
    transaction_count: int
    first_gift_date: date
    last_gift_date: date
    categories: list[str]
    monthly_giving: dict[str, Decimal]
    monthly_average: Decimal
    is_regular: bool

    @property
    def name(self) -> str:
        return self.identity.display_name

    @property
    def average_gift(self) -> Decimal:
        return self.total_given / self.transaction_count


@dataclass(frozen=True, slots=True)
class GivingTrend:
    month: str
    amount: Decimal
    donor_count: int


@dataclass(frozen=True, slots=True)
class DonorRetention:
    """Donor movement between the two most recent giving months."""

    retained: int = 0
    lapsed: int = 0
    new: int = 0


@dataclass(frozen=True, slots=True)
class DonorAnalytics:
    total_donors: int = 0
    active_donors: int = 0
    new_donors_this_month: int = 0
    average_gift_size: Decimal = ZERO
    total_giving: Decimal = ZERO
    top_donors: list[DonorProfile] = field(default_factory=list)
    giving_trends: list[GivingTrend] = field(default_factory=list)
    donor_retention: DonorRetention = field(default_factory=DonorRetention)


@dataclass(frozen=True, slots=True)
class DonorReport:
    profiles: list[DonorProfile] = field(default_factory=list)
    analytics: DonorAnalytics = field(default_factory=DonorAnalytics)


def _build_profile(identity: DonorIdentity, gifts: list[Transaction]) -> DonorProfile:
    ordered = sorted(gifts, key=lambda t: t.date)

    monthly: dict[str, Decimal] = {}
    categories: list[str] = []
    for gift in ordered:
        monthly[gift.month] = monthly.get(gift.month, ZERO) + as_money(gift.amount)
        if gift.category not in categories:
            categories.append(gift.category)

    total = sum((as_money(g.amount) for g in ordered), ZERO)
    # Mean over months with activity only; quiet months are absent, not zero.
    monthly_average = sum(monthly.values(), ZERO) / len(monthly)
    contact = next((g.donor_contact for g in ordered if g.donor_contact), "")

    return DonorProfile(
        identity=identity,
        contact=contact,
        total_given=total,
        transaction_count=len(ordered),
        first_gift_date=ordered[0].date,
        last_gift_date=ordered[-1].date,
        categories=categories,
        monthly_giving=monthly,
        monthly_average=monthly_average,
        is_regular=len(monthly) >= REGULAR_DONOR_MONTHS,
    )


def giving_trends(
    donations: Iterable[Transaction], *, limit: int = DEFAULT_TREND_MONTHS
) -> list[GivingTrend]:
    """Monthly giving totals and distinct donor counts, latest ``limit`` months."""

    amounts: dict[str, Decimal] = {}
    donors: dict[str, set[str]] = {}
    for gift in donations:
        amounts[gift.month] = amounts.get(gift.month, ZERO) + as_money(gift.amount)
        donors.setdefault(gift.month, set()).add(donor_display_name(gift.donor_name))

    trends = [
        GivingTrend(month=month, amount=amounts[month], donor_count=len(donors[month]))
        for month in sorted(amounts)
    ]
    return trends[-limit:] if limit > 0 else []


def donor_retention(
    donations: Iterable[Transaction], trends: list[GivingTrend]
) -> DonorRetention:
    """Compare who gave in the latest trend month against the month before it."""

    if len(trends) < 2:
        return DonorRetention()

    previous_month, current_month = trends[-2].month, trends[-1].month
    previous: set[str] = set()
    current: set[str] = set()
    for gift in donations:
        if gift.month == current_month:
            current.add(donor_display_name(gift.donor_name))
        elif gift.month == previous_month:
            previous.add(donor_display_name(gift.donor_name))

    return DonorRetention(
        retained=len(current & previous),
        lapsed=len(previous - current),
        new=len(current - previous),
    )


def build_donor_report(
    transactions: Iterable[Transaction],
    *,
    clock: Clock,
    members: Iterable[Member] = (),
    active_months: int = DEFAULT_ACTIVE_MONTHS,
    trend_months: int = DEFAULT_TREND_MONTHS,
    top_limit: int = DEFAULT_TOP_DONORS,
) -> DonorReport:
    """Group income by donor and derive profile and congregation-level stats.

    ``clock`` supplies "today" for the active-donor and new-this-month
    windows. ``members`` is only used to attach advisory member ids.
    """

    donations = [t for t in transactions if t.is_income]
    known_members = list(members)

    grouped: dict[str, list[Transaction]] = {}
    for gift in donations:
        grouped.setdefault(donor_display_name(gift.donor_name), []).append(gift)

    profiles = [
        _build_profile(resolve_donor_identity(name, known_members), gifts)
        for name, gifts in grouped.items()
    ]
    profiles.sort(key=lambda p: p.total_given, reverse=True)

    today = clock.today()
    active_cutoff = shift_months(today, -active_months)
    this_month = today.isoformat()[:7]

    total_giving = sum((p.total_given for p in profiles), ZERO)
    trends = giving_trends(donations, limit=trend_months)

    analytics = DonorAnalytics(
        total_donors=len(profiles),
        active_donors=sum(1 for p in profiles if p.last_gift_date >= active_cutoff),
        new_donors_this_month=sum(
            1 for p in profiles if p.first_gift_date.isoformat()[:7] == this_month
        ),
        average_gift_size=total_giving / len(profiles) if profiles else ZERO,
        total_giving=total_giving,
        top_donors=profiles[:top_limit],
        giving_trends=trends,
        donor_retention=donor_retention(donations, trends),
    )

    logger.debug(
        "Built donor report",
        extra={"donors": analytics.total_donors, "as_of": today.isoformat()},
    )
    return DonorReport(profiles=profiles, analytics=analytics)
