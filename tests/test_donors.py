"""Tests for donor profiles, giving trends and retention."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from churchledger.models import Member
from churchledger.services.clock import FixedClock, shift_months
from churchledger.services.donors import build_donor_report
from tests.conftest import expense, income


def _ledger():
    return [
        income("2024-01-07", 100, donor_name="Grace Lee", donor_contact="555-0100"),
        income("2024-02-04", 100, donor_name="Grace Lee", category="Missions"),
        income("2024-02-18", 50, donor_name="Grace Lee"),
        income("2024-04-07", 100, donor_name="Grace Lee"),
        income("2024-05-05", 700, donor_name="Samuel Okafor"),
        income("2024-06-02", 40),
        income("2024-06-09", 20, donor_name=""),
        expense("2024-06-10", 5000, donor_name="Vendor Co"),
    ]


class TestProfiles:
    """Per-donor statistics."""

    def test_only_income_is_grouped(self, fixed_clock):
        report = build_donor_report(_ledger(), clock=fixed_clock)

        names = [p.name for p in report.profiles]
        assert "Vendor Co" not in names
        assert sorted(names) == ["Anonymous", "Grace Lee", "Samuel Okafor"]

    def test_profiles_sorted_by_total_given(self, fixed_clock):
        report = build_donor_report(_ledger(), clock=fixed_clock)

        assert [p.name for p in report.profiles] == ["Samuel Okafor", "Grace Lee", "Anonymous"]

    def test_profile_statistics(self, fixed_clock):
        grace = next(
            p for p in build_donor_report(_ledger(), clock=fixed_clock).profiles if p.name == "Grace Lee"
        )

        assert grace.total_given == Decimal("350")
        assert grace.transaction_count == 4
        assert grace.first_gift_date == date(2024, 1, 7)
        assert grace.last_gift_date == date(2024, 4, 7)
        assert grace.categories == ["Tithes & Offerings", "Missions"]
        assert grace.monthly_giving == {
            "2024-01": Decimal("100"),
            "2024-02": Decimal("150"),
            "2024-04": Decimal("100"),
        }
        assert grace.contact == "555-0100"
        assert grace.average_gift == Decimal("87.5")

    def test_monthly_average_ignores_quiet_months(self, fixed_clock):
        """March had no gifts, so the mean is over three months, not four."""
        grace = next(
            p for p in build_donor_report(_ledger(), clock=fixed_clock).profiles if p.name == "Grace Lee"
        )

        assert grace.monthly_average == Decimal("350") / 3

    def test_regular_donor_needs_three_distinct_months(self, fixed_clock):
        profiles = {p.name: p for p in build_donor_report(_ledger(), clock=fixed_clock).profiles}

        assert profiles["Grace Lee"].is_regular is True
        assert profiles["Samuel Okafor"].is_regular is False

    def test_three_gifts_in_one_month_is_not_regular(self, fixed_clock):
        ledger = [income(f"2024-03-{d:02d}", 10, donor_name="Ruth") for d in (3, 10, 17)]

        profile = build_donor_report(ledger, clock=fixed_clock).profiles[0]

        assert profile.is_regular is False
        assert profile.monthly_average == Decimal("30")

    def test_blank_donor_names_group_as_anonymous(self, fixed_clock):
        anonymous = next(
            p for p in build_donor_report(_ledger(), clock=fixed_clock).profiles if p.name == "Anonymous"
        )

        assert anonymous.total_given == Decimal("60")
        assert anonymous.identity.is_anonymous
        assert anonymous.contact == ""

    def test_member_ids_attached_on_unique_name_match(self, fixed_clock):
        members = [Member(id=7, name="grace  lee", email="grace@example.com")]

        profiles = {
            p.name: p for p in build_donor_report(_ledger(), clock=fixed_clock, members=members).profiles
        }

        assert profiles["Grace Lee"].identity.member_id == 7
        assert profiles["Samuel Okafor"].identity.member_id is None


class TestAnalytics:
    """Congregation-level statistics driven by the injected clock."""

    def test_totals_and_average(self, fixed_clock):
        stats = build_donor_report(_ledger(), clock=fixed_clock).analytics

        assert stats.total_donors == 3
        assert stats.total_giving == Decimal("1110")
        assert stats.average_gift_size == Decimal("370")
        assert [p.name for p in stats.top_donors] == ["Samuel Okafor", "Grace Lee", "Anonymous"]

    def test_active_and_new_donors_use_clock(self, fixed_clock):
        stats = build_donor_report(_ledger(), clock=fixed_clock).analytics

        # 2024-06-15 minus six months is 2023-12-15: everyone gave since then
        assert stats.active_donors == 3
        assert stats.new_donors_this_month == 1

    def test_later_clock_changes_windows(self):
        stats = build_donor_report(_ledger(), clock=FixedClock(date(2024, 10, 20))).analytics

        # cutoff 2024-04-20: Grace's last gift (04-07) is too old
        assert stats.active_donors == 2
        assert stats.new_donors_this_month == 0

    def test_empty_ledger(self, fixed_clock):
        report = build_donor_report([], clock=fixed_clock)

        assert report.profiles == []
        assert report.analytics.total_donors == 0
        assert report.analytics.average_gift_size == 0
        assert report.analytics.giving_trends == []

    def test_giving_trends(self, fixed_clock):
        trends = build_donor_report(_ledger(), clock=fixed_clock).analytics.giving_trends

        assert [t.month for t in trends] == ["2024-01", "2024-02", "2024-04", "2024-05", "2024-06"]
        feb = trends[1]
        assert feb.amount == Decimal("150")
        assert feb.donor_count == 1
        assert trends[-1].donor_count == 1  # both June gifts are Anonymous

    def test_giving_trends_keep_last_twelve(self, fixed_clock):
        ledger = [income(f"{2022 + m // 12}-{m % 12 + 1:02d}-05", 5, donor_name="Ruth") for m in range(20)]

        trends = build_donor_report(ledger, clock=fixed_clock).analytics.giving_trends

        assert len(trends) == 12
        assert trends[-1].month == "2023-08"


class TestRetention:
    def test_retention_between_two_latest_months(self, fixed_clock):
        ledger = [
            income("2024-04-07", 10, donor_name="Ruth"),
            income("2024-04-07", 10, donor_name="Naomi"),
            income("2024-04-14", 10, donor_name="Boaz"),
            income("2024-05-05", 10, donor_name="Ruth"),
            income("2024-05-12", 10, donor_name="Naomi"),
            income("2024-05-12", 10, donor_name="Obed"),
        ]

        retention = build_donor_report(ledger, clock=fixed_clock).analytics.donor_retention

        assert (retention.retained, retention.lapsed, retention.new) == (2, 1, 1)

    def test_single_month_yields_zeroes(self, fixed_clock):
        ledger = [
            income("2024-05-05", 10, donor_name="Ruth"),
            income("2024-05-12", 10, donor_name="Naomi"),
        ]

        retention = build_donor_report(ledger, clock=fixed_clock).analytics.donor_retention

        assert (retention.retained, retention.lapsed, retention.new) == (0, 0, 0)


def test_shift_months_clamps_day():
    assert shift_months(date(2024, 8, 31), -6) == date(2024, 2, 29)
    assert shift_months(date(2024, 1, 15), -1) == date(2023, 12, 15)
    assert shift_months(date(2023, 11, 30), 3) == date(2024, 2, 29)
