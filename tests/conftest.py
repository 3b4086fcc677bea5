"""Pytest configuration and shared fixtures for ChurchLedger tests.

This module provides database fixtures, transaction builders, and store
fixtures for testing the engines and the SQLModel adapters without touching
a real data directory.
"""

from __future__ import annotations

import tempfile
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest
from sqlmodel import Session, SQLModel, create_engine

# Import all models to ensure they're registered with SQLModel metadata
from churchledger.infra.repositories import (
    SQLModelBudgetStore,
    SQLModelLedgerStore,
    SQLModelMemberRepository,
)
from churchledger.models import BudgetAllocation, Member, Transaction, TransactionType  # noqa: F401
from churchledger.services.clock import FixedClock

# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Return a factory of sessions usable as context managers."""

    def factory():
        return Session(db_engine, expire_on_commit=False)

    return factory


@pytest.fixture
def ledger_store(session_factory) -> SQLModelLedgerStore:
    return SQLModelLedgerStore(session_factory)


@pytest.fixture
def budget_store(session_factory) -> SQLModelBudgetStore:
    return SQLModelBudgetStore(session_factory)


@pytest.fixture
def member_repo(session_factory) -> SQLModelMemberRepository:
    return SQLModelMemberRepository(session_factory)


# =============================================================================
# Test Data Builders
# =============================================================================


@pytest.fixture
def fixed_clock() -> FixedClock:
    """A clock pinned to 15 June 2024."""
    return FixedClock(date(2024, 6, 15))


def make_tx(
    day: str,
    amount: str | int | Decimal,
    *,
    type: TransactionType = TransactionType.INCOME,
    category: str = "Tithes & Offerings",
    description: str = "Test transaction",
    donor_name: str | None = None,
    donor_contact: str | None = None,
) -> Transaction:
    """Build an unsaved transaction from an ISO date string and amount."""

    return Transaction(
        date=date.fromisoformat(day),
        description=description,
        category=category,
        amount=Decimal(str(amount)),
        type=type,
        donor_name=donor_name,
        donor_contact=donor_contact,
    )


def income(day: str, amount, **kwargs) -> Transaction:
    return make_tx(day, amount, type=TransactionType.INCOME, **kwargs)


def expense(day: str, amount, **kwargs) -> Transaction:
    kwargs.setdefault("category", "Utilities")
    return make_tx(day, amount, type=TransactionType.EXPENSE, **kwargs)


def assert_float_equal(actual: float, expected: float, tolerance: float = 1e-6) -> None:
    """Assert two floats are equal within a tolerance."""
    assert abs(actual - expected) <= tolerance, f"{actual} != {expected} (tolerance {tolerance})"
