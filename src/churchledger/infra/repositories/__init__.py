"""SQLModel-backed store implementations."""

from .budget import SQLModelBudgetStore
from .member import SQLModelMemberRepository
from .transaction import SQLModelLedgerStore

__all__ = [
    "SQLModelBudgetStore",
    "SQLModelLedgerStore",
    "SQLModelMemberRepository",
]
