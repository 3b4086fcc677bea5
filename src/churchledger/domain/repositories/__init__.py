"""Repository protocol definitions for domain layer."""

from .budget import BudgetStore
from .ledger import LedgerStore, SnapshotListener
from .member import MemberRepository

__all__ = [
    "BudgetStore",
    "LedgerStore",
    "MemberRepository",
    "SnapshotListener",
]
