"""SQLModel table exports."""

from .budget import BudgetAllocation
from .member import Member
from .transaction import Transaction, TransactionType, as_money, to_cents

__all__ = [
    "BudgetAllocation",
    "Member",
    "Transaction",
    "TransactionType",
    "as_money",
    "to_cents",
]
