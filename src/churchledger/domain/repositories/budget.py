"""Budget store protocol."""

from __future__ import annotations

from decimal import Decimal
from typing import Mapping, Protocol


class BudgetStore(Protocol):
    """Monthly category allocations keyed by ``YYYY-MM``."""

    def get(self, month: str) -> dict[str, Decimal]:
        """Allocations for a month; empty when none are set."""
        ...

    def set(self, month: str, allocations: Mapping[str, object]) -> dict[str, Decimal]:
        """Replace a month's allocations, dropping entries that are zero or less."""
        ...

    def months(self) -> list[str]:
        """Months that have at least one allocation, ascending."""
        ...
