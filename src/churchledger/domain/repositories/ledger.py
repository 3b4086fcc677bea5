"""Ledger store protocol."""

from __future__ import annotations

from typing import Any, Callable, Iterable, Optional, Protocol

from ...models.transaction import Transaction

SnapshotListener = Callable[[list[Transaction]], None]


class LedgerStore(Protocol):
    """Owner of the transaction collection.

    Engines never talk to the store directly; they receive the list handed to
    ``subscribe`` listeners (or returned by ``snapshot``) and treat it as frozen.
    """

    def snapshot(self) -> list[Transaction]:
        """Return every transaction, detached from any session."""
        ...

    def get_by_id(self, transaction_id: int) -> Optional[Transaction]:
        """Retrieve a transaction by ID."""
        ...

    def append(self, transaction: Transaction) -> Transaction:
        """Persist a new transaction and return it with its assigned id."""
        ...

    def append_many(self, transactions: Iterable[Transaction]) -> list[Transaction]:
        """Append each transaction independently; there is no batch atomicity."""
        ...

    def update(self, transaction_id: int, **changes: Any) -> Transaction:
        """Apply a partial update."""
        ...

    def delete(self, transaction_id: int) -> None:
        """Delete a transaction by ID."""
        ...

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register for full snapshots after every change; returns an unsubscribe callable."""
        ...
