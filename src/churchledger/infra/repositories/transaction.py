"""SQLModel implementation of the ledger store."""

from __future__ import annotations

import logging
from typing import Any, Callable, ContextManager, Iterable, Optional

from sqlmodel import Session, select

from ...domain.repositories.ledger import SnapshotListener
from ...errors import TransactionNotFoundError
from ...models.transaction import Transaction, TransactionType, to_cents

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], ContextManager[Session]]

_UPDATABLE_FIELDS = frozenset(
    {"date", "description", "category", "amount", "type", "donor_name", "donor_contact"}
)


class SQLModelLedgerStore:
    """Transaction store that pushes a fresh snapshot to listeners on every change."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory
        self._listeners: list[SnapshotListener] = []

    def snapshot(self) -> list[Transaction]:
        """Return every transaction ordered by date then id."""
        with self.session_factory() as session:
            statement = select(Transaction).order_by(Transaction.date, Transaction.id)  # type: ignore[arg-type]
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def get_by_id(self, transaction_id: int) -> Optional[Transaction]:
        """Retrieve a transaction by ID."""
        with self.session_factory() as session:
            obj = session.get(Transaction, transaction_id)
            if obj:
                session.expunge(obj)
            return obj

    def _insert(self, transaction: Transaction) -> Transaction:
        row = Transaction(
            date=transaction.date,
            description=transaction.description,
            category=transaction.category,
            amount=abs(to_cents(transaction.amount)),
            type=TransactionType(transaction.type),
            donor_name=transaction.donor_name,
            donor_contact=transaction.donor_contact,
        )
        with self.session_factory() as session:
            session.add(row)
            session.commit()
            session.refresh(row)
            session.expunge(row)
        return row

    def append(self, transaction: Transaction) -> Transaction:
        """Persist a new transaction; any id on the input is ignored."""
        created = self._insert(transaction)
        self._notify()
        return created

    def append_many(self, transactions: Iterable[Transaction]) -> list[Transaction]:
        """Append each transaction in its own session; earlier rows survive a later failure."""
        created: list[Transaction] = []
        try:
            for transaction in transactions:
                created.append(self._insert(transaction))
        finally:
            if created:
                logger.info(f"Appended {len(created)} transactions")
                self._notify()
        return created

    def update(self, transaction_id: int, **changes: Any) -> Transaction:
        """Apply a partial update; amounts are stored as absolute values."""
        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {sorted(unknown)}")

        with self.session_factory() as session:
            obj = session.get(Transaction, transaction_id)
            if obj is None:
                raise TransactionNotFoundError(transaction_id)
            for name, value in changes.items():
                if name == "amount":
                    value = abs(to_cents(value))
                elif name == "type":
                    value = TransactionType(value)
                setattr(obj, name, value)
            session.add(obj)
            session.commit()
            session.refresh(obj)
            session.expunge(obj)

        self._notify()
        return obj

    def delete(self, transaction_id: int) -> None:
        """Delete a transaction by ID."""
        with self.session_factory() as session:
            obj = session.get(Transaction, transaction_id)
            if obj is None:
                raise TransactionNotFoundError(transaction_id)
            session.delete(obj)
            session.commit()

        self._notify()

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register ``listener``; it receives the current snapshot immediately."""
        self._listeners.append(listener)
        listener(self.snapshot())

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        if not self._listeners:
            return
        current = self.snapshot()
        for listener in list(self._listeners):
            listener(list(current))
