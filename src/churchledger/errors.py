"""Exception hierarchy for the ledger core."""

from __future__ import annotations


class ChurchLedgerError(Exception):
    """Base class for all errors raised by churchledger."""


class IngestionError(ChurchLedgerError):
    """Raised when CSV text cannot be turned into transactions."""


class StructuralError(IngestionError):
    """The batch as a whole is unusable; no rows were processed."""


class RowError(IngestionError):
    """A single row failed validation; the rest of the batch continues."""


class TransactionNotFoundError(ChurchLedgerError, LookupError):
    """The ledger store has no transaction with the requested id."""

    def __init__(self, transaction_id: int):
        super().__init__(f"Transaction {transaction_id} not found")
        self.transaction_id = transaction_id
