"""
Storage interfaces for the transaction log and the snapshot series.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from portfolio_engine.core.models.snapshot import Snapshot
from portfolio_engine.core.models.transaction import Transaction


class ITransactionStore(ABC):
    """Abstract interface for the append-only transaction log."""

    @abstractmethod
    def add_transaction(self, transaction: Transaction) -> Transaction:
        """Append a transaction and return it with its assigned id."""
        pass

    @abstractmethod
    def list_transactions(self) -> list[Transaction]:
        """Return the full log in insertion order."""
        pass

    @abstractmethod
    def transactions_for_symbol(self, symbol: str) -> list[Transaction]:
        """Return all transactions for one symbol."""
        pass

    @abstractmethod
    def transactions_between(self, start: datetime, end: datetime) -> list[Transaction]:
        """Return transactions dated within ``[start, end]``."""
        pass

    @abstractmethod
    def clear_transactions(self) -> None:
        """Delete every transaction."""
        pass


class ISnapshotStore(ABC):
    """Abstract interface for the snapshot time series."""

    @abstractmethod
    def put_snapshot(self, snapshot: Snapshot) -> None:
        """Insert or replace the snapshot with the same timestamp key."""
        pass

    @abstractmethod
    def list_snapshots(self) -> list[Snapshot]:
        """Return all snapshots in timestamp order."""
        pass

    @abstractmethod
    def clear_snapshots(self) -> None:
        """Delete every snapshot."""
        pass
