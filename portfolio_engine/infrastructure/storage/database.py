"""
SQL storage for the transaction log and the snapshot series.

``PortfolioDatabase`` is an explicit handle: it must be opened before use
and is passed to whatever needs storage, instead of living in a
module-level global.
"""

from datetime import UTC, datetime

from loguru import logger
from sqlalchemy import DateTime, Engine, Float, Integer, String, create_engine, delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker
from sqlalchemy.pool import StaticPool

from portfolio_engine.core.enums import StoreState
from portfolio_engine.core.exceptions.portfolio import StorageError
from portfolio_engine.core.interfaces.storage import ISnapshotStore, ITransactionStore
from portfolio_engine.core.models.snapshot import Snapshot
from portfolio_engine.core.models.transaction import Transaction
from portfolio_engine.core.utils.validation import validate_symbol, validate_timestamp


class Base(DeclarativeBase):
    """Declarative base for SQLAlchemy models."""

    pass


class TransactionRow(Base):
    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    symbol: Mapped[str] = mapped_column(String(32), index=True)
    side: Mapped[str] = mapped_column(String(4))
    qty: Mapped[float] = mapped_column(Float)
    price: Mapped[float] = mapped_column(Float)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)
    notes: Mapped[str | None] = mapped_column(String, nullable=True)

    def to_model(self) -> Transaction:
        return Transaction(
            id=self.id,
            symbol=self.symbol,
            side=self.side,
            qty=self.qty,
            price=self.price,
            date=_as_utc(self.date),
            notes=self.notes,
        )


class SnapshotRow(Base):
    __tablename__ = "snapshots"

    ts: Mapped[str] = mapped_column(String(40), primary_key=True)
    value: Mapped[float] = mapped_column(Float)

    def to_model(self) -> Snapshot:
        return Snapshot(ts=self.ts, value=self.value)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class PortfolioDatabase(ITransactionStore, ISnapshotStore):
    """Storage handle with an explicit ``open -> ready -> closed`` lifecycle.

    Usable as a context manager. Every read or write on a handle that is
    not ready raises StorageError, as does any database failure; nothing
    is retried.

    Args:
        url: SQLAlchemy database URL; ``sqlite://`` keeps everything in memory
    """

    def __init__(self, url: str = "sqlite://") -> None:
        self.url = url
        self.state = StoreState.CLOSED
        self._engine: Engine | None = None
        self._session_factory: sessionmaker[Session] | None = None

    def __enter__(self) -> "PortfolioDatabase":
        return self.open()

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def is_ready(self) -> bool:
        return self.state == StoreState.READY

    def open(self) -> "PortfolioDatabase":
        """Connect and create the tables if needed."""
        if self.is_ready:
            return self
        kwargs: dict = {}
        if self.url in ("sqlite://", "sqlite:///:memory:"):
            # one shared connection, otherwise each session sees an empty database
            kwargs = {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
        try:
            self._engine = create_engine(self.url, **kwargs)
            Base.metadata.create_all(self._engine)
        except SQLAlchemyError as e:
            self._engine = None
            raise StorageError(f"Failed to open database {self.url}: {e}") from e
        self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        self.state = StoreState.READY
        logger.debug(f"Opened portfolio database {self.url}")
        return self

    def close(self) -> None:
        """Release the connection pool. Closing twice is harmless."""
        if self._engine is not None:
            self._engine.dispose()
        self._engine = None
        self._session_factory = None
        self.state = StoreState.CLOSED

    def _session(self) -> Session:
        if not self.is_ready or self._session_factory is None:
            raise StorageError(f"Database is {self.state}; call open() first")
        return self._session_factory()

    # Transactions
    def add_transaction(self, transaction: Transaction) -> Transaction:
        row = TransactionRow(
            symbol=transaction.symbol,
            side=transaction.side.value,
            qty=transaction.qty,
            price=transaction.price,
            date=transaction.date,
            notes=transaction.notes,
        )
        try:
            with self._session() as session, session.begin():
                session.add(row)
                session.flush()
                transaction_id = row.id
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to add transaction: {e}") from e
        logger.debug(f"Stored transaction #{transaction_id}: {transaction.side} {transaction.symbol}")
        return transaction.with_id(transaction_id)

    def list_transactions(self) -> list[Transaction]:
        return self._select_transactions(select(TransactionRow).order_by(TransactionRow.id))

    def transactions_for_symbol(self, symbol: str) -> list[Transaction]:
        stmt = (
            select(TransactionRow)
            .where(TransactionRow.symbol == validate_symbol(symbol))
            .order_by(TransactionRow.id)
        )
        return self._select_transactions(stmt)

    def transactions_between(self, start: datetime, end: datetime) -> list[Transaction]:
        stmt = (
            select(TransactionRow)
            .where(TransactionRow.date >= validate_timestamp(start, "start"))
            .where(TransactionRow.date <= validate_timestamp(end, "end"))
            .order_by(TransactionRow.date, TransactionRow.id)
        )
        return self._select_transactions(stmt)

    def clear_transactions(self) -> None:
        self._clear(TransactionRow)

    def _select_transactions(self, stmt) -> list[Transaction]:
        try:
            with self._session() as session:
                return [row.to_model() for row in session.scalars(stmt)]
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to read transactions: {e}") from e

    # Snapshots
    def put_snapshot(self, snapshot: Snapshot) -> None:
        try:
            with self._session() as session, session.begin():
                session.merge(SnapshotRow(ts=snapshot.key, value=snapshot.value))
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to store snapshot {snapshot.key}: {e}") from e

    def list_snapshots(self) -> list[Snapshot]:
        try:
            with self._session() as session:
                rows = session.scalars(select(SnapshotRow).order_by(SnapshotRow.ts))
                return [row.to_model() for row in rows]
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to read snapshots: {e}") from e

    def clear_snapshots(self) -> None:
        self._clear(SnapshotRow)

    def _clear(self, model: type[Base]) -> None:
        try:
            with self._session() as session, session.begin():
                session.execute(delete(model))
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to clear {model.__tablename__}: {e}") from e
        logger.info(f"Cleared {model.__tablename__}")
