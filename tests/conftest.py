"""
Shared fixtures for the portfolio engine test suite.
"""

from collections.abc import Iterator
from datetime import UTC, datetime, timedelta

import pytest

from portfolio_engine.config import Settings
from portfolio_engine.core.enums import Side
from portfolio_engine.core.exceptions.portfolio import QuoteError
from portfolio_engine.core.models.quote import Quote
from portfolio_engine.core.models.transaction import Transaction
from portfolio_engine.infrastructure.storage import PortfolioDatabase

T0 = datetime(2024, 1, 2, 15, 30, tzinfo=UTC)


def make_tx(
    side: str,
    symbol: str,
    qty: float,
    price: float,
    day: int = 0,
    notes: str | None = None,
) -> Transaction:
    """Build a transaction dated ``day`` days after T0."""
    return Transaction(
        symbol=symbol,
        side=Side(side),
        qty=qty,
        price=price,
        date=T0 + timedelta(days=day),
        notes=notes,
    )


class StubProvider:
    """Quote provider serving canned quotes and recording calls."""

    name = "stub"

    def __init__(self, quotes: dict[str, Quote] | None = None, failing: set[str] | None = None):
        self.quotes = quotes or {}
        self.failing = failing or set()
        self.calls: list[tuple[str, str]] = []

    def fetch_quote(self, symbol: str, api_key: str) -> Quote:
        self.calls.append((symbol, api_key))
        if symbol in self.failing or symbol not in self.quotes:
            raise QuoteError(symbol, "stubbed failure")
        return self.quotes[symbol]


class RecordingGate:
    """Rate limiter that never blocks and counts acquisitions."""

    def __init__(self) -> None:
        self.acquired = 0

    def acquire(self) -> None:
        self.acquired += 1


class FrozenClock:
    """Clock returning a fixed instant that tests can advance."""

    def __init__(self, start: datetime = T0) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def db() -> Iterator[PortfolioDatabase]:
    """Open in-memory database."""
    with PortfolioDatabase("sqlite://") as database:
        yield database


@pytest.fixture
def settings() -> Settings:
    return Settings(api_key="demo", starting_cash=100000.0, database_url="sqlite://")


@pytest.fixture
def gate() -> RecordingGate:
    return RecordingGate()


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()
