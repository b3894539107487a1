"""
Commands consumed by the cycle runner.

Every way of triggering an accounting cycle is one of these values, so
the runner never depends on where a trigger came from.
"""

from dataclasses import dataclass
from datetime import datetime

from portfolio_engine.core.enums import Side


@dataclass(frozen=True)
class AddTransaction:
    """Record a trade, then run a cycle.

    With no ``price`` the trade executes at the current market price;
    an explicit 0 is recorded as given. With no ``date`` it is dated now.
    """

    symbol: str
    side: Side | str
    qty: float
    price: float | None = None
    date: datetime | str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class SellAll:
    """Sell the entire holding of ``symbol`` at market, then run a cycle."""

    symbol: str


@dataclass(frozen=True)
class SnapshotNow:
    """Run a cycle on demand."""


@dataclass(frozen=True)
class Tick:
    """Periodic refresh trigger."""


Command = AddTransaction | SellAll | SnapshotNow | Tick
