"""
Transaction domain model.

A transaction is one immutable entry in the append-only trade log.
"""

from dataclasses import dataclass, replace
from datetime import datetime

from portfolio_engine.core.enums import Side
from portfolio_engine.core.utils.validation import (
    validate_non_negative,
    validate_positive,
    validate_side,
    validate_symbol,
    validate_timestamp,
)


@dataclass(frozen=True)
class Transaction:
    """Represents an executed trade in the ledger.

    Values are validated and normalized on construction: the symbol is
    upper-cased, the side parsed, and the date converted to aware UTC.
    ``id`` is ``None`` until the transaction store assigns one.
    """

    symbol: str
    side: Side
    qty: float
    price: float
    date: datetime
    notes: str | None = None
    id: int | None = None

    def __post_init__(self) -> None:
        """Validate and normalize transaction data after initialization."""
        object.__setattr__(self, "symbol", validate_symbol(self.symbol))
        object.__setattr__(self, "side", validate_side(self.side))
        object.__setattr__(self, "qty", validate_positive(self.qty, "qty"))
        object.__setattr__(self, "price", validate_non_negative(self.price, "price"))
        object.__setattr__(self, "date", validate_timestamp(self.date))
        if self.notes is not None and not self.notes.strip():
            object.__setattr__(self, "notes", None)

    def notional_value(self) -> float:
        """Calculate the notional value of the trade."""
        return self.qty * self.price

    def cash_flow(self) -> float:
        """Signed effect of this trade on the cash balance."""
        return self.side.cash_sign * self.notional_value()

    def with_id(self, transaction_id: int) -> "Transaction":
        """Return a copy carrying the id assigned by storage."""
        return replace(self, id=transaction_id)
