"""
Valuation result models.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class HoldingValuation:
    """Point-in-time valuation of a single holding.

    ``priced`` is False when no live quote was available and the cost
    basis was used as the last price.
    """

    symbol: str
    qty: float
    avg_cost: float
    last_price: float
    prev_close: float
    value: float
    cost_basis: float
    unrealized_pl: float
    pl_pct: float
    day_change: float
    priced: bool


@dataclass(frozen=True)
class PortfolioValuation:
    """Point-in-time valuation of the whole portfolio."""

    holdings: tuple[HoldingValuation, ...] = field(default_factory=tuple)
    cash: float = 0.0
    total_value: float = 0.0
    total_cost: float = 0.0
    day_change: float = 0.0

    @property
    def unrealized_pl(self) -> float:
        """Unrealized P&L across all holdings."""
        return self.total_value - self.total_cost

    @property
    def portfolio_value(self) -> float:
        """Cash plus market value of all holdings."""
        return self.cash + self.total_value

    def get(self, symbol: str) -> HoldingValuation | None:
        """Look up the valuation for a symbol."""
        wanted = symbol.upper()
        return next((h for h in self.holdings if h.symbol == wanted), None)
