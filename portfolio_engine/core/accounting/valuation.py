"""
Valuation service.

Combines holdings, whatever quotes are available and the cash balance
into a point-in-time portfolio valuation. Holdings without a quote are
valued at their cost basis, so they contribute no unrealized P&L and no
day change.
"""

from collections.abc import Iterable, Mapping

from portfolio_engine.core.models.holding import Holding
from portfolio_engine.core.models.quote import Quote
from portfolio_engine.core.models.valuation import HoldingValuation, PortfolioValuation
from portfolio_engine.core.types.financial import safe_percentage


def value_holding(holding: Holding, quote: Quote | None) -> HoldingValuation:
    """Value a single holding against an optional quote."""
    last_price = quote.price if quote is not None else holding.avg_cost
    if quote is not None and quote.prev_close is not None:
        prev_close = quote.prev_close
    else:
        prev_close = last_price

    value = holding.qty * last_price
    cost_basis = holding.cost_basis()
    unrealized_pl = value - cost_basis

    return HoldingValuation(
        symbol=holding.symbol,
        qty=holding.qty,
        avg_cost=holding.avg_cost,
        last_price=last_price,
        prev_close=prev_close,
        value=value,
        cost_basis=cost_basis,
        unrealized_pl=unrealized_pl,
        pl_pct=safe_percentage(unrealized_pl, cost_basis),
        day_change=holding.qty * (last_price - prev_close),
        priced=quote is not None,
    )


def value_portfolio(
    holdings: Iterable[Holding],
    quotes: Mapping[str, Quote],
    cash: float,
) -> PortfolioValuation:
    """Value the portfolio.

    Args:
        holdings: Current holdings
        quotes: Quotes by symbol; may be missing any symbol
        cash: Current cash balance

    Returns:
        PortfolioValuation with per-holding rows and aggregates
    """
    rows = tuple(value_holding(h, quotes.get(h.symbol)) for h in holdings)
    return PortfolioValuation(
        holdings=rows,
        cash=cash,
        total_value=sum((row.value for row in rows), 0.0),
        total_cost=sum((row.cost_basis for row in rows), 0.0),
        day_change=sum((row.day_change for row in rows), 0.0),
    )
