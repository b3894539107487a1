"""
Portfolio accounting core.

Pure, synchronous functions over in-memory data: ledger replay,
cash derivation and valuation.
"""

from .cash import compute_cash
from .ledger import (
    compute_holdings,
    find_oversells,
    held_quantity,
    realized_pnl,
    replay_lots,
)
from .valuation import value_holding, value_portfolio

__all__ = [
    "compute_holdings",
    "replay_lots",
    "realized_pnl",
    "held_quantity",
    "find_oversells",
    "compute_cash",
    "value_holding",
    "value_portfolio",
]
