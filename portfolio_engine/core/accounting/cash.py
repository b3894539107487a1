"""
Cash ledger.
"""

from collections.abc import Iterable

from portfolio_engine.core.models.transaction import Transaction


def compute_cash(transactions: Iterable[Transaction], starting_cash: float) -> float:
    """Derive the cash balance from starting capital and trade cash flows.

    BUYs debit ``qty * price`` and SELLs credit it. The fold is
    commutative, so transaction order does not matter.
    """
    cash = starting_cash
    for transaction in transactions:
        cash += transaction.cash_flow()
    return cash
