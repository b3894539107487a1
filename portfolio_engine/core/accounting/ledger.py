"""
Ledger replay engine.

Folds the transaction log into per-symbol holdings using the
moving-average cost method. Every function here is pure: the input
sequence is never mutated and the working map is local to the call.
"""

from collections.abc import Iterable

from portfolio_engine.core.constants import QTY_EPSILON
from portfolio_engine.core.enums import Side
from portfolio_engine.core.models.holding import Holding, Lot
from portfolio_engine.core.models.transaction import Transaction
from portfolio_engine.core.types.financial import is_effectively_zero


def _chronological(transactions: Iterable[Transaction]) -> list[Transaction]:
    # sorted() is stable: equal dates keep their input order
    return sorted(transactions, key=lambda t: t.date)


def _apply(lot: Lot, transaction: Transaction) -> float:
    """Apply one transaction to a lot and return the cost basis removed."""
    removed = 0.0
    if transaction.side == Side.BUY:
        lot.cost += transaction.qty * transaction.price
    else:
        removed = min(max(lot.qty, 0.0), transaction.qty) * lot.average_cost()
        lot.cost -= removed
    lot.qty += transaction.side.sign * transaction.qty

    if is_effectively_zero(lot.qty):
        lot.qty = 0.0
        lot.cost = 0.0
    return removed


def replay_lots(transactions: Iterable[Transaction]) -> dict[str, Lot]:
    """Replay the log and return the raw per-symbol accumulators.

    Unlike ``compute_holdings`` this keeps flat and oversold symbols, so
    callers can inspect a negative accumulator.

    Args:
        transactions: Transactions in any order

    Returns:
        Mapping of symbol to Lot, in order of first appearance
    """
    lots: dict[str, Lot] = {}
    for transaction in _chronological(transactions):
        symbol = transaction.symbol.upper()
        _apply(lots.setdefault(symbol, Lot()), transaction)
    return lots


def compute_holdings(transactions: Iterable[Transaction]) -> list[Holding]:
    """Fold the transaction log into current holdings.

    Transactions are replayed in ascending ``date`` order; ties keep
    their relative input order. BUYs add their full trade cost to the
    basis; SELLs remove ``min(held, sold)`` units at the current average
    cost. Quantities within 1e-9 of zero snap both quantity and cost to
    zero. Symbols whose quantity ends at or below zero are omitted.

    Args:
        transactions: Transactions in any order

    Returns:
        Holdings with positive quantity, in order of first appearance
    """
    return [
        Holding(symbol=symbol, qty=lot.qty, avg_cost=lot.average_cost())
        for symbol, lot in replay_lots(transactions).items()
        if lot.qty > 0
    ]


def realized_pnl(transactions: Iterable[Transaction]) -> float:
    """Total realized P&L under the moving-average method.

    Each SELL realizes its proceeds minus the cost basis it removed.
    """
    lots: dict[str, Lot] = {}
    realized = 0.0
    for transaction in _chronological(transactions):
        lot = lots.setdefault(transaction.symbol.upper(), Lot())
        removed = _apply(lot, transaction)
        if transaction.side == Side.SELL:
            realized += transaction.notional_value() - removed
    return realized


def find_oversells(transactions: Iterable[Transaction]) -> list[tuple[Transaction, float]]:
    """Find SELLs that exceed the quantity held when they execute.

    Returns:
        ``(transaction, held_before)`` pairs in replay order
    """
    lots: dict[str, Lot] = {}
    oversells: list[tuple[Transaction, float]] = []
    for transaction in _chronological(transactions):
        lot = lots.setdefault(transaction.symbol.upper(), Lot())
        if transaction.side == Side.SELL and transaction.qty > lot.qty + QTY_EPSILON:
            oversells.append((transaction, lot.qty))
        _apply(lot, transaction)
    return oversells


def held_quantity(transactions: Iterable[Transaction], symbol: str) -> float:
    """Signed quantity of ``symbol`` after replaying the log."""
    lot = replay_lots(transactions).get(symbol.upper())
    return lot.qty if lot is not None else 0.0
