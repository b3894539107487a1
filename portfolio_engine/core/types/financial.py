"""
Financial helpers for portfolio accounting.

All amounts are plain floats. Quantities and cost basis accumulate float
noise over long transaction logs, so comparisons against zero go through
``is_effectively_zero`` and percentages through ``safe_percentage``.
"""

import math

from portfolio_engine.core.constants import QTY_EPSILON

ZERO = 0.0
HUNDRED = 100.0

MONEY_DECIMALS = 2
QTY_DECIMALS = 4


def is_effectively_zero(value: float, tolerance: float = QTY_EPSILON) -> bool:
    """Check whether a value is zero within tolerance.

    Examples:
        >>> is_effectively_zero(0.1 + 0.2 - 0.3)
        True
        >>> is_effectively_zero(0.001)
        False
    """
    return abs(value) < tolerance


def safe_percentage(numerator: float, denominator: float) -> float:
    """Return ``numerator / denominator * 100``, or 0 when undefined.

    A zero denominator or a non-finite ratio yields 0.0 rather than
    NaN or infinity.

    Examples:
        >>> safe_percentage(25.0, 100.0)
        25.0
        >>> safe_percentage(10.0, 0.0)
        0.0
    """
    if denominator == ZERO:
        return ZERO
    pct = numerator / denominator * HUNDRED
    return pct if math.isfinite(pct) else ZERO


def round_qty(qty: float) -> float:
    """Round a quantity for display."""
    return round(qty, QTY_DECIMALS)


def format_money(amount: float) -> str:
    """Format an amount as US dollars, e.g. ``$1,234.50``."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.{MONEY_DECIMALS}f}"


def format_signed_money(amount: float) -> str:
    """Format an amount with an explicit sign, e.g. ``+$12.00``."""
    return f"+{format_money(amount)}" if amount >= 0 else format_money(amount)
