"""
Core type definitions and utilities.
"""

# Re-export financial utilities for easy access
from .financial import (
    HUNDRED,
    MONEY_DECIMALS,
    QTY_DECIMALS,
    ZERO,
    format_money,
    format_signed_money,
    is_effectively_zero,
    round_qty,
    safe_percentage,
)

__all__ = [
    # Utility functions
    "is_effectively_zero",
    "safe_percentage",
    "round_qty",
    "format_money",
    "format_signed_money",
    # Constants
    "MONEY_DECIMALS",
    "QTY_DECIMALS",
    "ZERO",
    "HUNDRED",
]
