"""
Market quote model.
"""

from dataclasses import dataclass

from portfolio_engine.core.exceptions.portfolio import ValidationError


@dataclass(frozen=True)
class Quote:
    """Latest price for a symbol as returned by a quote provider."""

    price: float
    prev_close: float | None = None

    def __post_init__(self) -> None:
        if not self.price > 0:
            raise ValidationError(f"Quote price must be positive, got {self.price}")
