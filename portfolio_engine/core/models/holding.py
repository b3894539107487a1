"""
Holding and lot domain models.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Holding:
    """A currently held position derived from the transaction log.

    ``avg_cost`` is the moving-average cost basis per unit.
    """

    symbol: str
    qty: float
    avg_cost: float

    def cost_basis(self) -> float:
        """Total cost basis of the units held."""
        return self.qty * self.avg_cost


@dataclass
class Lot:
    """Working accumulator for one symbol during replay.

    ``qty`` is signed; an oversold symbol goes negative.
    """

    qty: float = 0.0
    cost: float = 0.0

    def average_cost(self) -> float:
        """Cost per unit, or 0.0 when nothing is held."""
        return self.cost / self.qty if self.qty > 0 else 0.0
