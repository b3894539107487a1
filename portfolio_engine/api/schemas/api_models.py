"""
Pydantic schemas for API request/response models.
"""

from dataclasses import asdict
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from portfolio_engine.app.cycle import CycleResult
from portfolio_engine.core.enums import Side
from portfolio_engine.core.models.snapshot import Snapshot
from portfolio_engine.core.models.transaction import Transaction
from portfolio_engine.core.models.valuation import HoldingValuation, PortfolioValuation


class TransactionRequest(BaseModel):
    """Request model for recording a trade."""

    symbol: str = Field(..., min_length=1, description="Ticker symbol")
    side: Side = Field(..., description="BUY or SELL")
    qty: float = Field(..., gt=0, allow_inf_nan=False, description="Units traded")
    price: float | None = Field(
        default=None,
        ge=0,
        allow_inf_nan=False,
        description="Execution price; omit to trade at the market price",
    )
    date: datetime | None = Field(default=None, description="Trade time (default now)")
    notes: str | None = None

    @field_validator("side", mode="before")
    @classmethod
    def normalize_side(cls, v: object) -> object:
        """Accept sides in any case."""
        return v.strip().upper() if isinstance(v, str) else v


class TransactionResponse(BaseModel):
    """Response model for one ledger entry."""

    id: int | None
    symbol: str
    side: Side
    qty: float
    price: float
    date: datetime
    notes: str | None = None

    @classmethod
    def from_model(cls, transaction: Transaction) -> "TransactionResponse":
        return cls(
            id=transaction.id,
            symbol=transaction.symbol,
            side=transaction.side,
            qty=transaction.qty,
            price=transaction.price,
            date=transaction.date,
            notes=transaction.notes,
        )


class HoldingResponse(BaseModel):
    """Response model for a valued holding."""

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

    @classmethod
    def from_model(cls, row: HoldingValuation) -> "HoldingResponse":
        return cls(**asdict(row))


class ValuationResponse(BaseModel):
    """Response model for a portfolio valuation."""

    holdings: list[HoldingResponse]
    cash: float
    total_value: float
    total_cost: float
    unrealized_pl: float
    day_change: float
    portfolio_value: float

    @classmethod
    def from_model(cls, valuation: PortfolioValuation) -> "ValuationResponse":
        return cls(
            holdings=[HoldingResponse.from_model(h) for h in valuation.holdings],
            cash=valuation.cash,
            total_value=valuation.total_value,
            total_cost=valuation.total_cost,
            unrealized_pl=valuation.unrealized_pl,
            day_change=valuation.day_change,
            portfolio_value=valuation.portfolio_value,
        )


class SnapshotResponse(BaseModel):
    """Response model for one snapshot."""

    ts: datetime
    value: float

    @classmethod
    def from_model(cls, snapshot: Snapshot) -> "SnapshotResponse":
        return cls(ts=snapshot.ts, value=snapshot.value)


class CycleResponse(BaseModel):
    """Response model for a completed accounting cycle."""

    valuation: ValuationResponse
    snapshot: SnapshotResponse
    realized_pl: float
    priced_symbols: list[str]
    transaction: TransactionResponse | None = None

    @classmethod
    def from_result(cls, result: CycleResult) -> "CycleResponse":
        return cls(
            valuation=ValuationResponse.from_model(result.valuation),
            snapshot=SnapshotResponse.from_model(result.snapshot),
            realized_pl=result.realized_pl,
            priced_symbols=sorted(result.quotes),
            transaction=(
                TransactionResponse.from_model(result.transaction)
                if result.transaction is not None
                else None
            ),
        )
