"""
Portfolio API endpoints.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, Request, Response

from portfolio_engine.api.schemas.api_models import (
    CycleResponse,
    SnapshotResponse,
    TransactionRequest,
    TransactionResponse,
    ValuationResponse,
)
from portfolio_engine.app.commands import AddTransaction, SellAll, SnapshotNow, Tick
from portfolio_engine.app.cycle import PortfolioCycle
from portfolio_engine.infrastructure.export import export_csv

router = APIRouter()


def get_cycle(request: Request) -> PortfolioCycle:
    """Return the cycle runner attached to the application."""
    return request.app.state.cycle


@router.get("/portfolio", response_model=ValuationResponse)
def get_portfolio(cycle: PortfolioCycle = Depends(get_cycle)) -> ValuationResponse:
    """Current holdings valued at cost basis, without fetching quotes."""
    return ValuationResponse.from_model(cycle.preview())


@router.post("/portfolio/refresh", response_model=CycleResponse)
def refresh_portfolio(cycle: PortfolioCycle = Depends(get_cycle)) -> CycleResponse:
    """Fetch quotes, value the portfolio and record a snapshot."""
    return CycleResponse.from_result(cycle.run(Tick()))


@router.delete("/portfolio", response_model=CycleResponse)
def reset_portfolio(cycle: PortfolioCycle = Depends(get_cycle)) -> CycleResponse:
    """Delete all transactions and snapshots."""
    return CycleResponse.from_result(cycle.reset())


@router.get("/transactions", response_model=list[TransactionResponse])
def list_transactions(
    symbol: str | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
    cycle: PortfolioCycle = Depends(get_cycle),
) -> list[TransactionResponse]:
    """Transactions, newest first, optionally filtered by symbol and date range."""
    if start is not None or end is not None:
        transactions = cycle.db.transactions_between(start or datetime.min, end or datetime.max)
        if symbol is not None:
            transactions = [t for t in transactions if t.symbol == symbol.strip().upper()]
    elif symbol is not None:
        transactions = cycle.db.transactions_for_symbol(symbol)
    else:
        transactions = cycle.db.list_transactions()
    transactions = sorted(transactions, key=lambda t: t.date, reverse=True)
    return [TransactionResponse.from_model(t) for t in transactions]


@router.post("/transactions", response_model=CycleResponse, status_code=201)
def add_transaction(
    payload: TransactionRequest, cycle: PortfolioCycle = Depends(get_cycle)
) -> CycleResponse:
    """Record a trade and run a cycle."""
    command = AddTransaction(
        symbol=payload.symbol,
        side=payload.side,
        qty=payload.qty,
        price=payload.price,
        date=payload.date,
        notes=payload.notes,
    )
    return CycleResponse.from_result(cycle.run(command))


@router.post("/positions/{symbol}/sell-all", response_model=CycleResponse, status_code=201)
def sell_all(symbol: str, cycle: PortfolioCycle = Depends(get_cycle)) -> CycleResponse:
    """Sell the whole holding of ``symbol`` at the market price."""
    return CycleResponse.from_result(cycle.run(SellAll(symbol=symbol)))


@router.get("/snapshots", response_model=list[SnapshotResponse])
def list_snapshots(cycle: PortfolioCycle = Depends(get_cycle)) -> list[SnapshotResponse]:
    """Recorded portfolio values in time order."""
    return [SnapshotResponse.from_model(s) for s in cycle.recorder.history()]


@router.post("/snapshots", response_model=CycleResponse, status_code=201)
def snapshot_now(cycle: PortfolioCycle = Depends(get_cycle)) -> CycleResponse:
    """Run a cycle and record a snapshot now."""
    return CycleResponse.from_result(cycle.run(SnapshotNow()))


@router.get("/export")
def export(cycle: PortfolioCycle = Depends(get_cycle)) -> Response:
    """Download transactions and snapshots as CSV."""
    content = export_csv(cycle.db.list_transactions(), cycle.db.list_snapshots())
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="portfolio_export.csv"'},
    )
