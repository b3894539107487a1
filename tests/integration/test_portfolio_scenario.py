"""
End-to-end scenario: trades recorded through the cycle runner against a
file-backed database, valued with stubbed quotes.
"""

from pathlib import Path

import pytest
from conftest import FrozenClock, RecordingGate, StubProvider

from portfolio_engine.app.commands import AddTransaction, SellAll, Tick
from portfolio_engine.app.cycle import PortfolioCycle
from portfolio_engine.config import Settings
from portfolio_engine.core.accounting import compute_cash, compute_holdings
from portfolio_engine.core.models.quote import Quote
from portfolio_engine.infrastructure.export import export_csv
from portfolio_engine.infrastructure.storage import PortfolioDatabase


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    return f"sqlite:///{tmp_path / 'scenario.db'}"


class TestTradingScenario:
    def test_should_track_holdings_cash_and_snapshots(
        self, database_url: str, clock: FrozenClock
    ) -> None:
        settings = Settings(api_key="demo", starting_cash=100000.0, database_url=database_url)
        provider = StubProvider({"AAA": Quote(price=72.0, prev_close=71.0)})

        with PortfolioDatabase(database_url) as db:
            cycle = PortfolioCycle(
                db,
                lambda: settings,
                gate=RecordingGate(),
                provider_factory=lambda s: provider,
                clock=clock,
            )

            cycle.run(AddTransaction(symbol="AAA", side="BUY", qty=10, price=50.0))
            clock.advance(days=1)
            result = cycle.run(AddTransaction(symbol="AAA", side="BUY", qty=5, price=60.0))

            [holding] = result.holdings
            assert holding.qty == 15
            assert holding.avg_cost == pytest.approx(53.3333, rel=1e-4)
            assert result.valuation.cash == pytest.approx(99200.0)

            clock.advance(days=1)
            result = cycle.run(AddTransaction(symbol="AAA", side="SELL", qty=5, price=70.0))

            [holding] = result.holdings
            assert holding.qty == 10
            assert holding.avg_cost == pytest.approx(53.3333, rel=1e-4)
            assert result.valuation.cash == pytest.approx(99550.0)
            assert result.valuation.total_value == pytest.approx(720.0)
            assert result.snapshot.value == pytest.approx(100270.0)
            assert result.realized_pl == pytest.approx(350.0 - 800.0 / 3)

            clock.advance(days=1)
            result = cycle.run(SellAll(symbol="AAA"))
            assert result.valuation.holdings == ()
            assert result.valuation.cash == pytest.approx(100270.0)

        with PortfolioDatabase(database_url) as db:
            transactions = db.list_transactions()
            snapshots = db.list_snapshots()

        assert [t.id for t in transactions] == [1, 2, 3, 4]
        assert compute_holdings(transactions) == []
        assert compute_cash(transactions, 100000.0) == pytest.approx(100270.0)
        assert [s.value for s in snapshots] == pytest.approx(
            [100220.0, 100280.0, 100270.0, 100270.0]
        )
        assert export_csv(transactions, snapshots).count("Sell all @ market (quick)") == 1

    def test_should_survive_quote_outage(self, database_url: str, clock: FrozenClock) -> None:
        settings = Settings(api_key="demo", database_url=database_url)
        provider = StubProvider({"AAA": Quote(price=10.0)})

        with PortfolioDatabase(database_url) as db:
            cycle = PortfolioCycle(
                db,
                lambda: settings,
                gate=RecordingGate(),
                provider_factory=lambda s: provider,
                clock=clock,
            )
            cycle.run(AddTransaction(symbol="AAA", side="BUY", qty=3, price=8.0))
            provider.failing.add("AAA")
            clock.advance(minutes=1)

            result = cycle.run(Tick())

        assert result.valuation.get("AAA").last_price == 8.0
        assert result.snapshot.value == pytest.approx(100000.0)
