"""
Unit tests for the command line interface.
"""

import json
from pathlib import Path

import pytest

from portfolio_engine.cli import build_parser, format_valuation, main
from portfolio_engine.core.models.valuation import HoldingValuation, PortfolioValuation


@pytest.fixture
def settings_path(tmp_path: Path) -> Path:
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps({"database_url": f"sqlite:///{tmp_path / 'cli.db'}", "api_key": ""})
    )
    return path


def run(settings_path: Path, *argv: str) -> int:
    return main(["--settings", str(settings_path), *argv])


class TestParser:
    def test_should_upper_case_side(self) -> None:
        args = build_parser().parse_args(["add", "sell", "AAPL", "2", "--price", "10"])

        assert args.side == "SELL"
        assert args.qty == 2.0
        assert args.price == 10.0

    def test_should_reject_unknown_side(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["add", "hold", "AAPL", "1"])


class TestFormatValuation:
    def test_should_render_empty_portfolio(self) -> None:
        text = format_valuation(PortfolioValuation(cash=100000.0))

        assert "(no holdings)" in text
        assert "Portfolio value: $100,000.00" in text

    def test_should_mark_unpriced_holdings(self) -> None:
        row = HoldingValuation(
            symbol="AAA",
            qty=2,
            avg_cost=50.0,
            last_price=50.0,
            prev_close=50.0,
            value=100.0,
            cost_basis=100.0,
            unrealized_pl=0.0,
            pl_pct=0.0,
            day_change=0.0,
            priced=False,
        )
        text = format_valuation(PortfolioValuation(holdings=(row,), total_value=100.0))

        assert "n/a" in text
        assert "+$0.00" in text


class TestCommands:
    def test_should_record_and_list_transactions(
        self, settings_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert run(settings_path, "add", "buy", "aaa", "10", "--price", "50", "--notes", "x") == 0
        assert run(settings_path, "add", "SELL", "AAA", "4", "--price", "60") == 0
        capsys.readouterr()

        assert run(settings_path, "transactions") == 0
        out = capsys.readouterr().out

        assert out.startswith("2 transactions")
        assert "SELL 4 AAA @ $60.00" in out
        assert "(x)" in out

        assert run(settings_path, "transactions", "--symbol", "zzz") == 0
        assert capsys.readouterr().out.startswith("0 transactions")

    def test_should_show_valuation_and_realized_pl(
        self, settings_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        run(settings_path, "add", "BUY", "AAA", "10", "--price", "50")
        run(settings_path, "add", "SELL", "AAA", "4", "--price", "60")
        capsys.readouterr()

        assert run(settings_path, "show") == 0
        out = capsys.readouterr().out

        assert "Cash:            $99,740.00" in out
        assert "Realized P&L:    +$40.00" in out

    def test_should_preview_without_snapshot(
        self, settings_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert run(settings_path, "show", "--no-fetch") == 0
        assert run(settings_path, "history") == 0

        out = capsys.readouterr().out
        assert "Portfolio value: $100,000.00" in out
        assert "+00:00" not in out

    def test_should_record_snapshot_and_history(
        self, settings_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert run(settings_path, "snapshot") == 0
        assert run(settings_path, "history") == 0

        out = capsys.readouterr().out
        assert out.count("$100,000.00") == 2

    def test_should_fail_market_order_without_api_key(self, settings_path: Path) -> None:
        assert run(settings_path, "add", "BUY", "AAA", "1") == 1

    def test_should_fail_sell_all_for_unknown_symbol(self, settings_path: Path) -> None:
        assert run(settings_path, "sell-all", "AAA") == 1

    def test_should_fail_oversell(self, settings_path: Path) -> None:
        run(settings_path, "add", "BUY", "AAA", "1", "--price", "5")

        assert run(settings_path, "add", "SELL", "AAA", "2", "--price", "5") == 1

    def test_should_export_to_file(self, settings_path: Path, tmp_path: Path) -> None:
        run(settings_path, "add", "BUY", "AAA", "1", "--price", "5", "--notes", 'say "hi"')
        output = tmp_path / "export.csv"

        assert run(settings_path, "export", "--output", str(output)) == 0

        text = output.read_text(encoding="utf-8")
        assert text.startswith("Transactions\n")
        assert '"say ""hi"""' in text
        assert "\nSnapshots\nts,value\n" in text

    def test_should_export_to_stdout(
        self, settings_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert run(settings_path, "export", "--output", "-") == 0

        assert capsys.readouterr().out.startswith("Transactions\n")

    def test_should_require_confirmation_to_reset(
        self, settings_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        run(settings_path, "add", "BUY", "AAA", "1", "--price", "5")

        assert run(settings_path, "reset") == 1
        assert run(settings_path, "reset", "--yes") == 0
        capsys.readouterr()
        run(settings_path, "transactions")

        assert capsys.readouterr().out.startswith("0 transactions")


class TestConfigCommand:
    def test_should_update_and_redact_settings(
        self, settings_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert run(settings_path, "config", "--api-key", "secret", "--refresh-sec", "30") == 0

        out = capsys.readouterr().out
        stored = json.loads(settings_path.read_text())
        assert "api_key = ***" in out
        assert "refresh_sec = 30" in out
        assert stored["api_key"] == "secret"

    def test_should_show_settings_without_changes(
        self, settings_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert run(settings_path, "config") == 0

        assert "provider = alphavantage" in capsys.readouterr().out

    def test_should_reject_invalid_settings(self, settings_path: Path) -> None:
        assert run(settings_path, "config", "--refresh-sec", "0") == 1

    def test_should_fail_on_broken_settings_file(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.json"
        path.write_text("{broken")

        assert run(path, "show") == 1
