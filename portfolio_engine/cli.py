#!/usr/bin/env python3
"""
Portfolio Engine command line.

Records trades, values the portfolio and keeps the snapshot history in
the database named by the settings file.
"""

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

from loguru import logger

from portfolio_engine.app.commands import AddTransaction, SellAll, SnapshotNow, Tick
from portfolio_engine.app.cycle import CycleResult, PortfolioCycle
from portfolio_engine.app.scheduler import RefreshScheduler
from portfolio_engine.core.exceptions.portfolio import PortfolioException
from portfolio_engine.core.models.valuation import PortfolioValuation
from portfolio_engine.core.types.financial import format_money, format_signed_money, round_qty
from portfolio_engine.core.utils.log_setup import configure_logging
from portfolio_engine.infrastructure.export import export_csv, write_export
from portfolio_engine.infrastructure.storage import PortfolioDatabase, SettingsStore
from portfolio_engine.infrastructure.storage.settings_store import DEFAULT_SETTINGS_PATH


def format_valuation(valuation: PortfolioValuation) -> str:
    """Render a valuation as a plain-text table with a summary."""
    lines = [
        f"{'SYMBOL':<8} {'QTY':>12} {'AVG COST':>12} {'LAST':>12} "
        f"{'VALUE':>14} {'P&L':>14} {'P&L %':>8}"
    ]
    for row in valuation.holdings:
        last = format_money(row.last_price) if row.priced else "n/a"
        lines.append(
            f"{row.symbol:<8} {round_qty(row.qty):>12g} {format_money(row.avg_cost):>12} "
            f"{last:>12} {format_money(row.value):>14} "
            f"{format_signed_money(row.unrealized_pl):>14} {row.pl_pct:>7.2f}%"
        )
    if not valuation.holdings:
        lines.append("(no holdings)")
    lines.extend(
        [
            "",
            f"Portfolio value: {format_money(valuation.portfolio_value)}",
            f"Unrealized P&L:  {format_signed_money(valuation.unrealized_pl)}",
            f"Cash:            {format_money(valuation.cash)}",
            f"Day change:      {format_signed_money(valuation.day_change)}",
        ]
    )
    return "\n".join(lines)


def _print_result(result: CycleResult) -> None:
    if result.transaction is not None:
        t = result.transaction
        print(f"Recorded #{t.id}: {t.side} {t.qty:g} {t.symbol} @ {format_money(t.price)}")
    print(format_valuation(result.valuation))
    print(f"Realized P&L:    {format_signed_money(result.realized_pl)}")


def _cmd_add(cycle: PortfolioCycle, args: argparse.Namespace) -> int:
    command = AddTransaction(
        symbol=args.symbol,
        side=args.side,
        qty=args.qty,
        price=args.price,
        date=args.date,
        notes=args.notes,
    )
    _print_result(cycle.run(command))
    return 0


def _cmd_sell_all(cycle: PortfolioCycle, args: argparse.Namespace) -> int:
    _print_result(cycle.run(SellAll(symbol=args.symbol)))
    return 0


def _cmd_snapshot(cycle: PortfolioCycle, args: argparse.Namespace) -> int:
    result = cycle.run(SnapshotNow())
    print(f"Snapshot {result.snapshot.key}: {format_money(result.snapshot.value)}")
    return 0


def _cmd_show(cycle: PortfolioCycle, args: argparse.Namespace) -> int:
    if args.no_fetch:
        print(format_valuation(cycle.preview()))
    else:
        _print_result(cycle.run(Tick()))
    return 0


def _cmd_transactions(cycle: PortfolioCycle, args: argparse.Namespace) -> int:
    if args.symbol:
        transactions = cycle.db.transactions_for_symbol(args.symbol)
    else:
        transactions = cycle.db.list_transactions()
    transactions = sorted(transactions, key=lambda t: t.date, reverse=True)
    count = len(transactions)
    print(f"{count} transaction{'' if count == 1 else 's'}")
    for t in transactions:
        line = f"{t.date.isoformat()}  {t.side:<4} {t.qty:g} {t.symbol} @ {format_money(t.price)}"
        print(f"{line}  ({t.notes})" if t.notes else line)
    return 0


def _cmd_history(cycle: PortfolioCycle, args: argparse.Namespace) -> int:
    for snapshot in cycle.recorder.history():
        print(f"{snapshot.key}  {format_money(snapshot.value)}")
    return 0


def _cmd_export(cycle: PortfolioCycle, args: argparse.Namespace) -> int:
    transactions = cycle.db.list_transactions()
    snapshots = cycle.db.list_snapshots()
    if args.output == "-":
        sys.stdout.write(export_csv(transactions, snapshots))
    else:
        path = write_export(args.output, transactions, snapshots)
        print(f"Exported {len(transactions)} transactions and {len(snapshots)} snapshots to {path}")
    return 0


def _cmd_reset(cycle: PortfolioCycle, args: argparse.Namespace) -> int:
    if not args.yes:
        logger.error("Reset deletes all transactions and snapshots; pass --yes to confirm")
        return 1
    _print_result(cycle.reset())
    return 0


def _cmd_watch(cycle: PortfolioCycle, args: argparse.Namespace) -> int:
    scheduler = RefreshScheduler(cycle)
    logger.info(
        f"Refreshing every {cycle.settings_source().effective_refresh_sec}s; Ctrl+C to stop"
    )
    try:
        scheduler.run_forever()
    except KeyboardInterrupt:
        logger.info("Stopped")
    return 0


def _cmd_config(store: SettingsStore, args: argparse.Namespace) -> int:
    changes = {
        "provider": args.provider,
        "api_key": args.api_key,
        "refresh_sec": args.refresh_sec,
        "starting_cash": args.starting_cash,
        "database_url": args.database_url,
    }
    if any(v is not None for v in changes.values()):
        settings = store.update(**changes)
    else:
        settings = store.load()
    for key, value in settings.redacted().items():
        print(f"{key} = {value}")
    return 0


CYCLE_COMMANDS = {
    "add": _cmd_add,
    "sell-all": _cmd_sell_all,
    "snapshot": _cmd_snapshot,
    "show": _cmd_show,
    "transactions": _cmd_transactions,
    "history": _cmd_history,
    "export": _cmd_export,
    "reset": _cmd_reset,
    "watch": _cmd_watch,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="portfolio-engine",
        description="Track holdings, cash and portfolio value from a trade log",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Record a buy at a fixed price
  portfolio-engine add BUY AAPL 10 --price 189.5

  # Record a sell at the market price (needs an API key)
  portfolio-engine add SELL AAPL 4

  # Value the portfolio and record a snapshot
  portfolio-engine show

  # Refresh periodically
  portfolio-engine watch
        """,
    )
    parser.add_argument(
        "--settings",
        type=Path,
        default=DEFAULT_SETTINGS_PATH,
        help=f"Settings file (default: {DEFAULT_SETTINGS_PATH})",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="Record a transaction")
    add.add_argument("side", type=str.upper, choices=["BUY", "SELL"])
    add.add_argument("symbol", type=str)
    add.add_argument("qty", type=float)
    add.add_argument("--price", type=float, default=None, help="Execution price (default: market)")
    add.add_argument("--date", type=str, default=None, help="ISO-8601 trade time (default: now)")
    add.add_argument("--notes", type=str, default=None)

    sell_all = sub.add_parser("sell-all", help="Sell an entire holding at market")
    sell_all.add_argument("symbol", type=str)

    sub.add_parser("snapshot", help="Value the portfolio and record a snapshot now")

    show = sub.add_parser("show", help="Show holdings and portfolio value")
    show.add_argument(
        "--no-fetch", action="store_true", help="Value at cost basis; no quotes, no snapshot"
    )

    transactions = sub.add_parser("transactions", help="List transactions, newest first")
    transactions.add_argument("--symbol", type=str, default=None, help="Only this symbol")
    sub.add_parser("history", help="List recorded snapshots")

    export = sub.add_parser("export", help="Export transactions and snapshots as CSV")
    export.add_argument(
        "--output", type=str, default="portfolio_export.csv", help="Output file, or - for stdout"
    )

    reset = sub.add_parser("reset", help="Delete all transactions and snapshots")
    reset.add_argument("--yes", action="store_true", help="Confirm the reset")

    sub.add_parser("watch", help="Refresh on the configured interval until interrupted")

    config = sub.add_parser("config", help="Show or change settings")
    config.add_argument("--provider", type=str)
    config.add_argument("--api-key", type=str)
    config.add_argument("--refresh-sec", type=int)
    config.add_argument("--starting-cash", type=float)
    config.add_argument("--database-url", type=str)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    store = SettingsStore(args.settings)

    try:
        if args.command == "config":
            configure_logging(debug=args.debug)
            return _cmd_config(store, args)

        settings = store.load()
        configure_logging(settings.log_level, debug=args.debug)
        with PortfolioDatabase(settings.database_url) as db:
            cycle = PortfolioCycle(db, store.load)
            return CYCLE_COMMANDS[args.command](cycle, args)
    except PortfolioException as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
