"""
Accounting cycle runner.

Every trigger (app start, a new trade, sell-all, snapshot-now, the
periodic timer) becomes a command handed to ``PortfolioCycle.run``. A
cycle re-reads the settings and the full transaction log, fetches
quotes, values the portfolio and records a snapshot:

    IDLE -> FETCHING -> VALUATING -> SNAPSHOTTING -> IDLE
"""

import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from loguru import logger

from portfolio_engine.config import Settings
from portfolio_engine.core.accounting import (
    compute_cash,
    compute_holdings,
    find_oversells,
    held_quantity,
    realized_pnl,
    value_portfolio,
)
from portfolio_engine.core.constants import SELL_ALL_NOTE
from portfolio_engine.core.enums import CycleState, Side
from portfolio_engine.core.exceptions.portfolio import (
    NoPriceAvailableError,
    OversellError,
    PositionNotFoundError,
    ValidationError,
)
from portfolio_engine.core.models.holding import Holding
from portfolio_engine.core.models.quote import Quote
from portfolio_engine.core.models.snapshot import Snapshot
from portfolio_engine.core.models.transaction import Transaction
from portfolio_engine.core.models.valuation import PortfolioValuation
from portfolio_engine.core.protocols import QuoteProvider, RateLimiter
from portfolio_engine.core.utils.decorators import log_operation
from portfolio_engine.core.utils.validation import (
    validate_positive,
    validate_side,
    validate_symbol,
    validate_timestamp,
)
from portfolio_engine.infrastructure.quotes import FixedIntervalGate, QuoteFetcher
from portfolio_engine.infrastructure.storage import PortfolioDatabase

from .commands import AddTransaction, Command, SellAll, SnapshotNow, Tick
from .snapshots import SnapshotRecorder, utc_now

SettingsSource = Callable[[], Settings]
ProviderFactory = Callable[[Settings], QuoteProvider | None]


@dataclass(frozen=True)
class CycleResult:
    """Outcome of one accounting cycle."""

    valuation: PortfolioValuation
    snapshot: Snapshot
    holdings: tuple[Holding, ...] = ()
    quotes: dict[str, Quote] = field(default_factory=dict)
    realized_pl: float = 0.0
    transaction: Transaction | None = None


class PortfolioCycle:
    """Runs accounting cycles against one storage handle.

    Thread Safety:
        ``run`` and ``reset`` hold an internal RLock for the whole cycle,
        so cycles triggered from different threads never overlap.
    """

    def __init__(
        self,
        db: PortfolioDatabase,
        settings_source: SettingsSource,
        gate: RateLimiter | None = None,
        provider_factory: ProviderFactory | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.db = db
        self.settings_source = settings_source
        if gate is None:
            gate = FixedIntervalGate(settings_source().quote_interval_sec)
        self.gate = gate
        self.provider_factory = provider_factory
        self.clock = clock
        self.recorder = SnapshotRecorder(db, clock)
        self.state = CycleState.IDLE
        self._lock = threading.RLock()

    def _fetcher(self, settings: Settings) -> QuoteFetcher:
        # without a factory the provider named in settings is used
        provider = self.provider_factory(settings) if self.provider_factory is not None else None
        return QuoteFetcher.from_settings(settings, self.gate, provider)

    @log_operation
    def run(self, command: Command) -> CycleResult:
        """Apply ``command`` and run a full cycle.

        Raises:
            ValidationError: If a trade is malformed or oversells a holding
            NoPriceAvailableError: If a market-priced trade has no price
            PositionNotFoundError: If selling all of a symbol not held
            StorageError: If the store fails
        """
        with self._lock:
            settings = self.settings_source()
            fetcher = self._fetcher(settings)

            transaction = None
            if isinstance(command, AddTransaction):
                transaction = self._add_transaction(command, settings, fetcher)
            elif isinstance(command, SellAll):
                transaction = self._sell_all(command.symbol, fetcher)
            elif not isinstance(command, SnapshotNow | Tick):
                raise ValidationError(f"Unknown command: {command!r}")

            return self._cycle(settings, fetcher, transaction)

    def reset(self) -> CycleResult:
        """Delete all transactions and snapshots, then run a cycle."""
        with self._lock:
            self.db.clear_transactions()
            self.db.clear_snapshots()
            logger.warning("Portfolio reset: transactions and snapshots cleared")
            return self.run(Tick())

    def preview(self) -> PortfolioValuation:
        """Value the portfolio at cost basis without fetching or recording."""
        settings = self.settings_source()
        transactions = self.db.list_transactions()
        cash = compute_cash(transactions, settings.starting_cash)
        return value_portfolio(compute_holdings(transactions), {}, cash)

    def _cycle(
        self,
        settings: Settings,
        fetcher: QuoteFetcher,
        transaction: Transaction | None,
    ) -> CycleResult:
        try:
            self.state = CycleState.FETCHING
            transactions = self.db.list_transactions()
            holdings = compute_holdings(transactions)
            quotes = fetcher.fetch_quotes(h.symbol for h in holdings)

            self.state = CycleState.VALUATING
            cash = compute_cash(transactions, settings.starting_cash)
            valuation = value_portfolio(holdings, quotes, cash)

            self.state = CycleState.SNAPSHOTTING
            snapshot = self.recorder.record(valuation.portfolio_value)
        finally:
            self.state = CycleState.IDLE

        logger.info(
            f"Cycle complete: value={valuation.portfolio_value:.2f} cash={cash:.2f} "
            f"holdings={len(holdings)} priced={len(quotes)}"
        )
        return CycleResult(
            valuation=valuation,
            snapshot=snapshot,
            holdings=tuple(holdings),
            quotes=quotes,
            realized_pl=realized_pnl(transactions),
            transaction=transaction,
        )

    def _add_transaction(
        self,
        command: AddTransaction,
        settings: Settings,
        fetcher: QuoteFetcher,
    ) -> Transaction:
        try:
            symbol = validate_symbol(command.symbol)
            qty = validate_positive(command.qty, "qty")
        except ValidationError as e:
            raise ValidationError(f"Symbol and quantity are required: {e}") from e
        side = validate_side(command.side)

        price = command.price
        if price is None:
            if not settings.has_api_key:
                raise NoPriceAvailableError(symbol, "no API key set")
            price = fetcher.fetch_price(symbol)
            if price is None:
                raise NoPriceAvailableError(symbol, "could not fetch market price")

        transaction = Transaction(
            symbol=symbol,
            side=side,
            qty=qty,
            price=price,
            date=command.date if command.date is not None else self.clock(),
            notes=command.notes,
        )
        self._check_oversell(transaction)
        return self.db.add_transaction(transaction)

    def _sell_all(self, symbol: str, fetcher: QuoteFetcher) -> Transaction:
        symbol = validate_symbol(symbol)
        now = validate_timestamp(self.clock())
        # trades dated after now do not count towards the current holding
        history = [t for t in self.db.transactions_for_symbol(symbol) if t.date <= now]
        qty = held_quantity(history, symbol)
        if qty <= 0:
            raise PositionNotFoundError(symbol)

        price = fetcher.fetch_price(symbol) if fetcher.enabled else None
        if price is None:
            raise NoPriceAvailableError(symbol)

        transaction = Transaction(
            symbol=symbol,
            side=Side.SELL,
            qty=qty,
            price=price,
            date=now,
            notes=SELL_ALL_NOTE,
        )
        self._check_oversell(transaction)
        return self.db.add_transaction(transaction)

    def _check_oversell(self, transaction: Transaction) -> None:
        """Reject a trade that would leave any SELL larger than the holding."""
        if transaction.side != Side.SELL:
            # a back-dated BUY can only raise quantities
            return
        history = self.db.list_transactions()
        before = {id(t) for t, _ in find_oversells(history)}
        for oversold, held in find_oversells([*history, transaction]):
            if id(oversold) not in before:
                raise OversellError(oversold.symbol, oversold.qty, max(held, 0.0))
