"""
Quote fetcher.

Sequential, rate-limited adapter over a single configured provider.
This is the only blocking I/O in an accounting cycle.
"""

from collections.abc import Iterable

from loguru import logger

from portfolio_engine.config import Settings
from portfolio_engine.core.exceptions.portfolio import QuoteError
from portfolio_engine.core.models.quote import Quote
from portfolio_engine.core.protocols import QuoteProvider, RateLimiter

from .alpha_vantage import AlphaVantageProvider


def build_provider(name: str, timeout: float | None = None) -> QuoteProvider | None:
    """Return the provider registered under ``name``, or None if unknown."""
    normalized = name.strip().lower()
    if normalized == AlphaVantageProvider.name:
        if timeout is None:
            return AlphaVantageProvider()
        return AlphaVantageProvider(timeout=timeout)
    logger.warning(f"Unknown quote provider '{name}'; quotes disabled")
    return None


class QuoteFetcher:
    """Fetch quotes for many symbols, one request at a time."""

    def __init__(
        self,
        provider: QuoteProvider | None,
        api_key: str,
        gate: RateLimiter,
    ) -> None:
        self.provider = provider
        self.api_key = api_key.strip()
        self.gate = gate

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        gate: RateLimiter,
        provider: QuoteProvider | None = None,
    ) -> "QuoteFetcher":
        """Build a fetcher for the provider and key named in ``settings``."""
        if provider is None:
            provider = build_provider(settings.provider, settings.request_timeout_sec)
        return cls(provider, settings.api_key, gate)

    @property
    def enabled(self) -> bool:
        """True when a provider and credentials are configured."""
        return self.provider is not None and bool(self.api_key)

    def fetch_quotes(self, symbols: Iterable[str]) -> dict[str, Quote]:
        """Fetch quotes for ``symbols``.

        A failure for one symbol is logged and the symbol left out of the
        result; the rest of the batch still runs. Without credentials no
        request is made and the result is empty.

        Args:
            symbols: Symbols to price; duplicates are fetched once

        Returns:
            Quotes keyed by upper-cased symbol
        """
        wanted = list(dict.fromkeys(s.strip().upper() for s in symbols if s.strip()))
        if not wanted:
            return {}
        if not self.enabled:
            logger.info("No quote provider credentials configured; skipping quote fetch")
            return {}

        quotes: dict[str, Quote] = {}
        for symbol in wanted:
            self.gate.acquire()
            try:
                quotes[symbol] = self.provider.fetch_quote(symbol, self.api_key)
            except QuoteError as e:
                logger.warning(f"Quote error {symbol}: {e.reason}")
            except Exception as e:
                logger.warning(f"Quote error {symbol}: {type(e).__name__}: {e}")
        logger.info(f"Fetched {len(quotes)}/{len(wanted)} quotes")
        return quotes

    def fetch_price(self, symbol: str) -> float | None:
        """Return the latest price for one symbol, or None if unavailable."""
        quote = self.fetch_quotes([symbol]).get(symbol.strip().upper())
        return quote.price if quote is not None else None
