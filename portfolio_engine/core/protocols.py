"""
Core protocols.

Structural interfaces for collaborators the engine calls but does not own.
"""

from typing import Protocol

from portfolio_engine.core.models.quote import Quote


class QuoteProvider(Protocol):
    """A source of market quotes.

    Implementations return a Quote or raise QuoteError; any vendor
    specifics stay behind this call.
    """

    name: str

    def fetch_quote(self, symbol: str, api_key: str) -> Quote:
        """Fetch the latest quote for ``symbol``."""
        ...


class RateLimiter(Protocol):
    """Gate acquired before every call to a rate-limited provider."""

    def acquire(self) -> None:
        """Block until the next call is allowed."""
        ...
