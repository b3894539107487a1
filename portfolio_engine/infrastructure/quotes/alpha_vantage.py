"""
Alpha Vantage quote provider.

Uses the ``GLOBAL_QUOTE`` endpoint, which returns the latest price and
the previous close for one symbol per request.
"""

import math
from typing import Any

import requests
from loguru import logger

from portfolio_engine.core.constants import REQUEST_TIMEOUT_SEC
from portfolio_engine.core.exceptions.portfolio import QuoteError
from portfolio_engine.core.models.quote import Quote

BASE_URL = "https://www.alphavantage.co/query"


def _parse_float(raw: Any) -> float | None:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None


class AlphaVantageProvider:
    """Fetches quotes from Alpha Vantage."""

    name = "alphavantage"

    def __init__(
        self,
        session: requests.Session | None = None,
        timeout: float = REQUEST_TIMEOUT_SEC,
        base_url: str = BASE_URL,
    ) -> None:
        self.session = session or requests.Session()
        self.timeout = timeout
        self.base_url = base_url

    def fetch_quote(self, symbol: str, api_key: str) -> Quote:
        """Fetch the latest quote for ``symbol``.

        Raises:
            QuoteError: On network failure, HTTP error, malformed body,
                a rate-limit notice, or a missing price
        """
        params = {"function": "GLOBAL_QUOTE", "symbol": symbol, "apikey": api_key}
        try:
            response = self.session.get(self.base_url, params=params, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except ValueError as e:
            # requests.JSONDecodeError is also a RequestException
            raise QuoteError(symbol, "response is not valid JSON") from e
        except requests.RequestException as e:
            raise QuoteError(symbol, f"network error: {e}") from e

        return self.parse_quote(symbol, payload)

    @staticmethod
    def parse_quote(symbol: str, payload: Any) -> Quote:
        """Build a Quote from a ``GLOBAL_QUOTE`` payload.

        Raises:
            QuoteError: If the payload carries no usable price
        """
        if not isinstance(payload, dict):
            raise QuoteError(symbol, "unexpected response shape")
        for notice in ("Note", "Information", "Error Message"):
            if notice in payload:
                raise QuoteError(symbol, str(payload[notice]))

        data = payload.get("Global Quote") or {}
        price = _parse_float(data.get("05. price"))
        if price is None or price <= 0:
            raise QuoteError(symbol, "no price in response")

        prev_close = _parse_float(data.get("08. previous close"))
        logger.debug(f"Quote {symbol}: price={price} prev_close={prev_close}")
        return Quote(price=price, prev_close=prev_close)
