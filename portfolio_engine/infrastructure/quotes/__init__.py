"""
Market quote adapters.
"""

from .alpha_vantage import AlphaVantageProvider
from .fetcher import QuoteFetcher, build_provider
from .rate_limiter import FixedIntervalGate

__all__ = ["AlphaVantageProvider", "FixedIntervalGate", "QuoteFetcher", "build_provider"]
