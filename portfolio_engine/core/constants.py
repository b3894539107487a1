"""
Core constants and limits.

Defines engine-wide constants for replay arithmetic, quote throttling
and the refresh cycle.
"""

# Ledger Arithmetic
QTY_EPSILON = 1e-9  # Quantities closer to zero than this are snapped to zero

# Settings Defaults
DEFAULT_PROVIDER = "alphavantage"
DEFAULT_STARTING_CASH = 100000.0
DEFAULT_REFRESH_SEC = 60
DEFAULT_DATABASE_URL = "sqlite:///portfolio.db"

# Quote Provider Limits
QUOTE_INTERVAL_SEC = 13.0  # ~5 requests/minute on the free Alpha Vantage tier
REQUEST_TIMEOUT_SEC = 10.0

# Refresh Cycle
MIN_REFRESH_SEC = 15  # Floor for the periodic timer

# Notes
SELL_ALL_NOTE = "Sell all @ market (quick)"
