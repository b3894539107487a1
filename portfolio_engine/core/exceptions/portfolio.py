"""
Custom exception hierarchy for the portfolio engine.

This module defines domain-specific exceptions for better error handling.
The accounting core never raises; these are raised at the ingestion
boundary, by the storage layer and by the quote adapters.
"""


class PortfolioException(Exception):
    """Base exception for all portfolio-engine errors."""

    pass


class ValidationError(PortfolioException):
    """Raised when input validation fails."""

    pass


class ConfigurationError(PortfolioException):
    """Raised when configuration is invalid."""

    pass


class StorageError(PortfolioException):
    """Raised when the transaction or snapshot store fails."""

    pass


class QuoteError(PortfolioException):
    """Raised when a quote cannot be fetched or parsed."""

    def __init__(self, symbol: str, reason: str):
        self.symbol = symbol
        self.reason = reason
        super().__init__(f"Quote unavailable for {symbol}: {reason}")


class NoPriceAvailableError(PortfolioException):
    """Raised when a market-priced action has no price to execute at."""

    def __init__(self, symbol: str, reason: str = "no market price available"):
        self.symbol = symbol
        self.reason = reason
        super().__init__(f"Cannot price {symbol}: {reason}. Enter a manual price.")


class PortfolioError(PortfolioException):
    """Raised when portfolio operations fail."""

    pass


class PositionNotFoundError(PortfolioError):
    """Raised when trying to operate on a symbol that is not held."""

    def __init__(self, symbol: str):
        self.symbol = symbol
        super().__init__(f"Position not found for symbol: {symbol}")


class OversellError(ValidationError):
    """Raised when a SELL would exceed the quantity currently held."""

    def __init__(self, symbol: str, requested: float, held: float):
        self.symbol = symbol
        self.requested = requested
        self.held = held
        super().__init__(
            f"Cannot sell {requested:g} {symbol}: only {held:g} held"
        )
