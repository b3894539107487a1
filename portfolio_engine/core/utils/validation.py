"""
Validation utilities for core domain models.

Provides consistent validation at the transaction-ingestion boundary.
"""

import math
from datetime import UTC, datetime
from typing import Any

from portfolio_engine.core.enums import Side
from portfolio_engine.core.exceptions.portfolio import ValidationError


def validate_symbol(symbol: Any, param_name: str = "symbol") -> str:
    """Validate and normalize a ticker symbol.

    Args:
        symbol: Value to validate
        param_name: Parameter name for error messages

    Returns:
        The stripped, upper-cased symbol

    Raises:
        ValidationError: If symbol is not a non-empty string
    """
    if not isinstance(symbol, str):
        raise ValidationError(f"{param_name} must be a string, got {type(symbol).__name__}")
    normalized = symbol.strip().upper()
    if not normalized:
        raise ValidationError(f"{param_name} is required")
    return normalized


def validate_side(side: Any, param_name: str = "side") -> Side:
    """Validate a transaction side.

    Raises:
        ValidationError: If side is not BUY or SELL
    """
    try:
        return Side.parse(side)
    except ValueError as e:
        raise ValidationError(f"Invalid {param_name}: {e}") from e


def validate_finite(value: Any, param_name: str) -> float:
    """Validate that a value is a finite real number.

    Args:
        value: Value to validate
        param_name: Parameter name for error messages

    Returns:
        The value as float

    Raises:
        ValidationError: If value is not numeric, NaN or infinite
    """
    if isinstance(value, bool):
        raise ValidationError(f"{param_name} must be a number, got bool")
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{param_name} must be a number, got {value!r}") from e
    if not math.isfinite(number):
        raise ValidationError(f"{param_name} must be finite, got {number}")
    return number


def validate_positive(value: Any, param_name: str) -> float:
    """Validate that a numeric value is positive and finite.

    Raises:
        ValidationError: If value is not positive
    """
    number = validate_finite(value, param_name)
    if number <= 0:
        raise ValidationError(f"{param_name} must be positive, got {number}")
    return number


def validate_non_negative(value: Any, param_name: str) -> float:
    """Validate that a numeric value is zero or positive and finite.

    Raises:
        ValidationError: If value is negative
    """
    number = validate_finite(value, param_name)
    if number < 0:
        raise ValidationError(f"{param_name} must be non-negative, got {number}")
    return number


def validate_timestamp(value: Any, param_name: str = "date") -> datetime:
    """Validate a timestamp and normalize it to an aware UTC datetime.

    Accepts ``datetime`` objects or ISO-8601 strings (a trailing ``Z`` is
    understood). Naive values are taken to be UTC.

    Raises:
        ValidationError: If value cannot be interpreted as a timestamp
    """
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(text)
        except ValueError as e:
            raise ValidationError(f"{param_name} must be an ISO-8601 timestamp, got {value!r}") from e
    if not isinstance(value, datetime):
        raise ValidationError(f"{param_name} must be a datetime, got {type(value).__name__}")
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
