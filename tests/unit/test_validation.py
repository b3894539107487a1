"""
Unit tests for validation utilities.
"""

import math
from datetime import UTC, datetime, timedelta, timezone

import pytest

from portfolio_engine.core.enums import Side
from portfolio_engine.core.exceptions.portfolio import ValidationError
from portfolio_engine.core.utils.validation import (
    validate_finite,
    validate_non_negative,
    validate_positive,
    validate_side,
    validate_symbol,
    validate_timestamp,
)


class TestValidateSymbol:
    def test_should_strip_and_upper_case(self) -> None:
        assert validate_symbol(" msft\n") == "MSFT"

    def test_should_reject_empty_symbol(self) -> None:
        with pytest.raises(ValidationError, match="symbol is required"):
            validate_symbol("")

    def test_should_reject_non_string(self) -> None:
        with pytest.raises(ValidationError, match="symbol must be a string, got int"):
            validate_symbol(42)

    def test_should_use_parameter_name_in_message(self) -> None:
        with pytest.raises(ValidationError, match="ticker is required"):
            validate_symbol(" ", "ticker")


class TestValidateSide:
    @pytest.mark.parametrize("raw", ["BUY", "buy", " Buy ", Side.BUY])
    def test_should_parse_buy_in_any_case(self, raw: object) -> None:
        assert validate_side(raw) is Side.BUY

    def test_should_reject_unknown_side(self) -> None:
        with pytest.raises(ValidationError, match="Valid sides: BUY, SELL"):
            validate_side("SHORT")


class TestValidateNumbers:
    def test_should_accept_numeric_strings(self) -> None:
        assert validate_finite("2.5", "qty") == 2.5

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_should_reject_non_finite(self, value: float) -> None:
        with pytest.raises(ValidationError, match="qty must be finite"):
            validate_finite(value, "qty")

    def test_should_reject_bool(self) -> None:
        with pytest.raises(ValidationError, match="got bool"):
            validate_finite(True, "qty")

    def test_should_reject_non_numeric(self) -> None:
        with pytest.raises(ValidationError, match="qty must be a number"):
            validate_finite(None, "qty")

    def test_should_require_positive(self) -> None:
        assert validate_positive(0.001, "qty") == 0.001
        with pytest.raises(ValidationError, match="qty must be positive"):
            validate_positive(0, "qty")

    def test_should_allow_zero_when_non_negative(self) -> None:
        assert validate_non_negative(0, "price") == 0.0
        with pytest.raises(ValidationError, match="price must be non-negative"):
            validate_non_negative(-1, "price")


class TestValidateTimestamp:
    def test_should_parse_trailing_z(self) -> None:
        assert validate_timestamp("2024-05-06T07:08:09Z") == datetime(
            2024, 5, 6, 7, 8, 9, tzinfo=UTC
        )

    def test_should_treat_naive_as_utc(self) -> None:
        assert validate_timestamp(datetime(2024, 5, 6)).tzinfo is UTC

    def test_should_convert_aware_to_utc(self) -> None:
        eastern = timezone(timedelta(hours=-5))
        result = validate_timestamp(datetime(2024, 5, 6, 2, tzinfo=eastern))

        assert result == datetime(2024, 5, 6, 7, tzinfo=UTC)
        assert result.tzinfo is UTC

    def test_should_reject_garbage(self) -> None:
        with pytest.raises(ValidationError, match="date must be an ISO-8601 timestamp"):
            validate_timestamp("06/05/2024")
        with pytest.raises(ValidationError, match="date must be a datetime, got int"):
            validate_timestamp(1714978089)
