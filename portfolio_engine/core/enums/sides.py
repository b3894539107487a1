"""
Trade side enumeration.

This module defines the allowed sides of a ledger transaction.
"""

from enum import StrEnum


class Side(StrEnum):
    """
    Allowed transaction sides.

    BUY adds units and debits cash, SELL removes units and credits cash.
    """

    BUY = "BUY"
    SELL = "SELL"

    @property
    def sign(self) -> int:
        """Direction applied to the held quantity."""
        return 1 if self == self.BUY else -1

    @property
    def cash_sign(self) -> int:
        """Direction applied to the cash balance."""
        return -self.sign

    @classmethod
    def parse(cls, value: "str | Side") -> "Side":
        """Parse a side from user input, ignoring case and surrounding whitespace.

        Args:
            value: Side name such as ``"buy"`` or a Side member

        Returns:
            The matching Side

        Raises:
            ValueError: If the value is not a known side
        """
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().upper()
        try:
            return cls(normalized)
        except ValueError:
            valid = ", ".join(member.value for member in cls)
            raise ValueError(f"Invalid side '{value}'. Valid sides: {valid}") from None
