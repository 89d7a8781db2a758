"""
Money helpers and display formatting.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Union

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0")

Number = Union[Decimal, int, float, str, None]


def to_decimal(value: Number) -> Decimal:
    """Convert a nullable numeric value to Decimal, treating None/blank as zero."""
    if value is None or value == "":
        return ZERO
    if isinstance(value, Decimal):
        return value
    try:
        # str() keeps floats like 0.1 from expanding to binary noise
        return Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"Not a monetary amount: {value!r}") from e


def quantize_money(value: Number) -> Decimal:
    """Round to two decimal places for storage and display."""
    return to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def money_float(value: Number) -> float:
    """Two-decimal float for JSON payloads."""
    return float(quantize_money(value))


class CurrencyFormatter:
    """Currency formatting utilities"""

    CURRENCY_SYMBOLS = {
        'INR': '₹',
        'USD': '$',
        'EUR': '€',
        'GBP': '£'
    }

    @classmethod
    def format_amount(cls, amount: Any,
                      currency: str = 'INR',
                      include_symbol: bool = True) -> str:
        """Format monetary amount with thousands separators"""
        value = quantize_money(amount)
        sign = "-" if value < 0 else ""
        text = f"{abs(value):,.2f}"
        if include_symbol:
            symbol = cls.CURRENCY_SYMBOLS.get(currency, f"{currency} ")
            return f"{sign}{symbol}{text}"
        return f"{sign}{text}"
