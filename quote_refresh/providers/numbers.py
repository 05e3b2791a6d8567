"""
Locale-independent price parsing.

Exchanges send prices as dot-decimal strings (sometimes bare JSON numbers).
Anything else, including comma-decimal text, is rejected rather than coerced.
"""
from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Any

_DOT_DECIMAL = re.compile(r"^[+-]?\d+(\.\d+)?([eE][+-]?\d+)?$")


class PriceFormatError(ValueError):
    """Raised when a price value is not a positive finite dot-decimal number."""


def parse_price(value: Any) -> Decimal:
    """
    Parse an exchange price field into a positive finite Decimal.

    Accepts str, int and float (floats go through repr so 0.1 stays 0.1).
    Rejects bools, empty strings, comma decimals, NaN/Infinity, zero and negatives.
    """
    if isinstance(value, bool) or value is None:
        raise PriceFormatError(f"not a price: {value!r}")
    if isinstance(value, (int, float)):
        text = repr(value)
    elif isinstance(value, str):
        text = value.strip()
    else:
        raise PriceFormatError(f"unsupported price type {type(value).__name__}")

    if not _DOT_DECIMAL.match(text):
        raise PriceFormatError(f"not a dot-decimal number: {value!r}")
    try:
        price = Decimal(text)
    except InvalidOperation:
        raise PriceFormatError(f"not a dot-decimal number: {value!r}") from None
    if not price.is_finite() or price <= 0:
        raise PriceFormatError(f"price must be positive: {value!r}")
    return price
