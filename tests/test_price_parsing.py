"""Price parsing is dot-decimal only, independent of the host locale."""

from __future__ import annotations

import locale
from decimal import Decimal

import pytest

from quote_refresh.providers.numbers import PriceFormatError, parse_price


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("67890.12", Decimal("67890.12")),
        ("  0.00001234 ", Decimal("0.00001234")),
        ("42", Decimal("42")),
        (67890.5, Decimal("67890.5")),
        (3, Decimal("3")),
        ("1.5e3", Decimal("1500")),
    ],
)
def test_parses_dot_decimal(raw, expected):
    assert parse_price(raw) == expected


@pytest.mark.parametrize(
    "raw",
    ["67890,12", "67.890,12", "", "abc", "NaN", "Infinity", "-1.0", "0", "0.0", "1_000", True, None, [], {}],
)
def test_rejects_non_prices(raw):
    with pytest.raises(PriceFormatError):
        parse_price(raw)


def test_result_is_decimal_not_float():
    assert isinstance(parse_price("0.1"), Decimal)
    assert parse_price("0.1") + parse_price("0.2") == Decimal("0.3")


def test_locale_does_not_change_parsing():
    """Even under a comma-decimal locale, only dot-decimal text parses."""
    saved = locale.setlocale(locale.LC_NUMERIC)
    try:
        for name in ("de_DE.UTF-8", "de_DE.utf8", "fr_FR.UTF-8"):
            try:
                locale.setlocale(locale.LC_NUMERIC, name)
                break
            except locale.Error:
                continue
        assert parse_price("67890.12") == Decimal("67890.12")
        with pytest.raises(PriceFormatError):
            parse_price("67890,12")
    finally:
        locale.setlocale(locale.LC_NUMERIC, saved)
