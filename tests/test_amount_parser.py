"""Tests for amount parsing."""

from decimal import Decimal

import pytest

from financy.utils.amount_parser import parse_amount


@pytest.mark.parametrize(
    "text,expected",
    [
        ("123.45", Decimal("123.45")),
        ("123,45", Decimal("123.45")),
        ("R$ 1.234,56", Decimal("1234.56")),
        ("1,234.56", Decimal("1234.56")),
        ("1234", Decimal("1234.00")),
        ("10,005", Decimal("10.01")),
        ("1.200", Decimal("1200.00")),
        ("R$ 1.234.567", Decimal("1234567.00")),
        ("1.5", Decimal("1.50")),
        ("12.3456", Decimal("12.35")),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "abc", "0", "-50.00", "R$ 0,00"])
def test_parse_amount_rejects(text):
    with pytest.raises(ValueError):
        parse_amount(text)
