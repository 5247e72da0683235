"""Tests for amount parsing."""

from decimal import Decimal

import pytest

from farmledger.utils.amount_parser import parse_amount


@pytest.mark.parametrize(
    "text,expected",
    [
        ("1234.5", Decimal("1234.5")),
        ("$1,234.50", Decimal("1234.50")),
        ("GHS 1,234.50", Decimal("1234.50")),
        ("₵20", Decimal("20")),
        ("-123.45", Decimal("-123.45")),
        ("(123.45)", Decimal("-123.45")),
        ("  12.50 ", Decimal("12.50")),
    ],
)
def test_parse_amount(text, expected):
    """Test the accepted amount formats."""
    assert parse_amount(text) == expected


def test_empty_amount():
    """Test that blank input is rejected."""
    with pytest.raises(ValueError, match="Empty amount string"):
        parse_amount("   ")


@pytest.mark.parametrize("text", ["abc", "nan", "Infinity", "1.2.3"])
def test_unparseable_amount(text):
    """Test that non-numeric and non-finite input is rejected."""
    with pytest.raises(ValueError, match="Could not parse amount"):
        parse_amount(text)
