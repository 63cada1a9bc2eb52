"""Tests for amount parser."""

import pytest
from decimal import Decimal

from talikhata.utils.amount_parser import parse_amount


@pytest.mark.parametrize(
    "text, expected",
    [
        ("500", Decimal("500")),
        ("500.50", Decimal("500.50")),
        ("1,500.00", Decimal("1500.00")),
        ("1,50,000", Decimal("150000")),
        ("৳500", Decimal("500")),
        ("Tk 500", Decimal("500")),
        ("500 BDT", Decimal("500")),
        ("500 taka", Decimal("500")),
        ("$20", Decimal("20")),
        ("৫০০", Decimal("500")),
        ("৳১,২৫০.৫০", Decimal("1250.50")),
        ("-75", Decimal("-75")),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "  ", "abc", "12..5", "NaN", "Infinity"])
def test_parse_amount_invalid(text):
    with pytest.raises(ValueError):
        parse_amount(text)


def test_precision_is_left_to_the_domain():
    assert parse_amount("10.005") == Decimal("10.005")
