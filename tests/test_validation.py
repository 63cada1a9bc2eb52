"""Tests for domain field validation."""

import pytest
from decimal import Decimal

from talikhata.domain.errors import ValidationError
from talikhata.domain.validation import (
    normalize_email,
    normalize_phone,
    normalize_tags,
    to_money,
    validate_amounts,
    validate_optional_text,
    validate_time,
)


class TestMoney:
    def test_quantizes_to_cents(self):
        assert str(to_money(5)) == "5.00"
        assert str(to_money("12.3")) == "12.30"

    def test_accepts_floats_by_repr(self):
        assert to_money(0.1) == Decimal("0.10")

    @pytest.mark.parametrize("value", ["abc", None, "NaN", "Infinity"])
    def test_rejects_non_numbers(self, value):
        with pytest.raises(ValidationError, match="Invalid"):
            to_money(value)

    def test_rejects_sub_cent_precision(self):
        with pytest.raises(ValidationError, match="2 decimal places"):
            to_money(Decimal("1.001"), "refund amount")

    def test_rejects_values_the_decimal_context_cannot_quantize(self):
        with pytest.raises(ValidationError, match="cannot exceed"):
            to_money(Decimal("1e27"))


class TestAmounts:
    def test_valid_pair(self):
        assert validate_amounts(Decimal("100"), Decimal("0")) == (Decimal("100.00"), Decimal("0.00"))

    @pytest.mark.parametrize(
        "amount, refund, message",
        [
            ("0", "0", "greater than 0"),
            ("-1", "0", "greater than 0"),
            ("10", "-0.01", "cannot be negative"),
            ("10", "10", "must be less than"),
            ("10", "10.01", "must be less than"),
        ],
    )
    def test_invalid_pairs(self, amount, refund, message):
        with pytest.raises(ValidationError, match=message):
            validate_amounts(Decimal(amount), Decimal(refund))


class TestContactFields:
    @pytest.mark.parametrize("phone", ["01712345678", "+8801912345678", "8801312345678"])
    def test_valid_phones(self, phone):
        assert normalize_phone(f" {phone} ") == phone

    def test_empty_phone_is_none(self):
        assert normalize_phone("") is None
        assert normalize_phone(None) is None

    def test_email_is_lowercased(self):
        assert normalize_email(" Shop@Example.COM ") == "shop@example.com"

    def test_optional_text(self):
        assert validate_optional_text("  ", "Note", 10) is None
        assert validate_optional_text(" hi ", "Note", 10) == "hi"
        with pytest.raises(ValidationError, match="Note cannot be more than 10"):
            validate_optional_text("x" * 11, "Note", 10)

    def test_tags(self):
        assert normalize_tags(None) == ()
        assert normalize_tags(["b", "a", "b ", " "]) == ("b", "a")


@pytest.mark.parametrize("value, expected", [("9:05", "09:05"), ("23:59", "23:59"), ("00:00", "00:00")])
def test_validate_time(value, expected):
    assert validate_time(value) == expected


@pytest.mark.parametrize("value", ["24:00", "12:60", "noon", "1230"])
def test_validate_time_rejects(value):
    with pytest.raises(ValidationError):
        validate_time(value)
