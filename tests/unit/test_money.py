"""Tests for sellerfees.core.money: rounding, normalization and display."""

import math
from decimal import Decimal

import pytest
from pydantic import ValidationError

from sellerfees.core.models import CommissionRequest, SellerType
from sellerfees.core.money import (
    ceil_money,
    finite_money,
    floor_rate,
    format_currency,
    format_percent,
    is_finite_number,
    normalize_money,
    normalize_percent,
    parse_decimal,
    round_money,
    to_decimal,
)


class TestRounding:

    def test_round_half_up_to_cent(self):
        assert round_money(Decimal("2.345")) == Decimal("2.35")
        assert round_money(Decimal("2.344")) == Decimal("2.34")

    def test_round_float_without_binary_artifacts(self):
        # 1.005 is 1.00499999... in binary; repr keeps the decimal intent
        assert round_money(1.005) == Decimal("1.01")

    def test_round_negative_half_away_from_zero(self):
        assert round_money(Decimal("-0.005")) == Decimal("-0.01")

    def test_ceil_money_rounds_up(self):
        assert ceil_money(Decimal("10.001")) == Decimal("10.01")
        assert ceil_money(Decimal("10.00")) == Decimal("10.00")

    def test_floor_rate_truncates_to_four_places(self):
        assert floor_rate(Decimal("0.123456")) == Decimal("0.1234")
        assert floor_rate(Decimal("0.99999")) == Decimal("0.9999")


class TestToDecimal:

    def test_none_is_zero(self):
        assert to_decimal(None) == Decimal("0")

    def test_invalid_string_is_zero(self):
        assert to_decimal("abc") == Decimal("0")

    def test_float_uses_shortest_repr(self):
        assert to_decimal(0.1) == Decimal("0.1")

    def test_is_finite_number(self):
        assert is_finite_number(1.5)
        assert is_finite_number(Decimal("2"))
        assert not is_finite_number(math.nan)
        assert not is_finite_number(math.inf)
        assert not is_finite_number(None)
        assert not is_finite_number(True)
        assert not is_finite_number("10")


class TestNormalizePercent:

    @pytest.mark.parametrize(
        "value, expected",
        [
            (0.1, Decimal("0.1")),
            (10, Decimal("0.1")),
            (1, Decimal("1")),
            (100, Decimal("1")),
            (150, Decimal("1")),
            (-5, Decimal("0")),
            (math.nan, Decimal("0")),
            (math.inf, Decimal("0")),
            (None, Decimal("0")),
        ],
    )
    def test_normalize(self, value, expected):
        assert normalize_percent(value) == expected


class TestNormalizeMoney:

    def test_negative_becomes_zero(self):
        assert normalize_money(-3) == Decimal("0")

    def test_non_finite_becomes_zero(self):
        assert normalize_money(math.nan) == Decimal("0")
        assert normalize_money(None) == Decimal("0")

    def test_positive_kept(self):
        assert normalize_money(12.5) == Decimal("12.5")

    def test_finite_money_keeps_negatives(self):
        assert finite_money(-999) == Decimal("-999.00")
        assert finite_money(math.inf) == Decimal("0")


class TestFormatting:

    def test_format_currency_thousands(self):
        assert format_currency(Decimal("1234.56")) == "R$ 1.234,56"

    def test_format_currency_small(self):
        assert format_currency(Decimal("0.5")) == "R$ 0,50"

    def test_format_currency_negative(self):
        assert format_currency(Decimal("-12")) == "-R$ 12,00"

    def test_format_percent(self):
        assert format_percent(Decimal("0.025")) == "2,5%"
        assert format_percent(Decimal("0.14")) == "14%"
        assert format_percent(Decimal("0.192")) == "19,2%"


class TestParseDecimal:

    @pytest.mark.parametrize(
        "value, expected",
        [("12.50", "12.50"), ("12,50", "12.50"), (" 7 ", "7"), (3, "3"), (0.1, "0.1"), (Decimal("1.5"), "1.5")],
    )
    def test_accepts_numbers(self, value, expected):
        assert parse_decimal(value) == Decimal(expected)

    @pytest.mark.parametrize("value", ["abc", "", "1,234.5,6", None, True, "NaN", math.inf])
    def test_rejects_non_numbers(self, value):
        with pytest.raises(ValueError):
            parse_decimal(value)


class TestAmountFields:

    def test_comma_decimal_price(self):
        request = CommissionRequest(item_price="12,50", seller_type=SellerType.CNPJ)
        assert request.item_price == Decimal("12.50")

    def test_unparseable_price_rejected(self):
        with pytest.raises(ValidationError):
            CommissionRequest(item_price="abc", seller_type=SellerType.CNPJ)

    def test_negative_price_still_rejected(self):
        with pytest.raises(ValidationError):
            CommissionRequest(item_price="-1", seller_type=SellerType.CNPJ)
