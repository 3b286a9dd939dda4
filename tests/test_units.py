"""
Tests for token amount conversion.
"""
from decimal import Decimal

import pytest

from story_build.errors import ValidationError
from story_build.units import (
    MAX_UINT256,
    format_ether,
    format_units,
    is_unlimited,
    parse_ether,
    to_base_units,
    to_decimal,
)


class TestToDecimal:

    def test_float_uses_shortest_repr(self):
        assert to_decimal(0.1) == Decimal("0.1")

    def test_strips_strings(self):
        assert to_decimal(" 2.50 ") == Decimal("2.50")

    @pytest.mark.parametrize("value", ["abc", "", None, [1]])
    def test_rejects_non_numbers(self, value):
        with pytest.raises(ValidationError, match="must be a number"):
            to_decimal(value, "fee")

    @pytest.mark.parametrize("value", ["NaN", "Infinity", float("inf")])
    def test_rejects_non_finite(self, value):
        with pytest.raises(ValidationError, match="finite"):
            to_decimal(value)

    def test_rejects_negative(self):
        with pytest.raises(ValidationError, match=">= 0"):
            to_decimal("-0.5")

    def test_rejects_bool(self):
        with pytest.raises(ValidationError, match="boolean"):
            to_decimal(False)


class TestParseEther:

    @pytest.mark.parametrize("amount,expected", [
        ("1.5", 1500000000000000000),
        (0, 0),
        (2, 2 * 10 ** 18),
        ("0.1", 10 ** 17),
        (0.3, 3 * 10 ** 17),
    ])
    def test_scales_exactly(self, amount, expected):
        assert parse_ether(amount) == expected

    def test_out_of_range(self):
        with pytest.raises(ValidationError, match="out of range"):
            parse_ether(Decimal(2) ** 256)


class TestFormatEther:

    @pytest.mark.parametrize("wei,expected", [
        (0, "0"),
        (10 ** 18, "1"),
        (1500000000000000000, "1.5"),
        (1, "0.000000000000000001"),
        (100 * 10 ** 18, "100"),
    ])
    def test_formats_without_trailing_zeros(self, wei, expected):
        assert format_ether(wei) == expected


class TestIsUnlimited:

    def test_max_uint_is_unlimited(self):
        assert is_unlimited(MAX_UINT256)

    def test_large_finite_allowance_is_not(self):
        assert not is_unlimited(10 ** 30)


class TestTokenUnits:

    def test_six_decimal_token(self):
        assert to_base_units("2.5", 6) == 2_500_000
        assert format_units(2_500_000, 6) == "2.5"

    def test_large_amount_keeps_precision(self):
        assert to_base_units("12345678901.000000000000000001", 18) == 12345678901 * 10 ** 18 + 1

    def test_too_many_decimals(self):
        with pytest.raises(ValidationError, match="decimal places"):
            to_base_units("0.0000001", 6)

    def test_whole_amounts_have_no_fraction(self):
        assert format_units(3 * 10 ** 18, 18) == "3"
        assert format_units(0, 6) == "0"
