from decimal import Decimal

import pytest

from vehicle_loan.utils import decimal_from_str, parse_amount, parse_rate, to_decimal


class TestToDecimal:
    def test_float_goes_through_str(self):
        assert to_decimal(0.11) == Decimal("0.11")

    def test_int_and_str(self):
        assert to_decimal(60) == Decimal("60")
        assert to_decimal("1.5") == Decimal("1.5")

    def test_decimal_passthrough(self):
        value = Decimal("0.125")
        assert to_decimal(value) is value

    def test_rejects_junk(self):
        with pytest.raises(ValueError):
            to_decimal("abc")
        with pytest.raises(ValueError):
            to_decimal(None)
        with pytest.raises(ValueError):
            to_decimal(True)


class TestDecimalFromStr:
    @pytest.mark.parametrize(
        "text",
        ["65000000", "65.000.000", "65,000,000", "Gs. 65.000.000", " 65 000 000 "],
    )
    def test_grouped_amounts(self, text):
        assert decimal_from_str(text) == Decimal("65000000")

    def test_fraction_is_not_grouping(self):
        assert decimal_from_str("0.125") == Decimal("0.125")
        assert decimal_from_str("1.5") == Decimal("1.5")

    def test_comma_is_decimal_separator(self):
        assert decimal_from_str("1,5") == Decimal("1.5")
        assert decimal_from_str("0,125") == Decimal("0.125")

    def test_invalid(self):
        with pytest.raises(ValueError):
            decimal_from_str("sixty")

    @pytest.mark.parametrize("text", ["nan", "NaN", "inf", "-Infinity", "sNaN"])
    def test_non_finite_rejected(self, text):
        with pytest.raises(ValueError):
            decimal_from_str(text)


class TestParseAmount:
    def test_suffixes(self):
        assert parse_amount("65m") == Decimal("65000000")
        assert parse_amount("1.5M") == Decimal("1500000")
        assert parse_amount("500k") == Decimal("500000")

    def test_plain(self):
        assert parse_amount("15.000.000") == Decimal("15000000")

    def test_decimal_comma_with_suffix(self):
        assert parse_amount("1,5m") == Decimal("1500000")

    @pytest.mark.parametrize("text", ["nan", "inf", "Infinity"])
    def test_non_finite_rejected(self, text):
        with pytest.raises(ValueError):
            parse_amount(text)

    def test_empty_is_invalid(self):
        with pytest.raises(ValueError):
            parse_amount("")


class TestParseRate:
    @pytest.mark.parametrize("text", ["11", "11%", "0.11", "11,0", " 11 % "])
    def test_percent_or_fraction(self, text):
        assert parse_rate(text) == Decimal("0.11")

    def test_three_decimals(self):
        assert parse_rate("0.125") == Decimal("0.125")
        assert parse_rate("12.5") == Decimal("0.125")

    def test_invalid(self):
        with pytest.raises(ValueError):
            parse_rate("eleven")

    @pytest.mark.parametrize("text", ["nan", "inf", "Infinity", "nan%"])
    def test_non_finite_rejected(self, text):
        with pytest.raises(ValueError):
            parse_rate(text)
