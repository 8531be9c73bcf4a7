"""
Unit tests for unit conversion helpers.
"""

from decimal import Decimal

import pytest

from decrowdfund.shared.exceptions import ValidationException
from decrowdfund.utils.units import (
    from_base_units,
    parse_decimal,
    parse_int,
    rating_from_scaled,
    to_base_units,
)


class TestFromBaseUnits:
    @pytest.mark.parametrize(
        "amount, expected",
        [
            (0, Decimal(0)),
            (10**18, Decimal(1)),
            (5 * 10**17, Decimal("0.5")),
            (1, Decimal("0.000000000000000001")),
            ("2000000000000000000", Decimal(2)),
            (None, Decimal(0)),
        ],
    )
    def test_converts_to_ether(self, amount, expected):
        result = from_base_units(amount)
        assert isinstance(result, Decimal)
        assert result == expected


class TestToBaseUnits:
    def test_decimal_string(self):
        assert to_base_units("0.5") == 5 * 10**17

    def test_whitespace_is_ignored(self):
        assert to_base_units(" 1 ") == 10**18

    @pytest.mark.parametrize("value", ["", "   ", None])
    def test_empty_rejected(self, value):
        with pytest.raises(ValidationException, match="required"):
            to_base_units(value, "goal")

    @pytest.mark.parametrize("value", ["abc", "1,5", "0x10"])
    def test_not_a_number(self, value):
        with pytest.raises(ValidationException, match="must be a number"):
            to_base_units(value)

    @pytest.mark.parametrize("value", ["NaN", "Infinity"])
    def test_non_finite(self, value):
        with pytest.raises(ValidationException, match="finite"):
            to_base_units(value)

    def test_negative(self):
        with pytest.raises(ValidationException, match="cannot be negative"):
            to_base_units("-1", "donation")

    @pytest.mark.parametrize(
        "value", ["0.0000000000000000001", "1.0000000000000000005"]
    )
    def test_below_one_wei_rejected(self, value):
        """Test amounts that would be truncated to a different wei value."""
        with pytest.raises(ValidationException, match="too many decimal places"):
            to_base_units(value, "donation")

    def test_smallest_unit_accepted(self):
        assert to_base_units("0.000000000000000001") == 1


class TestParseInt:
    def test_whole_number(self):
        assert parse_int("100", "duration") == 100
        assert parse_int("100.0", "duration") == 100

    def test_negative_rejected(self):
        with pytest.raises(ValidationException, match="cannot be negative"):
            parse_int("-60", "deadline extension")

    def test_fraction_rejected(self):
        with pytest.raises(ValidationException, match="whole number"):
            parse_int("1.5", "duration")


class TestParseDecimal:
    def test_field_name_in_message(self):
        with pytest.raises(ValidationException) as exc_info:
            parse_decimal("x", "goal")
        assert exc_info.value.message.startswith("goal")


class TestRatingFromScaled:
    @pytest.mark.parametrize(
        "scaled, expected",
        [(0, "0.00"), (437, "4.37"), (500, "5.00"), (None, "0.00")],
    )
    def test_scaling(self, scaled, expected):
        assert rating_from_scaled(scaled) == Decimal(expected)
