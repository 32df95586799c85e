import logging
from datetime import date
from decimal import Decimal

import pytest

from tilgungsplan.utils import add_months, month_end, next_month_end, parse_year_month, round2, to_decimal


class TestRound2:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (1.005, Decimal("1.01")),
            (123.454, Decimal("123.45")),
            (123.455, Decimal("123.46")),
            (Decimal("0.125"), Decimal("0.13")),
            (42, Decimal("42.00")),
            ("99.995", Decimal("100.00")),
        ],
    )
    def test_round_half_up(self, value, expected):
        assert round2(value) == expected

    def test_amount_wider_than_default_precision(self):
        assert round2(10**27) == Decimal(10**27)
        assert round2(Decimal("123456789012345678901234567890.125")) == Decimal(
            "123456789012345678901234567890.13"
        )

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf"), Decimal("NaN"), "abc"])
    def test_invalid_values_become_zero(self, value, caplog):
        with caplog.at_level(logging.WARNING, logger="tilgungsplan.utils"):
            assert round2(value) == 0
        assert "invalid value" in caplog.text


class TestToDecimal:
    def test_float_uses_shortest_repr(self):
        assert to_decimal(1.005) == Decimal("1.005")

    def test_decimal_is_unchanged(self):
        value = Decimal("3.14")
        assert to_decimal(value) is value


class TestMonthEnd:
    def test_thirty_one_day_month(self):
        assert month_end(date(2026, 1, 1)) == date(2026, 1, 31)

    def test_thirty_day_month(self):
        assert month_end(date(2026, 4, 15)) == date(2026, 4, 30)

    def test_leap_february(self):
        assert month_end(date(2028, 2, 3)) == date(2028, 2, 29)

    def test_common_february(self):
        assert month_end(date(2027, 2, 3)) == date(2027, 2, 28)


class TestNextMonthEnd:
    def test_year_boundary(self):
        assert next_month_end(date(2027, 12, 31)) == date(2028, 1, 31)

    def test_into_leap_february(self):
        assert next_month_end(date(2028, 1, 31)) == date(2028, 2, 29)

    def test_into_common_february(self):
        assert next_month_end(date(2027, 1, 31)) == date(2027, 2, 28)

    def test_out_of_february(self):
        assert next_month_end(date(2027, 2, 28)) == date(2027, 3, 31)

    def test_successive_steps_stay_on_month_end(self):
        current = date(2026, 1, 31)
        for _ in range(24):
            current = next_month_end(current)
            assert current == month_end(current)
        assert current == date(2028, 1, 31)


class TestAddMonths:
    def test_clamps_day(self):
        assert add_months(date(2026, 1, 31), 1) == date(2026, 2, 28)

    def test_crosses_year(self):
        assert add_months(date(2026, 11, 1), 3) == date(2027, 2, 1)


class TestParseYearMonth:
    def test_valid(self):
        assert parse_year_month("2026-03") == date(2026, 3, 1)

    @pytest.mark.parametrize("value", ["2026", "2026-13", "march"])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_year_month(value)
