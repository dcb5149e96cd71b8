"""
Aggregation primitive tests: coercion, ratios, percent change, zero-fill, windows.

Run with: pytest backend/tests/test_metrics.py -v
"""
from datetime import date
from decimal import Decimal

import pytest

from smartour.services.metrics import (
    month_windows,
    last_month_start,
    percent_change,
    percentage,
    ratio,
    round2,
    to_float,
    to_int,
    trend_start,
    zero_filled,
)


class TestCoercion:

    @pytest.mark.parametrize("raw, expected", [
        (None, 0.0),
        (Decimal("12.50"), 12.5),
        ("7", 7.0),
        ("not a number", 0.0),
        (float("nan"), 0.0),
        (float("inf"), 0.0),
        (3, 3.0),
    ])
    def test_to_float(self, raw, expected):
        assert to_float(raw) == expected

    def test_to_int_truncates(self):
        assert to_int(Decimal("4.9")) == 4
        assert to_int(None) == 0

    def test_round2(self):
        assert round2(Decimal("1.23456")) == 1.23


class TestRatios:

    def test_ratio_zero_denominator(self):
        assert ratio(5, 0) == 0.0
        assert ratio(5, None) == 0.0

    def test_percentage_rounding(self):
        assert percentage(1, 3) == 33.33
        assert percentage(1, 3, digits=1) == 33.3

    def test_percentage_of_nothing(self):
        assert percentage(10, 0) == 0.0


class TestPercentChange:
    """previous -> current, as used by the month-over-month report."""

    def test_both_zero(self):
        assert percent_change(0, 0) == 0

    def test_growth_from_zero_is_100(self):
        assert percent_change(0, 5) == 100
        assert percent_change(0, 0.01) == 100

    def test_regular_change(self):
        assert percent_change(200, 250) == 25.0
        assert percent_change(3, 2) == -33.33

    def test_drop_to_zero(self):
        assert percent_change(40, 0) == -100.0

    def test_null_inputs(self):
        assert percent_change(None, None) == 0


class TestZeroFilled:

    def test_missing_keys_get_default(self):
        filled = zero_filled(["a", "b", "c"], {"b": 4})
        assert filled == {"a": 0, "b": 4, "c": 0}
        assert list(filled) == ["a", "b", "c"]

    def test_unknown_keys_are_dropped(self):
        assert zero_filled(["a"], {"a": 1, "z": 9}) == {"a": 1}


class TestWindows:

    def test_last_month_is_30_days(self):
        assert last_month_start(date(2026, 3, 31)) == date(2026, 3, 1)

    def test_month_windows_are_adjacent(self):
        (cur_start, cur_end), (prev_start, prev_end) = month_windows(date(2026, 10, 19))
        assert cur_end == date(2026, 10, 19)
        assert prev_end == cur_start
        assert (cur_end - cur_start).days == 30
        assert (prev_end - prev_start).days == 30

    def test_trend_start(self):
        assert trend_start(date(2026, 10, 19)) == date(2026, 7, 21)
