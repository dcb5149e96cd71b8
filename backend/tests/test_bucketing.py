"""
Classification table tests.

Ensures:
- Age bands cover every age from 18 up and exclude minors / unknown ages
- Duration bands have inclusive upper bounds (2 and 5 days)
- Occupancy alerts split [0, 55] into critical / warning with nothing above 55
- Occupancy-impact labels use +/-5 point thresholds
"""

import pytest

from smartour.services.bucketing import (
    AGE_BANDS,
    DURATION_BANDS,
    IMPACT_BANDS,
    age_band,
    duration_band,
    impact_band,
    occupancy_alert_level,
    occupancy_impact_label,
)


class TestAgeBand:

    @pytest.mark.parametrize("age, band", [
        (18, "18-24"), (24, "18-24"),
        (25, "25-34"), (34, "25-34"),
        (35, "35-44"), (44, "35-44"),
        (45, "45-54"), (54, "45-54"),
        (55, "55+"), (99, "55+"),
    ])
    def test_boundaries(self, age, band):
        assert age_band(age) == band

    def test_total_from_18_upwards(self):
        for age in range(18, 121):
            assert age_band(age) in AGE_BANDS

    @pytest.mark.parametrize("age", [None, 0, 12, 17])
    def test_minors_and_unknown_are_excluded(self, age):
        assert age_band(age) is None


class TestDurationBand:

    @pytest.mark.parametrize("days, band", [
        (1, "1-2 gün"), (2, "1-2 gün"),
        (3, "3-5 gün"), (5, "3-5 gün"),
        (6, "6+ gün"), (21, "6+ gün"),
    ])
    def test_boundaries(self, days, band):
        assert duration_band(days) == band

    @pytest.mark.parametrize("days", [None, 0, -1])
    def test_unknown_duration_excluded(self, days):
        assert duration_band(days) is None

    def test_band_order(self):
        assert DURATION_BANDS == ["1-2 gün", "3-5 gün", "6+ gün"]


class TestOccupancyAlertLevel:

    def test_critical_and_warning_partition_0_to_55(self):
        """Every value in [0, 55] gets exactly one of the two levels."""
        steps = [x / 2 for x in range(0, 111)]  # 0.0, 0.5, ... 55.0
        for occupancy in steps:
            level = occupancy_alert_level(occupancy)
            assert level in ("critical", "warning")
            assert (level == "critical") == (occupancy <= 40)

    def test_boundaries(self):
        assert occupancy_alert_level(40) == "critical"
        assert occupancy_alert_level(40.01) == "warning"
        assert occupancy_alert_level(55) == "warning"

    @pytest.mark.parametrize("occupancy", [55.01, 60, 100])
    def test_above_55_has_no_alert(self, occupancy):
        assert occupancy_alert_level(occupancy) is None


class TestImpactBand:

    @pytest.mark.parametrize("score, band", [
        (0, "Low"), (1, "Low"), (2, "Medium"), (3, "Medium"), (4, "High"), (5, "High"),
    ])
    def test_scores(self, score, band):
        assert impact_band(score) == band

    @pytest.mark.parametrize("score", [None, -1, 6])
    def test_out_of_scale(self, score):
        assert impact_band(score) is None

    def test_band_order(self):
        assert IMPACT_BANDS == ["Low", "Medium", "High"]


class TestOccupancyImpactLabel:

    @pytest.mark.parametrize("delta, label", [
        (5.01, "Positive impact"),
        (5, "Neutral"),
        (0, "Neutral"),
        (-5, "Neutral"),
        (-5.01, "Negative impact"),
    ])
    def test_thresholds(self, delta, label):
        assert occupancy_impact_label(delta) == label
