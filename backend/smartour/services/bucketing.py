"""
Fixed classification tables used across reports.

Each function maps a raw value to one label of a closed list, or None when
the value falls outside every bucket (those rows are left out of the report).
"""

from typing import Any, Optional

from smartour.services.metrics import to_float

# ---- Age bands (customers under 18 are never reported) ----
AGE_BANDS = ["18-24", "25-34", "35-44", "45-54", "55+"]

# ---- Tour duration bands, in days ----
DURATION_BANDS = ["1-2 gün", "3-5 gün", "6+ gün"]

# ---- Occupancy alert thresholds (percent) ----
CRITICAL_OCCUPANCY = 40
WARNING_OCCUPANCY = 55
LOW_OCCUPANCY = 50  # Campaign KPI: tours still below this despite campaigns

# ---- Campaign impact (0-5 survey score) ----
IMPACT_BANDS = ["Low", "Medium", "High"]

# ---- Vacations per year ----
FREQUENCY_BANDS = ["1", "2", "3", "4+"]

# ---- Occupancy change around a campaign, in percentage points ----
IMPACT_DELTA_THRESHOLD = 5
POSITIVE_IMPACT = "Positive impact"
NEUTRAL_IMPACT = "Neutral"
NEGATIVE_IMPACT = "Negative impact"


def age_band(age: Any) -> Optional[str]:
    if age is None:
        return None
    value = to_float(age)
    if value < 18:
        return None
    if value < 25:
        return "18-24"
    if value < 35:
        return "25-34"
    if value < 45:
        return "35-44"
    if value < 55:
        return "45-54"
    return "55+"


def duration_band(days: Any) -> Optional[str]:
    if days is None:
        return None
    value = to_float(days)
    if value < 1:
        return None
    if value <= 2:
        return "1-2 gün"
    if value <= 5:
        return "3-5 gün"
    return "6+ gün"


def occupancy_alert_level(occupancy: Any) -> Optional[str]:
    """critical up to 40%, warning up to 55%, no alert above that."""
    value = to_float(occupancy)
    if value <= CRITICAL_OCCUPANCY:
        return "critical"
    if value <= WARNING_OCCUPANCY:
        return "warning"
    return None


def impact_band(score: Optional[int]) -> Optional[str]:
    if score is None or score < 0 or score > 5:
        return None
    if score <= 1:
        return "Low"
    if score <= 3:
        return "Medium"
    return "High"


def occupancy_impact_label(delta: float) -> str:
    if delta > IMPACT_DELTA_THRESHOLD:
        return POSITIVE_IMPACT
    if delta < -IMPACT_DELTA_THRESHOLD:
        return NEGATIVE_IMPACT
    return NEUTRAL_IMPACT
