"""
Aggregation primitives shared by every report.

Database drivers hand back None, Decimal or even strings for aggregates;
everything goes through to_float / to_int before arithmetic so JSON never
sees null or NaN where a number is expected.
"""

from datetime import date, timedelta
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple
import math

LAST_MONTH_DAYS = 30
TREND_DAYS = 90


def to_float(value: Any) -> float:
    """Coerce an aggregate to float; None, NaN and garbage become 0.0."""
    if value is None:
        return 0.0
    try:
        result = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(result) or math.isinf(result):
        return 0.0
    return result


def to_int(value: Any) -> int:
    return int(to_float(value))


def round2(value: Any) -> float:
    return round(to_float(value), 2)


def ratio(numerator: Any, denominator: Any) -> float:
    """numerator / denominator, 0 when the denominator is 0."""
    den = to_float(denominator)
    if den == 0:
        return 0.0
    return to_float(numerator) / den


def percentage(part: Any, whole: Any, digits: int = 2) -> float:
    return round(ratio(part, whole) * 100, digits)


def percent_change(previous: Any, current: Any) -> float:
    """
    (current - previous) / previous * 100, rounded to 2 decimals.

    previous == 0 gives 100 when current grew above zero, otherwise 0.
    """
    prev = to_float(previous)
    cur = to_float(current)
    if prev == 0:
        return 100.0 if cur > 0 else 0.0
    return round((cur - prev) / prev * 100, 2)


def zero_filled(keys: Iterable[str], counts: Mapping[str, Any], default: Any = 0) -> Dict[str, Any]:
    """Merge aggregated counts onto a fixed key list so empty buckets still show up."""
    return {key: counts.get(key, default) for key in keys}


def last_month_start(today: Optional[date] = None) -> date:
    today = today or date.today()
    return today - timedelta(days=LAST_MONTH_DAYS)


def month_windows(today: Optional[date] = None) -> Tuple[Tuple[date, date], Tuple[date, date]]:
    """
    Half-open (start, end) windows for the last 30 days and the 30 days before.
    """
    today = today or date.today()
    current_start = today - timedelta(days=LAST_MONTH_DAYS)
    previous_start = today - timedelta(days=2 * LAST_MONTH_DAYS)
    return (current_start, today), (previous_start, current_start)


def trend_start(today: Optional[date] = None) -> date:
    today = today or date.today()
    return today - timedelta(days=TREND_DAYS)
