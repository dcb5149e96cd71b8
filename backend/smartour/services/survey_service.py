"""
Survey analytics: age-based breakdowns and free-text answer tallies.

Answer columns are optional. When schema probing finds no column for a
question, the report comes back empty (or zero-filled) with available=False
instead of failing the request.
"""

from collections import Counter, defaultdict
from typing import Any, Callable, Dict, List, Optional
import logging

from sqlalchemy.orm import Session

from smartour.core.monitoring import report_operation
from smartour.db.repositories import ReservationRepository, SurveyRepository
from smartour.db.schema import resolve_columns
from smartour.services.answer_rules import frequency_band, impact_score
from smartour.services.bucketing import AGE_BANDS, FREQUENCY_BANDS, IMPACT_BANDS, age_band, impact_band
from smartour.services.metrics import percentage, ratio, to_int, zero_filled

logger = logging.getLogger(__name__)

PRIORITY_FEATURE_LIMIT = 10
ACTIVITY_PREFERENCE_LIMIT = 8


@report_operation("age distribution")
def age_distribution(db: Session) -> Dict[str, Any]:
    counts: Counter = Counter()
    for age, participants in SurveyRepository(db).participants_by_age():
        band = age_band(age)
        if band is not None:
            counts[band] += to_int(participants)
    filled = zero_filled(AGE_BANDS, counts)
    return {
        "distribution": [{"ageGroup": band, "count": filled[band]} for band in AGE_BANDS],
        "total": sum(filled.values()),
    }


@report_operation("age and tour type heatmap")
def age_tour_heatmap(db: Session) -> Dict[str, Any]:
    """Reservations per (age band, tour type); tour types are those actually booked."""
    cells: Dict[str, Counter] = defaultdict(Counter)
    tour_types = set()
    for age, tour_type, count in ReservationRepository(db).counts_by_age_and_type():
        band = age_band(age)
        if band is None:
            continue
        cells[band][tour_type] += to_int(count)
        tour_types.add(tour_type)

    ordered_types = sorted(tour_types)
    matrix = {band: zero_filled(ordered_types, cells[band]) for band in AGE_BANDS}

    peak = None
    for band in AGE_BANDS:
        for tour_type in ordered_types:
            count = matrix[band][tour_type]
            if count > 0 and (peak is None or count > peak["count"]):
                peak = {"ageGroup": band, "tourType": tour_type, "count": count}

    return {
        "ageGroups": AGE_BANDS,
        "tourTypes": ordered_types,
        "matrix": matrix,
        "max": peak,
    }


@report_operation("age and campaign sensitivity")
def age_campaign_sensitivity(db: Session) -> Dict[str, Any]:
    split = {band: {"campaign": 0, "nonCampaign": 0} for band in AGE_BANDS}
    for age, attached, count in ReservationRepository(db).counts_by_age_and_campaign():
        band = age_band(age)
        if band is None:
            continue
        key = "campaign" if to_int(attached) else "nonCampaign"
        split[band][key] += to_int(count)

    bands = []
    most_sensitive = None
    for band in AGE_BANDS:
        campaign = split[band]["campaign"]
        non_campaign = split[band]["nonCampaign"]
        total = campaign + non_campaign
        entry = {
            "ageGroup": band,
            "campaign": campaign,
            "nonCampaign": non_campaign,
            "total": total,
            "campaignPercent": percentage(campaign, total),
            "nonCampaignPercent": percentage(non_campaign, total),
        }
        bands.append(entry)
        if total and (most_sensitive is None or entry["campaignPercent"] > most_sensitive["campaignPercent"]):
            most_sensitive = entry

    return {
        "bands": bands,
        "mostSensitive": (
            {"ageGroup": most_sensitive["ageGroup"], "campaignPercent": most_sensitive["campaignPercent"]}
            if most_sensitive else None
        ),
    }


# ---------------------------------------------------------------------------
# Free-text answers
# ---------------------------------------------------------------------------

def _answer_column(db: Session, field: str) -> Optional[str]:
    return resolve_columns(db, [field])[field]


def _top_answers(db: Session, field: str, key: str, limit: int) -> Dict[str, Any]:
    column = _answer_column(db, field)
    if column is None:
        return {"items": [], "available": False}
    rows = SurveyRepository(db).answer_counts(column, limit=limit)
    return {
        "items": [{key: answer, "count": to_int(count)} for answer, count in rows],
        "available": True,
    }


@report_operation("priority features")
def priority_features(db: Session) -> Dict[str, Any]:
    result = _top_answers(db, "priority_feature", "feature", PRIORITY_FEATURE_LIMIT)
    return {"features": result["items"], "available": result["available"]}


@report_operation("activity preferences")
def activity_preferences(db: Session) -> Dict[str, Any]:
    result = _top_answers(db, "activity_preference", "activity", ACTIVITY_PREFERENCE_LIMIT)
    items = result["items"]
    return {
        "activities": items,
        "top": items[0] if items else None,
        "available": result["available"],
    }


def _bucketed_answers(
    db: Session,
    field: str,
    classify: Callable[[Any], Any],
) -> Optional[List[tuple]]:
    """(classification, count) per distinct answer that classifies; None when the column is absent."""
    column = _answer_column(db, field)
    if column is None:
        return None
    classified = []
    for answer, count in SurveyRepository(db).answer_counts(column):
        value = classify(answer)
        if value is None:
            logger.debug(f"Dropping unparseable {field} answer: {answer!r}")
            continue
        classified.append((value, to_int(count)))
    return classified


@report_operation("campaign impact distribution")
def campaign_impact_distribution(db: Session) -> Dict[str, Any]:
    scored = _bucketed_answers(db, "campaign_impact", impact_score)
    counts: Counter = Counter()
    score_total = 0
    responses = 0
    for score, count in scored or []:
        counts[impact_band(score)] += count
        score_total += score * count
        responses += count

    filled = zero_filled(IMPACT_BANDS, counts)
    return {
        "distribution": [{"level": band, "count": filled[band]} for band in IMPACT_BANDS],
        "averageScore": round(ratio(score_total, responses), 1),
        "totalResponses": responses,
        "available": scored is not None,
    }


@report_operation("vacation frequency distribution")
def vacation_frequency_distribution(db: Session) -> Dict[str, Any]:
    banded = _bucketed_answers(db, "vacation_frequency", frequency_band)
    counts: Counter = Counter()
    for band, count in banded or []:
        counts[band] += count

    filled = zero_filled(FREQUENCY_BANDS, counts)
    return {
        "distribution": [{"frequency": band, "count": filled[band]} for band in FREQUENCY_BANDS],
        "totalResponses": sum(filled.values()),
        "available": banded is not None,
    }
