"""
Operational KPIs for the dashboard home page.

Rolling windows are computed here from `today` (injectable for tests) and
bound as query parameters:
  - last month:        rezervasyon_tarihi >= today - 30 days
  - month-over-month:  [today-30, today) vs [today-60, today-30)
  - trend series:      rezervasyon_tarihi >= today - 90 days
"""

from collections import defaultdict
from datetime import date
from typing import Any, Dict, List, Optional
import logging

from sqlalchemy.orm import Session

from smartour.core.errors import NotFoundError
from smartour.core.monitoring import report_operation
from smartour.db.repositories import (
    CustomerRepository,
    ReservationRepository,
    SurveyRepository,
    TourRepository,
)
from smartour.services.bucketing import (
    DURATION_BANDS,
    WARNING_OCCUPANCY,
    duration_band,
    occupancy_alert_level,
)
from smartour.services.metrics import (
    last_month_start,
    month_windows,
    percent_change,
    percentage,
    ratio,
    round2,
    to_float,
    to_int,
    trend_start,
)

logger = logging.getLogger(__name__)


@report_operation("KPI data")
def overview(db: Session) -> Dict[str, Any]:
    total_customers = to_int(CustomerRepository(db).count())
    participants = to_int(SurveyRepository(db).participant_count())
    return {
        "totalCustomers": total_customers,
        "totalReservations": to_int(ReservationRepository(db).count()),
        "totalTours": to_int(TourRepository(db).count()),
        "surveyParticipants": participants,
        "surveyParticipationRate": percentage(participants, total_customers),
    }


@report_operation("monthly profit data")
def monthly_profit(db: Session, today: Optional[date] = None) -> Dict[str, float]:
    start = last_month_start(today)
    return {"monthlyProfit": to_float(ReservationRepository(db).profit_since(start))}


@report_operation("monthly insights data")
def monthly_insights(db: Session, today: Optional[date] = None) -> Dict[str, float]:
    """Last 30 days against the 30 days before, on volume, profit and campaign share."""
    repo = ReservationRepository(db)
    (cur_start, cur_end), (prev_start, prev_end) = month_windows(today)

    cur_count, cur_profit, cur_campaign = (to_float(v) for v in repo.window_summary(cur_start, cur_end))
    prev_count, prev_profit, prev_campaign = (to_float(v) for v in repo.window_summary(prev_start, prev_end))

    cur_avg = ratio(cur_profit, cur_count)
    prev_avg = ratio(prev_profit, prev_count)
    cur_rate = percentage(cur_campaign, cur_count)
    prev_rate = percentage(prev_campaign, prev_count)

    return {
        "currentReservations": int(cur_count),
        "previousReservations": int(prev_count),
        "reservationChangePercent": percent_change(prev_count, cur_count),
        "currentProfit": round2(cur_profit),
        "previousProfit": round2(prev_profit),
        "profitChangePercent": percent_change(prev_profit, cur_profit),
        "currentAverageProfit": round2(cur_avg),
        "previousAverageProfit": round2(prev_avg),
        "averageProfitChangePercent": percent_change(prev_avg, cur_avg),
        "campaignReservationRate": cur_rate,
        "previousCampaignReservationRate": prev_rate,
        "campaignRateChangePercent": percent_change(prev_rate, cur_rate),
    }


@report_operation("featured tours")
def featured_tours(db: Session, today: Optional[date] = None) -> Dict[str, Any]:
    """
    Most profitable and riskiest tour of the last month.

    Riskiest = lowest occupancy among tours booked in the window; with no
    bookings at all it falls back to the emptiest tour overall.
    """
    start = last_month_start(today)
    reservations = ReservationRepository(db)

    best = reservations.most_profitable_tour(start)
    most_profitable = None
    if best is not None:
        most_profitable = {
            "tourId": best.tur_id,
            "tourName": best.tur_adi,
            "totalProfit": round2(best.total_profit),
        }

    risky = reservations.lowest_occupancy_booked_tour(start)
    fallback = False
    if risky is None:
        risky = TourRepository(db).lowest_occupancy()
        fallback = True
    riskiest = None
    if risky is not None:
        riskiest = {
            "tourId": risky.tur_id,
            "tourName": risky.tur_adi,
            "occupancy": round2(risky.doluluk_orani),
            "fallback": fallback,
        }

    return {"mostProfitable": most_profitable, "riskiest": riskiest}


@report_operation("critical occupancy alerts")
def critical_occupancy_alerts(db: Session) -> Dict[str, List[Dict[str, Any]]]:
    alerts = []
    for row in TourRepository(db).at_or_below_occupancy(WARNING_OCCUPANCY):
        occupancy = to_float(row.doluluk_orani)
        alerts.append({
            "tourId": row.tur_id,
            "tourName": row.tur_adi,
            "dolulukOrani": occupancy,
            "alertLevel": occupancy_alert_level(occupancy),
        })
    return {"alerts": alerts}


@report_operation("tour details")
def tour_performance(db: Session, tur_id: int) -> Dict[str, Any]:
    tour = TourRepository(db).get(tur_id)
    if tour is None:
        raise NotFoundError(f"Tour {tur_id} not found", error="Tour not found")

    count, profit = ReservationRepository(db).tour_totals(tur_id)
    count = to_int(count)
    capacity = to_int(tour.kapasite) or 1
    return {
        "tourId": tour.tur_id,
        "tourName": tour.tur_adi,
        "tourType": tour.tur_turu,
        "capacity": to_int(tour.kapasite),
        "price": to_float(tour.fiyat),
        "cost": to_float(tour.maliyet),
        "durationDays": tour.sure_gun,
        "occupancy": to_float(tour.doluluk_orani),
        "alertLevel": occupancy_alert_level(tour.doluluk_orani),
        "reservationCount": count,
        "totalProfit": round2(profit),
        "averageProfit": round2(ratio(profit, count)),
        "computedOccupancy": round2(count * 100 / capacity),
    }


# ---------------------------------------------------------------------------
# Tour types
# ---------------------------------------------------------------------------

@report_operation("tour type stats")
def tour_type_stats(db: Session) -> List[Dict[str, Any]]:
    return [
        {"tur_turu": tour_type, "toplam": to_int(total)}
        for tour_type, total in TourRepository(db).count_by_type()
    ]


def _reservations_by_type(db: Session) -> List[Dict[str, Any]]:
    rows = [
        {"tourType": tour_type, "reservationCount": to_int(count)}
        for tour_type, count in ReservationRepository(db).counts_by_tour_type()
    ]
    return sorted(rows, key=lambda r: r["reservationCount"], reverse=True)


def _occupancy_by_type(db: Session) -> List[Dict[str, Any]]:
    rows = [
        {"tourType": tour_type, "averageOccupancy": round2(avg)}
        for tour_type, avg in TourRepository(db).average_occupancy_by_type()
    ]
    return sorted(rows, key=lambda r: r["averageOccupancy"], reverse=True)


@report_operation("reservations by tour type")
def reservations_by_tour_type(db: Session) -> List[Dict[str, Any]]:
    return _reservations_by_type(db)


@report_operation("occupancy by tour type")
def occupancy_by_tour_type(db: Session) -> List[Dict[str, Any]]:
    return _occupancy_by_type(db)


@report_operation("tour type leaders")
def tour_type_leaders(db: Session) -> Dict[str, Any]:
    by_reservations = _reservations_by_type(db)
    by_occupancy = _occupancy_by_type(db)
    return {
        "topByReservations": by_reservations[0] if by_reservations else None,
        "topByOccupancy": by_occupancy[0] if by_occupancy else None,
    }


# ---------------------------------------------------------------------------
# Durations
# ---------------------------------------------------------------------------

def _duration_bands(db: Session, start: Optional[date]) -> List[Dict[str, Any]]:
    """Per duration band: reservations, distinct tours, weekday/weekend split."""
    stats = {
        band: {"reservations": 0, "tours": set(), "weekday": 0, "weekend": 0}
        for band in DURATION_BANDS
    }
    for tur_id, days, booked_on, count in ReservationRepository(db).counts_by_tour_day(start):
        band = duration_band(days)
        if band is None:
            continue
        count = to_int(count)
        entry = stats[band]
        entry["reservations"] += count
        entry["tours"].add(tur_id)
        if booked_on.weekday() >= 5:
            entry["weekend"] += count
        else:
            entry["weekday"] += count

    return [
        {
            "band": band,
            "reservationCount": stats[band]["reservations"],
            "tourCount": len(stats[band]["tours"]),
            "weekdayReservations": stats[band]["weekday"],
            "weekendReservations": stats[band]["weekend"],
        }
        for band in DURATION_BANDS
    ]


@report_operation("duration insights")
def duration_insights(db: Session, today: Optional[date] = None) -> Dict[str, Any]:
    bands = _duration_bands(db, last_month_start(today))
    total = sum(b["reservationCount"] for b in bands)
    weekend = sum(b["weekendReservations"] for b in bands)
    top = max(bands, key=lambda b: b["reservationCount"]) if total else None
    return {
        "bands": bands,
        "totalReservations": total,
        "topBand": top["band"] if top else None,
        "weekendShare": percentage(weekend, total),
    }


@report_operation("duration analysis")
def duration_analysis(db: Session) -> Dict[str, Any]:
    bands = _duration_bands(db, None)
    return {
        "bands": bands,
        "totalReservations": sum(b["reservationCount"] for b in bands),
    }


# ---------------------------------------------------------------------------
# Trends
# ---------------------------------------------------------------------------

@report_operation("reservation trends")
def reservation_trends(db: Session, today: Optional[date] = None) -> Dict[str, Any]:
    """Last three months of reservations per (month, tour type), oldest month first."""
    months: Dict[tuple, Dict[str, int]] = defaultdict(dict)
    tour_types = set()
    for year, month, tour_type, count in ReservationRepository(db).monthly_counts_by_type(trend_start(today)):
        key = (to_int(year), to_int(month))
        months[key][tour_type] = months[key].get(tour_type, 0) + to_int(count)
        tour_types.add(tour_type)

    ordered_types = sorted(tour_types)
    series = []
    for year, month in sorted(months):
        counts = {t: months[(year, month)].get(t, 0) for t in ordered_types}
        series.append({
            "year": year,
            "month": month,
            "label": f"{year}-{month:02d}",
            "counts": counts,
            "total": sum(counts.values()),
        })
    return {"tourTypes": ordered_types, "months": series}
