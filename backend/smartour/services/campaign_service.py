"""
Campaign analytics: KPIs, campaign vs non-campaign comparison, ROI ranking,
occupancy before/after campaigns, what-if profit simulations and the
campaign x tour-type impact matrix.

ROI here is profit earned per unit of discount granted:
    roi = total_profit / discount_amount * 100
not a standard financial ROI.
"""

from collections import defaultdict
from typing import Any, Dict, List, Optional
import logging

from sqlalchemy.orm import Session

from smartour.core.errors import NotFoundError, ValidationError
from smartour.core.monitoring import report_operation
from smartour.db.repositories import MATRIX_AGGREGATES, CampaignRepository, ReservationRepository
from smartour.services.bucketing import LOW_OCCUPANCY, occupancy_impact_label
from smartour.services.metrics import percentage, ratio, round2, to_float, to_int

logger = logging.getLogger(__name__)

# Comparison metric -> index into ReservationRepository.split_by_campaign rows
COMPARISON_METRICS = {
    "rezervasyon_sayisi": 1,
    "ortalama_kar": 2,
    "toplam_kar": 3,
    "ortalama_doluluk": 4,
}

DEFAULT_MATRIX_METRIC = "avg_profit"
COUNT_MATRIX_METRICS = {"reservation_count"}

MAX_SIMULATED_DISCOUNT = 50


def _campaign_or_404(db: Session, kampanya_id: int):
    campaign = CampaignRepository(db).get(kampanya_id)
    if campaign is None:
        raise NotFoundError(f"Campaign {kampanya_id} not found", error="Campaign not found")
    return campaign


def _campaign_ref(campaign) -> Dict[str, Any]:
    return {
        "campaignId": campaign.kampanya_id,
        "campaignName": campaign.kampanya_adi,
        "discountRate": to_float(campaign.indirim_orani),
    }


@report_operation("campaigns")
def list_campaigns(db: Session) -> List[Dict[str, Any]]:
    campaigns = []
    for campaign in CampaignRepository(db).list_all():
        entry = _campaign_ref(campaign)
        entry["startDate"] = campaign.baslangic_tarihi.isoformat() if campaign.baslangic_tarihi else None
        entry["endDate"] = campaign.bitis_tarihi.isoformat() if campaign.bitis_tarihi else None
        campaigns.append(entry)
    return campaigns


@report_operation("campaign KPIs")
def campaign_kpis(db: Session) -> Dict[str, Any]:
    repo = ReservationRepository(db)
    total, attached, profit = repo.campaign_summary()
    return {
        "campaignReservationRate": percentage(attached, total, digits=1),
        "totalCampaignProfit": round2(profit),
        "lowOccupancyCampaignTours": to_int(repo.low_occupancy_campaign_tours(LOW_OCCUPANCY)),
        "campaignReservations": to_int(attached),
        "totalReservations": to_int(total),
    }


@report_operation("campaign comparison")
def campaign_comparison(db: Session, metric: Optional[str]) -> Dict[str, float]:
    """Selected metric for campaign-attached vs other reservations."""
    if not metric:
        raise ValidationError("metric parameter is required")
    if metric not in COMPARISON_METRICS:
        raise ValidationError(
            f"Unknown metric '{metric}'. Expected one of: {', '.join(COMPARISON_METRICS)}"
        )
    index = COMPARISON_METRICS[metric]
    values = {1: 0.0, 0: 0.0}
    for row in ReservationRepository(db).split_by_campaign():
        values[to_int(row[0])] = to_float(row[index])

    if metric == "rezervasyon_sayisi":
        return {"kampanyali": int(values[1]), "kampanyasiz": int(values[0])}
    return {"kampanyali": round2(values[1]), "kampanyasiz": round2(values[0])}


@report_operation("campaign ROI")
def campaign_roi(db: Session) -> List[Dict[str, Any]]:
    ranking = []
    for kampanya_id, name, rate, profit, discount in CampaignRepository(db).profit_and_discount():
        profit = to_float(profit)
        discount = to_float(discount)
        roi = round2(profit / discount * 100) if discount else 0.0
        ranking.append({
            "campaignId": kampanya_id,
            "campaignName": name,
            "discountRate": to_float(rate),
            "totalProfit": round2(profit),
            "discountAmount": round2(discount),
            "roi": roi,
        })
    ranking.sort(key=lambda r: r["roi"], reverse=True)
    return ranking


# ---------------------------------------------------------------------------
# Occupancy before / after campaigns
# ---------------------------------------------------------------------------

def _occupancy(count: Any, capacity: Any) -> float:
    """Recomputed occupancy: reservations * 100 / capacity (missing capacity counts as 1)."""
    return to_int(count) * 100 / (to_int(capacity) or 1)


def _impact_rows(db: Session) -> List[Dict[str, Any]]:
    rows = []
    for row in CampaignRepository(db).occupancy_around_campaigns():
        before = _occupancy(row.before_count, row.kapasite)
        after = _occupancy(row.after_count, row.kapasite)
        delta = after - before
        rows.append({
            "campaignId": row.kampanya_id,
            "campaignName": row.kampanya_adi,
            "tourId": row.tur_id,
            "tourName": row.tur_adi,
            "occupancyBefore": round2(before),
            "occupancyAfter": round2(after),
            "delta": round2(delta),
            "impact": occupancy_impact_label(delta),
        })
    return rows


@report_operation("campaign occupancy impact")
def occupancy_impact_summary(db: Session) -> Dict[str, Any]:
    """Before/after occupancy per campaign, averaged over the tours booked under it."""
    grouped: Dict[Any, List[Dict[str, Any]]] = defaultdict(list)
    for row in _impact_rows(db):
        grouped[(row["campaignId"], row["campaignName"])].append(row)

    campaigns = []
    for (kampanya_id, name), rows in sorted(grouped.items(), key=lambda item: item[0][0]):
        before = sum(r["occupancyBefore"] for r in rows) / len(rows)
        after = sum(r["occupancyAfter"] for r in rows) / len(rows)
        campaigns.append({
            "campaignId": kampanya_id,
            "campaignName": name,
            "tourCount": len(rows),
            "averageBefore": round2(before),
            "averageAfter": round2(after),
            "averageDelta": round2(after - before),
        })

    overall_before = ratio(sum(c["averageBefore"] for c in campaigns), len(campaigns))
    overall_after = ratio(sum(c["averageAfter"] for c in campaigns), len(campaigns))
    return {
        "campaigns": campaigns,
        "overallBefore": round2(overall_before),
        "overallAfter": round2(overall_after),
        "overallDelta": round2(overall_after - overall_before),
    }


@report_operation("campaign occupancy impact table")
def occupancy_impact_table(db: Session) -> List[Dict[str, Any]]:
    return sorted(_impact_rows(db), key=lambda r: r["delta"], reverse=True)


# ---------------------------------------------------------------------------
# What-if simulations
# ---------------------------------------------------------------------------

def parse_campaign_id(raw: Optional[str]) -> int:
    if raw is None or str(raw).strip() == "":
        raise ValidationError("campaign_id parameter is required")
    try:
        return int(str(raw).strip())
    except ValueError:
        raise ValidationError(f"campaign_id must be an integer, got '{raw}'")


def parse_simulated_discount(raw: Optional[str]) -> float:
    if raw is None or str(raw).strip() == "":
        raise ValidationError("simulated_discount parameter is required")
    try:
        value = float(str(raw).strip())
    except ValueError:
        raise ValidationError(f"simulated_discount must be a number, got '{raw}'")
    if not 0 <= value <= MAX_SIMULATED_DISCOUNT:
        raise ValidationError(
            f"simulated_discount must be between 0 and {MAX_SIMULATED_DISCOUNT}, got {value:g}"
        )
    return value


def discounted_profit(price: Any, cost: Any, party_size: Any, discount: float) -> float:
    """Profit of one reservation at a given discount percentage."""
    party = to_int(party_size) or 1
    return to_float(price) * party * (1 - discount / 100) - to_float(cost) * party


def _simulation_payload(campaign, original: List[float], simulated: List[float]) -> Dict[str, Any]:
    original_total = sum(original)
    simulated_total = sum(simulated)
    count = len(original)
    change = 0.0
    if original_total != 0:
        change = round2((simulated_total - original_total) / abs(original_total) * 100)
    payload = _campaign_ref(campaign)
    payload.update({
        "reservationCount": count,
        "originalTotalProfit": round2(original_total),
        "simulatedTotalProfit": round2(simulated_total),
        "originalAverageProfit": round2(ratio(original_total, count)),
        "simulatedAverageProfit": round2(ratio(simulated_total, count)),
        "profitDifference": round2(simulated_total - original_total),
        "changePercent": change,
    })
    return payload


@report_operation("discount simulation")
def simulate_discount(db: Session, kampanya_id: int, simulated_discount: float) -> Dict[str, Any]:
    """Recompute a campaign's profit as if it had offered simulated_discount percent."""
    campaign = _campaign_or_404(db, kampanya_id)
    actual = to_float(campaign.indirim_orani)
    original, simulated = [], []
    for price, cost, party, _stored in CampaignRepository(db).reservations_for_simulation(kampanya_id):
        original.append(discounted_profit(price, cost, party, actual))
        simulated.append(discounted_profit(price, cost, party, simulated_discount))

    payload = _simulation_payload(campaign, original, simulated)
    payload["simulatedDiscount"] = simulated_discount
    return payload


@report_operation("campaign removal simulation")
def simulate_removal(db: Session, kampanya_id: int) -> Dict[str, Any]:
    """Stored profit of a campaign's reservations vs the same bookings at full price."""
    campaign = _campaign_or_404(db, kampanya_id)
    current, simulated = [], []
    for price, cost, party, stored in CampaignRepository(db).reservations_for_simulation(kampanya_id):
        current.append(to_float(stored))
        simulated.append(discounted_profit(price, cost, party, 0))
    return _simulation_payload(campaign, current, simulated)


# ---------------------------------------------------------------------------
# Impact matrix
# ---------------------------------------------------------------------------

@report_operation("campaign impact matrix")
def impact_matrix(db: Session, metric: Optional[str]) -> Dict[str, Any]:
    """
    Campaign x tour-type grid of one aggregate, one row per campaign id
    (names are labels and may repeat). Unknown metrics fall back to
    avg_profit. min/max cover populated cells only; empty cells read 0.
    """
    if metric not in MATRIX_AGGREGATES:
        metric = DEFAULT_MATRIX_METRIC
    aggregate = MATRIX_AGGREGATES[metric]()
    coerce = to_int if metric in COUNT_MATRIX_METRICS else round2

    cells = {}
    names = {}
    for kampanya_id, name, tour_type, value in CampaignRepository(db).matrix_cells(aggregate):
        cells[(kampanya_id, tour_type)] = coerce(value)
        names[kampanya_id] = name

    campaign_ids = sorted(names, key=lambda cid: (names[cid], cid))
    tour_types = sorted({tour_type for _, tour_type in cells})
    rows = [
        {
            "campaignId": cid,
            "campaignName": names[cid],
            "values": {tour_type: cells.get((cid, tour_type), 0) for tour_type in tour_types},
        }
        for cid in campaign_ids
    ]

    best = None
    if cells:
        (best_id, best_type), best_value = max(cells.items(), key=lambda item: item[1])
        best = {
            "campaignId": best_id,
            "campaignName": names[best_id],
            "tourType": best_type,
            "value": best_value,
        }

    values = list(cells.values())
    return {
        "metric": metric,
        "tourTypes": tour_types,
        "campaigns": rows,
        "min": min(values) if values else 0,
        "max": max(values) if values else 0,
        "best": best,
    }
