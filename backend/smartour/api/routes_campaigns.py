"""
Campaign analytics routes, including the what-if simulators.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
import logging

from smartour.db.database import get_db
from smartour.services import campaign_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/campaigns", tags=["campaigns"])


@router.get("")
def list_campaigns(db: Session = Depends(get_db)):
    """Campaigns for the dashboard selectors."""
    return campaign_service.list_campaigns(db)


@router.get("/kpis")
def campaign_kpis(db: Session = Depends(get_db)):
    return campaign_service.campaign_kpis(db)


@router.get("/comparison")
def campaign_comparison(
    metric: Optional[str] = Query(None, description="rezervasyon_sayisi | ortalama_kar | toplam_kar | ortalama_doluluk"),
    db: Session = Depends(get_db),
):
    return campaign_service.campaign_comparison(db, metric)


@router.get("/roi")
def campaign_roi(db: Session = Depends(get_db)):
    """Campaigns ranked by profit per discount granted."""
    return campaign_service.campaign_roi(db)


@router.get("/occupancy-impact")
def occupancy_impact(db: Session = Depends(get_db)):
    return campaign_service.occupancy_impact_summary(db)


@router.get("/occupancy-impact/table")
def occupancy_impact_table(db: Session = Depends(get_db)):
    return campaign_service.occupancy_impact_table(db)


@router.get("/what-if/discount")
def what_if_discount(
    campaign_id: Optional[str] = Query(None, description="Campaign to simulate"),
    simulated_discount: Optional[str] = Query(None, description="Hypothetical discount, 0-50"),
    db: Session = Depends(get_db),
):
    """
    Recompute a campaign's profit under a hypothetical discount.
    Parameters are validated here so bad input is a 400, not a 422.
    """
    kampanya_id = campaign_service.parse_campaign_id(campaign_id)
    discount = campaign_service.parse_simulated_discount(simulated_discount)
    return campaign_service.simulate_discount(db, kampanya_id, discount)


@router.get("/what-if/removal")
def what_if_removal(
    campaign_id: Optional[str] = Query(None, description="Campaign to remove"),
    db: Session = Depends(get_db),
):
    kampanya_id = campaign_service.parse_campaign_id(campaign_id)
    return campaign_service.simulate_removal(db, kampanya_id)


@router.get("/impact-matrix")
def impact_matrix(
    metric: Optional[str] = Query(None, description="avg_profit | total_profit | reservation_count | avg_occupancy"),
    db: Session = Depends(get_db),
):
    """Unknown metrics are treated as avg_profit."""
    return campaign_service.impact_matrix(db, metric)
