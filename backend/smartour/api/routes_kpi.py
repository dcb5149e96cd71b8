"""
Operational KPI routes: overview cards, alerts, tour types, durations, trends.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging

from smartour.db.database import get_db
from smartour.services import kpi_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["kpi"])


# ============================================================================
# KPI CARDS
# ============================================================================

@router.get("/kpi/overview")
def kpi_overview(db: Session = Depends(get_db)):
    """Customer, reservation, tour and survey participation totals."""
    return kpi_service.overview(db)


@router.get("/kpi/monthly-profit")
def kpi_monthly_profit(db: Session = Depends(get_db)):
    """Total profit of reservations from the last 30 days."""
    return kpi_service.monthly_profit(db)


@router.get("/kpi/monthly-insights")
def kpi_monthly_insights(db: Session = Depends(get_db)):
    """Last 30 days vs the 30 days before."""
    return kpi_service.monthly_insights(db)


@router.get("/kpi/featured-tours")
def kpi_featured_tours(db: Session = Depends(get_db)):
    return kpi_service.featured_tours(db)


@router.get("/alerts/critical-occupancy")
def critical_occupancy(db: Session = Depends(get_db)):
    """Tours at or below 55% occupancy, emptiest first."""
    return kpi_service.critical_occupancy_alerts(db)


@router.get("/tours/{turId}")
def tour_details(turId: int, db: Session = Depends(get_db)):
    return kpi_service.tour_performance(db, turId)


# ============================================================================
# TOUR TYPES
# ============================================================================

@router.get("/tour-types")
def tour_types(db: Session = Depends(get_db)):
    """Number of tours per tour type."""
    return kpi_service.tour_type_stats(db)


@router.get("/tour-types/reservations")
def tour_type_reservations(db: Session = Depends(get_db)):
    return kpi_service.reservations_by_tour_type(db)


@router.get("/tour-types/occupancy")
def tour_type_occupancy(db: Session = Depends(get_db)):
    return kpi_service.occupancy_by_tour_type(db)


@router.get("/tour-types/leaders")
def tour_type_leaders(db: Session = Depends(get_db)):
    return kpi_service.tour_type_leaders(db)


# ============================================================================
# DURATIONS & TRENDS
# ============================================================================

@router.get("/durations/insights")
def duration_insights(db: Session = Depends(get_db)):
    """Duration bands over the last 30 days."""
    return kpi_service.duration_insights(db)


@router.get("/durations/analysis")
def duration_analysis(db: Session = Depends(get_db)):
    """Duration bands over all reservations."""
    return kpi_service.duration_analysis(db)


@router.get("/trends/reservations")
def reservation_trends(db: Session = Depends(get_db)):
    return kpi_service.reservation_trends(db)
