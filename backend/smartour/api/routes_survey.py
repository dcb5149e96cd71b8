"""
Survey analytics routes.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from smartour.db.database import get_db
from smartour.services import survey_service

router = APIRouter(prefix="/survey", tags=["survey"])


@router.get("/age-distribution")
def age_distribution(db: Session = Depends(get_db)):
    return survey_service.age_distribution(db)


@router.get("/age-tour-heatmap")
def age_tour_heatmap(db: Session = Depends(get_db)):
    return survey_service.age_tour_heatmap(db)


@router.get("/age-campaign-sensitivity")
def age_campaign_sensitivity(db: Session = Depends(get_db)):
    return survey_service.age_campaign_sensitivity(db)


@router.get("/priority-features")
def priority_features(db: Session = Depends(get_db)):
    return survey_service.priority_features(db)


@router.get("/activity-preferences")
def activity_preferences(db: Session = Depends(get_db)):
    return survey_service.activity_preferences(db)


@router.get("/campaign-impact")
def campaign_impact(db: Session = Depends(get_db)):
    return survey_service.campaign_impact_distribution(db)


@router.get("/vacation-frequency")
def vacation_frequency(db: Session = Depends(get_db)):
    return survey_service.vacation_frequency_distribution(db)
