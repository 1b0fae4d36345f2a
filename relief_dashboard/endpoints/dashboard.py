from typing import List
import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from relief_dashboard import config, crud, models, schemas
from relief_dashboard.auth.dependencies import get_current_user
from relief_dashboard.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/dashboard/stats", response_model=schemas.DashboardStats)
def dashboard_stats(db: Session = Depends(get_db), user: models.User = Depends(get_current_user)):
    try:
        return crud.get_dashboard_stats(db)
    except SQLAlchemyError:
        logger.exception("Error fetching dashboard stats")
        raise HTTPException(status_code=500, detail="Failed to fetch dashboard statistics")


@router.get("/analytics/summary", response_model=schemas.AnalyticsSummary)
def analytics_summary(db: Session = Depends(get_db), user: models.User = Depends(get_current_user)):
    try:
        return crud.get_analytics_summary(db)
    except SQLAlchemyError:
        logger.exception("Error building analytics summary")
        raise HTTPException(status_code=500, detail="Failed to build analytics summary")


@router.get("/activities", response_model=List[schemas.ActivityOut])
def recent_activities(limit: int = Query(config.ACTIVITY_LIMIT_DEFAULT, ge=1, le=config.ACTIVITY_LIMIT_MAX),
                      db: Session = Depends(get_db), user: models.User = Depends(get_current_user)):
    try:
        return crud.get_recent_activities(db, limit)
    except SQLAlchemyError:
        logger.exception("Error fetching activities")
        raise HTTPException(status_code=500, detail="Failed to fetch activities")
