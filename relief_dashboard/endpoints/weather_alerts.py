from typing import List
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from relief_dashboard import crud, models, schemas
from relief_dashboard.auth.dependencies import get_current_user
from relief_dashboard.database import get_db
from relief_dashboard.utils.alerts import format_alert_sms, send_sms

logger = logging.getLogger(__name__)

router = APIRouter()


def notify_active_teams(db: Session, alert: models.WeatherAlert) -> int:
    """Text a high-severity alert to every active team that has a contact number."""
    msg = format_alert_sms(alert)
    c = 0
    for team in crud.get_response_teams(db, status="active"):
        if team.contact_number and send_sms(team.contact_number, msg):
            c += 1
    return c


@router.get("", response_model=List[schemas.WeatherAlertOut])
def list_active_alerts(db: Session = Depends(get_db), user: models.User = Depends(get_current_user)):
    try:
        return crud.get_active_weather_alerts(db)
    except SQLAlchemyError:
        logger.exception("Error fetching weather alerts")
        raise HTTPException(status_code=500, detail="Failed to fetch weather alerts")


@router.post("", response_model=schemas.WeatherAlertOut)
def create_alert(alert: schemas.WeatherAlertCreate, db: Session = Depends(get_db),
                 user: models.User = Depends(get_current_user)):
    try:
        a = crud.create_weather_alert(db, alert, created_by=user.id)
        crud.log_activity(
            db,
            type="alert_creation",
            description=f"Created {a.severity} alert: {a.title}",
            entity_type="alert",
            entity_id=a.id,
            performed_by=user.id,
            location=a.affected_area or "Unknown",
        )
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error creating weather alert")
        raise HTTPException(status_code=500, detail="Failed to create weather alert")
    if a.severity == "high" and a.is_active:
        # alert is committed; a failed broadcast is only logged
        try:
            sent = notify_active_teams(db, a)
            logger.info(f"Alert {a.id} sent to {sent} response teams")
        except Exception:
            db.rollback()
            logger.exception(f"Error notifying response teams of alert {a.id}")
    return a


@router.delete("/{alert_id}")
def deactivate_alert(alert_id: str, db: Session = Depends(get_db), user: models.User = Depends(get_current_user)):
    try:
        found = crud.deactivate_weather_alert(db, alert_id)
        if found:
            crud.log_activity(
                db,
                type="alert_deactivation",
                description="Deactivated weather alert",
                entity_type="alert",
                entity_id=alert_id,
                performed_by=user.id,
            )
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error deactivating weather alert")
        raise HTTPException(status_code=500, detail="Failed to deactivate weather alert")
    if not found:
        raise HTTPException(status_code=404, detail="Weather alert not found")
    return {"success": True}
