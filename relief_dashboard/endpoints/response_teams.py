from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from relief_dashboard import crud, models, schemas
from relief_dashboard.auth.dependencies import get_current_user
from relief_dashboard.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter()


def _check_zone(db: Session, zone_id: Optional[str]):
    if zone_id is not None and not crud.get_flood_zone(db, zone_id):
        raise HTTPException(status_code=404, detail="Flood zone not found")


@router.get("", response_model=List[schemas.ResponseTeamOut])
def list_teams(db: Session = Depends(get_db), user: models.User = Depends(get_current_user)):
    try:
        return crud.get_response_teams(db)
    except SQLAlchemyError:
        logger.exception("Error fetching response teams")
        raise HTTPException(status_code=500, detail="Failed to fetch response teams")


@router.post("", response_model=schemas.ResponseTeamOut)
def create_team(team: schemas.ResponseTeamCreate, db: Session = Depends(get_db),
                user: models.User = Depends(get_current_user)):
    _check_zone(db, team.assigned_zone)
    try:
        t = crud.create_response_team(db, team, lead_officer=user.id)
        crud.log_activity(
            db,
            type="team_creation",
            description=f"Created response team: {t.name}",
            entity_type="team",
            entity_id=t.id,
            performed_by=user.id,
            location=t.current_location or "Base",
        )
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error creating response team")
        raise HTTPException(status_code=500, detail="Failed to create response team")
    return t


@router.patch("/{team_id}", response_model=schemas.ResponseTeamOut)
def update_team(team_id: str, updates: schemas.ResponseTeamUpdate, db: Session = Depends(get_db),
                user: models.User = Depends(get_current_user)):
    _check_zone(db, updates.assigned_zone)
    try:
        t = crud.update_response_team(db, team_id, updates.changes())
        if t:
            crud.log_activity(
                db,
                type="team_update",
                description=f"Updated response team: {t.name}",
                entity_type="team",
                entity_id=t.id,
                performed_by=user.id,
                metadata=updates.model_dump(exclude_unset=True, mode="json"),
            )
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error updating response team")
        raise HTTPException(status_code=500, detail="Failed to update response team")
    if not t:
        raise HTTPException(status_code=404, detail="Response team not found")
    return t
