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


@router.get("", response_model=List[schemas.AffectedPersonOut])
def list_population(flood_zone_id: Optional[str] = None, db: Session = Depends(get_db),
                    user: models.User = Depends(get_current_user)):
    try:
        return crud.get_affected_population(db, flood_zone_id)
    except SQLAlchemyError:
        logger.exception("Error fetching affected population")
        raise HTTPException(status_code=500, detail="Failed to fetch affected population")


@router.post("", response_model=schemas.AffectedPersonOut)
def register_person(person: schemas.AffectedPersonCreate, db: Session = Depends(get_db),
                    user: models.User = Depends(get_current_user)):
    _check_zone(db, person.flood_zone_id)
    try:
        p = crud.create_affected_person(db, person, registered_by=user.id)
        crud.log_activity(
            db,
            type="population_registration",
            description=f"Registered affected person: {p.name}",
            entity_type="population",
            entity_id=p.id,
            performed_by=user.id,
            location=p.address or "Unknown",
        )
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error registering affected person")
        raise HTTPException(status_code=500, detail="Failed to register affected person")
    return p


@router.patch("/{person_id}", response_model=schemas.AffectedPersonOut)
def update_person(person_id: str, updates: schemas.AffectedPersonUpdate, db: Session = Depends(get_db),
                  user: models.User = Depends(get_current_user)):
    _check_zone(db, updates.flood_zone_id)
    try:
        p = crud.update_affected_person(db, person_id, updates.changes())
        if p:
            crud.log_activity(
                db,
                type="population_update",
                description=f"Updated affected person: {p.name}",
                entity_type="population",
                entity_id=p.id,
                performed_by=user.id,
                metadata=updates.model_dump(exclude_unset=True, mode="json"),
            )
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error updating affected person")
        raise HTTPException(status_code=500, detail="Failed to update affected person")
    if not p:
        raise HTTPException(status_code=404, detail="Person not found")
    return p
