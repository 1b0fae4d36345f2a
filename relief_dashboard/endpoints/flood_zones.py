from typing import List
import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from relief_dashboard import crud, models, schemas
from relief_dashboard.auth.dependencies import get_current_user
from relief_dashboard.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[schemas.FloodZoneOut])
def list_flood_zones(db: Session = Depends(get_db), user: models.User = Depends(get_current_user)):
    try:
        return crud.get_flood_zones(db)
    except SQLAlchemyError:
        logger.exception("Error fetching flood zones")
        raise HTTPException(status_code=500, detail="Failed to fetch flood zones")


@router.get("/locate", response_model=List[schemas.LocatedZone])
def locate_flood_zones(lat: float = Query(..., ge=-90, le=90), lon: float = Query(..., ge=-180, le=180),
                       db: Session = Depends(get_db), user: models.User = Depends(get_current_user)):
    try:
        found = crud.get_zones_containing(db, lat, lon)
    except SQLAlchemyError:
        logger.exception("Error locating flood zones")
        raise HTTPException(status_code=500, detail="Failed to locate flood zones")
    return [
        schemas.LocatedZone(zone=schemas.FloodZoneOut.model_validate(z), distance_m=round(d, 1))
        for z, d in found
    ]


@router.post("", response_model=schemas.FloodZoneOut)
def create_flood_zone(zone: schemas.FloodZoneCreate, db: Session = Depends(get_db),
                      user: models.User = Depends(get_current_user)):
    try:
        z = crud.create_flood_zone(db, zone)
        crud.log_activity(
            db,
            type="zone_creation",
            description=f"Created flood zone: {z.name}",
            entity_type="flood_zone",
            entity_id=z.id,
            performed_by=user.id,
            location=z.district,
        )
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error creating flood zone")
        raise HTTPException(status_code=500, detail="Failed to create flood zone")
    return z


@router.patch("/{zone_id}", response_model=schemas.FloodZoneOut)
def update_flood_zone(zone_id: str, updates: schemas.FloodZoneUpdate, db: Session = Depends(get_db),
                      user: models.User = Depends(get_current_user)):
    try:
        z = crud.update_flood_zone(db, zone_id, updates.changes())
        if z:
            crud.log_activity(
                db,
                type="zone_update",
                description=f"Updated flood zone: {z.name}",
                entity_type="flood_zone",
                entity_id=z.id,
                performed_by=user.id,
                location=z.district,
                metadata=updates.model_dump(exclude_unset=True, mode="json"),
            )
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error updating flood zone")
        raise HTTPException(status_code=500, detail="Failed to update flood zone")
    if not z:
        raise HTTPException(status_code=404, detail="Flood zone not found")
    return z
