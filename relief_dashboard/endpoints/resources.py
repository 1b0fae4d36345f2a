from typing import List
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from relief_dashboard import crud, models, schemas
from relief_dashboard.auth.dependencies import get_current_user
from relief_dashboard.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[schemas.ResourceOut])
def list_resources(db: Session = Depends(get_db), user: models.User = Depends(get_current_user)):
    try:
        return crud.get_resources(db)
    except SQLAlchemyError:
        logger.exception("Error fetching resources")
        raise HTTPException(status_code=500, detail="Failed to fetch resources")


@router.post("", response_model=schemas.ResourceOut)
def create_resource(resource: schemas.ResourceCreate, db: Session = Depends(get_db),
                    user: models.User = Depends(get_current_user)):
    try:
        r = crud.create_resource(db, resource)
        crud.log_activity(
            db,
            type="resource_creation",
            description=f"Added resource: {r.name} ({r.total_quantity} {r.unit})",
            entity_type="resource",
            entity_id=r.id,
            performed_by=user.id,
            location=r.location or "Central Store",
        )
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error creating resource")
        raise HTTPException(status_code=500, detail="Failed to create resource")
    return r


@router.patch("/{resource_id}", response_model=schemas.ResourceOut)
def update_resource(resource_id: str, updates: schemas.ResourceUpdate, db: Session = Depends(get_db),
                    user: models.User = Depends(get_current_user)):
    try:
        r = crud.update_resource(db, resource_id, updates.changes())
        if r:
            crud.log_activity(
                db,
                type="resource_update",
                description=f"Updated resource: {r.name}",
                entity_type="resource",
                entity_id=r.id,
                performed_by=user.id,
                metadata=updates.model_dump(exclude_unset=True, mode="json"),
            )
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error updating resource")
        raise HTTPException(status_code=500, detail="Failed to update resource")
    if not r:
        raise HTTPException(status_code=404, detail="Resource not found")
    return r
