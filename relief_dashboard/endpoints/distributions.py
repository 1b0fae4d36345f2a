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


@router.get("", response_model=List[schemas.ReliefDistributionOut])
def list_distributions(flood_zone_id: Optional[str] = None, db: Session = Depends(get_db),
                       user: models.User = Depends(get_current_user)):
    try:
        return crud.get_relief_distributions(db, flood_zone_id)
    except SQLAlchemyError:
        logger.exception("Error fetching relief distributions")
        raise HTTPException(status_code=500, detail="Failed to fetch relief distributions")


@router.post("", response_model=schemas.ReliefDistributionOut)
def record_distribution(distribution: schemas.ReliefDistributionCreate, db: Session = Depends(get_db),
                        user: models.User = Depends(get_current_user)):
    if distribution.flood_zone_id is not None and not crud.get_flood_zone(db, distribution.flood_zone_id):
        raise HTTPException(status_code=404, detail="Flood zone not found")
    try:
        d = crud.create_relief_distribution(db, distribution, distributed_by=user.id)
        if d:
            crud.log_activity(
                db,
                type="relief_distribution",
                description=f"Distributed relief: {d.quantity} units to {d.distributed_to}",
                entity_type="distribution",
                entity_id=d.id,
                performed_by=user.id,
                location=d.distributed_to or "Unknown",
            )
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error creating relief distribution")
        raise HTTPException(status_code=500, detail="Failed to create relief distribution")
    if not d:
        raise HTTPException(status_code=404, detail="Resource not found")
    return d
