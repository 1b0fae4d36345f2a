from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional, Tuple
import logging

from sqlalchemy import func, literal_column, or_
from sqlalchemy.orm import Session

from relief_dashboard import models, schemas
from relief_dashboard.auth import utils_auth as auth_utils
from relief_dashboard.models import utcnow
from relief_dashboard.utils.geo import distance_m

logger = logging.getLogger(__name__)


def _apply(obj, fields: Dict[str, Any]):
    for key, value in fields.items():
        setattr(obj, key, value)


def distribution_percentage(distributed, total) -> int:
    """Share of stock handed out, as a whole percentage rounded half up."""
    if not total:
        return 0
    pct = Decimal(int(distributed or 0)) * 100 / Decimal(int(total))
    return int(pct.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


# ----------------------------
# Users
# ----------------------------

def get_user(db: Session, user_id: str) -> Optional[models.User]:
    if not user_id:
        return None
    return db.query(models.User).filter(models.User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.email == email.lower()).first()


def create_user(db: Session, user: schemas.UserCreate) -> models.User:
    if get_user_by_email(db, user.email):
        raise ValueError("User with this email already exists")
    db_user = models.User(
        email=user.email.lower(),
        first_name=user.first_name,
        last_name=user.last_name,
        role=user.role,
        district=user.district,
        organization=user.organization,
        password_hash=auth_utils.hash_password(user.password),
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def upsert_user(db: Session, user_id: str, fields: Dict[str, Any]) -> models.User:
    user = get_user(db, user_id)
    if user is None:
        user = models.User(id=user_id, **fields)
        db.add(user)
    else:
        _apply(user, fields)
        user.updated_at = utcnow()
    db.commit()
    db.refresh(user)
    return user


def authenticate_user(db: Session, email: str, password: str) -> Optional[models.User]:
    user = get_user_by_email(db, email)
    if not user or not auth_utils.verify_password(password, user.password_hash):
        return None
    return user


# ----------------------------
# Flood zones
# ----------------------------

def get_flood_zones(db: Session) -> List[models.FloodZone]:
    return db.query(models.FloodZone).order_by(models.FloodZone.last_updated.desc()).all()


def get_flood_zone(db: Session, zone_id: str) -> Optional[models.FloodZone]:
    return db.query(models.FloodZone).filter(models.FloodZone.id == zone_id).first()


def create_flood_zone(db: Session, data: schemas.FloodZoneCreate) -> models.FloodZone:
    logger.info(f"Creating flood zone with data: {data.model_dump()}")
    zone = models.FloodZone(**data.model_dump())
    db.add(zone)
    db.commit()
    db.refresh(zone)
    return zone


def update_flood_zone(db: Session, zone_id: str, fields: Dict[str, Any]) -> Optional[models.FloodZone]:
    zone = get_flood_zone(db, zone_id)
    if not zone:
        return None
    _apply(zone, fields)
    zone.last_updated = utcnow()
    db.commit()
    db.refresh(zone)
    return zone


def get_zones_containing(db: Session, lat: float, lon: float) -> List[Tuple[models.FloodZone, float]]:
    zones = db.query(models.FloodZone).filter(models.FloodZone.is_active == True).all()  # noqa: E712
    res = []
    for z in zones:
        d = distance_m((z.latitude, z.longitude), (lat, lon))
        if d <= z.radius:
            res.append((z, d))
    res.sort(key=lambda x: x[1])
    return res


# ----------------------------
# Affected population
# ----------------------------

def get_affected_population(db: Session, flood_zone_id: Optional[str] = None) -> List[models.AffectedPerson]:
    q = db.query(models.AffectedPerson)
    if flood_zone_id:
        q = q.filter(models.AffectedPerson.flood_zone_id == flood_zone_id)
    return q.order_by(models.AffectedPerson.created_at.desc()).all()


def create_affected_person(db: Session, data: schemas.AffectedPersonCreate, registered_by: str) -> models.AffectedPerson:
    person = models.AffectedPerson(**data.model_dump(), registered_by=registered_by)
    db.add(person)
    db.commit()
    db.refresh(person)
    return person


def update_affected_person(db: Session, person_id: str, fields: Dict[str, Any]) -> Optional[models.AffectedPerson]:
    person = db.query(models.AffectedPerson).filter(models.AffectedPerson.id == person_id).first()
    if not person:
        return None
    _apply(person, fields)
    person.updated_at = utcnow()
    db.commit()
    db.refresh(person)
    return person


# ----------------------------
# Resources
# ----------------------------

def get_resources(db: Session) -> List[models.Resource]:
    return db.query(models.Resource).order_by(models.Resource.updated_at.desc()).all()


def get_resource(db: Session, resource_id: str) -> Optional[models.Resource]:
    return db.query(models.Resource).filter(models.Resource.id == resource_id).first()


def create_resource(db: Session, data: schemas.ResourceCreate) -> models.Resource:
    resource = models.Resource(**data.model_dump())
    db.add(resource)
    db.commit()
    db.refresh(resource)
    return resource


def update_resource(db: Session, resource_id: str, fields: Dict[str, Any]) -> Optional[models.Resource]:
    resource = get_resource(db, resource_id)
    if not resource:
        return None
    _apply(resource, fields)
    resource.updated_at = utcnow()
    db.commit()
    db.refresh(resource)
    return resource


# ----------------------------
# Relief distribution
# ----------------------------

def get_relief_distributions(db: Session, flood_zone_id: Optional[str] = None) -> List[models.ReliefDistribution]:
    q = db.query(models.ReliefDistribution)
    if flood_zone_id:
        q = q.filter(models.ReliefDistribution.flood_zone_id == flood_zone_id)
    return q.order_by(models.ReliefDistribution.distribution_date.desc()).all()


def create_relief_distribution(db: Session, data: schemas.ReliefDistributionCreate, distributed_by: str) -> Optional[models.ReliefDistribution]:
    """
    Record a distribution and add its quantity to the resource's distributed total.
    Both writes share one commit. Returns None when the resource does not exist.
    """
    if not get_resource(db, data.resource_id):
        return None
    distribution = models.ReliefDistribution(**data.model_dump(), distributed_by=distributed_by)
    db.add(distribution)
    db.query(models.Resource).filter(models.Resource.id == data.resource_id).update(
        {
            models.Resource.distributed_quantity: func.coalesce(models.Resource.distributed_quantity, 0) + data.quantity,
            models.Resource.updated_at: utcnow(),
        },
        synchronize_session=False,
    )
    db.commit()
    db.refresh(distribution)
    return distribution


# ----------------------------
# Weather alerts
# ----------------------------

def get_active_weather_alerts(db: Session) -> List[models.WeatherAlert]:
    now = utcnow()
    return db.query(models.WeatherAlert).filter(
        models.WeatherAlert.is_active == True,  # noqa: E712
        or_(models.WeatherAlert.valid_until.is_(None), models.WeatherAlert.valid_until >= now)
    ).order_by(models.WeatherAlert.created_at.desc()).all()


def create_weather_alert(db: Session, data: schemas.WeatherAlertCreate, created_by: str) -> models.WeatherAlert:
    alert = models.WeatherAlert(**data.model_dump(), created_by=created_by)
    db.add(alert)
    db.commit()
    db.refresh(alert)
    return alert


def deactivate_weather_alert(db: Session, alert_id: str) -> bool:
    updated = db.query(models.WeatherAlert).filter(models.WeatherAlert.id == alert_id).update(
        {models.WeatherAlert.is_active: False}, synchronize_session=False
    )
    db.commit()
    return updated > 0


# ----------------------------
# Response teams
# ----------------------------

def get_response_teams(db: Session, status: Optional[str] = None) -> List[models.ResponseTeam]:
    q = db.query(models.ResponseTeam)
    if status:
        q = q.filter(models.ResponseTeam.status == status)
    return q.order_by(models.ResponseTeam.updated_at.desc()).all()


def create_response_team(db: Session, data: schemas.ResponseTeamCreate, lead_officer: str) -> models.ResponseTeam:
    team = models.ResponseTeam(**data.model_dump(), lead_officer=lead_officer)
    db.add(team)
    db.commit()
    db.refresh(team)
    return team


def update_response_team(db: Session, team_id: str, fields: Dict[str, Any]) -> Optional[models.ResponseTeam]:
    team = db.query(models.ResponseTeam).filter(models.ResponseTeam.id == team_id).first()
    if not team:
        return None
    _apply(team, fields)
    team.updated_at = utcnow()
    db.commit()
    db.refresh(team)
    return team


# ----------------------------
# Activity log
# ----------------------------

def get_recent_activities(db: Session, limit: int = 20) -> List[models.ActivityLog]:
    return db.query(models.ActivityLog).order_by(models.ActivityLog.created_at.desc()).limit(limit).all()


def log_activity(db: Session, type: str, description: str, performed_by: Optional[str] = None,
                 entity_type: Optional[str] = None, entity_id: Optional[str] = None,
                 location: Optional[str] = None, metadata: Optional[Dict[str, Any]] = None) -> models.ActivityLog:
    activity = models.ActivityLog(
        type=type,
        description=description,
        entity_type=entity_type,
        entity_id=entity_id,
        performed_by=performed_by,
        location=location,
        metadata_=metadata,
    )
    db.add(activity)
    db.commit()
    db.refresh(activity)
    return activity


# ----------------------------
# Dashboard & analytics
# ----------------------------

def get_dashboard_stats(db: Session) -> Dict[str, int]:
    active_zones = db.query(func.count(models.FloodZone.id)).filter(
        models.FloodZone.is_active == True  # noqa: E712
    ).scalar()
    affected_people = db.query(func.count(models.AffectedPerson.id)).scalar()
    total, distributed = db.query(
        func.coalesce(func.sum(models.Resource.total_quantity), 0),
        func.coalesce(func.sum(models.Resource.distributed_quantity), 0),
    ).one()
    response_teams = db.query(func.count(models.ResponseTeam.id)).scalar()
    return {
        "active_zones": active_zones or 0,
        "affected_people": affected_people or 0,
        "relief_distributed": distribution_percentage(distributed, total),
        "response_teams": response_teams or 0,
    }


def get_analytics_summary(db: Session, district_limit: int = 10) -> Dict[str, Any]:
    zones_by_risk = dict(
        db.query(models.FloodZone.risk_level, func.count(models.FloodZone.id))
        .group_by(models.FloodZone.risk_level).all()
    )
    population_by_status = dict(
        db.query(models.AffectedPerson.evacuation_status, func.count(models.AffectedPerson.id))
        .group_by(models.AffectedPerson.evacuation_status).all()
    )

    people = func.sum(func.coalesce(models.AffectedPerson.family_members, 1))
    total_people = db.query(people).scalar() or 0

    resources_by_type = []
    grand_total = grand_distributed = 0
    rows = db.query(
        models.Resource.type,
        func.sum(models.Resource.total_quantity),
        func.sum(func.coalesce(models.Resource.distributed_quantity, 0)),
    ).group_by(models.Resource.type).order_by(models.Resource.type).all()
    for rtype, total, distributed in rows:
        total, distributed = int(total or 0), int(distributed or 0)
        grand_total += total
        grand_distributed += distributed
        resources_by_type.append({
            "type": rtype,
            "total": total,
            "distributed": distributed,
            "available": total - distributed,
        })

    # people without a zone share the "Unknown" group with any zone of that name
    district = func.coalesce(models.FloodZone.district, literal_column("'Unknown'"))
    district_rows = db.query(district, people) \
        .select_from(models.AffectedPerson) \
        .outerjoin(models.FloodZone, models.AffectedPerson.flood_zone_id == models.FloodZone.id) \
        .group_by(district) \
        .order_by(people.desc()) \
        .limit(district_limit).all()

    return {
        "zones_by_risk": zones_by_risk,
        "population_by_status": population_by_status,
        "total_people": int(total_people),
        "resources_by_type": resources_by_type,
        "distribution_efficiency": distribution_percentage(grand_distributed, grand_total),
        "population_by_district": [
            {"district": name, "population": int(count or 0)} for name, count in district_rows
        ],
    }
