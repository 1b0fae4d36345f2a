import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Boolean, Numeric, DateTime, ForeignKey, Text, JSON
from sqlalchemy.orm import relationship

from relief_dashboard.database import Base


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    # naive UTC so comparisons behave the same on every backend
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(Base):
    __tablename__ = "users"
    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(255), unique=True, index=True)
    first_name = Column(String(100))
    last_name = Column(String(100))
    profile_image_url = Column(String(500))
    role = Column(String(30), nullable=False, default="field_worker")
    district = Column(String(100))
    organization = Column(String(150))
    password_hash = Column(String(255))
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow)


class FloodZone(Base):
    __tablename__ = "flood_zones"
    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(150), nullable=False)
    district = Column(String(100), nullable=False)
    latitude = Column(Numeric(10, 8, asdecimal=False), nullable=False)
    longitude = Column(Numeric(11, 8, asdecimal=False), nullable=False)
    risk_level = Column(String(10), nullable=False)
    radius = Column(Integer, nullable=False)  # metres
    water_level = Column(Numeric(8, 2, asdecimal=False))
    danger_mark = Column(Numeric(8, 2, asdecimal=False))
    is_active = Column(Boolean, default=True)
    last_updated = Column(DateTime, default=utcnow)
    created_at = Column(DateTime, default=utcnow)

    population = relationship("AffectedPerson", back_populates="flood_zone")


class AffectedPerson(Base):
    __tablename__ = "affected_population"
    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(150), nullable=False)
    age = Column(Integer)
    gender = Column(String(20))
    phone_number = Column(String(20))
    address = Column(Text)
    latitude = Column(Numeric(10, 8, asdecimal=False))
    longitude = Column(Numeric(11, 8, asdecimal=False))
    flood_zone_id = Column(String(36), ForeignKey("flood_zones.id"), nullable=True)
    evacuation_status = Column(String(20), nullable=False)
    medical_needs = Column(Text)
    family_members = Column(Integer, default=1)
    registered_by = Column(String(36), ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow)

    flood_zone = relationship("FloodZone", back_populates="population")


class Resource(Base):
    __tablename__ = "resources"
    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(150), nullable=False)
    type = Column(String(20), nullable=False)
    unit = Column(String(30), nullable=False)
    total_quantity = Column(Integer, nullable=False)
    allocated_quantity = Column(Integer, default=0)
    distributed_quantity = Column(Integer, default=0)
    priority = Column(String(10), nullable=False)
    location = Column(String(150))
    expiry_date = Column(DateTime)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow)


class ReliefDistribution(Base):
    __tablename__ = "relief_distribution"
    id = Column(String(36), primary_key=True, default=new_id)
    resource_id = Column(String(36), ForeignKey("resources.id"), nullable=False)
    flood_zone_id = Column(String(36), ForeignKey("flood_zones.id"), nullable=True)
    quantity = Column(Integer, nullable=False)
    distributed_to = Column(String(150))
    distributed_by = Column(String(36), ForeignKey("users.id"), nullable=True)
    distribution_date = Column(DateTime, default=utcnow)
    recipient_count = Column(Integer)
    notes = Column(Text)
    status = Column(String(20), default="completed")
    created_at = Column(DateTime, default=utcnow)

    resource = relationship("Resource", foreign_keys=[resource_id])


class WeatherAlert(Base):
    __tablename__ = "weather_alerts"
    id = Column(String(36), primary_key=True, default=new_id)
    type = Column(String(30), nullable=False)
    severity = Column(String(10), nullable=False)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    affected_area = Column(String(150))
    valid_until = Column(DateTime)
    is_active = Column(Boolean, default=True)
    created_by = Column(String(36), ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, default=utcnow)


class ResponseTeam(Base):
    __tablename__ = "response_teams"
    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(150), nullable=False)
    type = Column(String(30), nullable=False)
    status = Column(String(20), nullable=False)
    current_location = Column(String(150))
    assigned_zone = Column(String(36), ForeignKey("flood_zones.id"), nullable=True)
    member_count = Column(Integer, default=0)
    contact_number = Column(String(20))
    lead_officer = Column(String(36), ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow)


class ActivityLog(Base):
    __tablename__ = "activity_log"
    id = Column(String(36), primary_key=True, default=new_id)
    type = Column(String(50), nullable=False)
    description = Column(Text, nullable=False)
    entity_type = Column(String(30))
    entity_id = Column(String(36))
    performed_by = Column(String(36), ForeignKey("users.id"), nullable=True)
    location = Column(String(150))
    metadata_ = Column("metadata", JSON)
    created_at = Column(DateTime, default=utcnow)
