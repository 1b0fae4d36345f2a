from datetime import datetime, timezone
from typing import Any, ClassVar, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

Role = Literal["district_officer", "ngo", "field_worker"]
RiskLevel = Literal["high", "medium", "low"]
EvacuationStatus = Literal["evacuated", "sheltered", "at_risk", "safe"]
ResourceType = Literal["food", "medical", "shelter", "water", "clothing"]
Priority = Literal["high", "medium", "low"]
DistributionStatus = Literal["planned", "in_progress", "completed"]
AlertType = Literal["flood_warning", "heavy_rain", "dam_release"]
Severity = Literal["high", "medium", "low"]
TeamType = Literal["relief_distribution", "medical_response", "evacuation", "standby"]
TeamStatus = Literal["active", "standby", "unavailable"]


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class PatchModel(BaseModel):
    """Partial update: only fields present in the body are applied."""

    not_null_fields: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode="after")
    def reject_null_required(self):
        for name in self.not_null_fields:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


# ----------------------------
# Users
# ----------------------------

class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Role = "field_worker"
    district: Optional[str] = None
    organization: Optional[str] = None


class UserUpdate(PatchModel):
    not_null_fields = ("role",)

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    role: Optional[Role] = None
    district: Optional[str] = None
    organization: Optional[str] = None


class UserOut(BaseModel):
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    role: str
    district: Optional[str] = None
    organization: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LoginSchema(BaseModel):
    email: str
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


# ----------------------------
# Flood zones
# ----------------------------

class FloodZoneCreate(BaseModel):
    name: str = Field(..., min_length=1)
    district: str = Field(..., min_length=1)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    risk_level: RiskLevel
    radius: int = Field(..., gt=0)
    water_level: Optional[float] = None
    danger_mark: Optional[float] = None
    is_active: bool = True


class FloodZoneUpdate(PatchModel):
    not_null_fields = ("name", "district", "latitude", "longitude", "risk_level", "radius", "is_active")

    name: Optional[str] = Field(None, min_length=1)
    district: Optional[str] = Field(None, min_length=1)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    risk_level: Optional[RiskLevel] = None
    radius: Optional[int] = Field(None, gt=0)
    water_level: Optional[float] = None
    danger_mark: Optional[float] = None
    is_active: Optional[bool] = None


class FloodZoneOut(BaseModel):
    id: str
    name: str
    district: str
    latitude: float
    longitude: float
    risk_level: str
    radius: int
    water_level: Optional[float] = None
    danger_mark: Optional[float] = None
    is_active: Optional[bool] = None
    last_updated: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LocatedZone(BaseModel):
    zone: FloodZoneOut
    distance_m: float


# ----------------------------
# Affected population
# ----------------------------

class AffectedPersonCreate(BaseModel):
    name: str = Field(..., min_length=1)
    age: Optional[int] = Field(None, ge=0, le=150)
    gender: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    flood_zone_id: Optional[str] = None
    evacuation_status: EvacuationStatus
    medical_needs: Optional[str] = None
    family_members: int = Field(1, ge=1)


class AffectedPersonUpdate(PatchModel):
    not_null_fields = ("name", "evacuation_status", "family_members")

    name: Optional[str] = Field(None, min_length=1)
    age: Optional[int] = Field(None, ge=0, le=150)
    gender: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    flood_zone_id: Optional[str] = None
    evacuation_status: Optional[EvacuationStatus] = None
    medical_needs: Optional[str] = None
    family_members: Optional[int] = Field(None, ge=1)


class AffectedPersonOut(BaseModel):
    id: str
    name: str
    age: Optional[int] = None
    gender: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    flood_zone_id: Optional[str] = None
    evacuation_status: str
    medical_needs: Optional[str] = None
    family_members: Optional[int] = None
    registered_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ----------------------------
# Resources
# ----------------------------

class ResourceCreate(BaseModel):
    name: str = Field(..., min_length=1)
    type: ResourceType
    unit: str = Field(..., min_length=1)
    total_quantity: int = Field(..., ge=0)
    allocated_quantity: int = Field(0, ge=0)
    distributed_quantity: int = Field(0, ge=0)
    priority: Priority
    location: Optional[str] = None
    expiry_date: Optional[datetime] = None

    @field_validator("expiry_date")
    @classmethod
    def naive_expiry(cls, value):
        return to_naive_utc(value)


class ResourceUpdate(PatchModel):
    not_null_fields = ("name", "type", "unit", "total_quantity", "allocated_quantity", "priority")

    name: Optional[str] = Field(None, min_length=1)
    type: Optional[ResourceType] = None
    unit: Optional[str] = Field(None, min_length=1)
    total_quantity: Optional[int] = Field(None, ge=0)
    allocated_quantity: Optional[int] = Field(None, ge=0)
    priority: Optional[Priority] = None
    location: Optional[str] = None
    expiry_date: Optional[datetime] = None

    @field_validator("expiry_date")
    @classmethod
    def naive_expiry(cls, value):
        return to_naive_utc(value)


class ResourceOut(BaseModel):
    id: str
    name: str
    type: str
    unit: str
    total_quantity: int
    allocated_quantity: Optional[int] = None
    distributed_quantity: Optional[int] = None
    priority: str
    location: Optional[str] = None
    expiry_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ----------------------------
# Relief distribution
# ----------------------------

class ReliefDistributionCreate(BaseModel):
    resource_id: str
    flood_zone_id: Optional[str] = None
    quantity: int = Field(..., gt=0)
    distributed_to: Optional[str] = None
    recipient_count: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None
    status: DistributionStatus = "completed"


class ReliefDistributionOut(BaseModel):
    id: str
    resource_id: str
    flood_zone_id: Optional[str] = None
    quantity: int
    distributed_to: Optional[str] = None
    distributed_by: Optional[str] = None
    distribution_date: Optional[datetime] = None
    recipient_count: Optional[int] = None
    notes: Optional[str] = None
    status: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ----------------------------
# Weather alerts
# ----------------------------

class WeatherAlertCreate(BaseModel):
    type: AlertType
    severity: Severity
    title: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    affected_area: Optional[str] = None
    valid_until: Optional[datetime] = None
    is_active: bool = True

    @field_validator("valid_until")
    @classmethod
    def naive_valid_until(cls, value):
        return to_naive_utc(value)


class WeatherAlertOut(BaseModel):
    id: str
    type: str
    severity: str
    title: str
    message: str
    affected_area: Optional[str] = None
    valid_until: Optional[datetime] = None
    is_active: Optional[bool] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ----------------------------
# Response teams
# ----------------------------

class ResponseTeamCreate(BaseModel):
    name: str = Field(..., min_length=1)
    type: TeamType
    status: TeamStatus
    current_location: Optional[str] = None
    assigned_zone: Optional[str] = None
    member_count: int = Field(0, ge=0)
    contact_number: Optional[str] = None


class ResponseTeamUpdate(PatchModel):
    not_null_fields = ("name", "type", "status", "member_count")

    name: Optional[str] = Field(None, min_length=1)
    type: Optional[TeamType] = None
    status: Optional[TeamStatus] = None
    current_location: Optional[str] = None
    assigned_zone: Optional[str] = None
    member_count: Optional[int] = Field(None, ge=0)
    contact_number: Optional[str] = None


class ResponseTeamOut(BaseModel):
    id: str
    name: str
    type: str
    status: str
    current_location: Optional[str] = None
    assigned_zone: Optional[str] = None
    member_count: Optional[int] = None
    contact_number: Optional[str] = None
    lead_officer: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ----------------------------
# Activity log
# ----------------------------

class ActivityOut(BaseModel):
    id: str
    type: str
    description: str
    entity_type: Optional[str] = None
    entity_id: Optional[str] = None
    performed_by: Optional[str] = None
    location: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = Field(None, validation_alias="metadata_")
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ----------------------------
# Dashboard, analytics and weather
# ----------------------------

class DashboardStats(BaseModel):
    active_zones: int
    affected_people: int
    relief_distributed: int
    response_teams: int


class ResourceTypeTotals(BaseModel):
    type: str
    total: int
    distributed: int
    available: int


class DistrictPopulation(BaseModel):
    district: str
    population: int


class AnalyticsSummary(BaseModel):
    zones_by_risk: Dict[str, int]
    population_by_status: Dict[str, int]
    total_people: int
    resources_by_type: List[ResourceTypeTotals]
    distribution_efficiency: int
    population_by_district: List[DistrictPopulation]


class WeatherOut(BaseModel):
    temperature: float
    humidity: int
    description: str
    wind_speed: float
    pressure: int
    precipitation_status: str
    water_level_status: str
