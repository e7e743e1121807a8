"""Pydantic v2 schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class HealthResponse(BaseModel):
    status: str
    version: str


# Property Schemas
class PropertyWrite(BaseModel):
    """Schema for creating or replacing a property.

    Status-specific fields that do not belong to ``status`` are ignored.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    address: str = Field(..., min_length=1, max_length=255)
    commune: str = Field(..., min_length=1, max_length=120)
    property_type: str = Field(default="Oficina", min_length=1, max_length=120)
    owner: str = ""
    condominium: str | None = None
    price_uf: Decimal = Field(..., ge=0)
    land_m2: Decimal = Field(default=Decimal("0"), ge=0)
    built_m2: Decimal = Field(default=Decimal("0"), ge=0)
    storage_m2: Decimal = Field(default=Decimal("0"), ge=0)
    status: str = Field(..., pattern=r"^(AVAILABLE|LEASED|NOTICE_GIVEN)$")
    vacancy_start_date: date | None = None
    notice_end_date: date | None = None
    current_tenant: str | None = None
    lease_start_date: date | None = None
    lease_end_date: date | None = None
    lease_type: str | None = Field(default=None, pattern=r"^(FIXED|RENEWABLE)$")


class PropertyCreate(PropertyWrite):
    id: str | None = Field(default=None, pattern=r"^P-\d+$")


class PropertyResponse(BaseModel):
    id: str
    address: str
    commune: str
    property_type: str
    owner: str
    condominium: str | None
    price_uf: str  # Decimal as string
    land_m2: str
    built_m2: str
    storage_m2: str
    status: str
    vacancy_start_date: date | None = None
    notice_end_date: date | None = None
    current_tenant: str | None = None
    lease_start_date: date | None = None
    lease_end_date: date | None = None
    lease_type: str | None = None
    days_vacant: int | None = None
    days_to_handover: int | None = None
    created_at: datetime
    updated_at: datetime


# Visit Schemas
class VisitCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    property_id: str = Field(..., min_length=1)
    visit_date: date
    executive_name: str = Field(..., min_length=1, max_length=120)
    client_name: str = Field(..., min_length=1, max_length=255)
    client_phone: str | None = None
    client_email: str | None = None
    offer_uf: Decimal | None = Field(default=None, ge=0)
    has_broker: bool = False
    broker_name: str | None = None
    comments: str = ""
    next_action: str = Field(..., min_length=1, max_length=255)
    next_action_date: date | None = None


class ScheduleActionRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    action: str = Field(..., min_length=1, max_length=255)
    action_date: date
    note: str | None = None


class ActionHistoryItemResponse(BaseModel):
    action: str
    scheduled_date: date | None
    status: str
    archived_date: date
    completed_date: date | None = None
    note: str | None = None
    closure_reason: str | None = None


class VisitResponse(BaseModel):
    id: str
    property_id: str
    visit_date: date
    executive_name: str
    client_name: str
    client_phone: str | None
    client_email: str | None
    offer_uf: str | None
    has_broker: bool
    broker_name: str | None
    comments: str
    next_action: str
    next_action_date: date | None
    action_status: str
    action_completed_date: date | None
    closure_reason: str | None
    history: list[ActionHistoryItemResponse]
    created_at: datetime


class PropertyDeleteResponse(BaseModel):
    deleted_id: str
    properties: list[PropertyResponse]
    visits: list[VisitResponse]


# Lease Resolution Schemas
class LeaseResolutionResponse(BaseModel):
    id: str
    property_id: str
    state: str
    winner_name: str
    previous_status: str | None
    pending_winner_visit_ids: list[str]
    auto_closed_visit_ids: list[str]
    property: PropertyResponse
    created_at: datetime
    closed_at: datetime | None


class PropertySaveResponse(BaseModel):
    """Result of a save; ``lease_resolution`` is set when the save is held."""

    property: PropertyResponse
    held: bool = False
    lease_resolution: LeaseResolutionResponse | None = None


# Alert Schemas
class StalePropertyResponse(BaseModel):
    property_id: str
    address: str
    status: str
    reference_date: date
    days_inactive: int
    last_visit_date: date | None


class CommitmentAlertResponse(BaseModel):
    visit_id: str
    property_id: str
    client_name: str
    executive_name: str
    next_action: str
    next_action_date: date
    days_left: int
    level: str


class AlertReportResponse(BaseModel):
    as_of: date
    total: int
    urgent_count: int
    stale_properties: list[StalePropertyResponse]
    action_alerts: list[CommitmentAlertResponse]


# Report Schemas
class StockSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total: int
    available: int
    leased: int
    notice_given: int
    average_vacancy_days: int


class ExecutiveActivityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    executive_name: str
    this_week: int
    this_month: int
    previous_month: int


class TrendPointResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    as_of: date
    stale_count: int


class StaleTrendResponse(BaseModel):
    points: list[TrendPointResponse]
    current: int
    recovered: int


# Reference Value Schemas
class ReferenceValueResponse(BaseModel):
    available: bool
    value: str | None = None  # Decimal as string
    as_of: date | None = None
