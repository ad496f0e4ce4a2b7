from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from app.domain import VehicleStatus


class Vehicle(BaseModel):
    id: str
    license_plate: str
    brand: str
    model: str
    full_name: str
    year: int
    status: VehicleStatus
    renter_id: str | None = None
    created_at: datetime
    updated_at: datetime | None = None


class VehicleCreate(BaseModel):
    license_plate: str = Field(..., max_length=16)
    brand: str = Field(..., max_length=100)
    model: str = Field(..., max_length=100)
    year: int


class VehicleUpdate(BaseModel):
    """Only provided fields are changed; brand and model must be given together."""

    brand: str | None = Field(None, max_length=100)
    model: str | None = Field(None, max_length=100)
    year: int | None = None


class VehicleStatusChange(BaseModel):
    """`renter_id` is required when `status` is rented."""

    status: VehicleStatus
    renter_id: str | None = None


class MaintenanceSummary(BaseModel):
    vehicle_id: str
    total_cost: Decimal
    period_cost: Decimal | None = None
    has_recent_maintenance: bool
    pending_count: int
