from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from app.domain import MaintenanceType


class Maintenance(BaseModel):
    id: str
    vehicle_id: str
    description: str
    cost: Decimal
    type: MaintenanceType
    notes: str | None = None
    maintenance_date: datetime
    created_at: datetime
    actual_cost: Decimal | None = None
    completed_at: datetime | None = None
    is_expensive: bool


class MaintenanceSchedule(BaseModel):
    description: str = Field(..., max_length=500)
    estimated_cost: Decimal = Field(..., ge=0)
    type: MaintenanceType
    notes: str | None = None


class MaintenanceComplete(BaseModel):
    actual_cost: Decimal = Field(..., ge=0)
    completion_notes: str | None = None


class MaintenanceCostReport(BaseModel):
    start: datetime
    end: datetime
    total_cost: Decimal
