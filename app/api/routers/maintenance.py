from datetime import datetime

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_vehicle_service
from app.domain import MaintenanceType
from app.schemas.error import error_responses
from app.schemas.maintenance import Maintenance, MaintenanceCostReport
from app.services.vehicle import VehicleService

router = APIRouter(
    prefix="/maintenance",
    tags=["maintenance"],
    responses=error_responses(400, 404),
)


@router.get("", response_model=list[Maintenance])
def list_maintenance(
    type: MaintenanceType | None = Query(None, description="Filter by maintenance type"),
    start: datetime | None = Query(None, description="Period start (inclusive)"),
    end: datetime | None = Query(None, description="Period end (inclusive)"),
    service: VehicleService = Depends(get_vehicle_service),
):
    """
    List maintenance records across the fleet.

    start and end must be given together.
    """
    return service.list_maintenance(type=type, start=start, end=end)


@router.get("/costs", response_model=MaintenanceCostReport)
def get_maintenance_costs(
    start: datetime = Query(..., description="Period start (inclusive)"),
    end: datetime = Query(..., description="Period end (inclusive)"),
    service: VehicleService = Depends(get_vehicle_service),
):
    return service.get_maintenance_cost_report(start, end)


@router.get("/{maintenance_id}", response_model=Maintenance)
def get_maintenance_by_id(
    maintenance_id: str, service: VehicleService = Depends(get_vehicle_service)
):
    return service.get_maintenance(maintenance_id)
