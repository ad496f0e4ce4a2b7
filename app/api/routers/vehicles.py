from datetime import datetime

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import get_vehicle_service
from app.domain import VehicleStatus
from app.schemas.error import error_responses
from app.schemas.maintenance import Maintenance, MaintenanceComplete, MaintenanceSchedule
from app.schemas.vehicle import (
    MaintenanceSummary,
    Vehicle,
    VehicleCreate,
    VehicleStatusChange,
    VehicleUpdate,
)
from app.services.vehicle import VehicleService

router = APIRouter(
    prefix="/vehicles",
    tags=["vehicles"],
    responses=error_responses(400, 404),
)


@router.post(
    "",
    response_model=Vehicle,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(409),
)
def create_new_vehicle(
    vehicle_data: VehicleCreate,
    service: VehicleService = Depends(get_vehicle_service),
):
    """
    Create a new vehicle. The license plate is stored upper-cased and must be unique.
    """
    return service.create_vehicle(vehicle_data)


@router.get("", response_model=list[Vehicle])
def get_all_vehicles(
    status: VehicleStatus | None = Query(None, description="Filter by status"),
    service: VehicleService = Depends(get_vehicle_service),
):
    return service.get_all_vehicles(status=status)


@router.get("/available", response_model=list[Vehicle])
def get_available_vehicles(service: VehicleService = Depends(get_vehicle_service)):
    return service.get_available_vehicles()


@router.get("/by-license-plate/{license_plate}", response_model=Vehicle)
def get_vehicle_by_license_plate(
    license_plate: str, service: VehicleService = Depends(get_vehicle_service)
):
    return service.get_vehicle_by_license_plate(license_plate)


@router.get("/{vehicle_id}", response_model=Vehicle)
def get_vehicle_by_id(vehicle_id: str, service: VehicleService = Depends(get_vehicle_service)):
    return service.get_vehicle(vehicle_id)


@router.put("/{vehicle_id}", response_model=Vehicle)
def update_vehicle_by_id(
    vehicle_id: str,
    vehicle_data: VehicleUpdate,
    service: VehicleService = Depends(get_vehicle_service),
):
    return service.update_vehicle(vehicle_id, vehicle_data)


@router.patch("/{vehicle_id}/status", response_model=Vehicle)
def change_vehicle_status(
    vehicle_id: str,
    status_data: VehicleStatusChange,
    service: VehicleService = Depends(get_vehicle_service),
):
    """
    Switch a vehicle between available and rented.

    Renting requires `renter_id`; making a rented vehicle available returns it
    for its renter, exactly like DELETE /users/{user_id}/rentals/{vehicle_id}.

    Sending a vehicle to maintenance is done through
    POST /vehicles/{vehicle_id}/maintenance instead.
    """
    return service.change_vehicle_status(
        vehicle_id, status_data.status, renter_id=status_data.renter_id
    )


@router.delete(
    "/{vehicle_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=error_responses(409),
)
def delete_vehicle_by_id(vehicle_id: str, service: VehicleService = Depends(get_vehicle_service)):
    """
    Delete a vehicle and its maintenance history. Rented vehicles cannot be deleted.
    """
    service.delete_vehicle(vehicle_id)


@router.post(
    "/{vehicle_id}/maintenance",
    response_model=Maintenance,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(409),
)
def schedule_maintenance(
    vehicle_id: str,
    maintenance_data: MaintenanceSchedule,
    service: VehicleService = Depends(get_vehicle_service),
):
    """
    Schedule maintenance: records it and moves the vehicle to in_maintenance.
    Rented vehicles are rejected with 409.
    """
    return service.schedule_maintenance(vehicle_id, maintenance_data)


@router.post("/{vehicle_id}/maintenance/{maintenance_id}/complete", response_model=Maintenance)
def complete_maintenance(
    vehicle_id: str,
    maintenance_id: str,
    completion_data: MaintenanceComplete,
    service: VehicleService = Depends(get_vehicle_service),
):
    return service.complete_maintenance(vehicle_id, maintenance_id, completion_data)


@router.get("/{vehicle_id}/maintenance", response_model=list[Maintenance])
def get_maintenance_history(
    vehicle_id: str, service: VehicleService = Depends(get_vehicle_service)
):
    return service.get_maintenance_history(vehicle_id)


@router.get("/{vehicle_id}/maintenance/summary", response_model=MaintenanceSummary)
def get_maintenance_summary(
    vehicle_id: str,
    start: datetime | None = Query(None, description="Period start (inclusive)"),
    end: datetime | None = Query(None, description="Period end (inclusive)"),
    service: VehicleService = Depends(get_vehicle_service),
):
    return service.get_maintenance_summary(vehicle_id, start=start, end=end)
