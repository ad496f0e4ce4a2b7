import logging
from datetime import datetime, timezone

from app.domain import (
    MaintenanceHistory,
    MaintenanceType,
    User,
    Vehicle,
    VehicleAggregate,
    VehicleModel,
    VehicleStatus,
)
from app.domain.entity import as_utc
from app.domain.maintenance_policy import DEFAULT_MAINTENANCE_POLICY, MaintenancePolicy
from app.errors import ConflictError, DomainValidationError, NotFoundError
from app.repositories.interfaces import (
    MaintenanceHistoryRepository,
    UserRepository,
    VehicleRepository,
)
from app.schemas.maintenance import (
    Maintenance as MaintenanceSchema,
    MaintenanceComplete,
    MaintenanceCostReport,
    MaintenanceSchedule,
)
from app.schemas.vehicle import (
    MaintenanceSummary,
    Vehicle as VehicleSchema,
    VehicleCreate,
    VehicleUpdate,
)

logger = logging.getLogger(__name__)


def to_vehicle_dto(vehicle: Vehicle) -> VehicleSchema:
    return VehicleSchema(
        id=vehicle.id,
        license_plate=vehicle.license_plate,
        brand=vehicle.model.brand,
        model=vehicle.model.model,
        full_name=vehicle.model.full_name,
        year=vehicle.year,
        status=vehicle.status,
        renter_id=vehicle.renter_id,
        created_at=vehicle.created_at,
        updated_at=vehicle.updated_at,
    )


def to_maintenance_dto(maintenance: MaintenanceHistory) -> MaintenanceSchema:
    return MaintenanceSchema(
        id=maintenance.id,
        vehicle_id=maintenance.vehicle_id,
        description=maintenance.description,
        cost=maintenance.cost,
        type=maintenance.type,
        notes=maintenance.notes,
        maintenance_date=maintenance.maintenance_date,
        created_at=maintenance.created_at,
        actual_cost=maintenance.actual_cost,
        completed_at=maintenance.completed_at,
        is_expensive=maintenance.is_expensive(),
    )


def _to_utc(value: datetime) -> datetime:
    return as_utc(value).astimezone(timezone.utc)


def _validate_period(start: datetime, end: datetime) -> tuple[datetime, datetime]:
    start, end = _to_utc(start), _to_utc(end)
    if start > end:
        raise DomainValidationError(f"Period start ({start}) cannot be after end ({end})")
    return start, end


class VehicleService:
    """Use cases around vehicles and their maintenance.

    Maintenance is always scheduled and completed through `VehicleAggregate`
    and persisted with `save_aggregate`, so status and records are written
    together.
    """

    def __init__(
        self,
        vehicles: VehicleRepository,
        maintenance: MaintenanceHistoryRepository,
        users: UserRepository,
        maintenance_policy: MaintenancePolicy = DEFAULT_MAINTENANCE_POLICY,
        recent_maintenance_months: int = 6,
    ):
        self.vehicles = vehicles
        self.maintenance = maintenance
        self.users = users
        self.maintenance_policy = maintenance_policy
        self.recent_maintenance_months = recent_maintenance_months

    def _get_vehicle(self, vehicle_id: str) -> Vehicle:
        vehicle = self.vehicles.get_by_id(vehicle_id)
        if not vehicle:
            raise NotFoundError("Vehicle not found")
        return vehicle

    def _get_renter(self, user_id: str) -> User:
        user = self.users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def _get_aggregate(self, vehicle_id: str) -> VehicleAggregate:
        aggregate = self.vehicles.get_aggregate(vehicle_id, policy=self.maintenance_policy)
        if not aggregate:
            raise NotFoundError("Vehicle not found")
        return aggregate

    def create_vehicle(self, data: VehicleCreate) -> VehicleSchema:
        """
        Create a new vehicle.

        - Validates license plate uniqueness (case-insensitive)
        - Validates brand, model and year through the domain
        """
        if self.vehicles.license_plate_exists(data.license_plate):
            raise ConflictError(
                f"A vehicle with license plate {data.license_plate.strip().upper()} already exists"
            )

        vehicle = Vehicle(data.license_plate, VehicleModel(data.brand, data.model), data.year)
        self.vehicles.add(vehicle)
        logger.info("Created vehicle %s (%s)", vehicle.id, vehicle.license_plate)
        return to_vehicle_dto(vehicle)

    def get_vehicle(self, vehicle_id: str) -> VehicleSchema:
        return to_vehicle_dto(self._get_vehicle(vehicle_id))

    def get_vehicle_by_license_plate(self, license_plate: str) -> VehicleSchema:
        vehicle = self.vehicles.get_by_license_plate(license_plate)
        if not vehicle:
            raise NotFoundError("Vehicle not found")
        return to_vehicle_dto(vehicle)

    def get_all_vehicles(self, status: VehicleStatus | None = None) -> list[VehicleSchema]:
        if status is not None:
            vehicles = self.vehicles.get_by_status(status)
        else:
            vehicles = self.vehicles.get_all()
        return [to_vehicle_dto(v) for v in vehicles]

    def get_available_vehicles(self) -> list[VehicleSchema]:
        return [to_vehicle_dto(v) for v in self.vehicles.get_available()]

    def update_vehicle(self, vehicle_id: str, data: VehicleUpdate) -> VehicleSchema:
        """
        Update brand/model and/or year.

        Raises:
            NotFoundError: If the vehicle doesn't exist
            DomainValidationError: If only one of brand/model is given, or values are invalid
        """
        vehicle = self._get_vehicle(vehicle_id)

        if (data.brand is None) != (data.model is None):
            raise DomainValidationError("Both brand and model must be provided together")

        model = VehicleModel(data.brand, data.model) if data.brand is not None else None
        vehicle.update_details(model=model, year=data.year)
        self.vehicles.update(vehicle)
        return to_vehicle_dto(vehicle)

    def change_vehicle_status(
        self, vehicle_id: str, status: VehicleStatus, renter_id: str | None = None
    ) -> VehicleSchema:
        """
        Move a vehicle between available and rented.

        Renting needs `renter_id` so the rental belongs to a user; making a
        rented vehicle available again returns it on behalf of its renter.
        Maintenance transitions are rejected here: they have to go through
        schedule_maintenance / complete_maintenance so a record is kept.

        Raises:
            NotFoundError: If the vehicle or the renter doesn't exist
            DomainValidationError: For in_maintenance, or rented without a renter
            InvalidStateError: If the transition is not allowed
        """
        renter = None
        if status == VehicleStatus.RENTED:
            if not renter_id:
                raise DomainValidationError("renter_id is required to rent a vehicle")
            renter = self._get_renter(renter_id)
            aggregate = self._get_aggregate(vehicle_id)
            aggregate.validate_for_rental()
            vehicle = aggregate.vehicle
            renter.rent_vehicle(vehicle)
        elif status == VehicleStatus.AVAILABLE:
            vehicle = self._get_vehicle(vehicle_id)
            if vehicle.renter_id:
                renter = self._get_renter(vehicle.renter_id)
                renter.return_vehicle(vehicle)
            else:
                vehicle.return_from_rental()
        else:
            raise DomainValidationError(
                "Use the maintenance endpoints to send a vehicle to maintenance"
            )

        self.vehicles.update(vehicle)
        if renter is not None:
            self.users.update(renter)
        logger.info("Vehicle %s is now %s", vehicle.id, vehicle.status.value)
        return to_vehicle_dto(vehicle)

    def delete_vehicle(self, vehicle_id: str) -> None:
        """
        Delete a vehicle and its maintenance records.

        Raises:
            NotFoundError: If the vehicle doesn't exist
            ConflictError: If the vehicle is currently rented
        """
        vehicle = self._get_vehicle(vehicle_id)
        if vehicle.is_rented():
            logger.warning("Refused to delete rented vehicle %s", vehicle_id)
            raise ConflictError("Cannot delete a rented vehicle")

        self.vehicles.delete(vehicle_id)
        logger.info("Deleted vehicle %s", vehicle_id)

    def schedule_maintenance(
        self, vehicle_id: str, data: MaintenanceSchedule
    ) -> MaintenanceSchema:
        aggregate = self._get_aggregate(vehicle_id)
        record = aggregate.schedule_maintenance(
            data.description, data.estimated_cost, data.type, data.notes
        )
        self.vehicles.save_aggregate(aggregate)
        logger.info("Scheduled maintenance %s for vehicle %s", record.id, vehicle_id)
        return to_maintenance_dto(record)

    def complete_maintenance(
        self, vehicle_id: str, maintenance_id: str, data: MaintenanceComplete
    ) -> MaintenanceSchema:
        aggregate = self._get_aggregate(vehicle_id)
        record = aggregate.complete_maintenance(
            maintenance_id, data.actual_cost, data.completion_notes
        )
        self.vehicles.save_aggregate(aggregate)
        logger.info("Completed maintenance %s for vehicle %s", record.id, vehicle_id)
        return to_maintenance_dto(record)

    def get_maintenance_history(self, vehicle_id: str) -> list[MaintenanceSchema]:
        aggregate = self._get_aggregate(vehicle_id)
        return [to_maintenance_dto(m) for m in aggregate.maintenance_histories]

    def get_maintenance_summary(
        self,
        vehicle_id: str,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> MaintenanceSummary:
        if (start is None) != (end is None):
            raise DomainValidationError("Both start and end must be provided together, or neither")

        aggregate = self._get_aggregate(vehicle_id)
        period_cost = None
        if start is not None and end is not None:
            start, end = _validate_period(start, end)
            period_cost = aggregate.get_maintenance_cost_by_period(start, end)

        return MaintenanceSummary(
            vehicle_id=vehicle_id,
            total_cost=aggregate.get_total_maintenance_cost(),
            period_cost=period_cost,
            has_recent_maintenance=aggregate.has_recent_maintenance(
                self.recent_maintenance_months
            ),
            pending_count=len(aggregate.pending_maintenance()),
        )

    def list_maintenance(
        self,
        type: MaintenanceType | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[MaintenanceSchema]:
        if (start is None) != (end is None):
            raise DomainValidationError("Both start and end must be provided together, or neither")

        if start is not None and end is not None:
            start, end = _validate_period(start, end)
            records = self.maintenance.get_by_period(start, end)
            if type is not None:
                records = [r for r in records if r.type == type]
        elif type is not None:
            records = self.maintenance.get_by_type(type)
        else:
            records = self.maintenance.get_all()
        return [to_maintenance_dto(r) for r in records]

    def get_maintenance(self, maintenance_id: str) -> MaintenanceSchema:
        record = self.maintenance.get_by_id(maintenance_id)
        if not record:
            raise NotFoundError("Maintenance not found")
        return to_maintenance_dto(record)

    def get_maintenance_cost_report(self, start: datetime, end: datetime) -> MaintenanceCostReport:
        start, end = _validate_period(start, end)
        return MaintenanceCostReport(
            start=start,
            end=end,
            total_cost=self.maintenance.get_total_cost_by_period(start, end),
        )
