from sqlalchemy.orm import Session

from app.db.models.maintenance_history import MaintenanceHistory as MaintenanceHistoryModel
from app.db.models.vehicle import Vehicle as VehicleRecord
from app.domain import Vehicle, VehicleAggregate, VehicleModel, VehicleStatus
from app.domain.maintenance_policy import DEFAULT_MAINTENANCE_POLICY, MaintenancePolicy
from app.errors import NotFoundError
from app.repositories.maintenance_history import apply_maintenance, to_maintenance


def to_vehicle(row: VehicleRecord) -> Vehicle:
    """Rehydrate a vehicle entity from its table row."""
    return Vehicle.reconstruct(
        id=row.id,
        license_plate=row.license_plate,
        model=VehicleModel(row.brand, row.model),
        year=row.year,
        status=VehicleStatus(row.status),
        renter_id=row.renter_id,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _apply(row: VehicleRecord, vehicle: Vehicle) -> None:
    row.license_plate = vehicle.license_plate
    row.brand = vehicle.model.brand
    row.model = vehicle.model.model
    row.year = vehicle.year
    row.status = vehicle.status.value
    row.renter_id = vehicle.renter_id
    row.created_at = vehicle.created_at
    row.updated_at = vehicle.updated_at


class SqlAlchemyVehicleRepository:
    """Vehicle persistence. Pure data access - no business logic."""

    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(VehicleRecord)

    def get_by_id(self, entity_id: str) -> Vehicle | None:
        row = self._query().filter(VehicleRecord.id == entity_id).first()
        return to_vehicle(row) if row else None

    def get_by_license_plate(self, license_plate: str) -> Vehicle | None:
        row = (
            self._query()
            .filter(VehicleRecord.license_plate == license_plate.strip().upper())
            .first()
        )
        return to_vehicle(row) if row else None

    def get_all(self) -> list[Vehicle]:
        rows = self._query().order_by(VehicleRecord.license_plate).all()
        return [to_vehicle(row) for row in rows]

    def get_by_status(self, status: VehicleStatus) -> list[Vehicle]:
        rows = (
            self._query()
            .filter(VehicleRecord.status == VehicleStatus(status).value)
            .order_by(VehicleRecord.license_plate)
            .all()
        )
        return [to_vehicle(row) for row in rows]

    def get_available(self) -> list[Vehicle]:
        return self.get_by_status(VehicleStatus.AVAILABLE)

    def get_by_renter(self, user_id: str) -> list[Vehicle]:
        rows = (
            self._query()
            .filter(
                VehicleRecord.renter_id == user_id,
                VehicleRecord.status == VehicleStatus.RENTED.value,
            )
            .order_by(VehicleRecord.license_plate)
            .all()
        )
        return [to_vehicle(row) for row in rows]

    def exists(self, entity_id: str) -> bool:
        return self._query().filter(VehicleRecord.id == entity_id).first() is not None

    def license_plate_exists(self, license_plate: str) -> bool:
        return self.get_by_license_plate(license_plate) is not None

    def add(self, entity: Vehicle) -> None:
        row = VehicleRecord(id=entity.id)
        _apply(row, entity)
        self.db.add(row)
        self.db.commit()

    def update(self, entity: Vehicle) -> None:
        row = self.db.get(VehicleRecord, entity.id)
        if not row:
            raise NotFoundError("Vehicle not found")
        _apply(row, entity)
        self.db.commit()

    def delete(self, entity_id: str) -> None:
        row = self.db.get(VehicleRecord, entity_id)
        if not row:
            raise NotFoundError("Vehicle not found")
        # Maintenance records belong to the vehicle aggregate and go with it.
        self.db.query(MaintenanceHistoryModel).filter(
            MaintenanceHistoryModel.vehicle_id == entity_id
        ).delete(synchronize_session=False)
        self.db.delete(row)
        self.db.commit()

    def get_aggregate(
        self, vehicle_id: str, policy: MaintenancePolicy = DEFAULT_MAINTENANCE_POLICY
    ) -> VehicleAggregate | None:
        vehicle = self.get_by_id(vehicle_id)
        if vehicle is None:
            return None
        rows = (
            self.db.query(MaintenanceHistoryModel)
            .filter(MaintenanceHistoryModel.vehicle_id == vehicle_id)
            .order_by(MaintenanceHistoryModel.maintenance_date)
            .all()
        )
        return VehicleAggregate(vehicle, [to_maintenance(row) for row in rows], policy=policy)

    def save_aggregate(self, aggregate: VehicleAggregate) -> None:
        """Write the vehicle row and every maintenance record, committing once."""
        vehicle = aggregate.vehicle
        try:
            row = self.db.get(VehicleRecord, vehicle.id)
            if not row:
                raise NotFoundError("Vehicle not found")
            _apply(row, vehicle)

            for maintenance in aggregate.maintenance_histories:
                maintenance_row = self.db.get(MaintenanceHistoryModel, maintenance.id)
                if maintenance_row is None:
                    maintenance_row = MaintenanceHistoryModel(id=maintenance.id)
                    self.db.add(maintenance_row)
                apply_maintenance(maintenance_row, maintenance)

            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
