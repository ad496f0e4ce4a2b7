from datetime import datetime
from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.db.models.maintenance_history import MaintenanceHistory as MaintenanceHistoryModel
from app.domain import MaintenanceHistory, MaintenanceType
from app.errors import NotFoundError


def to_maintenance(row: MaintenanceHistoryModel) -> MaintenanceHistory:
    """Rehydrate a maintenance record from its table row."""
    return MaintenanceHistory.reconstruct(
        id=row.id,
        vehicle_id=row.vehicle_id,
        description=row.description,
        cost=row.cost,
        type=MaintenanceType(row.type),
        notes=row.notes,
        maintenance_date=row.maintenance_date,
        created_at=row.created_at,
        actual_cost=row.actual_cost,
        completed_at=row.completed_at,
    )


def apply_maintenance(row: MaintenanceHistoryModel, maintenance: MaintenanceHistory) -> None:
    row.vehicle_id = maintenance.vehicle_id
    row.description = maintenance.description
    row.cost = maintenance.cost
    row.type = maintenance.type.value
    row.notes = maintenance.notes
    row.maintenance_date = maintenance.maintenance_date
    row.created_at = maintenance.created_at
    row.actual_cost = maintenance.actual_cost
    row.completed_at = maintenance.completed_at


def _as_decimal(value) -> Decimal:
    return Decimal(str(value)) if value is not None else Decimal("0")


class SqlAlchemyMaintenanceHistoryRepository:
    """Maintenance record persistence. Pure data access - no business logic.

    Records are normally written through `SqlAlchemyVehicleRepository.save_aggregate`;
    this repository serves the read side and standalone fixes.
    """

    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(MaintenanceHistoryModel)

    def get_by_id(self, entity_id: str) -> MaintenanceHistory | None:
        row = self._query().filter(MaintenanceHistoryModel.id == entity_id).first()
        return to_maintenance(row) if row else None

    def get_all(self) -> list[MaintenanceHistory]:
        rows = self._query().order_by(MaintenanceHistoryModel.maintenance_date).all()
        return [to_maintenance(row) for row in rows]

    def get_by_vehicle_id(self, vehicle_id: str) -> list[MaintenanceHistory]:
        rows = (
            self._query()
            .filter(MaintenanceHistoryModel.vehicle_id == vehicle_id)
            .order_by(MaintenanceHistoryModel.maintenance_date)
            .all()
        )
        return [to_maintenance(row) for row in rows]

    def get_by_type(self, maintenance_type: MaintenanceType) -> list[MaintenanceHistory]:
        rows = (
            self._query()
            .filter(MaintenanceHistoryModel.type == MaintenanceType(maintenance_type).value)
            .order_by(MaintenanceHistoryModel.maintenance_date)
            .all()
        )
        return [to_maintenance(row) for row in rows]

    def get_by_period(self, start: datetime, end: datetime) -> list[MaintenanceHistory]:
        """Records whose maintenance date falls within [start, end]."""
        rows = (
            self._query()
            .filter(
                MaintenanceHistoryModel.maintenance_date >= start,
                MaintenanceHistoryModel.maintenance_date <= end,
            )
            .order_by(MaintenanceHistoryModel.maintenance_date)
            .all()
        )
        return [to_maintenance(row) for row in rows]

    def get_total_cost_by_vehicle(self, vehicle_id: str) -> Decimal:
        total = (
            self.db.query(func.sum(MaintenanceHistoryModel.cost))
            .filter(MaintenanceHistoryModel.vehicle_id == vehicle_id)
            .scalar()
        )
        return _as_decimal(total)

    def get_total_cost_by_period(self, start: datetime, end: datetime) -> Decimal:
        total = (
            self.db.query(func.sum(MaintenanceHistoryModel.cost))
            .filter(
                MaintenanceHistoryModel.maintenance_date >= start,
                MaintenanceHistoryModel.maintenance_date <= end,
            )
            .scalar()
        )
        return _as_decimal(total)

    def exists(self, entity_id: str) -> bool:
        return self._query().filter(MaintenanceHistoryModel.id == entity_id).first() is not None

    def add(self, entity: MaintenanceHistory) -> None:
        row = MaintenanceHistoryModel(id=entity.id)
        apply_maintenance(row, entity)
        self.db.add(row)
        self.db.commit()

    def update(self, entity: MaintenanceHistory) -> None:
        row = self.db.get(MaintenanceHistoryModel, entity.id)
        if not row:
            raise NotFoundError("Maintenance not found")
        apply_maintenance(row, entity)
        self.db.commit()

    def delete(self, entity_id: str) -> None:
        row = self.db.get(MaintenanceHistoryModel, entity_id)
        if not row:
            raise NotFoundError("Maintenance not found")
        self.db.delete(row)
        self.db.commit()
