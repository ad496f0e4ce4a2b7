from __future__ import annotations

from datetime import datetime
from decimal import Decimal, InvalidOperation

from app.domain.entity import Entity, as_utc, new_id, utcnow
from app.domain.enums import MaintenanceType
from app.errors import DomainValidationError

# Arbitrary line above which a maintenance counts as expensive.
EXPENSIVE_MAINTENANCE_THRESHOLD = Decimal("1000")


def _to_cost(value, field: str = "Cost") -> Decimal:
    try:
        cost = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise DomainValidationError(f"{field} must be a number")
    if not cost.is_finite():
        raise DomainValidationError(f"{field} must be a number")
    if cost < 0:
        raise DomainValidationError(f"{field} cannot be negative")
    return cost


def _clean_notes(notes: str | None) -> str | None:
    if notes is None:
        return None
    if not isinstance(notes, str):
        raise DomainValidationError("Notes must be text")
    return notes.strip()


class MaintenanceHistory(Entity):
    """A single maintenance performed (or being performed) on a vehicle.

    `cost` is fixed when the maintenance is scheduled. The amount actually
    paid is kept apart in `actual_cost` once the maintenance is completed.
    """

    def __init__(
        self,
        vehicle_id: str,
        description: str,
        cost: Decimal | int | float | str,
        type: MaintenanceType,
        notes: str | None = None,
    ):
        if not isinstance(vehicle_id, str) or not vehicle_id.strip():
            raise DomainValidationError("Vehicle id cannot be empty")
        if not isinstance(description, str) or not description.strip():
            raise DomainValidationError("Description cannot be empty")
        try:
            maintenance_type = MaintenanceType(type)
        except ValueError:
            raise DomainValidationError(f"Invalid maintenance type: {type!r}")

        now = utcnow()
        self._id = new_id()
        self._vehicle_id = vehicle_id
        self._description = description.strip()
        self._cost = _to_cost(cost)
        self._type = maintenance_type
        self._notes = _clean_notes(notes)
        self._maintenance_date = now
        self._created_at = now
        self._actual_cost: Decimal | None = None
        self._completed_at: datetime | None = None

    @classmethod
    def reconstruct(
        cls,
        *,
        id: str,
        vehicle_id: str,
        description: str,
        cost: Decimal,
        type: MaintenanceType,
        maintenance_date: datetime,
        created_at: datetime,
        notes: str | None = None,
        actual_cost: Decimal | None = None,
        completed_at: datetime | None = None,
    ) -> MaintenanceHistory:
        """Rebuild a stored record without running validation."""
        record = cls.__new__(cls)
        record._id = id
        record._vehicle_id = vehicle_id
        record._description = description
        record._cost = Decimal(cost)
        record._type = MaintenanceType(type)
        record._notes = notes
        record._maintenance_date = as_utc(maintenance_date)
        record._created_at = as_utc(created_at)
        record._actual_cost = Decimal(actual_cost) if actual_cost is not None else None
        record._completed_at = as_utc(completed_at)
        return record

    @property
    def vehicle_id(self) -> str:
        return self._vehicle_id

    @property
    def description(self) -> str:
        return self._description

    @property
    def cost(self) -> Decimal:
        return self._cost

    @property
    def type(self) -> MaintenanceType:
        return self._type

    @property
    def notes(self) -> str | None:
        return self._notes

    @property
    def maintenance_date(self) -> datetime:
        return self._maintenance_date

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def actual_cost(self) -> Decimal | None:
        return self._actual_cost

    @property
    def completed_at(self) -> datetime | None:
        return self._completed_at

    def update_notes(self, notes: str | None) -> None:
        self._notes = _clean_notes(notes)

    def record_completion(self, actual_cost) -> None:
        self._actual_cost = _to_cost(actual_cost, field="Actual cost")
        self._completed_at = utcnow()

    def is_completed(self) -> bool:
        return self._completed_at is not None

    def is_preventive(self) -> bool:
        return self._type == MaintenanceType.PREVENTIVE

    def is_corrective(self) -> bool:
        return self._type == MaintenanceType.CORRECTIVE

    def is_expensive(self) -> bool:
        return self._cost > EXPENSIVE_MAINTENANCE_THRESHOLD
