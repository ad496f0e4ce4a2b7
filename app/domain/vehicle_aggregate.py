"""Consistency boundary between a vehicle and its maintenance records."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Iterable

from app.domain.entity import subtract_months, utcnow
from app.domain.enums import MaintenanceType, VehicleStatus
from app.domain.maintenance_history import MaintenanceHistory
from app.domain.maintenance_policy import DEFAULT_MAINTENANCE_POLICY, MaintenancePolicy
from app.domain.vehicle import Vehicle
from app.errors import ConflictError, DomainValidationError, InvalidStateError, NotFoundError


class VehicleAggregate:
    """Aggregate root owning one vehicle and all of its maintenance records.

    Scheduling and completing maintenance must go through this class: every
    operation either applies all of its changes (record + vehicle status) or
    none of them. Persist the aggregate as a whole with
    `VehicleRepository.save_aggregate`.
    """

    def __init__(
        self,
        vehicle: Vehicle,
        maintenance_histories: Iterable[MaintenanceHistory] | None = None,
        policy: MaintenancePolicy = DEFAULT_MAINTENANCE_POLICY,
    ):
        if not isinstance(vehicle, Vehicle):
            raise DomainValidationError("Vehicle is required")

        histories = list(maintenance_histories or ())
        foreign = [h.id for h in histories if h.vehicle_id != vehicle.id]
        if foreign:
            raise DomainValidationError(
                f"Maintenance records {foreign} do not belong to vehicle {vehicle.id}"
            )

        self._vehicle = vehicle
        self._maintenance_histories = histories
        self._policy = policy

    @property
    def vehicle(self) -> Vehicle:
        return self._vehicle

    @property
    def maintenance_histories(self) -> tuple[MaintenanceHistory, ...]:
        return tuple(self._maintenance_histories)

    def pending_maintenance(self) -> tuple[MaintenanceHistory, ...]:
        return tuple(h for h in self._maintenance_histories if not h.is_completed())

    def schedule_maintenance(
        self,
        description: str,
        estimated_cost: Decimal | int | float | str,
        type: MaintenanceType,
        notes: str | None = None,
    ) -> MaintenanceHistory:
        if self._vehicle.status == VehicleStatus.RENTED:
            raise ConflictError(
                f"Cannot schedule maintenance for rented vehicle {self._vehicle.license_plate}"
            )

        # Build the record first so invalid input fails before anything changes,
        # and only append it once the status transition succeeded.
        maintenance = MaintenanceHistory(
            self._vehicle.id, description, estimated_cost, type, notes
        )
        self._vehicle.send_to_maintenance()
        self._maintenance_histories.append(maintenance)
        return maintenance

    def complete_maintenance(
        self,
        maintenance_id: str,
        actual_cost: Decimal | int | float | str,
        completion_notes: str | None = None,
    ) -> MaintenanceHistory:
        maintenance = self._find(maintenance_id)
        if maintenance is None:
            raise NotFoundError(f"Maintenance {maintenance_id} not found")

        if self._vehicle.status != VehicleStatus.IN_MAINTENANCE:
            raise InvalidStateError(
                f"Vehicle {self._vehicle.license_plate} is not in maintenance"
            )
        if maintenance.is_completed():
            raise InvalidStateError(f"Maintenance {maintenance_id} is already completed")

        if completion_notes is not None and not isinstance(completion_notes, str):
            raise DomainValidationError("Completion notes must be text")

        # record_completion validates the amount before anything is written.
        maintenance.record_completion(actual_cost)
        if completion_notes is not None and completion_notes.strip():
            maintenance.update_notes(completion_notes)
        self._vehicle.complete_maintenance()
        return maintenance

    def get_total_maintenance_cost(self) -> Decimal:
        return sum((h.cost for h in self._maintenance_histories), Decimal("0"))

    def get_maintenance_cost_by_period(self, start: datetime, end: datetime) -> Decimal:
        return sum(
            (h.cost for h in self._maintenance_histories if start <= h.maintenance_date <= end),
            Decimal("0"),
        )

    def has_recent_maintenance(self, months: int = 6) -> bool:
        cutoff = subtract_months(utcnow(), months)
        return any(h.maintenance_date >= cutoff for h in self._maintenance_histories)

    def requires_maintenance(self) -> bool:
        return self._policy.requires_maintenance(
            self._vehicle, self.maintenance_histories
        )

    def validate_for_rental(self) -> None:
        if not self._vehicle.is_available():
            raise InvalidStateError(
                f"Vehicle {self._vehicle.license_plate} is not available for rental"
            )
        if self.requires_maintenance():
            raise InvalidStateError(
                f"Vehicle {self._vehicle.license_plate} requires maintenance before it can be rented"
            )

    def _find(self, maintenance_id: str) -> MaintenanceHistory | None:
        return next(
            (h for h in self._maintenance_histories if h.id == maintenance_id), None
        )
