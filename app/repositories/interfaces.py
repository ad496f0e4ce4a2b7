"""Persistence contracts consumed by the application services.

Services depend on these protocols only; `app.repositories.user`,
`app.repositories.vehicle` and `app.repositories.maintenance_history` provide
the SQLAlchemy implementations. Lookups return at most one entity or None,
existence checks return a bool.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Protocol, TypeVar

from app.domain import (
    MaintenanceHistory,
    MaintenanceType,
    User,
    UserType,
    Vehicle,
    VehicleAggregate,
    VehicleStatus,
)
from app.domain.entity import Entity
from app.domain.maintenance_policy import DEFAULT_MAINTENANCE_POLICY, MaintenancePolicy

T = TypeVar("T", bound=Entity)


class Repository(Protocol[T]):
    """Generic CRUD contract over an identity-bearing entity."""

    def get_by_id(self, entity_id: str) -> T | None: ...

    def get_all(self) -> list[T]: ...

    def add(self, entity: T) -> None: ...

    def update(self, entity: T) -> None: ...

    def delete(self, entity_id: str) -> None: ...

    def exists(self, entity_id: str) -> bool: ...


class UserRepository(Repository[User], Protocol):
    def get_by_email(self, email: str) -> User | None: ...

    def get_by_document(self, document: str) -> User | None: ...

    def get_by_type(self, user_type: UserType) -> list[User]: ...

    def get_active(self) -> list[User]: ...

    def email_exists(self, email: str) -> bool: ...

    def document_exists(self, document: str) -> bool: ...


class VehicleRepository(Repository[Vehicle], Protocol):
    def get_by_license_plate(self, license_plate: str) -> Vehicle | None: ...

    def get_by_status(self, status: VehicleStatus) -> list[Vehicle]: ...

    def get_available(self) -> list[Vehicle]: ...

    def get_by_renter(self, user_id: str) -> list[Vehicle]: ...

    def license_plate_exists(self, license_plate: str) -> bool: ...

    def get_aggregate(
        self, vehicle_id: str, policy: MaintenancePolicy = DEFAULT_MAINTENANCE_POLICY
    ) -> VehicleAggregate | None: ...

    def save_aggregate(self, aggregate: VehicleAggregate) -> None:
        """Persist the vehicle and all of its maintenance records in one transaction."""
        ...


class MaintenanceHistoryRepository(Repository[MaintenanceHistory], Protocol):
    def get_by_vehicle_id(self, vehicle_id: str) -> list[MaintenanceHistory]: ...

    def get_by_type(self, maintenance_type: MaintenanceType) -> list[MaintenanceHistory]: ...

    def get_by_period(self, start: datetime, end: datetime) -> list[MaintenanceHistory]: ...

    def get_total_cost_by_vehicle(self, vehicle_id: str) -> Decimal: ...

    def get_total_cost_by_period(self, start: datetime, end: datetime) -> Decimal: ...
