"""Policy deciding whether a vehicle must be serviced before it can be rented.

No concrete rule (mileage, age, time since last service) is defined by the
business yet, so the default policy never requires maintenance. Plug a
different implementation into `VehicleAggregate` to enforce one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, Sequence

if TYPE_CHECKING:
    from app.domain.maintenance_history import MaintenanceHistory
    from app.domain.vehicle import Vehicle


class MaintenancePolicy(Protocol):
    def requires_maintenance(
        self, vehicle: Vehicle, histories: Sequence[MaintenanceHistory]
    ) -> bool: ...


@dataclass(frozen=True, slots=True)
class NoMaintenanceRequired:
    """Default policy: a vehicle never requires maintenance to be rented."""

    def requires_maintenance(
        self, vehicle: Vehicle, histories: Sequence[MaintenanceHistory]
    ) -> bool:
        return False


DEFAULT_MAINTENANCE_POLICY: MaintenancePolicy = NoMaintenanceRequired()
