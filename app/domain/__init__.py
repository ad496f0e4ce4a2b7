"""Domain model: entities, value objects and the vehicle aggregate.

This package contains the rules that define *what* a valid fleet looks like,
independent from *where* they are applied (services, repositories, etc.).
Nothing in here performs I/O.
"""

from app.domain.enums import MaintenanceType, UserType, VehicleStatus
from app.domain.maintenance_history import MaintenanceHistory
from app.domain.maintenance_policy import MaintenancePolicy, NoMaintenanceRequired
from app.domain.user import User
from app.domain.value_objects import Email, VehicleModel
from app.domain.vehicle import Vehicle
from app.domain.vehicle_aggregate import VehicleAggregate

__all__ = [
    "Email",
    "MaintenanceHistory",
    "MaintenancePolicy",
    "MaintenanceType",
    "NoMaintenanceRequired",
    "User",
    "UserType",
    "Vehicle",
    "VehicleAggregate",
    "VehicleModel",
    "VehicleStatus",
]
