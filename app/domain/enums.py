from enum import Enum


class VehicleStatus(str, Enum):
    AVAILABLE = "available"
    RENTED = "rented"
    IN_MAINTENANCE = "in_maintenance"


class UserType(str, Enum):
    CUSTOMER = "customer"
    EMPLOYEE = "employee"
    ADMINISTRATOR = "administrator"


class MaintenanceType(str, Enum):
    PREVENTIVE = "preventive"
    CORRECTIVE = "corrective"
