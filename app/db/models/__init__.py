from app.db.models.user import User
from app.db.models.vehicle import Vehicle
from app.db.models.maintenance_history import MaintenanceHistory

__all__ = ["User", "Vehicle", "MaintenanceHistory"]
