from fastapi import Depends
from sqlalchemy.orm import Session

from app.core.config import settings
from app.db import SessionLocal
from app.repositories.maintenance_history import SqlAlchemyMaintenanceHistoryRepository
from app.repositories.user import SqlAlchemyUserRepository
from app.repositories.vehicle import SqlAlchemyVehicleRepository
from app.services.user import UserService
from app.services.vehicle import VehicleService


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    """Build a UserService bound to the request's database session."""
    return UserService(
        users=SqlAlchemyUserRepository(db),
        vehicles=SqlAlchemyVehicleRepository(db),
    )


def get_vehicle_service(db: Session = Depends(get_db)) -> VehicleService:
    """Build a VehicleService bound to the request's database session."""
    return VehicleService(
        vehicles=SqlAlchemyVehicleRepository(db),
        maintenance=SqlAlchemyMaintenanceHistoryRepository(db),
        users=SqlAlchemyUserRepository(db),
        recent_maintenance_months=settings.recent_maintenance_months,
    )
