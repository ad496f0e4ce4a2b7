import os
import tempfile
from pathlib import Path

# Set environment variables BEFORE any imports that might use settings
# Use a temporary directory for test database to avoid permission issues
_test_db_dir = tempfile.mkdtemp()
_test_db_path = os.path.join(_test_db_dir, "test_fleet.db")
os.environ["DATABASE_URL"] = f"sqlite:///{_test_db_path}"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from alembic import command
from alembic.config import Config
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session

from app.main import app
from app.repositories.maintenance_history import SqlAlchemyMaintenanceHistoryRepository
from app.repositories.user import SqlAlchemyUserRepository
from app.repositories.vehicle import SqlAlchemyVehicleRepository
from app.schemas.user import UserCreate
from app.schemas.vehicle import VehicleCreate
from app.services.user import UserService
from app.services.vehicle import VehicleService

ALEMBIC_INI = Path(__file__).resolve().parent.parent / "alembic.ini"


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test and run migrations."""
    # Use a temporary file for SQLite database
    temp_db_dir = tempfile.mkdtemp()
    test_db_path = os.path.join(temp_db_dir, "test.db")
    test_db_url = f"sqlite:///{test_db_path}"

    # Create test engine and session with proper SQLite settings
    test_engine = create_engine(
        test_db_url,
        connect_args={"check_same_thread": False},
    )

    # Enable WAL mode to reduce locking issues, and enforce foreign keys
    @event.listens_for(test_engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=test_engine
    )

    # Run Alembic migrations to set up the database schema
    alembic_cfg = Config(str(ALEMBIC_INI))
    alembic_cfg.set_main_option("sqlalchemy.url", test_db_url)
    command.upgrade(alembic_cfg, "head")

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        # Dispose the engine to close all connections
        test_engine.dispose()

        # Clean up - remove test database file and directory
        try:
            if os.path.exists(test_db_path):
                os.remove(test_db_path)
            # Also remove WAL files
            for suffix in ["-wal", "-shm"]:
                wal_path = f"{test_db_path}{suffix}"
                if os.path.exists(wal_path):
                    os.remove(wal_path)
            if os.path.exists(temp_db_dir):
                os.rmdir(temp_db_dir)
        except OSError as e:
            print(f"Cleanup failed: {e}")


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database dependency override."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    from app.api.deps import get_db

    app.dependency_overrides[get_db] = override_get_db

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def db(db_session):
    """Alias for db_session to match test naming conventions."""
    return db_session


@pytest.fixture(scope="function")
def user_service(db: Session) -> UserService:
    return UserService(
        users=SqlAlchemyUserRepository(db),
        vehicles=SqlAlchemyVehicleRepository(db),
    )


@pytest.fixture(scope="function")
def vehicle_service(db: Session) -> VehicleService:
    return VehicleService(
        vehicles=SqlAlchemyVehicleRepository(db),
        maintenance=SqlAlchemyMaintenanceHistoryRepository(db),
        users=SqlAlchemyUserRepository(db),
    )


@pytest.fixture(scope="function")
def customer(user_service: UserService):
    """An active customer."""
    return user_service.create_user(
        UserCreate(
            name="John Doe",
            email="John.Doe@Example.com ",
            document="12345678900",
        )
    )


@pytest.fixture(scope="function")
def vehicle(vehicle_service: VehicleService):
    """An available Toyota Corolla."""
    return vehicle_service.create_vehicle(
        VehicleCreate(license_plate="ABC1234", brand="Toyota", model="Corolla", year=2022)
    )
