from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from app.domain import MaintenanceType, VehicleStatus
from app.errors import ConflictError, DomainValidationError, InvalidStateError, NotFoundError
from app.repositories.vehicle import SqlAlchemyVehicleRepository
from app.schemas.maintenance import MaintenanceComplete, MaintenanceSchedule
from app.schemas.vehicle import VehicleCreate, VehicleUpdate
from app.services.vehicle import VehicleService


def schedule(service: VehicleService, vehicle_id: str, cost="150.00", type=MaintenanceType.PREVENTIVE):
    return service.schedule_maintenance(
        vehicle_id,
        MaintenanceSchedule(description="Oil change", estimated_cost=Decimal(cost), type=type),
    )


# ============================================================================
# VEHICLE CRUD TESTS
# ============================================================================


def test_create_vehicle(vehicle):
    assert vehicle.license_plate == "ABC1234"
    assert vehicle.full_name == "Toyota Corolla"
    assert vehicle.status == VehicleStatus.AVAILABLE


def test_create_vehicle_duplicate_plate_ignores_case(vehicle_service: VehicleService, vehicle):
    with pytest.raises(ConflictError):
        vehicle_service.create_vehicle(
            VehicleCreate(license_plate="abc1234", brand="Honda", model="Civic", year=2020)
        )


def test_create_vehicle_invalid_year(vehicle_service: VehicleService):
    with pytest.raises(DomainValidationError):
        vehicle_service.create_vehicle(
            VehicleCreate(license_plate="OLD0001", brand="Ford", model="T", year=1850)
        )


def test_get_vehicle_by_license_plate(vehicle_service: VehicleService, vehicle):
    assert vehicle_service.get_vehicle_by_license_plate("abc1234").id == vehicle.id
    with pytest.raises(NotFoundError):
        vehicle_service.get_vehicle_by_license_plate("NOPE")


def test_list_vehicles_by_status(vehicle_service: VehicleService, vehicle, customer):
    other = vehicle_service.create_vehicle(
        VehicleCreate(license_plate="XYZ9876", brand="Honda", model="Civic", year=2021)
    )
    vehicle_service.change_vehicle_status(other.id, VehicleStatus.RENTED, renter_id=customer.id)

    assert [v.id for v in vehicle_service.get_all_vehicles()] == [vehicle.id, other.id]
    assert [v.id for v in vehicle_service.get_available_vehicles()] == [vehicle.id]
    assert [v.id for v in vehicle_service.get_all_vehicles(status=VehicleStatus.RENTED)] == [other.id]


def test_update_vehicle(vehicle_service: VehicleService, vehicle):
    updated = vehicle_service.update_vehicle(
        vehicle.id, VehicleUpdate(brand="Toyota", model="Yaris", year=2023)
    )
    assert updated.full_name == "Toyota Yaris"
    assert updated.year == 2023
    assert updated.updated_at is not None


def test_update_vehicle_brand_without_model(vehicle_service: VehicleService, vehicle):
    with pytest.raises(DomainValidationError):
        vehicle_service.update_vehicle(vehicle.id, VehicleUpdate(brand="Honda"))


def test_change_status_rent_and_return(
    vehicle_service: VehicleService, user_service, vehicle, customer
):
    rented = vehicle_service.change_vehicle_status(
        vehicle.id, VehicleStatus.RENTED, renter_id=customer.id
    )
    assert rented.status == VehicleStatus.RENTED
    assert rented.renter_id == customer.id
    assert [v.id for v in user_service.get_rented_vehicles(customer.id)] == [vehicle.id]

    with pytest.raises(InvalidStateError):
        vehicle_service.change_vehicle_status(
            vehicle.id, VehicleStatus.RENTED, renter_id=customer.id
        )

    returned = vehicle_service.change_vehicle_status(vehicle.id, VehicleStatus.AVAILABLE)
    assert returned.status == VehicleStatus.AVAILABLE
    assert returned.renter_id is None
    assert user_service.get_rented_vehicles(customer.id) == []


def test_change_status_to_rented_requires_renter(vehicle_service: VehicleService, vehicle):
    with pytest.raises(DomainValidationError):
        vehicle_service.change_vehicle_status(vehicle.id, VehicleStatus.RENTED)
    with pytest.raises(NotFoundError):
        vehicle_service.change_vehicle_status(
            vehicle.id, VehicleStatus.RENTED, renter_id="missing"
        )
    assert vehicle_service.get_vehicle(vehicle.id).status == VehicleStatus.AVAILABLE


def test_change_status_to_rented_applies_renter_rules(
    vehicle_service: VehicleService, user_service, vehicle, customer
):
    user_service.deactivate_user(customer.id)
    with pytest.raises(InvalidStateError):
        vehicle_service.change_vehicle_status(
            vehicle.id, VehicleStatus.RENTED, renter_id=customer.id
        )
    assert vehicle_service.get_vehicle(vehicle.id).renter_id is None


def test_change_status_available_when_not_rented(vehicle_service: VehicleService, vehicle):
    with pytest.raises(InvalidStateError):
        vehicle_service.change_vehicle_status(vehicle.id, VehicleStatus.AVAILABLE)


def test_change_status_to_maintenance_is_refused(vehicle_service: VehicleService, vehicle):
    with pytest.raises(DomainValidationError):
        vehicle_service.change_vehicle_status(vehicle.id, VehicleStatus.IN_MAINTENANCE)
    assert vehicle_service.get_vehicle(vehicle.id).status == VehicleStatus.AVAILABLE


def test_delete_rented_vehicle_conflicts(vehicle_service: VehicleService, vehicle, customer):
    vehicle_service.change_vehicle_status(vehicle.id, VehicleStatus.RENTED, renter_id=customer.id)
    with pytest.raises(ConflictError):
        vehicle_service.delete_vehicle(vehicle.id)


def test_delete_vehicle_removes_its_maintenance(vehicle_service: VehicleService, vehicle):
    record = schedule(vehicle_service, vehicle.id)
    vehicle_service.delete_vehicle(vehicle.id)

    with pytest.raises(NotFoundError):
        vehicle_service.get_vehicle(vehicle.id)
    with pytest.raises(NotFoundError):
        vehicle_service.get_maintenance(record.id)


# ============================================================================
# MAINTENANCE TESTS
# ============================================================================


def test_schedule_maintenance_persists_record_and_status(vehicle_service: VehicleService, vehicle):
    record = schedule(vehicle_service, vehicle.id)

    assert vehicle_service.get_vehicle(vehicle.id).status == VehicleStatus.IN_MAINTENANCE
    history = vehicle_service.get_maintenance_history(vehicle.id)
    assert [m.id for m in history] == [record.id]
    assert history[0].cost == Decimal("150.00")
    assert history[0].completed_at is None


def test_schedule_on_rented_vehicle_conflicts_and_persists_nothing(
    vehicle_service: VehicleService, vehicle, customer
):
    vehicle_service.change_vehicle_status(vehicle.id, VehicleStatus.RENTED, renter_id=customer.id)

    with pytest.raises(ConflictError):
        schedule(vehicle_service, vehicle.id)

    assert vehicle_service.get_vehicle(vehicle.id).status == VehicleStatus.RENTED
    assert vehicle_service.get_maintenance_history(vehicle.id) == []


def test_complete_maintenance(vehicle_service: VehicleService, vehicle):
    record = schedule(vehicle_service, vehicle.id, cost="800")

    completed = vehicle_service.complete_maintenance(
        vehicle.id, record.id, MaintenanceComplete(actual_cost=Decimal("950"), completion_notes="Pads")
    )

    assert completed.cost == Decimal("800")
    assert completed.actual_cost == Decimal("950")
    assert completed.notes == "Pads"
    assert completed.completed_at is not None
    assert vehicle_service.get_vehicle(vehicle.id).status == VehicleStatus.AVAILABLE
    assert vehicle_service.get_maintenance(record.id).actual_cost == Decimal("950")


def test_complete_unknown_maintenance(vehicle_service: VehicleService, vehicle):
    schedule(vehicle_service, vehicle.id)
    with pytest.raises(NotFoundError):
        vehicle_service.complete_maintenance(
            vehicle.id, "missing", MaintenanceComplete(actual_cost=Decimal("1"))
        )


def test_save_aggregate_failure_rolls_back(db, vehicle_service: VehicleService, vehicle):
    vehicles = SqlAlchemyVehicleRepository(db)
    aggregate = vehicles.get_aggregate(vehicle.id)
    aggregate.schedule_maintenance("Oil change", 100, MaintenanceType.PREVENTIVE)

    # Point the vehicle at a renter that does not exist so the commit fails
    # on the foreign key after the maintenance row has been staged.
    aggregate.vehicle._renter_id = "ghost"
    with pytest.raises(Exception):
        vehicles.save_aggregate(aggregate)

    assert vehicle_service.get_vehicle(vehicle.id).status == VehicleStatus.AVAILABLE
    assert vehicle_service.get_maintenance_history(vehicle.id) == []


def test_maintenance_summary(vehicle_service: VehicleService, vehicle):
    record = schedule(vehicle_service, vehicle.id, cost="1200")
    vehicle_service.complete_maintenance(
        vehicle.id, record.id, MaintenanceComplete(actual_cost=Decimal("1200"))
    )
    schedule(vehicle_service, vehicle.id, cost="300", type=MaintenanceType.CORRECTIVE)

    now = datetime.now(timezone.utc)
    summary = vehicle_service.get_maintenance_summary(
        vehicle.id, start=now - timedelta(days=1), end=now + timedelta(days=1)
    )
    assert summary.total_cost == Decimal("1500")
    assert summary.period_cost == Decimal("1500")
    assert summary.has_recent_maintenance is True
    assert summary.pending_count == 1

    empty_period = vehicle_service.get_maintenance_summary(
        vehicle.id, start=now - timedelta(days=30), end=now - timedelta(days=20)
    )
    assert empty_period.period_cost == Decimal("0")


def test_maintenance_summary_requires_both_bounds(vehicle_service: VehicleService, vehicle):
    with pytest.raises(DomainValidationError):
        vehicle_service.get_maintenance_summary(vehicle.id, start=datetime.now(timezone.utc))


def test_list_maintenance_filters(vehicle_service: VehicleService, vehicle):
    first = schedule(vehicle_service, vehicle.id, cost="100")
    vehicle_service.complete_maintenance(vehicle.id, first.id, MaintenanceComplete(actual_cost=Decimal("100")))
    second = schedule(vehicle_service, vehicle.id, cost="200", type=MaintenanceType.CORRECTIVE)

    now = datetime.now(timezone.utc)
    assert {m.id for m in vehicle_service.list_maintenance()} == {first.id, second.id}
    assert [m.id for m in vehicle_service.list_maintenance(type=MaintenanceType.CORRECTIVE)] == [second.id]
    assert {
        m.id for m in vehicle_service.list_maintenance(start=now - timedelta(hours=1), end=now + timedelta(hours=1))
    } == {first.id, second.id}
    assert [
        m.id
        for m in vehicle_service.list_maintenance(
            type=MaintenanceType.PREVENTIVE, start=now - timedelta(hours=1), end=now + timedelta(hours=1)
        )
    ] == [first.id]

    report = vehicle_service.get_maintenance_cost_report(now - timedelta(hours=1), now + timedelta(hours=1))
    assert report.total_cost == Decimal("300")


def test_period_start_after_end(vehicle_service: VehicleService):
    now = datetime.now(timezone.utc)
    with pytest.raises(DomainValidationError):
        vehicle_service.get_maintenance_cost_report(now, now - timedelta(days=1))


def test_rented_vehicle_sent_to_maintenance_persists_without_renter(
    db, user_service, vehicle_service: VehicleService, customer, vehicle
):
    user_service.rent_vehicle(customer.id, vehicle.id)
    vehicles = SqlAlchemyVehicleRepository(db)
    stored = vehicles.get_by_id(vehicle.id)

    stored.send_to_maintenance()
    vehicles.update(stored)

    reloaded = vehicle_service.get_vehicle(vehicle.id)
    assert reloaded.status == VehicleStatus.IN_MAINTENANCE
    assert reloaded.renter_id is None
    assert user_service.get_rented_vehicles(customer.id) == []
