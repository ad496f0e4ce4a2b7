from __future__ import annotations

from datetime import datetime

from app.domain.entity import Entity, as_utc, new_id, utcnow
from app.domain.enums import VehicleStatus
from app.domain.maintenance_policy import DEFAULT_MAINTENANCE_POLICY, MaintenancePolicy
from app.domain.value_objects import VehicleModel
from app.errors import DomainValidationError, InvalidStateError

MIN_YEAR = 1900


def _validate_year(year: int) -> int:
    max_year = utcnow().year + 1
    if not isinstance(year, int) or isinstance(year, bool) or not MIN_YEAR <= year <= max_year:
        raise DomainValidationError(
            f"Invalid year {year!r}: must be between {MIN_YEAR} and {max_year}"
        )
    return year


class Vehicle(Entity):
    """A rentable vehicle.

    Status only changes through the transition methods below:

        available --rent--> rented --return_from_rental--> available
        available|rented --send_to_maintenance--> in_maintenance
        in_maintenance --complete_maintenance--> available

    Maintenance should be driven through `VehicleAggregate` so the status and
    the maintenance records stay consistent.
    """

    def __init__(self, license_plate: str, model: VehicleModel, year: int):
        if not isinstance(license_plate, str) or not license_plate.strip():
            raise DomainValidationError("License plate cannot be empty")
        if not isinstance(model, VehicleModel):
            raise DomainValidationError("Vehicle model is required")

        self._id = new_id()
        self._license_plate = license_plate.strip().upper()
        self._model = model
        self._year = _validate_year(year)
        self._status = VehicleStatus.AVAILABLE
        self._renter_id: str | None = None
        self._created_at = utcnow()
        self._updated_at: datetime | None = None

    @classmethod
    def reconstruct(
        cls,
        *,
        id: str,
        license_plate: str,
        model: VehicleModel,
        year: int,
        status: VehicleStatus,
        created_at: datetime,
        updated_at: datetime | None = None,
        renter_id: str | None = None,
    ) -> Vehicle:
        """Rebuild a stored vehicle without running validation.

        Only the persistence layer should call this.
        """
        vehicle = cls.__new__(cls)
        vehicle._id = id
        vehicle._license_plate = license_plate
        vehicle._model = model
        vehicle._year = year
        vehicle._status = VehicleStatus(status)
        vehicle._renter_id = renter_id
        vehicle._created_at = as_utc(created_at)
        vehicle._updated_at = as_utc(updated_at)
        return vehicle

    @property
    def license_plate(self) -> str:
        return self._license_plate

    @property
    def model(self) -> VehicleModel:
        return self._model

    @property
    def year(self) -> int:
        return self._year

    @property
    def status(self) -> VehicleStatus:
        return self._status

    @property
    def renter_id(self) -> str | None:
        return self._renter_id

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime | None:
        return self._updated_at

    def _touch(self) -> None:
        self._updated_at = utcnow()

    def rent(self, renter_id: str | None = None) -> None:
        if self._status != VehicleStatus.AVAILABLE:
            raise InvalidStateError(
                f"Vehicle {self._license_plate} is not available for rental"
            )
        self._status = VehicleStatus.RENTED
        self._renter_id = renter_id
        self._touch()

    def return_from_rental(self) -> None:
        if self._status != VehicleStatus.RENTED:
            raise InvalidStateError(f"Vehicle {self._license_plate} is not rented")
        self._status = VehicleStatus.AVAILABLE
        self._renter_id = None
        self._touch()

    def send_to_maintenance(self) -> None:
        if self._status == VehicleStatus.IN_MAINTENANCE:
            raise InvalidStateError(
                f"Vehicle {self._license_plate} is already in maintenance"
            )
        self._status = VehicleStatus.IN_MAINTENANCE
        # Leaving "rented" ends the rental.
        self._renter_id = None
        self._touch()

    def complete_maintenance(self) -> None:
        if self._status != VehicleStatus.IN_MAINTENANCE:
            raise InvalidStateError(
                f"Vehicle {self._license_plate} is not in maintenance"
            )
        self._status = VehicleStatus.AVAILABLE
        self._touch()

    def update_details(
        self, model: VehicleModel | None = None, year: int | None = None
    ) -> None:
        """Replace the model and/or year. Both are validated before either is applied."""
        if model is None and year is None:
            return
        if model is not None and not isinstance(model, VehicleModel):
            raise DomainValidationError("Vehicle model is required")
        new_year = _validate_year(year) if year is not None else self._year

        if model is not None:
            self._model = model
        self._year = new_year
        self._touch()

    def is_available(self) -> bool:
        return self._status == VehicleStatus.AVAILABLE

    def is_rented(self) -> bool:
        return self._status == VehicleStatus.RENTED

    def requires_maintenance(
        self, policy: MaintenancePolicy = DEFAULT_MAINTENANCE_POLICY
    ) -> bool:
        # Without history the policy can only judge the vehicle itself;
        # VehicleAggregate passes the full record list.
        return policy.requires_maintenance(self, ())
