from __future__ import annotations

from datetime import datetime
from typing import Iterable

from app.domain.entity import Entity, as_utc, new_id, utcnow
from app.domain.enums import UserType
from app.domain.value_objects import Email
from app.domain.vehicle import Vehicle
from app.errors import DomainValidationError, InvalidStateError


class User(Entity):
    """A person who may rent vehicles.

    The vehicles a user currently holds are kept in memory only; the
    persistence layer rebuilds them every time the user is loaded.
    """

    def __init__(self, name: str, email: Email, document: str, type: UserType):
        if not isinstance(name, str) or not name.strip():
            raise DomainValidationError("Name cannot be empty")
        if not isinstance(email, Email):
            raise DomainValidationError("Email is required")
        if not isinstance(document, str) or not document.strip():
            raise DomainValidationError("Document cannot be empty")
        try:
            user_type = UserType(type)
        except ValueError:
            raise DomainValidationError(f"Invalid user type: {type!r}")

        self._id = new_id()
        self._name = name.strip()
        self._email = email
        self._document = document.strip()
        self._type = user_type
        self._is_active = True
        self._created_at = utcnow()
        self._updated_at: datetime | None = None
        self._rented_vehicles: list[Vehicle] = []

    @classmethod
    def reconstruct(
        cls,
        *,
        id: str,
        name: str,
        email: Email,
        document: str,
        type: UserType,
        is_active: bool,
        created_at: datetime,
        updated_at: datetime | None = None,
        rented_vehicles: Iterable[Vehicle] = (),
    ) -> User:
        """Rebuild a stored user without running validation."""
        user = cls.__new__(cls)
        user._id = id
        user._name = name
        user._email = email
        user._document = document
        user._type = UserType(type)
        user._is_active = is_active
        user._created_at = as_utc(created_at)
        user._updated_at = as_utc(updated_at)
        user._rented_vehicles = list(rented_vehicles)
        return user

    @property
    def name(self) -> str:
        return self._name

    @property
    def email(self) -> Email:
        return self._email

    @property
    def document(self) -> str:
        return self._document

    @property
    def type(self) -> UserType:
        return self._type

    @property
    def is_active(self) -> bool:
        return self._is_active

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime | None:
        return self._updated_at

    @property
    def rented_vehicles(self) -> tuple[Vehicle, ...]:
        return tuple(self._current_rentals())

    def _current_rentals(self) -> list[Vehicle]:
        # A vehicle sent to maintenance or returned elsewhere no longer counts.
        return [
            v for v in self._rented_vehicles
            if v.is_rented() and v.renter_id == self._id
        ]

    def _touch(self) -> None:
        self._updated_at = utcnow()

    def update_name(self, new_name: str) -> None:
        if not isinstance(new_name, str) or not new_name.strip():
            raise DomainValidationError("Name cannot be empty")
        self._name = new_name.strip()
        self._touch()

    def update_email(self, new_email: Email) -> None:
        if not isinstance(new_email, Email):
            raise DomainValidationError("Email is required")
        self._email = new_email
        self._touch()

    def deactivate(self) -> None:
        if not self._is_active:
            raise InvalidStateError("User is already inactive")
        if self._current_rentals():
            raise InvalidStateError("Cannot deactivate a user with rented vehicles")
        self._is_active = False
        self._touch()

    def activate(self) -> None:
        if self._is_active:
            raise InvalidStateError("User is already active")
        self._is_active = True
        self._touch()

    def rent_vehicle(self, vehicle: Vehicle) -> None:
        if not isinstance(vehicle, Vehicle):
            raise DomainValidationError("Vehicle is required")
        if not self._is_active:
            raise InvalidStateError("Inactive users cannot rent vehicles")
        if not self.can_rent_vehicles():
            raise InvalidStateError(
                f"Users of type {self._type.value} cannot rent vehicles"
            )
        if not vehicle.is_available():
            raise InvalidStateError(f"Vehicle {vehicle.license_plate} is not available")

        vehicle.rent(renter_id=self._id)
        self._rented_vehicles.append(vehicle)
        self._touch()

    def return_vehicle(self, vehicle: Vehicle) -> None:
        if not isinstance(vehicle, Vehicle):
            raise DomainValidationError("Vehicle is required")
        if vehicle not in self._current_rentals():
            raise InvalidStateError(
                f"Vehicle {vehicle.license_plate} is not rented by this user"
            )

        vehicle.return_from_rental()
        self._rented_vehicles.remove(vehicle)
        self._touch()

    def can_rent_vehicles(self) -> bool:
        return self._is_active and self._type == UserType.CUSTOMER

    def rented_vehicles_count(self) -> int:
        return len(self._current_rentals())
