"""Immutable, self-validating value objects."""

from __future__ import annotations

import re
from dataclasses import dataclass

from app.errors import DomainValidationError

EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$",
    re.IGNORECASE,
)


@dataclass(frozen=True, slots=True)
class Email:
    """An email address, stored trimmed and lower-cased.

    Because the stored value is already normalized, the generated equality and
    hash are case-insensitive with respect to the raw input.
    """

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not self.value.strip():
            raise DomainValidationError("Email cannot be empty")

        normalized = self.value.strip().lower()
        if not EMAIL_PATTERN.match(normalized):
            raise DomainValidationError(f"Invalid email: {self.value.strip()}")

        object.__setattr__(self, "value", normalized)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True, eq=False)
class VehicleModel:
    """Brand and model of a vehicle, compared case-insensitively."""

    brand: str
    model: str

    def __post_init__(self) -> None:
        if not isinstance(self.brand, str) or not self.brand.strip():
            raise DomainValidationError("Brand cannot be empty")
        if not isinstance(self.model, str) or not self.model.strip():
            raise DomainValidationError("Model cannot be empty")

        object.__setattr__(self, "brand", self.brand.strip())
        object.__setattr__(self, "model", self.model.strip())

    @property
    def full_name(self) -> str:
        return f"{self.brand} {self.model}"

    def _key(self) -> tuple[str, str]:
        return self.brand.lower(), self.model.lower()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VehicleModel):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        return self.full_name
