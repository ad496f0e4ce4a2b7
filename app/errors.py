"""Custom domain exceptions for the application."""

# Stable, machine-readable error codes for API consumers.
NOT_FOUND = "NOT_FOUND"
CONFLICT = "CONFLICT"
VALIDATION_ERROR = "VALIDATION_ERROR"
INVALID_STATE = "INVALID_STATE"


class DomainError(Exception):
    """Base exception for domain/business logic errors."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource does not exist."""

    pass


class ConflictError(DomainError):
    """Raised when an operation would violate a uniqueness or cross-entity rule."""

    pass


class DomainValidationError(DomainError):
    """Raised when input to a constructor or value object is malformed."""

    pass


class InvalidStateError(DomainError):
    """Raised when an operation is attempted from a state that forbids it (e.g. renting a rented vehicle)."""

    pass
