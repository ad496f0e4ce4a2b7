"""Map domain exceptions raised by services to HTTP error responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from app.errors import (
    CONFLICT,
    INVALID_STATE,
    NOT_FOUND,
    VALIDATION_ERROR,
    ConflictError,
    DomainError,
    DomainValidationError,
    InvalidStateError,
    NotFoundError,
)
from app.schemas.error import ErrorResponse

logger = logging.getLogger(__name__)

# exception class -> (HTTP status, error code, log the rejection)
ERROR_MAPPING: dict[type[DomainError], tuple[int, str, bool]] = {
    DomainValidationError: (status.HTTP_400_BAD_REQUEST, VALIDATION_ERROR, False),
    InvalidStateError: (status.HTTP_400_BAD_REQUEST, INVALID_STATE, True),
    ConflictError: (status.HTTP_409_CONFLICT, CONFLICT, True),
    NotFoundError: (status.HTTP_404_NOT_FOUND, NOT_FOUND, False),
}


def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Return `{detail, code}` with the status registered for the exception type."""
    status_code, code, log_it = ERROR_MAPPING[type(exc)]
    if log_it:
        logger.info(
            "Rejected %s %s (%s): %s", request.method, request.url.path, code, exc
        )
    body = ErrorResponse(detail=str(exc), code=code)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def register_exception_handlers(app: FastAPI) -> None:
    for exc_class in ERROR_MAPPING:
        app.add_exception_handler(exc_class, domain_error_handler)
