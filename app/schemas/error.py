"""Error body returned for domain exceptions, and its OpenAPI declarations."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Body of every 4xx raised from the domain or service layer."""

    detail: str = Field(..., description="Human-readable error message")
    code: str = Field(
        ...,
        description="Machine-readable error code",
        examples=["NOT_FOUND", "CONFLICT", "VALIDATION_ERROR", "INVALID_STATE"],
    )


_DESCRIPTIONS = {
    400: "Invalid input or operation not allowed in the current state",
    404: "Resource not found",
    409: "Conflicts with existing data",
}


def error_responses(*status_codes: int) -> dict:
    """Build a `responses=` mapping documenting ErrorResponse for the given codes."""
    return {
        code: {"model": ErrorResponse, "description": _DESCRIPTIONS[code]}
        for code in status_codes
    }
