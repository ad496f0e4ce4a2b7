from datetime import datetime

from pydantic import BaseModel, Field

from app.domain import UserType


class User(BaseModel):
    id: str
    name: str
    email: str
    document: str
    type: UserType
    is_active: bool
    rented_vehicles_count: int = 0
    created_at: datetime
    updated_at: datetime | None = None


class UserCreate(BaseModel):
    # Emptiness and format are checked by the domain so callers get the
    # same error whether they go through the API or not.
    name: str = Field(..., max_length=255)
    email: str = Field(..., max_length=320)
    document: str = Field(..., max_length=64)
    type: UserType = UserType.CUSTOMER


class UserUpdate(BaseModel):
    name: str | None = Field(None, max_length=255)
    email: str | None = Field(None, max_length=320)
