from fastapi import APIRouter, Depends, Query, status

from app.api.deps import get_user_service
from app.domain import UserType
from app.schemas.error import error_responses
from app.schemas.user import User, UserCreate, UserUpdate
from app.schemas.vehicle import Vehicle
from app.services.user import UserService

router = APIRouter(
    prefix="/users",
    tags=["users"],
    responses=error_responses(400, 404),
)


@router.post(
    "",
    response_model=User,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(409),
)
def create_new_user(
    user_data: UserCreate,
    service: UserService = Depends(get_user_service),
):
    """
    Create a new user.

    Email is stored lower-cased; email and document must be unique.
    """
    return service.create_user(user_data)


@router.get("", response_model=list[User])
def get_all_users(
    active: bool | None = Query(None, description="Filter by active flag"),
    type: UserType | None = Query(None, description="Filter by user type"),
    service: UserService = Depends(get_user_service),
):
    return service.get_all_users(active=active, type=type)


@router.get("/by-email/{email}", response_model=User)
def get_user_by_email(email: str, service: UserService = Depends(get_user_service)):
    return service.get_user_by_email(email)


@router.get("/by-document/{document}", response_model=User)
def get_user_by_document(document: str, service: UserService = Depends(get_user_service)):
    return service.get_user_by_document(document)


@router.get("/{user_id}", response_model=User)
def get_user_by_id(user_id: str, service: UserService = Depends(get_user_service)):
    return service.get_user(user_id)


@router.put("/{user_id}", response_model=User, responses=error_responses(409))
def update_user_by_id(
    user_id: str,
    user_data: UserUpdate,
    service: UserService = Depends(get_user_service),
):
    """
    Update a user's name and/or email. Omitted fields are left untouched.
    """
    return service.update_user(user_id, user_data)


@router.patch("/{user_id}/activate", response_model=User)
def activate_user(user_id: str, service: UserService = Depends(get_user_service)):
    return service.activate_user(user_id)


@router.patch("/{user_id}/deactivate", response_model=User)
def deactivate_user(user_id: str, service: UserService = Depends(get_user_service)):
    """
    Deactivate a user. Users holding rented vehicles cannot be deactivated.
    """
    return service.deactivate_user(user_id)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=error_responses(409),
)
def delete_user_by_id(user_id: str, service: UserService = Depends(get_user_service)):
    """
    Delete a user by ID.

    A user can only be deleted if they hold no rented vehicles.
    """
    service.delete_user(user_id)


@router.get("/{user_id}/rentals", response_model=list[Vehicle])
def get_user_rentals(user_id: str, service: UserService = Depends(get_user_service)):
    return service.get_rented_vehicles(user_id)


@router.post("/{user_id}/rentals/{vehicle_id}", response_model=Vehicle)
def rent_vehicle(
    user_id: str,
    vehicle_id: str,
    service: UserService = Depends(get_user_service),
):
    """
    Rent a vehicle to the user. Only active customers can rent, and only
    available vehicles can be rented.
    """
    return service.rent_vehicle(user_id, vehicle_id)


@router.delete("/{user_id}/rentals/{vehicle_id}", response_model=Vehicle)
def return_vehicle(
    user_id: str,
    vehicle_id: str,
    service: UserService = Depends(get_user_service),
):
    return service.return_vehicle(user_id, vehicle_id)
