import logging

from app.domain import Email, User, UserType
from app.domain.maintenance_policy import DEFAULT_MAINTENANCE_POLICY, MaintenancePolicy
from app.errors import ConflictError, NotFoundError
from app.repositories.interfaces import UserRepository, VehicleRepository
from app.schemas.user import User as UserSchema, UserCreate, UserUpdate
from app.schemas.vehicle import Vehicle as VehicleSchema
from app.services.vehicle import to_vehicle_dto

logger = logging.getLogger(__name__)


def to_user_dto(user: User) -> UserSchema:
    return UserSchema(
        id=user.id,
        name=user.name,
        email=user.email.value,
        document=user.document,
        type=user.type,
        is_active=user.is_active,
        rented_vehicles_count=user.rented_vehicles_count(),
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


class UserService:
    """Use cases around users and the vehicles they rent."""

    def __init__(
        self,
        users: UserRepository,
        vehicles: VehicleRepository,
        maintenance_policy: MaintenancePolicy = DEFAULT_MAINTENANCE_POLICY,
    ):
        self.users = users
        self.vehicles = vehicles
        self.maintenance_policy = maintenance_policy

    def _get_user(self, user_id: str) -> User:
        user = self.users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def create_user(self, data: UserCreate) -> UserSchema:
        """
        Create a new user.

        - Validates the email format (normalized to lower case)
        - Validates email and document uniqueness
        - Validates name and document are not blank

        Raises:
            DomainValidationError: If any field is malformed
            ConflictError: If the email or document is already registered
        """
        email = Email(data.email)
        if self.users.email_exists(email.value):
            raise ConflictError("A user with this email already exists")

        if data.document.strip() and self.users.document_exists(data.document):
            raise ConflictError("A user with this document already exists")

        user = User(data.name, email, data.document, data.type)
        self.users.add(user)
        logger.info("Created user %s (%s)", user.id, user.type.value)
        return to_user_dto(user)

    def get_user(self, user_id: str) -> UserSchema:
        return to_user_dto(self._get_user(user_id))

    def get_user_by_email(self, email: str) -> UserSchema:
        user = self.users.get_by_email(email)
        if not user:
            raise NotFoundError("User not found")
        return to_user_dto(user)

    def get_user_by_document(self, document: str) -> UserSchema:
        user = self.users.get_by_document(document)
        if not user:
            raise NotFoundError("User not found")
        return to_user_dto(user)

    def get_all_users(
        self, active: bool | None = None, type: UserType | None = None
    ) -> list[UserSchema]:
        """
        Get all users, optionally filtered.

        Args:
            active: Only active (True) or inactive (False) users
            type: Only users of this type
        """
        if type is not None:
            users = self.users.get_by_type(type)
        elif active is True:
            users = self.users.get_active()
        else:
            users = self.users.get_all()

        if active is not None:
            users = [u for u in users if u.is_active == active]
        return [to_user_dto(u) for u in users]

    def update_user(self, user_id: str, data: UserUpdate) -> UserSchema:
        """
        Update name and/or email. Only provided fields will be updated.

        Raises:
            NotFoundError: If user doesn't exist
            ConflictError: If email is already taken by another user
            DomainValidationError: If a provided value is malformed
        """
        user = self._get_user(user_id)

        if data.name is not None:
            user.update_name(data.name)

        if data.email is not None:
            new_email = Email(data.email)
            if new_email != user.email:
                if self.users.email_exists(new_email.value):
                    raise ConflictError("A user with this email already exists")
                user.update_email(new_email)

        self.users.update(user)
        return to_user_dto(user)

    def activate_user(self, user_id: str) -> UserSchema:
        user = self._get_user(user_id)
        user.activate()
        self.users.update(user)
        logger.info("Activated user %s", user_id)
        return to_user_dto(user)

    def deactivate_user(self, user_id: str) -> UserSchema:
        user = self._get_user(user_id)
        user.deactivate()
        self.users.update(user)
        logger.info("Deactivated user %s", user_id)
        return to_user_dto(user)

    def delete_user(self, user_id: str) -> None:
        """
        Delete a user.

        Raises:
            NotFoundError: If user doesn't exist
            ConflictError: If the user still holds rented vehicles
        """
        user = self._get_user(user_id)

        if user.rented_vehicles_count() > 0:
            logger.warning(
                "Refused to delete user %s holding %d rented vehicle(s)",
                user_id,
                user.rented_vehicles_count(),
            )
            raise ConflictError("Cannot delete a user with rented vehicles")

        self.users.delete(user_id)
        logger.info("Deleted user %s", user_id)

    def rent_vehicle(self, user_id: str, vehicle_id: str) -> VehicleSchema:
        """
        Rent a vehicle to a user.

        Raises:
            NotFoundError: If the user or the vehicle doesn't exist
            InvalidStateError: If the user cannot rent, or the vehicle is not rentable
        """
        user = self._get_user(user_id)
        aggregate = self.vehicles.get_aggregate(vehicle_id, policy=self.maintenance_policy)
        if not aggregate:
            raise NotFoundError("Vehicle not found")

        aggregate.validate_for_rental()

        vehicle = aggregate.vehicle
        user.rent_vehicle(vehicle)
        self.vehicles.update(vehicle)
        self.users.update(user)
        logger.info("User %s rented vehicle %s", user_id, vehicle_id)
        return to_vehicle_dto(vehicle)

    def return_vehicle(self, user_id: str, vehicle_id: str) -> VehicleSchema:
        """
        Return a vehicle previously rented by the user.

        Raises:
            NotFoundError: If the user or the vehicle doesn't exist
            InvalidStateError: If the vehicle is not rented by this user
        """
        user = self._get_user(user_id)
        vehicle = self.vehicles.get_by_id(vehicle_id)
        if not vehicle:
            raise NotFoundError("Vehicle not found")

        user.return_vehicle(vehicle)
        self.vehicles.update(vehicle)
        self.users.update(user)
        logger.info("User %s returned vehicle %s", user_id, vehicle_id)
        return to_vehicle_dto(vehicle)

    def get_rented_vehicles(self, user_id: str) -> list[VehicleSchema]:
        user = self._get_user(user_id)
        return [to_vehicle_dto(v) for v in user.rented_vehicles]
