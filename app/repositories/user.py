from sqlalchemy.orm import Session

from app.db.models.user import User as UserModel
from app.db.models.vehicle import Vehicle as VehicleRecord
from app.domain import Email, User, UserType, VehicleStatus
from app.errors import NotFoundError
from app.repositories.vehicle import to_vehicle


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def _apply(row: UserModel, user: User) -> None:
    row.name = user.name
    row.email = user.email.value
    row.document = user.document
    row.type = user.type.value
    row.is_active = user.is_active
    row.created_at = user.created_at
    row.updated_at = user.updated_at


class SqlAlchemyUserRepository:
    """User persistence. Pure data access - no business logic.

    Rented vehicles are not stored on the user: every load rebuilds them from
    the vehicles the user currently holds.
    """

    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(UserModel)

    def _to_entity(self, row: UserModel) -> User:
        rented = (
            self.db.query(VehicleRecord)
            .filter(
                VehicleRecord.renter_id == row.id,
                VehicleRecord.status == VehicleStatus.RENTED.value,
            )
            .order_by(VehicleRecord.license_plate)
            .all()
        )
        return User.reconstruct(
            id=row.id,
            name=row.name,
            email=Email(row.email),
            document=row.document,
            type=UserType(row.type),
            is_active=row.is_active,
            created_at=row.created_at,
            updated_at=row.updated_at,
            rented_vehicles=[to_vehicle(v) for v in rented],
        )

    def get_by_id(self, entity_id: str) -> User | None:
        row = self._query().filter(UserModel.id == entity_id).first()
        return self._to_entity(row) if row else None

    def get_by_email(self, email: str) -> User | None:
        row = self._query().filter(UserModel.email == _normalize_email(email)).first()
        return self._to_entity(row) if row else None

    def get_by_document(self, document: str) -> User | None:
        row = self._query().filter(UserModel.document == document.strip()).first()
        return self._to_entity(row) if row else None

    def get_all(self) -> list[User]:
        rows = self._query().order_by(UserModel.name).all()
        return [self._to_entity(row) for row in rows]

    def get_by_type(self, user_type: UserType) -> list[User]:
        rows = (
            self._query()
            .filter(UserModel.type == UserType(user_type).value)
            .order_by(UserModel.name)
            .all()
        )
        return [self._to_entity(row) for row in rows]

    def get_active(self) -> list[User]:
        rows = self._query().filter(UserModel.is_active.is_(True)).order_by(UserModel.name).all()
        return [self._to_entity(row) for row in rows]

    def exists(self, entity_id: str) -> bool:
        return self._query().filter(UserModel.id == entity_id).first() is not None

    def email_exists(self, email: str) -> bool:
        return (
            self._query().filter(UserModel.email == _normalize_email(email)).first()
            is not None
        )

    def document_exists(self, document: str) -> bool:
        return self._query().filter(UserModel.document == document.strip()).first() is not None

    def add(self, entity: User) -> None:
        row = UserModel(id=entity.id)
        _apply(row, entity)
        self.db.add(row)
        self.db.commit()

    def update(self, entity: User) -> None:
        row = self.db.get(UserModel, entity.id)
        if not row:
            raise NotFoundError("User not found")
        _apply(row, entity)
        self.db.commit()

    def delete(self, entity_id: str) -> None:
        row = self.db.get(UserModel, entity_id)
        if not row:
            raise NotFoundError("User not found")
        self.db.delete(row)
        self.db.commit()
