"""Repository classes encapsulating database operations.

Each repository is small and focused on a single table. Repositories
return SQLModel objects and perform commits/refreshes where
appropriate; constraint violations propagate to the caller as
`sqlalchemy.exc.IntegrityError`.
"""

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar
from sqlmodel import Session, select
from sqlalchemy import func
from . import models

T = TypeVar("T", models.Course, models.Student, models.Teacher, models.Class)


class EntityRepository(Generic[T]):
    """CRUD operations shared by the four entity tables."""
    model: Type[T]

    def __init__(self, session: Session):
        self.session = session

    def create(self, obj: T) -> T:
        """Persist a new row and return the managed instance."""
        self.session.add(obj)
        self.session.commit()
        self.session.refresh(obj)
        return obj

    def get(self, obj_id: int) -> Optional[T]:
        """Get a row by primary key or `None`."""
        return self.session.get(self.model, obj_id)

    def get_by_code(self, code: str) -> Optional[T]:
        """Return the row with business code `code` or `None`."""
        stmt = select(self.model).where(self.model.code == code)
        return self.session.exec(stmt).first()

    def list(self, name: Optional[str] = None) -> List[T]:
        """Return all rows ordered by id.

        When `name` is given only rows whose name contains it
        (case-insensitively) are returned; `%` and `_` match literally.
        """
        stmt = select(self.model)
        if name:
            stmt = stmt.where(func.lower(self.model.name).contains(name.lower(), autoescape=True))
        return self.session.exec(stmt.order_by(self.model.id)).all()

    def count(self) -> int:
        return self.session.exec(select(func.count()).select_from(self.model)).one()

    def update(self, obj: T, changes: Dict[str, Any]) -> T:
        """Apply `changes` to `obj` and persist them."""
        for key, value in changes.items():
            setattr(obj, key, value)
        self.session.add(obj)
        self.session.commit()
        self.session.refresh(obj)
        return obj

    def delete(self, obj: T) -> None:
        self.session.delete(obj)
        self.session.commit()


class CourseRepository(EntityRepository[models.Course]):
    model = models.Course


class StudentRepository(EntityRepository[models.Student]):
    model = models.Student


class TeacherRepository(EntityRepository[models.Teacher]):
    model = models.Teacher


class ClassRepository(EntityRepository[models.Class]):
    model = models.Class


class UserRepository:
    """CRUD operations for `User` objects."""
    def __init__(self, session: Session):
        self.session = session

    def create(self, user: models.User) -> models.User:
        """Persist a new user and return the managed instance."""
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        return user

    def get_by_username(self, username: str) -> Optional[models.User]:
        """Return a `User` by username or `None` if not found."""
        stmt = select(models.User).where(models.User.username == username)
        return self.session.exec(stmt).first()

    def get(self, user_id: int) -> Optional[models.User]:
        """Get a `User` by primary key."""
        return self.session.get(models.User, user_id)

    def list(self) -> List[models.User]:
        """Return all users ordered by id."""
        return self.session.exec(select(models.User).order_by(models.User.id)).all()

    def set_status(self, user: models.User, status: models.UserStatus) -> models.User:
        """Enable or disable a login account."""
        user.status = status
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        return user
