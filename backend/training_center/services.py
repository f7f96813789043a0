"""Business logic services used by HTTP controllers and scripts.

Services are intentionally thin: they translate validated payloads into
model instances, persist them via repositories and turn database
constraint violations into `ValueError` subclasses the controllers can
map to HTTP status codes.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import jwt
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from . import models, repositories
from .config import settings

logger = logging.getLogger("training_center.services")

PWD_CTX = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
ROLES = ("admin", "teacher", "student")

# fields a client may never set through an update
IMMUTABLE_FIELDS = {"id", "code", "created_at", "updated_at", "registration_date", "current_count"}
# columns that are NOT NULL in every entity table
REQUIRED_FIELDS = {"name", "code", "status"}


class DuplicateCodeError(ValueError):
    """Raised when a unique business code is already taken."""


class DuplicateUsernameError(ValueError):
    """Raised when a login name is already taken."""


class AuthService:
    """Authentication related operations (register + authenticate)."""
    def __init__(self, session: Session):
        self.session = session
        self.user_repo = repositories.UserRepository(session)

    def register(self, username: str, password: str, role: str = "student",
                 related_id: Optional[int] = None) -> models.User:
        """Create a new user with a hashed password.

        Returns the persisted `User` instance; a taken username raises
        `DuplicateUsernameError`.
        """
        if role not in ROLES:
            raise ValueError(f"unknown role: {role}")
        hashed = PWD_CTX.hash(password)
        u = models.User(username=username, password_hash=hashed, role=role, related_id=related_id)
        try:
            user = self.user_repo.create(u)
        except IntegrityError as exc:
            self.session.rollback()
            raise DuplicateUsernameError(f"username already exists: {username}") from exc
        logger.info("registered user %s (%s)", user.username, user.role)
        return user

    def authenticate(self, username: str, password: str) -> Optional[str]:
        """Verify credentials and return a signed JWT token on success.

        Returns `None` if authentication fails or the account is disabled.
        """
        user = self.user_repo.get_by_username(username)
        if not user or user.status != models.UserStatus.enabled:
            return None
        if not PWD_CTX.verify(password, user.password_hash):
            return None
        expire = datetime.now(timezone.utc) + timedelta(hours=settings.JWT_EXPIRE_HOURS)
        payload = {"user_id": user.id, "username": user.username, "role": user.role,
                   "related_id": user.related_id, "exp": int(expire.timestamp())}
        return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


class CatalogService:
    """Create, update and delete the four institution entities.

    `kind` selects the table: `course`, `student`, `teacher` or `class`.
    """
    REPOSITORIES = {
        "course": repositories.CourseRepository,
        "student": repositories.StudentRepository,
        "teacher": repositories.TeacherRepository,
        "class": repositories.ClassRepository,
    }

    def __init__(self, session: Session, kind: str):
        if kind not in self.REPOSITORIES:
            raise ValueError(f"unknown entity kind: {kind}")
        self.session = session
        self.kind = kind
        self.repo = self.REPOSITORIES[kind](session)

    def list(self, name: Optional[str] = None) -> List[Any]:
        return self.repo.list(name=name)

    def get(self, obj_id: int):
        return self.repo.get(obj_id)

    def count(self) -> int:
        return self.repo.count()

    def create(self, data: Dict[str, Any]):
        """Build a model instance from `data` and persist it.

        Generated fields are filled in by the model insert hooks; a code
        collision raises `DuplicateCodeError`.
        """
        obj = self.repo.model(**data)
        try:
            created = self.repo.create(obj)
        except IntegrityError as exc:
            self.session.rollback()
            raise self._translate(exc, data.get("code")) from exc
        logger.info("created %s id=%s code=%s", self.kind, created.id, created.code)
        return created

    def update(self, obj, changes: Dict[str, Any]):
        """Apply a partial update to `obj`.

        Course codes may be renamed; generated codes, timestamps and the
        enrollment count may not.
        """
        immutable = IMMUTABLE_FIELDS - {"code"} if self.kind == "course" else IMMUTABLE_FIELDS
        blocked = sorted(set(changes) & immutable)
        if blocked:
            raise ValueError(f"read-only fields: {', '.join(blocked)}")
        for key in REQUIRED_FIELDS:
            if key in changes and changes[key] is None:
                raise ValueError(f"{key} cannot be null")
        try:
            return self.repo.update(obj, changes)
        except IntegrityError as exc:
            self.session.rollback()
            raise self._translate(exc, changes.get("code")) from exc

    def delete(self, obj) -> None:
        obj_id, code = obj.id, obj.code
        self.repo.delete(obj)
        logger.info("deleted %s id=%s code=%s", self.kind, obj_id, code)

    def _translate(self, exc: IntegrityError, code: Optional[str]) -> ValueError:
        if "unique" in str(exc.orig).lower():
            return DuplicateCodeError(f"{self.kind} code already exists: {code}")
        return ValueError(f"{self.kind} violates a database constraint: {exc.orig}")


def dashboard_counts(session: Session) -> Dict[str, int]:
    """Return the number of rows of each entity kind, keyed `<kind>_count`."""
    return {f"{kind}_count": CatalogService(session, kind).count() for kind in CatalogService.REPOSITORIES}
