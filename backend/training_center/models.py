"""SQLModel data models.

This module defines the training center's database tables using
SQLModel. Each class maps to a table named after the lower-cased class
name (`course`, `student`, `teacher`, `class`, `user`).

Entities reference each other by plain integer ids only: there are no
relationships, cascades or foreign key constraints between them.
Lifecycle hooks registered at the bottom of the module fill in the
generated fields on insert.
"""

import enum
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import event
from sqlmodel import SQLModel, Field

from .utils.codes import code_generator

STUDENT_CODE_PREFIX = "STD"
TEACHER_CODE_PREFIX = "TCH"
CLASS_CODE_PREFIX = "CLS"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CourseStatus(str, enum.Enum):
    enabled = "enabled"
    disabled = "disabled"


class StudentStatus(str, enum.Enum):
    enrolled = "enrolled"
    graduated = "graduated"
    withdrawn = "withdrawn"


class TeacherStatus(str, enum.Enum):
    employed = "employed"
    departed = "departed"


class ClassStatus(str, enum.Enum):
    not_started = "not_started"
    in_progress = "in_progress"
    completed = "completed"


class UserStatus(str, enum.Enum):
    enabled = "enabled"
    disabled = "disabled"


class AuditedRecord(SQLModel):
    """Columns shared by every entity table.

    `updated_at` is refreshed by the ORM whenever the row is updated.
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow, sa_column_kwargs={"onupdate": utcnow})


class Course(AuditedRecord, table=True):
    """A course offered by the institution.

    Unlike the other entities the course `code` is chosen by staff, so
    it is never generated.
    """
    code: str = Field(max_length=32, unique=True, index=True, nullable=False)
    name: str = Field(max_length=128, index=True, nullable=False)
    description: Optional[str] = None
    course_type: Optional[str] = Field(default=None, max_length=64)
    difficulty_level: Optional[str] = Field(default=None, max_length=32)
    duration: Optional[int] = None  # class hours
    price: Optional[Decimal] = Field(default=None, max_digits=10, decimal_places=2)
    status: CourseStatus = Field(default=CourseStatus.enabled)


class Student(AuditedRecord, table=True):
    """A registered student.

    `code` and `registration_date` are filled in on insert.
    """
    code: Optional[str] = Field(default=None, max_length=32, unique=True, index=True, nullable=False)
    name: str = Field(max_length=64, index=True, nullable=False)
    gender: Optional[str] = Field(default=None, max_length=16)
    phone: Optional[str] = Field(default=None, max_length=25)
    email: Optional[str] = Field(default=None, max_length=150)
    date_of_birth: Optional[date] = None
    address: Optional[str] = None
    registration_date: Optional[datetime] = None
    status: StudentStatus = Field(default=StudentStatus.enrolled)


class Teacher(AuditedRecord, table=True):
    """A member of the teaching staff."""
    code: Optional[str] = Field(default=None, max_length=32, unique=True, index=True, nullable=False)
    name: str = Field(max_length=64, index=True, nullable=False)
    gender: Optional[str] = Field(default=None, max_length=16)
    phone: Optional[str] = Field(default=None, max_length=25)
    email: Optional[str] = Field(default=None, max_length=150)
    department_id: Optional[int] = Field(default=None, index=True)
    title: Optional[str] = Field(default=None, max_length=32)
    hire_date: Optional[date] = None
    status: TeacherStatus = Field(default=TeacherStatus.employed)


class Class(AuditedRecord, table=True):
    """A scheduled run of a course taught by one teacher.

    `current_count` always starts at 0; nothing keeps it below
    `capacity`.
    """
    code: Optional[str] = Field(default=None, max_length=32, unique=True, index=True, nullable=False)
    name: str = Field(max_length=128, index=True, nullable=False)
    course_id: Optional[int] = Field(default=None, index=True)
    teacher_id: Optional[int] = Field(default=None, index=True)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    capacity: Optional[int] = None
    current_count: int = Field(default=0, nullable=False)
    status: ClassStatus = Field(default=ClassStatus.not_started)


class User(SQLModel, table=True):
    """A login account.

    Fields:
    - `username`: unique login name
    - `password_hash`: hashed password string (never store plaintext)
    - `role`: one of `admin`, `teacher`, `student`
    - `related_id`: id of the student/teacher record the account belongs to
    - `status`: disabled accounts can neither log in nor use a token
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(index=True, nullable=False, unique=True)
    password_hash: str
    role: str = Field(default="student", max_length=16)
    related_id: Optional[int] = None
    status: UserStatus = Field(default=UserStatus.enabled)
    created_at: datetime = Field(default_factory=utcnow)


@event.listens_for(Student, "before_insert")
def _student_before_insert(mapper, connection, target):
    if not target.code:
        target.code = code_generator.next(STUDENT_CODE_PREFIX)
    target.registration_date = utcnow()


@event.listens_for(Teacher, "before_insert")
def _teacher_before_insert(mapper, connection, target):
    if not target.code:
        target.code = code_generator.next(TEACHER_CODE_PREFIX)


@event.listens_for(Class, "before_insert")
def _class_before_insert(mapper, connection, target):
    if not target.code:
        target.code = code_generator.next(CLASS_CODE_PREFIX)
    target.current_count = 0
