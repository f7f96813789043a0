"""Pydantic request schemas used by the API.

Schemas keep API input shapes stable and provide validation for
controller handlers and tests. `*In` schemas are used for creation;
`*Update` schemas make every field optional for partial updates.
Generated fields (codes of students/teachers/classes, timestamps,
`current_count`) are deliberately absent.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from .models import ClassStatus, CourseStatus, StudentStatus, TeacherStatus, UserStatus

PHONE_PATTERN = r"^1[3-9]\d{9}$"
EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"


class RegisterIn(BaseModel):
    """Payload for user registration/login endpoints.

    Self-registered accounts are always students.
    """
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UserIn(RegisterIn):
    """Account created by an administrator, with any role."""
    role: str = Field(default="student", pattern=r"^(admin|teacher|student)$")
    related_id: Optional[int] = None


class UserStatusIn(BaseModel):
    status: UserStatus


class TokenOut(BaseModel):
    """Authentication response containing an access token."""
    access_token: str


class CourseIn(BaseModel):
    code: str = Field(min_length=1, max_length=32)
    name: str = Field(min_length=1, max_length=128)
    description: Optional[str] = None
    course_type: Optional[str] = Field(default=None, max_length=64)
    difficulty_level: Optional[str] = Field(default=None, max_length=32)
    duration: Optional[int] = Field(default=None, ge=0)
    price: Optional[Decimal] = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    status: CourseStatus = CourseStatus.enabled


class CourseUpdate(BaseModel):
    code: Optional[str] = Field(default=None, min_length=1, max_length=32)
    name: Optional[str] = Field(default=None, min_length=1, max_length=128)
    description: Optional[str] = None
    course_type: Optional[str] = Field(default=None, max_length=64)
    difficulty_level: Optional[str] = Field(default=None, max_length=32)
    duration: Optional[int] = Field(default=None, ge=0)
    price: Optional[Decimal] = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    status: Optional[CourseStatus] = None


class StudentIn(BaseModel):
    """Student registration payload; the student code is generated."""
    name: str = Field(min_length=1, max_length=64)
    gender: Optional[str] = Field(default=None, max_length=16)
    phone: Optional[str] = Field(default=None, pattern=PHONE_PATTERN)
    email: Optional[str] = Field(default=None, max_length=150, pattern=EMAIL_PATTERN)
    date_of_birth: Optional[date] = None
    address: Optional[str] = None
    status: StudentStatus = StudentStatus.enrolled


class StudentUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=64)
    gender: Optional[str] = Field(default=None, max_length=16)
    phone: Optional[str] = Field(default=None, pattern=PHONE_PATTERN)
    email: Optional[str] = Field(default=None, max_length=150, pattern=EMAIL_PATTERN)
    date_of_birth: Optional[date] = None
    address: Optional[str] = None
    status: Optional[StudentStatus] = None


class TeacherIn(BaseModel):
    """Teacher hiring payload; the teacher code is generated."""
    name: str = Field(min_length=1, max_length=64)
    gender: Optional[str] = Field(default=None, max_length=16)
    phone: Optional[str] = Field(default=None, pattern=PHONE_PATTERN)
    email: Optional[str] = Field(default=None, max_length=150, pattern=EMAIL_PATTERN)
    department_id: Optional[int] = None
    title: Optional[str] = Field(default=None, max_length=32)
    hire_date: Optional[date] = None
    status: TeacherStatus = TeacherStatus.employed


class TeacherUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=64)
    gender: Optional[str] = Field(default=None, max_length=16)
    phone: Optional[str] = Field(default=None, pattern=PHONE_PATTERN)
    email: Optional[str] = Field(default=None, max_length=150, pattern=EMAIL_PATTERN)
    department_id: Optional[int] = None
    title: Optional[str] = Field(default=None, max_length=32)
    hire_date: Optional[date] = None
    status: Optional[TeacherStatus] = None


class ClassIn(BaseModel):
    """Class creation payload; code and current count are generated."""
    name: str = Field(min_length=1, max_length=128)
    course_id: Optional[int] = None
    teacher_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    capacity: Optional[int] = Field(default=None, ge=0)
    status: ClassStatus = ClassStatus.not_started


class ClassUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=128)
    course_id: Optional[int] = None
    teacher_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    capacity: Optional[int] = Field(default=None, ge=0)
    status: Optional[ClassStatus] = None
