"""Pydantic schemas for the weekly planner API.

JSON bodies use camelCase keys (``fullName``, ``weekNumber``); Python code
uses the snake_case attribute names.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from weekly_planner.services.storage import WeeklyPlanComplete
from weekly_planner.services.subject_fields import SubjectType


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(CamelModel):
    message: str


# ---------------------------------------------------------------------------
# Users and authentication
# ---------------------------------------------------------------------------


def _check_username(value: str) -> str:
    value = value.strip()
    if len(value) < 3:
        raise ValueError("Username must be at least 3 characters")
    return value


def _check_password(value: str) -> str:
    if len(value) < 6:
        raise ValueError("Password must be at least 6 characters")
    return value


class LoginRequest(CamelModel):
    username: str
    password: str


class UserCreate(CamelModel):
    username: str
    password: str
    full_name: str
    email: Optional[EmailStr] = None
    is_admin: bool = False

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        return _check_username(value)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        return _check_password(value)

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Full name is required")
        return value.strip()


class UserRead(CamelModel):
    id: int
    username: str
    full_name: str
    email: Optional[str] = None
    is_admin: bool


class UserUpdate(CamelModel):
    full_name: Optional[str] = None
    email: Optional[EmailStr] = None

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("Full name is required")
        return value


class RoleUpdate(CamelModel):
    is_admin: bool


class PasswordChange(CamelModel):
    current_password: str
    new_password: str

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, value: str) -> str:
        return _check_password(value)


class UserImportResult(CamelModel):
    created: List[str] = Field(default_factory=list)
    skipped: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Grades, subjects and assignments
# ---------------------------------------------------------------------------


class GradeCreate(CamelModel):
    name: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Grade name is required")
        return value.strip()


class GradeRead(CamelModel):
    id: int
    name: str


class SubjectCreate(CamelModel):
    name: str
    type: SubjectType = SubjectType.STANDARD

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Subject name is required")
        return value.strip()


class SubjectRead(CamelModel):
    id: int
    name: str
    type: str


class TeacherGradeCreate(CamelModel):
    teacher_id: int
    grade_id: int


class TeacherGradeRead(TeacherGradeCreate):
    id: int


class TeacherSubjectCreate(CamelModel):
    teacher_id: int
    grade_id: int
    subject_id: int


class TeacherSubjectRead(TeacherSubjectCreate):
    id: int


# ---------------------------------------------------------------------------
# Planning weeks
# ---------------------------------------------------------------------------


def _check_week_number(value: Optional[int]) -> Optional[int]:
    if value is not None and not 1 <= value <= 52:
        raise ValueError("Week number must be between 1 and 52")
    return value


def _check_year(value: Optional[int]) -> Optional[int]:
    if value is not None and not 2000 <= value <= 2100:
        raise ValueError("Year must be between 2000 and 2100")
    return value


class PlanningWeekCreate(CamelModel):
    week_number: int
    year: int
    start_date: date
    end_date: date
    is_active: bool = True

    @field_validator("week_number")
    @classmethod
    def validate_week_number(cls, value: int) -> int:
        return _check_week_number(value)

    @field_validator("year")
    @classmethod
    def validate_year(cls, value: int) -> int:
        return _check_year(value)

    @field_validator("end_date")
    @classmethod
    def validate_end_date(cls, value: date, info: ValidationInfo) -> date:
        start = info.data.get("start_date")
        if isinstance(start, date) and value < start:
            raise ValueError("End date must be on or after start date")
        return value


class PlanningWeekUpdate(CamelModel):
    week_number: Optional[int] = None
    year: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_active: Optional[bool] = None

    @field_validator("week_number")
    @classmethod
    def validate_week_number(cls, value: Optional[int]) -> Optional[int]:
        return _check_week_number(value)

    @field_validator("year")
    @classmethod
    def validate_year(cls, value: Optional[int]) -> Optional[int]:
        return _check_year(value)


class PlanningWeekRead(CamelModel):
    id: int
    week_number: int
    year: int
    start_date: date
    end_date: date
    is_active: bool


# ---------------------------------------------------------------------------
# Weekly and daily plans
# ---------------------------------------------------------------------------


class WeeklyPlanCreate(CamelModel):
    grade_id: int
    subject_id: int
    week_id: int
    notes: Optional[str] = None


class WeeklyPlanNotesUpdate(CamelModel):
    notes: Optional[str] = None


class WeeklyPlanRead(CamelModel):
    id: int
    teacher_id: int
    grade_id: int
    subject_id: int
    week_id: int
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime


def _check_day(value: Optional[int]) -> Optional[int]:
    if value is not None and not 1 <= value <= 5:
        raise ValueError("Day of week must be between 1 (Monday) and 5 (Friday)")
    return value


class DailyPlanFields(CamelModel):
    topic: Optional[str] = None
    books_and_pages: Optional[str] = None
    homework: Optional[str] = None
    homework_due_date: Optional[date] = None
    assignments: Optional[str] = None
    notes: Optional[str] = None
    required_items: Optional[str] = None
    skill: Optional[str] = None
    activity: Optional[str] = None


class DailyPlanCreate(DailyPlanFields):
    weekly_plan_id: int
    day_of_week: int

    @field_validator("day_of_week")
    @classmethod
    def validate_day(cls, value: int) -> int:
        return _check_day(value)


class DailyPlanUpdate(DailyPlanFields):
    day_of_week: Optional[int] = None

    @field_validator("day_of_week")
    @classmethod
    def validate_day(cls, value: Optional[int]) -> Optional[int]:
        return _check_day(value)


class DailyPlanRead(DailyPlanFields):
    id: int
    weekly_plan_id: int
    day_of_week: int


class WeeklyPlanCompleteRead(WeeklyPlanRead):
    teacher: UserRead
    grade: GradeRead
    subject: SubjectRead
    week: PlanningWeekRead
    daily_plans: List[DailyPlanRead] = Field(default_factory=list)

    @classmethod
    def from_complete(cls, complete: WeeklyPlanComplete) -> "WeeklyPlanCompleteRead":
        plan = WeeklyPlanRead.model_validate(complete.plan)
        return cls(
            **plan.model_dump(),
            teacher=UserRead.model_validate(complete.teacher),
            grade=GradeRead.model_validate(complete.grade),
            subject=SubjectRead.model_validate(complete.subject),
            week=PlanningWeekRead.model_validate(complete.week),
            daily_plans=[DailyPlanRead.model_validate(d) for d in complete.daily_plans],
        )


class ReseedResponse(CamelModel):
    message: str
    created: int


__all__ = [
    "CamelModel",
    "DailyPlanCreate",
    "DailyPlanRead",
    "DailyPlanUpdate",
    "GradeCreate",
    "GradeRead",
    "LoginRequest",
    "MessageResponse",
    "PasswordChange",
    "PlanningWeekCreate",
    "PlanningWeekRead",
    "PlanningWeekUpdate",
    "ReseedResponse",
    "RoleUpdate",
    "SubjectCreate",
    "SubjectRead",
    "TeacherGradeCreate",
    "TeacherGradeRead",
    "TeacherSubjectCreate",
    "TeacherSubjectRead",
    "UserCreate",
    "UserImportResult",
    "UserRead",
    "UserUpdate",
    "WeeklyPlanCompleteRead",
    "WeeklyPlanCreate",
    "WeeklyPlanNotesUpdate",
    "WeeklyPlanRead",
]
