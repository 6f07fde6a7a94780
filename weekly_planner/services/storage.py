"""Entity store for the planning domain.

``Storage`` is the capability interface the routes and the planning workflow
depend on. ``SqlStorage`` is the production implementation over a SQLAlchemy
session; ``MemoryStorage`` (see ``memory_storage``) mirrors it for tests.

Cascading deletes remove dependants leaf-first (daily plans, weekly plans,
assignments) before the parent row. The caller's session scope wraps every
request in one transaction, so a failure part way leaves nothing behind.
"""
from __future__ import annotations

import abc
import contextlib
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Iterator, Mapping, Sequence

from sqlalchemy import and_, delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from weekly_planner.db.models import (
    DailyPlan,
    Grade,
    PlanningWeek,
    Subject,
    TeacherGrade,
    TeacherSubject,
    User,
    WeeklyPlan,
)
from weekly_planner.errors import ConflictError, InvalidOperationError
from weekly_planner.security import hash_password, verify_password

LOGGER = logging.getLogger(__name__)

USER_UPDATABLE = frozenset({"username", "password", "full_name", "email", "is_admin"})
WEEK_UPDATABLE = frozenset({"week_number", "year", "start_date", "end_date", "is_active"})
DAILY_UPDATABLE = frozenset(
    {
        "day_of_week",
        "topic",
        "books_and_pages",
        "homework",
        "homework_due_date",
        "assignments",
        "notes",
        "required_items",
        "skill",
        "activity",
    }
)

DUPLICATE_USERNAME = "Username already exists"
DUPLICATE_GRADE = "A grade with this name already exists"
DUPLICATE_SUBJECT = "A subject with this name already exists"
DUPLICATE_WEEKLY_PLAN = "A plan for this subject in this week already exists"
DUPLICATE_DAILY_PLAN = "A plan for this day already exists"
INVALID_DATE_RANGE = "End date must be on or after start date"


@dataclass(slots=True)
class UserData:
    username: str
    password: str
    full_name: str
    email: str | None = None
    is_admin: bool = False


@dataclass(slots=True)
class PlanningWeekData:
    week_number: int
    year: int
    start_date: date
    end_date: date
    is_active: bool = True


@dataclass(slots=True)
class WeeklyPlanComplete:
    """A weekly plan joined with everything needed to display or export it."""

    plan: WeeklyPlan
    teacher: User
    grade: Grade
    subject: Subject
    week: PlanningWeek
    daily_plans: list[DailyPlan] = field(default_factory=list)


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def check_date_range(start_date: date, end_date: date) -> None:
    if end_date < start_date:
        raise InvalidOperationError(INVALID_DATE_RANGE)


def _pick(changes: Mapping[str, Any], allowed: frozenset[str]) -> dict[str, Any]:
    return {key: value for key, value in changes.items() if key in allowed}


def week_sort_key(week: PlanningWeek) -> tuple[int, int]:
    """Most recent first: year descending, then week number descending."""
    return (-week.year, -week.week_number)


class Storage(abc.ABC):
    """Create/get/list/update/delete per entity plus the complete-plan query."""

    # Users ---------------------------------------------------------------

    @abc.abstractmethod
    def get_user(self, user_id: int) -> User | None: ...

    @abc.abstractmethod
    def get_user_by_username(self, username: str) -> User | None: ...

    @abc.abstractmethod
    def create_user(self, data: UserData) -> User: ...

    @abc.abstractmethod
    def update_user(self, user_id: int, changes: Mapping[str, Any]) -> User | None: ...

    @abc.abstractmethod
    def delete_user(self, user_id: int) -> bool: ...

    @abc.abstractmethod
    def list_users(self) -> list[User]: ...

    @abc.abstractmethod
    def list_teachers(self) -> list[User]: ...

    def verify_user_credentials(self, username: str, password: str) -> User | None:
        user = self.get_user_by_username(username)
        if user is not None and verify_password(user.password, password):
            return user
        return None

    # Grades --------------------------------------------------------------

    @abc.abstractmethod
    def create_grade(self, name: str) -> Grade: ...

    @abc.abstractmethod
    def get_grade(self, grade_id: int) -> Grade | None: ...

    @abc.abstractmethod
    def list_grades(self) -> list[Grade]: ...

    @abc.abstractmethod
    def update_grade(self, grade_id: int, name: str) -> Grade | None: ...

    @abc.abstractmethod
    def delete_grade(self, grade_id: int) -> bool: ...

    # Subjects ------------------------------------------------------------

    @abc.abstractmethod
    def create_subject(self, name: str, subject_type: str = "standard") -> Subject: ...

    @abc.abstractmethod
    def get_subject(self, subject_id: int) -> Subject | None: ...

    @abc.abstractmethod
    def list_subjects(self) -> list[Subject]: ...

    @abc.abstractmethod
    def update_subject(
        self, subject_id: int, name: str, subject_type: str = "standard"
    ) -> Subject | None: ...

    @abc.abstractmethod
    def delete_subject(self, subject_id: int) -> bool: ...

    # Assignments ---------------------------------------------------------

    @abc.abstractmethod
    def assign_teacher_to_grade(self, teacher_id: int, grade_id: int) -> TeacherGrade: ...

    @abc.abstractmethod
    def remove_teacher_from_grade(self, teacher_id: int, grade_id: int) -> bool: ...

    @abc.abstractmethod
    def get_teacher_grades(self, teacher_id: int) -> list[Grade]: ...

    @abc.abstractmethod
    def get_grade_teachers(self, grade_id: int) -> list[User]: ...

    @abc.abstractmethod
    def assign_teacher_to_subject(
        self, teacher_id: int, grade_id: int, subject_id: int
    ) -> TeacherSubject: ...

    @abc.abstractmethod
    def remove_teacher_from_subject(
        self, teacher_id: int, grade_id: int, subject_id: int
    ) -> bool: ...

    @abc.abstractmethod
    def get_teacher_subjects_for_grade(self, teacher_id: int, grade_id: int) -> list[Subject]: ...

    def has_teacher_subject(self, teacher_id: int, grade_id: int, subject_id: int) -> bool:
        return any(
            subject.id == subject_id
            for subject in self.get_teacher_subjects_for_grade(teacher_id, grade_id)
        )

    # Planning weeks ------------------------------------------------------

    @abc.abstractmethod
    def create_planning_week(self, data: PlanningWeekData) -> PlanningWeek: ...

    @abc.abstractmethod
    def get_planning_week(self, week_id: int) -> PlanningWeek | None: ...

    @abc.abstractmethod
    def list_planning_weeks(self) -> list[PlanningWeek]: ...

    def list_active_planning_weeks(self) -> list[PlanningWeek]:
        return [week for week in self.list_planning_weeks() if week.is_active]

    @abc.abstractmethod
    def update_planning_week(
        self, week_id: int, changes: Mapping[str, Any]
    ) -> PlanningWeek | None: ...

    def toggle_planning_week_active(self, week_id: int) -> PlanningWeek | None:
        week = self.get_planning_week(week_id)
        if week is None:
            return None
        return self.update_planning_week(week_id, {"is_active": not week.is_active})

    @abc.abstractmethod
    def delete_planning_week(self, week_id: int) -> bool: ...

    # Weekly plans --------------------------------------------------------

    @abc.abstractmethod
    def create_weekly_plan(
        self,
        teacher_id: int,
        grade_id: int,
        subject_id: int,
        week_id: int,
        notes: str | None = None,
    ) -> WeeklyPlan: ...

    @abc.abstractmethod
    def get_weekly_plan(self, plan_id: int) -> WeeklyPlan | None: ...

    @abc.abstractmethod
    def list_teacher_weekly_plans(self, teacher_id: int) -> list[WeeklyPlan]: ...

    @abc.abstractmethod
    def list_grade_week_plans(self, grade_id: int, week_id: int) -> list[WeeklyPlan]: ...

    @abc.abstractmethod
    def update_weekly_plan_notes(self, plan_id: int, notes: str | None) -> WeeklyPlan | None: ...

    @abc.abstractmethod
    def delete_weekly_plan(self, plan_id: int) -> bool: ...

    def get_weekly_plan_complete(self, plan_id: int) -> WeeklyPlanComplete | None:
        plan = self.get_weekly_plan(plan_id)
        if plan is None:
            return None
        teacher = self.get_user(plan.teacher_id)
        grade = self.get_grade(plan.grade_id)
        subject = self.get_subject(plan.subject_id)
        week = self.get_planning_week(plan.week_id)
        if teacher is None or grade is None or subject is None or week is None:
            return None
        return WeeklyPlanComplete(
            plan=plan,
            teacher=teacher,
            grade=grade,
            subject=subject,
            week=week,
            daily_plans=self.list_daily_plans_for_weekly_plan(plan_id),
        )

    # Daily plans ---------------------------------------------------------

    @abc.abstractmethod
    def create_daily_plan(
        self, weekly_plan_id: int, day_of_week: int, values: Mapping[str, Any]
    ) -> DailyPlan: ...

    @abc.abstractmethod
    def update_daily_plan(self, plan_id: int, changes: Mapping[str, Any]) -> DailyPlan | None: ...

    @abc.abstractmethod
    def get_daily_plan(self, plan_id: int) -> DailyPlan | None: ...

    @abc.abstractmethod
    def list_daily_plans_for_weekly_plan(self, weekly_plan_id: int) -> list[DailyPlan]: ...

    @abc.abstractmethod
    def delete_daily_plan(self, plan_id: int) -> bool: ...


class SqlStorage(Storage):
    """Relational implementation bound to one SQLAlchemy session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    @contextlib.contextmanager
    def _unique(self, message: str) -> Iterator[None]:
        """Map unique-constraint violations inside the block to ``ConflictError``."""
        try:
            with self.session.begin_nested():
                yield
        except IntegrityError as exc:
            LOGGER.info("Unique constraint rejected write: %s", message)
            raise ConflictError(message) from exc

    def _delete_weekly_plans(self, *criteria) -> int:
        plan_ids = list(self.session.scalars(select(WeeklyPlan.id).where(*criteria)))
        if not plan_ids:
            return 0
        self.session.execute(delete(DailyPlan).where(DailyPlan.weekly_plan_id.in_(plan_ids)))
        self.session.execute(delete(WeeklyPlan).where(WeeklyPlan.id.in_(plan_ids)))
        return len(plan_ids)

    # Users ---------------------------------------------------------------

    def get_user(self, user_id: int) -> User | None:
        return self.session.get(User, user_id)

    def get_user_by_username(self, username: str) -> User | None:
        return self.session.scalar(select(User).where(User.username == username))

    def create_user(self, data: UserData) -> User:
        if self.get_user_by_username(data.username) is not None:
            raise ConflictError(DUPLICATE_USERNAME)
        user = User(
            username=data.username,
            password=hash_password(data.password),
            full_name=data.full_name,
            email=data.email,
            is_admin=data.is_admin,
        )
        with self._unique(DUPLICATE_USERNAME):
            self.session.add(user)
        return user

    def update_user(self, user_id: int, changes: Mapping[str, Any]) -> User | None:
        user = self.get_user(user_id)
        if user is None:
            return None
        updates = _pick(changes, USER_UPDATABLE)
        if updates.get("password"):
            updates["password"] = hash_password(updates["password"])
        else:
            updates.pop("password", None)
        with self._unique(DUPLICATE_USERNAME):
            for key, value in updates.items():
                setattr(user, key, value)
        return user

    def delete_user(self, user_id: int) -> bool:
        user = self.get_user(user_id)
        if user is None:
            return False
        removed_plans = self._delete_weekly_plans(WeeklyPlan.teacher_id == user_id)
        self.session.execute(delete(TeacherSubject).where(TeacherSubject.teacher_id == user_id))
        self.session.execute(delete(TeacherGrade).where(TeacherGrade.teacher_id == user_id))
        self.session.delete(user)
        self.session.flush()
        LOGGER.info("Deleted user %s with %d weekly plans", user_id, removed_plans)
        return True

    def list_users(self) -> list[User]:
        return list(self.session.scalars(select(User).order_by(User.id)))

    def list_teachers(self) -> list[User]:
        stmt = select(User).where(User.is_admin.is_(False)).order_by(User.id)
        return list(self.session.scalars(stmt))

    # Grades --------------------------------------------------------------

    def create_grade(self, name: str) -> Grade:
        grade = Grade(name=name)
        with self._unique(DUPLICATE_GRADE):
            self.session.add(grade)
        return grade

    def get_grade(self, grade_id: int) -> Grade | None:
        return self.session.get(Grade, grade_id)

    def list_grades(self) -> list[Grade]:
        return list(self.session.scalars(select(Grade).order_by(Grade.id)))

    def update_grade(self, grade_id: int, name: str) -> Grade | None:
        grade = self.get_grade(grade_id)
        if grade is None:
            return None
        with self._unique(DUPLICATE_GRADE):
            grade.name = name
        return grade

    def delete_grade(self, grade_id: int) -> bool:
        grade = self.get_grade(grade_id)
        if grade is None:
            return False
        self.session.execute(delete(TeacherSubject).where(TeacherSubject.grade_id == grade_id))
        self.session.execute(delete(TeacherGrade).where(TeacherGrade.grade_id == grade_id))
        removed_plans = self._delete_weekly_plans(WeeklyPlan.grade_id == grade_id)
        self.session.delete(grade)
        self.session.flush()
        LOGGER.info("Deleted grade %s with %d weekly plans", grade_id, removed_plans)
        return True

    # Subjects ------------------------------------------------------------

    def create_subject(self, name: str, subject_type: str = "standard") -> Subject:
        subject = Subject(name=name, type=subject_type)
        with self._unique(DUPLICATE_SUBJECT):
            self.session.add(subject)
        return subject

    def get_subject(self, subject_id: int) -> Subject | None:
        return self.session.get(Subject, subject_id)

    def list_subjects(self) -> list[Subject]:
        return list(self.session.scalars(select(Subject).order_by(Subject.id)))

    def update_subject(
        self, subject_id: int, name: str, subject_type: str = "standard"
    ) -> Subject | None:
        subject = self.get_subject(subject_id)
        if subject is None:
            return None
        with self._unique(DUPLICATE_SUBJECT):
            subject.name = name
            subject.type = subject_type
        return subject

    def delete_subject(self, subject_id: int) -> bool:
        subject = self.get_subject(subject_id)
        if subject is None:
            return False
        self.session.execute(
            delete(TeacherSubject).where(TeacherSubject.subject_id == subject_id)
        )
        removed_plans = self._delete_weekly_plans(WeeklyPlan.subject_id == subject_id)
        self.session.delete(subject)
        self.session.flush()
        LOGGER.info("Deleted subject %s with %d weekly plans", subject_id, removed_plans)
        return True

    # Assignments ---------------------------------------------------------

    def assign_teacher_to_grade(self, teacher_id: int, grade_id: int) -> TeacherGrade:
        existing = self.session.scalar(
            select(TeacherGrade).where(
                TeacherGrade.teacher_id == teacher_id, TeacherGrade.grade_id == grade_id
            )
        )
        if existing is not None:
            return existing
        assignment = TeacherGrade(teacher_id=teacher_id, grade_id=grade_id)
        with self._unique("Teacher is already assigned to this grade"):
            self.session.add(assignment)
        return assignment

    def remove_teacher_from_grade(self, teacher_id: int, grade_id: int) -> bool:
        self.session.execute(
            delete(TeacherSubject).where(
                TeacherSubject.teacher_id == teacher_id, TeacherSubject.grade_id == grade_id
            )
        )
        result = self.session.execute(
            delete(TeacherGrade).where(
                TeacherGrade.teacher_id == teacher_id, TeacherGrade.grade_id == grade_id
            )
        )
        return result.rowcount > 0

    def get_teacher_grades(self, teacher_id: int) -> list[Grade]:
        stmt = (
            select(Grade)
            .join(TeacherGrade, TeacherGrade.grade_id == Grade.id)
            .where(TeacherGrade.teacher_id == teacher_id)
            .distinct()
            .order_by(Grade.id)
        )
        return list(self.session.scalars(stmt))

    def get_grade_teachers(self, grade_id: int) -> list[User]:
        stmt = (
            select(User)
            .join(TeacherGrade, TeacherGrade.teacher_id == User.id)
            .where(TeacherGrade.grade_id == grade_id)
            .distinct()
            .order_by(User.id)
        )
        return list(self.session.scalars(stmt))

    def assign_teacher_to_subject(
        self, teacher_id: int, grade_id: int, subject_id: int
    ) -> TeacherSubject:
        existing = self.session.scalar(
            select(TeacherSubject).where(
                TeacherSubject.teacher_id == teacher_id,
                TeacherSubject.grade_id == grade_id,
                TeacherSubject.subject_id == subject_id,
            )
        )
        if existing is not None:
            return existing
        assignment = TeacherSubject(
            teacher_id=teacher_id, grade_id=grade_id, subject_id=subject_id
        )
        with self._unique("Teacher is already assigned to this subject"):
            self.session.add(assignment)
        return assignment

    def remove_teacher_from_subject(
        self, teacher_id: int, grade_id: int, subject_id: int
    ) -> bool:
        result = self.session.execute(
            delete(TeacherSubject).where(
                TeacherSubject.teacher_id == teacher_id,
                TeacherSubject.grade_id == grade_id,
                TeacherSubject.subject_id == subject_id,
            )
        )
        return result.rowcount > 0

    def get_teacher_subjects_for_grade(self, teacher_id: int, grade_id: int) -> list[Subject]:
        stmt = (
            select(Subject)
            .join(
                TeacherSubject,
                and_(
                    TeacherSubject.subject_id == Subject.id,
                    TeacherSubject.teacher_id == teacher_id,
                    TeacherSubject.grade_id == grade_id,
                ),
            )
            .order_by(Subject.id)
        )
        return list(self.session.scalars(stmt))

    # Planning weeks ------------------------------------------------------

    def create_planning_week(self, data: PlanningWeekData) -> PlanningWeek:
        check_date_range(data.start_date, data.end_date)
        week = PlanningWeek(
            week_number=data.week_number,
            year=data.year,
            start_date=data.start_date,
            end_date=data.end_date,
            is_active=data.is_active,
        )
        self.session.add(week)
        self.session.flush()
        return week

    def get_planning_week(self, week_id: int) -> PlanningWeek | None:
        return self.session.get(PlanningWeek, week_id)

    def list_planning_weeks(self) -> list[PlanningWeek]:
        stmt = select(PlanningWeek).order_by(
            PlanningWeek.year.desc(), PlanningWeek.week_number.desc()
        )
        return list(self.session.scalars(stmt))

    def list_active_planning_weeks(self) -> list[PlanningWeek]:
        stmt = (
            select(PlanningWeek)
            .where(PlanningWeek.is_active.is_(True))
            .order_by(PlanningWeek.year.desc(), PlanningWeek.week_number.desc())
        )
        return list(self.session.scalars(stmt))

    def update_planning_week(
        self, week_id: int, changes: Mapping[str, Any]
    ) -> PlanningWeek | None:
        week = self.get_planning_week(week_id)
        if week is None:
            return None
        updates = _pick(changes, WEEK_UPDATABLE)
        check_date_range(
            updates.get("start_date", week.start_date), updates.get("end_date", week.end_date)
        )
        for key, value in updates.items():
            setattr(week, key, value)
        self.session.flush()
        return week

    def delete_planning_week(self, week_id: int) -> bool:
        week = self.get_planning_week(week_id)
        if week is None:
            return False
        removed_plans = self._delete_weekly_plans(WeeklyPlan.week_id == week_id)
        self.session.delete(week)
        self.session.flush()
        LOGGER.info("Deleted planning week %s with %d weekly plans", week_id, removed_plans)
        return True

    # Weekly plans --------------------------------------------------------

    def create_weekly_plan(
        self,
        teacher_id: int,
        grade_id: int,
        subject_id: int,
        week_id: int,
        notes: str | None = None,
    ) -> WeeklyPlan:
        now = utcnow()
        plan = WeeklyPlan(
            teacher_id=teacher_id,
            grade_id=grade_id,
            subject_id=subject_id,
            week_id=week_id,
            notes=notes,
            created_at=now,
            updated_at=now,
        )
        with self._unique(DUPLICATE_WEEKLY_PLAN):
            self.session.add(plan)
        return plan

    def get_weekly_plan(self, plan_id: int) -> WeeklyPlan | None:
        return self.session.get(WeeklyPlan, plan_id)

    def list_teacher_weekly_plans(self, teacher_id: int) -> list[WeeklyPlan]:
        stmt = select(WeeklyPlan).where(WeeklyPlan.teacher_id == teacher_id).order_by(WeeklyPlan.id)
        return list(self.session.scalars(stmt))

    def list_grade_week_plans(self, grade_id: int, week_id: int) -> list[WeeklyPlan]:
        stmt = (
            select(WeeklyPlan)
            .where(WeeklyPlan.grade_id == grade_id, WeeklyPlan.week_id == week_id)
            .order_by(WeeklyPlan.id)
        )
        return list(self.session.scalars(stmt))

    def update_weekly_plan_notes(self, plan_id: int, notes: str | None) -> WeeklyPlan | None:
        plan = self.get_weekly_plan(plan_id)
        if plan is None:
            return None
        plan.notes = notes
        plan.updated_at = utcnow()
        self.session.flush()
        return plan

    def delete_weekly_plan(self, plan_id: int) -> bool:
        return self._delete_weekly_plans(WeeklyPlan.id == plan_id) > 0

    # Daily plans ---------------------------------------------------------

    def create_daily_plan(
        self, weekly_plan_id: int, day_of_week: int, values: Mapping[str, Any]
    ) -> DailyPlan:
        plan = DailyPlan(weekly_plan_id=weekly_plan_id, day_of_week=day_of_week)
        for key, value in _pick(values, DAILY_UPDATABLE - {"day_of_week"}).items():
            setattr(plan, key, value)
        with self._unique(DUPLICATE_DAILY_PLAN):
            self.session.add(plan)
        return plan

    def update_daily_plan(self, plan_id: int, changes: Mapping[str, Any]) -> DailyPlan | None:
        plan = self.get_daily_plan(plan_id)
        if plan is None:
            return None
        with self._unique(DUPLICATE_DAILY_PLAN):
            for key, value in _pick(changes, DAILY_UPDATABLE).items():
                setattr(plan, key, value)
        return plan

    def get_daily_plan(self, plan_id: int) -> DailyPlan | None:
        return self.session.get(DailyPlan, plan_id)

    def list_daily_plans_for_weekly_plan(self, weekly_plan_id: int) -> list[DailyPlan]:
        stmt = (
            select(DailyPlan)
            .where(DailyPlan.weekly_plan_id == weekly_plan_id)
            .order_by(DailyPlan.day_of_week)
        )
        return list(self.session.scalars(stmt))

    def delete_daily_plan(self, plan_id: int) -> bool:
        plan = self.get_daily_plan(plan_id)
        if plan is None:
            return False
        self.session.delete(plan)
        self.session.flush()
        return True


__all__ = [
    "DUPLICATE_DAILY_PLAN",
    "DUPLICATE_WEEKLY_PLAN",
    "PlanningWeekData",
    "SqlStorage",
    "Storage",
    "UserData",
    "WeeklyPlanComplete",
    "check_date_range",
    "utcnow",
    "week_sort_key",
]
