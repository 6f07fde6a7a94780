"""In-memory ``Storage`` used by tests and throwaway demos."""
from __future__ import annotations

import itertools
import logging
from typing import Any, Mapping

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
from weekly_planner.errors import ConflictError
from weekly_planner.security import hash_password
from weekly_planner.services.storage import (
    DAILY_UPDATABLE,
    DUPLICATE_DAILY_PLAN,
    DUPLICATE_GRADE,
    DUPLICATE_SUBJECT,
    DUPLICATE_USERNAME,
    DUPLICATE_WEEKLY_PLAN,
    USER_UPDATABLE,
    WEEK_UPDATABLE,
    PlanningWeekData,
    Storage,
    UserData,
    _pick,
    check_date_range,
    utcnow,
    week_sort_key,
)

LOGGER = logging.getLogger(__name__)


class MemoryStorage(Storage):
    """Keeps transient model instances in dictionaries keyed by id."""

    def __init__(self) -> None:
        self.users: dict[int, User] = {}
        self.grades: dict[int, Grade] = {}
        self.subjects: dict[int, Subject] = {}
        self.teacher_grades: dict[int, TeacherGrade] = {}
        self.teacher_subjects: dict[int, TeacherSubject] = {}
        self.planning_weeks: dict[int, PlanningWeek] = {}
        self.weekly_plans: dict[int, WeeklyPlan] = {}
        self.daily_plans: dict[int, DailyPlan] = {}
        self._ids = {
            name: itertools.count(1)
            for name in (
                "users",
                "grades",
                "subjects",
                "teacher_grades",
                "teacher_subjects",
                "planning_weeks",
                "weekly_plans",
                "daily_plans",
            )
        }

    def _next_id(self, table: str) -> int:
        return next(self._ids[table])

    def _delete_weekly_plans(self, predicate) -> int:
        doomed = [plan_id for plan_id, plan in self.weekly_plans.items() if predicate(plan)]
        for plan_id in doomed:
            for daily_id in [d.id for d in self.daily_plans.values() if d.weekly_plan_id == plan_id]:
                del self.daily_plans[daily_id]
            del self.weekly_plans[plan_id]
        return len(doomed)

    def _drop(self, table: dict[int, Any], predicate) -> int:
        doomed = [key for key, row in table.items() if predicate(row)]
        for key in doomed:
            del table[key]
        return len(doomed)

    # Users ---------------------------------------------------------------

    def get_user(self, user_id: int) -> User | None:
        return self.users.get(user_id)

    def get_user_by_username(self, username: str) -> User | None:
        return next((u for u in self.users.values() if u.username == username), None)

    def create_user(self, data: UserData) -> User:
        if self.get_user_by_username(data.username) is not None:
            raise ConflictError(DUPLICATE_USERNAME)
        user = User(
            id=self._next_id("users"),
            username=data.username,
            password=hash_password(data.password),
            full_name=data.full_name,
            email=data.email,
            is_admin=data.is_admin,
        )
        self.users[user.id] = user
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
        username = updates.get("username")
        if username is not None and username != user.username:
            if self.get_user_by_username(username) is not None:
                raise ConflictError(DUPLICATE_USERNAME)
        for key, value in updates.items():
            setattr(user, key, value)
        return user

    def delete_user(self, user_id: int) -> bool:
        if user_id not in self.users:
            return False
        removed_plans = self._delete_weekly_plans(lambda plan: plan.teacher_id == user_id)
        self._drop(self.teacher_subjects, lambda row: row.teacher_id == user_id)
        self._drop(self.teacher_grades, lambda row: row.teacher_id == user_id)
        del self.users[user_id]
        LOGGER.debug("Deleted user %s with %d weekly plans", user_id, removed_plans)
        return True

    def list_users(self) -> list[User]:
        return sorted(self.users.values(), key=lambda u: u.id)

    def list_teachers(self) -> list[User]:
        return [user for user in self.list_users() if not user.is_admin]

    # Grades --------------------------------------------------------------

    def _check_grade_name(self, name: str, grade_id: int | None = None) -> None:
        if any(g.name == name and g.id != grade_id for g in self.grades.values()):
            raise ConflictError(DUPLICATE_GRADE)

    def create_grade(self, name: str) -> Grade:
        self._check_grade_name(name)
        grade = Grade(id=self._next_id("grades"), name=name)
        self.grades[grade.id] = grade
        return grade

    def get_grade(self, grade_id: int) -> Grade | None:
        return self.grades.get(grade_id)

    def list_grades(self) -> list[Grade]:
        return sorted(self.grades.values(), key=lambda g: g.id)

    def update_grade(self, grade_id: int, name: str) -> Grade | None:
        grade = self.get_grade(grade_id)
        if grade is None:
            return None
        self._check_grade_name(name, grade_id)
        grade.name = name
        return grade

    def delete_grade(self, grade_id: int) -> bool:
        if grade_id not in self.grades:
            return False
        self._drop(self.teacher_subjects, lambda row: row.grade_id == grade_id)
        self._drop(self.teacher_grades, lambda row: row.grade_id == grade_id)
        self._delete_weekly_plans(lambda plan: plan.grade_id == grade_id)
        del self.grades[grade_id]
        return True

    # Subjects ------------------------------------------------------------

    def _check_subject_name(self, name: str, subject_id: int | None = None) -> None:
        if any(s.name == name and s.id != subject_id for s in self.subjects.values()):
            raise ConflictError(DUPLICATE_SUBJECT)

    def create_subject(self, name: str, subject_type: str = "standard") -> Subject:
        self._check_subject_name(name)
        subject = Subject(id=self._next_id("subjects"), name=name, type=subject_type)
        self.subjects[subject.id] = subject
        return subject

    def get_subject(self, subject_id: int) -> Subject | None:
        return self.subjects.get(subject_id)

    def list_subjects(self) -> list[Subject]:
        return sorted(self.subjects.values(), key=lambda s: s.id)

    def update_subject(
        self, subject_id: int, name: str, subject_type: str = "standard"
    ) -> Subject | None:
        subject = self.get_subject(subject_id)
        if subject is None:
            return None
        self._check_subject_name(name, subject_id)
        subject.name = name
        subject.type = subject_type
        return subject

    def delete_subject(self, subject_id: int) -> bool:
        if subject_id not in self.subjects:
            return False
        self._drop(self.teacher_subjects, lambda row: row.subject_id == subject_id)
        self._delete_weekly_plans(lambda plan: plan.subject_id == subject_id)
        del self.subjects[subject_id]
        return True

    # Assignments ---------------------------------------------------------

    def assign_teacher_to_grade(self, teacher_id: int, grade_id: int) -> TeacherGrade:
        for row in self.teacher_grades.values():
            if row.teacher_id == teacher_id and row.grade_id == grade_id:
                return row
        row = TeacherGrade(id=self._next_id("teacher_grades"), teacher_id=teacher_id, grade_id=grade_id)
        self.teacher_grades[row.id] = row
        return row

    def remove_teacher_from_grade(self, teacher_id: int, grade_id: int) -> bool:
        self._drop(
            self.teacher_subjects,
            lambda row: row.teacher_id == teacher_id and row.grade_id == grade_id,
        )
        removed = self._drop(
            self.teacher_grades,
            lambda row: row.teacher_id == teacher_id and row.grade_id == grade_id,
        )
        return removed > 0

    def get_teacher_grades(self, teacher_id: int) -> list[Grade]:
        ids = {row.grade_id for row in self.teacher_grades.values() if row.teacher_id == teacher_id}
        return [grade for grade in self.list_grades() if grade.id in ids]

    def get_grade_teachers(self, grade_id: int) -> list[User]:
        ids = {row.teacher_id for row in self.teacher_grades.values() if row.grade_id == grade_id}
        return [user for user in self.list_users() if user.id in ids]

    def assign_teacher_to_subject(
        self, teacher_id: int, grade_id: int, subject_id: int
    ) -> TeacherSubject:
        for row in self.teacher_subjects.values():
            if (row.teacher_id, row.grade_id, row.subject_id) == (teacher_id, grade_id, subject_id):
                return row
        row = TeacherSubject(
            id=self._next_id("teacher_subjects"),
            teacher_id=teacher_id,
            grade_id=grade_id,
            subject_id=subject_id,
        )
        self.teacher_subjects[row.id] = row
        return row

    def remove_teacher_from_subject(
        self, teacher_id: int, grade_id: int, subject_id: int
    ) -> bool:
        removed = self._drop(
            self.teacher_subjects,
            lambda row: (row.teacher_id, row.grade_id, row.subject_id)
            == (teacher_id, grade_id, subject_id),
        )
        return removed > 0

    def get_teacher_subjects_for_grade(self, teacher_id: int, grade_id: int) -> list[Subject]:
        ids = {
            row.subject_id
            for row in self.teacher_subjects.values()
            if row.teacher_id == teacher_id and row.grade_id == grade_id
        }
        return [subject for subject in self.list_subjects() if subject.id in ids]

    # Planning weeks ------------------------------------------------------

    def create_planning_week(self, data: PlanningWeekData) -> PlanningWeek:
        check_date_range(data.start_date, data.end_date)
        week = PlanningWeek(
            id=self._next_id("planning_weeks"),
            week_number=data.week_number,
            year=data.year,
            start_date=data.start_date,
            end_date=data.end_date,
            is_active=data.is_active,
        )
        self.planning_weeks[week.id] = week
        return week

    def get_planning_week(self, week_id: int) -> PlanningWeek | None:
        return self.planning_weeks.get(week_id)

    def list_planning_weeks(self) -> list[PlanningWeek]:
        return sorted(self.planning_weeks.values(), key=week_sort_key)

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
        return week

    def delete_planning_week(self, week_id: int) -> bool:
        if week_id not in self.planning_weeks:
            return False
        self._delete_weekly_plans(lambda plan: plan.week_id == week_id)
        del self.planning_weeks[week_id]
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
        key = (teacher_id, grade_id, subject_id, week_id)
        for plan in self.weekly_plans.values():
            if (plan.teacher_id, plan.grade_id, plan.subject_id, plan.week_id) == key:
                raise ConflictError(DUPLICATE_WEEKLY_PLAN)
        now = utcnow()
        plan = WeeklyPlan(
            id=self._next_id("weekly_plans"),
            teacher_id=teacher_id,
            grade_id=grade_id,
            subject_id=subject_id,
            week_id=week_id,
            notes=notes,
            created_at=now,
            updated_at=now,
        )
        self.weekly_plans[plan.id] = plan
        return plan

    def get_weekly_plan(self, plan_id: int) -> WeeklyPlan | None:
        return self.weekly_plans.get(plan_id)

    def list_teacher_weekly_plans(self, teacher_id: int) -> list[WeeklyPlan]:
        return sorted(
            (p for p in self.weekly_plans.values() if p.teacher_id == teacher_id),
            key=lambda p: p.id,
        )

    def list_grade_week_plans(self, grade_id: int, week_id: int) -> list[WeeklyPlan]:
        return sorted(
            (
                p
                for p in self.weekly_plans.values()
                if p.grade_id == grade_id and p.week_id == week_id
            ),
            key=lambda p: p.id,
        )

    def update_weekly_plan_notes(self, plan_id: int, notes: str | None) -> WeeklyPlan | None:
        plan = self.get_weekly_plan(plan_id)
        if plan is None:
            return None
        plan.notes = notes
        plan.updated_at = utcnow()
        return plan

    def delete_weekly_plan(self, plan_id: int) -> bool:
        return self._delete_weekly_plans(lambda plan: plan.id == plan_id) > 0

    # Daily plans ---------------------------------------------------------

    def _check_day_free(self, weekly_plan_id: int, day_of_week: int, plan_id: int | None = None) -> None:
        for row in self.daily_plans.values():
            if (
                row.weekly_plan_id == weekly_plan_id
                and row.day_of_week == day_of_week
                and row.id != plan_id
            ):
                raise ConflictError(DUPLICATE_DAILY_PLAN)

    def create_daily_plan(
        self, weekly_plan_id: int, day_of_week: int, values: Mapping[str, Any]
    ) -> DailyPlan:
        self._check_day_free(weekly_plan_id, day_of_week)
        row = DailyPlan(
            id=self._next_id("daily_plans"),
            weekly_plan_id=weekly_plan_id,
            day_of_week=day_of_week,
        )
        for name in DAILY_UPDATABLE - {"day_of_week"}:
            setattr(row, name, values.get(name))
        self.daily_plans[row.id] = row
        return row

    def update_daily_plan(self, plan_id: int, changes: Mapping[str, Any]) -> DailyPlan | None:
        row = self.get_daily_plan(plan_id)
        if row is None:
            return None
        updates = _pick(changes, DAILY_UPDATABLE)
        if "day_of_week" in updates:
            self._check_day_free(row.weekly_plan_id, updates["day_of_week"], plan_id)
        for key, value in updates.items():
            setattr(row, key, value)
        return row

    def get_daily_plan(self, plan_id: int) -> DailyPlan | None:
        return self.daily_plans.get(plan_id)

    def list_daily_plans_for_weekly_plan(self, weekly_plan_id: int) -> list[DailyPlan]:
        return sorted(
            (row for row in self.daily_plans.values() if row.weekly_plan_id == weekly_plan_id),
            key=lambda row: row.day_of_week,
        )

    def delete_daily_plan(self, plan_id: int) -> bool:
        return self.daily_plans.pop(plan_id, None) is not None


__all__ = ["MemoryStorage"]
