"""Demo data helpers."""
from __future__ import annotations

import logging
from datetime import date

from weekly_planner.db.models import Grade, PlanningWeek, Subject, User, WeeklyPlan
from weekly_planner.services.storage import PlanningWeekData, Storage, UserData

LOGGER = logging.getLogger(__name__)

DEMO_USERS: tuple[UserData, ...] = (
    UserData("admin", "admin123", "System Administrator", is_admin=True),
    UserData("teacher", "teacher123", "John Smith"),
    UserData("math_teacher", "teacher123", "Michael Johnson"),
    UserData("english_teacher", "teacher123", "Emily Davis"),
)
DEMO_GRADES = ("Grade 1", "Grade 2", "Grade 3", "2A")
DEMO_SUBJECTS = (
    ("Mathematics", "standard"),
    ("Science", "standard"),
    ("English", "standard"),
    ("Art", "art"),
    ("PE", "pe"),
)
# (username, grade, subject)
DEMO_ASSIGNMENTS = (
    ("teacher", "Grade 3", "Mathematics"),
    ("teacher", "Grade 3", "Science"),
    ("math_teacher", "2A", "Mathematics"),
    ("english_teacher", "2A", "English"),
)
DEMO_WEEKS: tuple[PlanningWeekData, ...] = (
    PlanningWeekData(15, 2024, date(2024, 4, 10), date(2024, 4, 16), is_active=False),
    PlanningWeekData(16, 2024, date(2024, 4, 17), date(2024, 4, 23), is_active=True),
)

MATH_TOPICS = (
    "Introduction to Fractions",
    "Adding Fractions",
    "Subtracting Fractions",
    "Introduction to Decimals",
    "Converting Fractions to Decimals",
)
ENGLISH_TOPICS = (
    "Reading Comprehension: Main Idea",
    "Grammar: Verb Tenses",
    "Vocabulary Development",
    "Writing: Paragraph Structure",
    "Literature Analysis",
)


def _math_day(day: int) -> dict:
    return {
        "topic": MATH_TOPICS[day - 1],
        "books_and_pages": f"Textbook pages {40 + day * 2}-{40 + day * 2 + 1}",
        "homework": f"Worksheet {day}" if day in (2, 4) else None,
        "homework_due_date": {2: date(2024, 4, 19), 4: date(2024, 4, 23)}.get(day),
        "assignments": "Quiz on fractions and decimals" if day == 5 else None,
    }


def _english_day(day: int) -> dict:
    return {
        "topic": ENGLISH_TOPICS[day - 1],
        "books_and_pages": f"Language Arts textbook pages {70 + day * 2}-{70 + day * 2 + 1}",
        "homework": f"Complete exercises {day}" if day in (1, 3) else None,
        "homework_due_date": {1: date(2024, 4, 18), 3: date(2024, 4, 22)}.get(day),
        "assignments": "Writing assignment: Personal narrative" if day == 5 else None,
    }


# (username, grade, subject, notes, daily content builder)
DEMO_PLANS = (
    ("math_teacher", "2A", "Mathematics", "Focus on fractions and decimals this week", _math_day),
    ("english_teacher", "2A", "English", "Focus on reading comprehension and grammar", _english_day),
)


def _ensure_user(storage: Storage, data: UserData) -> tuple[User, bool]:
    user = storage.get_user_by_username(data.username)
    if user is not None:
        return user, False
    return storage.create_user(data), True


def _ensure_grade(storage: Storage, grades: dict[str, Grade], name: str) -> bool:
    if name in grades:
        return False
    grades[name] = storage.create_grade(name)
    return True


def _ensure_subject(
    storage: Storage, subjects: dict[str, Subject], name: str, subject_type: str
) -> bool:
    if name in subjects:
        return False
    subjects[name] = storage.create_subject(name, subject_type)
    return True


def _ensure_week(
    storage: Storage, weeks: dict[tuple[int, int], PlanningWeek], data: PlanningWeekData
) -> bool:
    key = (data.week_number, data.year)
    if key in weeks:
        return False
    weeks[key] = storage.create_planning_week(data)
    return True


def _ensure_plan(
    storage: Storage, teacher: User, grade: Grade, subject: Subject, week: PlanningWeek, notes: str
) -> tuple[WeeklyPlan, bool]:
    for plan in storage.list_grade_week_plans(grade.id, week.id):
        if plan.teacher_id == teacher.id and plan.subject_id == subject.id:
            return plan, False
    return storage.create_weekly_plan(teacher.id, grade.id, subject.id, week.id, notes), True


def seed_demo_data(storage: Storage) -> int:
    """Insert whichever demo records are missing and return how many were added.

    Records are matched by natural key, so running this twice is harmless.
    """
    created = 0

    users: dict[str, User] = {}
    for data in DEMO_USERS:
        users[data.username], added = _ensure_user(storage, data)
        created += added

    grades = {grade.name: grade for grade in storage.list_grades()}
    for name in DEMO_GRADES:
        created += _ensure_grade(storage, grades, name)

    subjects = {subject.name: subject for subject in storage.list_subjects()}
    for name, subject_type in DEMO_SUBJECTS:
        created += _ensure_subject(storage, subjects, name, subject_type)

    for username, grade_name, subject_name in DEMO_ASSIGNMENTS:
        teacher, grade = users[username], grades[grade_name]
        subject = subjects[subject_name]
        if grade.id not in {g.id for g in storage.get_teacher_grades(teacher.id)}:
            storage.assign_teacher_to_grade(teacher.id, grade.id)
            created += 1
        if not storage.has_teacher_subject(teacher.id, grade.id, subject.id):
            storage.assign_teacher_to_subject(teacher.id, grade.id, subject.id)
            created += 1

    weeks = {(week.week_number, week.year): week for week in storage.list_planning_weeks()}
    for data in DEMO_WEEKS:
        created += _ensure_week(storage, weeks, data)

    active_week = weeks[(16, 2024)]
    for username, grade_name, subject_name, notes, build_day in DEMO_PLANS:
        plan, added = _ensure_plan(
            storage,
            users[username],
            grades[grade_name],
            subjects[subject_name],
            active_week,
            notes,
        )
        created += added
        existing_days = {d.day_of_week for d in storage.list_daily_plans_for_weekly_plan(plan.id)}
        for day in range(1, 6):
            if day not in existing_days:
                storage.create_daily_plan(plan.id, day, build_day(day))
                created += 1

    LOGGER.info("Demo data seeding added %d records", created)
    return created


__all__ = ["seed_demo_data"]
