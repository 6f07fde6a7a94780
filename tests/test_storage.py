"""Storage contract tests, run against both the SQL and in-memory stores."""
from __future__ import annotations

from datetime import date

import pytest

from weekly_planner.errors import ConflictError, InvalidOperationError
from weekly_planner.security import verify_password
from weekly_planner.services.storage import PlanningWeekData, Storage, UserData


def _week(storage: Storage, number: int = 16, year: int = 2024, active: bool = True):
    return storage.create_planning_week(
        PlanningWeekData(number, year, date(2024, 4, 17), date(2024, 4, 23), is_active=active)
    )


def _planning_world(storage: Storage) -> dict:
    teacher = storage.create_user(UserData("alice", "teacher123", "Alice Teacher"))
    grade = storage.create_grade("Grade 3")
    subject = storage.create_subject("Mathematics")
    week = _week(storage)
    storage.assign_teacher_to_grade(teacher.id, grade.id)
    storage.assign_teacher_to_subject(teacher.id, grade.id, subject.id)
    plan = storage.create_weekly_plan(teacher.id, grade.id, subject.id, week.id, "Fractions")
    for day in (3, 1, 2):
        storage.create_daily_plan(plan.id, day, {"topic": f"Day {day}"})
    return {"teacher": teacher, "grade": grade, "subject": subject, "week": week, "plan": plan}


def test_create_user_hashes_password(storage: Storage) -> None:
    user = storage.create_user(UserData("alice", "teacher123", "Alice Teacher", "a@example.com"))

    assert user.id is not None
    assert user.password != "teacher123"
    assert verify_password(user.password, "teacher123")
    assert storage.get_user_by_username("alice").id == user.id
    assert storage.verify_user_credentials("alice", "teacher123").id == user.id
    assert storage.verify_user_credentials("alice", "wrong") is None
    assert storage.verify_user_credentials("nobody", "teacher123") is None


def test_duplicate_username_is_rejected(storage: Storage) -> None:
    storage.create_user(UserData("alice", "teacher123", "Alice Teacher"))

    with pytest.raises(ConflictError, match="Username already exists"):
        storage.create_user(UserData("alice", "other123", "Another Alice"))
    assert len(storage.list_users()) == 1


def test_update_user_rehashes_only_new_passwords(storage: Storage) -> None:
    user = storage.create_user(UserData("alice", "teacher123", "Alice Teacher"))
    original = user.password

    storage.update_user(user.id, {"full_name": "Alice Cooper", "password": None})
    assert storage.get_user(user.id).password == original
    assert storage.get_user(user.id).full_name == "Alice Cooper"

    storage.update_user(user.id, {"password": "newpass1"})
    assert verify_password(storage.get_user(user.id).password, "newpass1")
    assert storage.update_user(9999, {"full_name": "Ghost"}) is None


def test_list_teachers_excludes_admins(storage: Storage) -> None:
    storage.create_user(UserData("admin", "admin123", "Admin", is_admin=True))
    storage.create_user(UserData("alice", "teacher123", "Alice Teacher"))

    assert [u.username for u in storage.list_users()] == ["admin", "alice"]
    assert [u.username for u in storage.list_teachers()] == ["alice"]


def test_grade_and_subject_names_are_unique(storage: Storage) -> None:
    grade = storage.create_grade("Grade 1")
    storage.create_grade("Grade 2")
    storage.create_subject("Art", "art")

    with pytest.raises(ConflictError):
        storage.create_grade("Grade 1")
    with pytest.raises(ConflictError):
        storage.update_grade(grade.id, "Grade 2")
    with pytest.raises(ConflictError):
        storage.create_subject("Art", "standard")

    assert storage.update_grade(grade.id, "First Grade").name == "First Grade"
    assert storage.update_subject(404, "Music") is None


def test_teacher_grade_assignment_is_idempotent(storage: Storage) -> None:
    teacher = storage.create_user(UserData("alice", "teacher123", "Alice Teacher"))
    grade = storage.create_grade("2A")

    first = storage.assign_teacher_to_grade(teacher.id, grade.id)
    second = storage.assign_teacher_to_grade(teacher.id, grade.id)

    assert first.id == second.id
    assert [g.name for g in storage.get_teacher_grades(teacher.id)] == ["2A"]
    assert [u.username for u in storage.get_grade_teachers(grade.id)] == ["alice"]


def test_teacher_subject_assignment_is_idempotent(storage: Storage) -> None:
    teacher = storage.create_user(UserData("alice", "teacher123", "Alice Teacher"))
    grade = storage.create_grade("2A")
    math = storage.create_subject("Mathematics")
    storage.create_subject("Science")

    first = storage.assign_teacher_to_subject(teacher.id, grade.id, math.id)
    second = storage.assign_teacher_to_subject(teacher.id, grade.id, math.id)

    assert first.id == second.id
    assert [s.name for s in storage.get_teacher_subjects_for_grade(teacher.id, grade.id)] == [
        "Mathematics"
    ]
    assert storage.has_teacher_subject(teacher.id, grade.id, math.id)
    assert storage.remove_teacher_from_subject(teacher.id, grade.id, math.id)
    assert not storage.remove_teacher_from_subject(teacher.id, grade.id, math.id)


def test_removing_grade_assignment_drops_subjects_in_that_grade(storage: Storage) -> None:
    teacher = storage.create_user(UserData("alice", "teacher123", "Alice Teacher"))
    grade_a = storage.create_grade("2A")
    grade_b = storage.create_grade("2B")
    math = storage.create_subject("Mathematics")
    for grade in (grade_a, grade_b):
        storage.assign_teacher_to_grade(teacher.id, grade.id)
        storage.assign_teacher_to_subject(teacher.id, grade.id, math.id)

    assert storage.remove_teacher_from_grade(teacher.id, grade_a.id)

    assert storage.get_teacher_subjects_for_grade(teacher.id, grade_a.id) == []
    assert len(storage.get_teacher_subjects_for_grade(teacher.id, grade_b.id)) == 1
    assert not storage.remove_teacher_from_grade(teacher.id, grade_a.id)


def test_planning_weeks_are_listed_most_recent_first(storage: Storage) -> None:
    _week(storage, 15, 2024, active=False)
    _week(storage, 2, 2025)
    _week(storage, 16, 2024)

    listed = [(w.year, w.week_number) for w in storage.list_planning_weeks()]
    active = [(w.year, w.week_number) for w in storage.list_active_planning_weeks()]

    assert listed == [(2025, 2), (2024, 16), (2024, 15)]
    assert active == [(2025, 2), (2024, 16)]


def test_planning_week_date_range_is_enforced(storage: Storage) -> None:
    with pytest.raises(InvalidOperationError, match="End date"):
        storage.create_planning_week(
            PlanningWeekData(1, 2024, date(2024, 1, 10), date(2024, 1, 5))
        )

    week = _week(storage)
    with pytest.raises(InvalidOperationError):
        storage.update_planning_week(week.id, {"end_date": date(2024, 4, 1)})

    updated = storage.update_planning_week(week.id, {"week_number": 17})
    assert updated.week_number == 17
    assert storage.update_planning_week(999, {"year": 2030}) is None


def test_toggle_planning_week(storage: Storage) -> None:
    week = _week(storage)

    assert storage.toggle_planning_week_active(week.id).is_active is False
    assert storage.toggle_planning_week_active(week.id).is_active is True
    assert storage.toggle_planning_week_active(12345) is None


def test_weekly_plan_uniqueness_is_enforced_by_store(storage: Storage) -> None:
    world = _planning_world(storage)
    teacher, grade = world["teacher"], world["grade"]

    with pytest.raises(ConflictError):
        storage.create_weekly_plan(
            teacher.id, grade.id, world["subject"].id, world["week"].id
        )
    assert len(storage.list_grade_week_plans(grade.id, world["week"].id)) == 1


def test_daily_plan_day_uniqueness(storage: Storage) -> None:
    plan = _planning_world(storage)["plan"]
    monday = storage.list_daily_plans_for_weekly_plan(plan.id)[0]

    with pytest.raises(ConflictError, match="A plan for this day already exists"):
        storage.create_daily_plan(plan.id, 1, {"topic": "Again"})
    with pytest.raises(ConflictError):
        storage.update_daily_plan(monday.id, {"day_of_week": 2})

    assert storage.get_daily_plan(monday.id).day_of_week == 1
    assert storage.update_daily_plan(monday.id, {"day_of_week": 5}).day_of_week == 5


def test_complete_plan_joins_and_sorts_days(storage: Storage) -> None:
    world = _planning_world(storage)

    complete = storage.get_weekly_plan_complete(world["plan"].id)

    assert complete.teacher.username == "alice"
    assert complete.grade.name == "Grade 3"
    assert complete.subject.name == "Mathematics"
    assert complete.week.week_number == 16
    assert [d.day_of_week for d in complete.daily_plans] == [1, 2, 3]
    assert storage.get_weekly_plan_complete(404) is None


def test_update_notes_refreshes_updated_at(storage: Storage) -> None:
    plan = _planning_world(storage)["plan"]
    created_at = plan.created_at

    updated = storage.update_weekly_plan_notes(plan.id, "Bring rulers")

    assert updated.notes == "Bring rulers"
    assert updated.created_at == created_at
    assert updated.updated_at >= created_at


@pytest.mark.parametrize("delete", ["grade", "subject", "week", "teacher"])
def test_cascading_delete_leaves_no_orphans(storage: Storage, delete: str) -> None:
    world = _planning_world(storage)
    teacher, grade, subject, week = (
        world["teacher"],
        world["grade"],
        world["subject"],
        world["week"],
    )
    plan_id = world["plan"].id

    deleted = {
        "grade": lambda: storage.delete_grade(grade.id),
        "subject": lambda: storage.delete_subject(subject.id),
        "week": lambda: storage.delete_planning_week(week.id),
        "teacher": lambda: storage.delete_user(teacher.id),
    }[delete]()

    assert deleted is True
    assert storage.get_weekly_plan(plan_id) is None
    assert storage.list_daily_plans_for_weekly_plan(plan_id) == []
    assert storage.list_teacher_weekly_plans(teacher.id) == []
    if delete in ("grade", "teacher"):
        assert storage.get_teacher_grades(teacher.id) == []
    if delete != "week":
        assert storage.get_teacher_subjects_for_grade(teacher.id, grade.id) == []


def test_deleting_missing_rows_reports_false(storage: Storage) -> None:
    assert storage.delete_user(1) is False
    assert storage.delete_grade(1) is False
    assert storage.delete_subject(1) is False
    assert storage.delete_planning_week(1) is False
    assert storage.delete_weekly_plan(1) is False
    assert storage.delete_daily_plan(1) is False


def test_delete_weekly_plan_removes_its_days(storage: Storage) -> None:
    plan = _planning_world(storage)["plan"]

    assert storage.delete_weekly_plan(plan.id)
    assert storage.list_daily_plans_for_weekly_plan(plan.id) == []
