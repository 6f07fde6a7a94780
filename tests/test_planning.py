"""Planning workflow tests over both storage implementations."""
from __future__ import annotations

from datetime import date

import pytest

from weekly_planner.errors import (
    ConflictError,
    InvalidOperationError,
    NotFoundError,
    PermissionDeniedError,
)
from weekly_planner.services import planning
from weekly_planner.services.storage import PlanningWeekData, Storage, UserData


@pytest.fixture()
def world(storage: Storage) -> dict:
    admin = storage.create_user(UserData("admin", "admin123", "Admin", is_admin=True))
    alice = storage.create_user(UserData("alice", "teacher123", "Alice Teacher"))
    bob = storage.create_user(UserData("bob", "teacher123", "Bob Teacher"))
    grade = storage.create_grade("Grade 3")
    math = storage.create_subject("Mathematics", "standard")
    art = storage.create_subject("Art", "art")
    pe = storage.create_subject("PE", "pe")
    active = storage.create_planning_week(
        PlanningWeekData(16, 2024, date(2024, 4, 17), date(2024, 4, 23))
    )
    closed = storage.create_planning_week(
        PlanningWeekData(15, 2024, date(2024, 4, 10), date(2024, 4, 16), is_active=False)
    )
    storage.assign_teacher_to_grade(alice.id, grade.id)
    for subject in (math, art, pe):
        storage.assign_teacher_to_subject(alice.id, grade.id, subject.id)
    return {
        "storage": storage,
        "admin": admin,
        "alice": alice,
        "bob": bob,
        "grade": grade,
        "math": math,
        "art": art,
        "pe": pe,
        "active": active,
        "closed": closed,
    }


def _plan(world: dict, subject: str = "math", teacher: str = "alice"):
    return planning.create_weekly_plan(
        world["storage"],
        world[teacher],
        world["grade"].id,
        world[subject].id,
        world["active"].id,
    )


def test_create_weekly_plan_sets_owner_and_timestamps(world) -> None:
    plan = _plan(world)

    assert plan.teacher_id == world["alice"].id
    assert plan.created_at == plan.updated_at


def test_second_identical_plan_is_rejected(world) -> None:
    _plan(world)

    with pytest.raises(ConflictError, match="A plan for this subject in this week already exists"):
        _plan(world)
    storage = world["storage"]
    assert len(storage.list_grade_week_plans(world["grade"].id, world["active"].id)) == 1


def test_inactive_week_is_rejected(world) -> None:
    with pytest.raises(InvalidOperationError, match="not active"):
        planning.create_weekly_plan(
            world["storage"],
            world["alice"],
            world["grade"].id,
            world["math"].id,
            world["closed"].id,
        )


def test_missing_week_reads_as_inactive(world) -> None:
    with pytest.raises(InvalidOperationError, match="not active"):
        planning.create_weekly_plan(
            world["storage"], world["alice"], world["grade"].id, world["math"].id, 999
        )


def test_unassigned_teacher_is_forbidden(world) -> None:
    with pytest.raises(PermissionDeniedError, match="not assigned"):
        _plan(world, teacher="bob")


def test_week_check_runs_before_assignment_check(world) -> None:
    with pytest.raises(InvalidOperationError):
        planning.create_weekly_plan(
            world["storage"],
            world["bob"],
            world["grade"].id,
            world["math"].id,
            world["closed"].id,
        )


def test_daily_plan_keeps_only_fields_for_subject_type(world) -> None:
    storage = world["storage"]
    plan = _plan(world, "pe")
    values = {"skill": "Dribbling", "activity": "Relay", "topic": "ignored", "homework": "x"}

    daily = planning.create_daily_plan(storage, world["alice"], plan.id, 1, values)

    assert daily.skill == "Dribbling"
    assert daily.activity == "Relay"
    assert daily.topic is None
    assert daily.homework is None


def test_duplicate_day_is_rejected_and_original_unchanged(world) -> None:
    storage = world["storage"]
    plan = _plan(world)
    first = planning.create_daily_plan(storage, world["alice"], plan.id, 1, {"topic": "Fractions"})

    with pytest.raises(ConflictError, match="A plan for this day already exists"):
        planning.create_daily_plan(storage, world["alice"], plan.id, 1, {"topic": "Decimals"})

    assert storage.get_daily_plan(first.id).topic == "Fractions"
    assert len(storage.list_daily_plans_for_weekly_plan(plan.id)) == 1


def test_update_daily_plan_revalidates_day(world) -> None:
    storage = world["storage"]
    plan = _plan(world, "art")
    monday = planning.create_daily_plan(storage, world["alice"], plan.id, 1, {"topic": "Clay"})
    planning.create_daily_plan(storage, world["alice"], plan.id, 2, {"topic": "Paint"})

    with pytest.raises(ConflictError):
        planning.update_daily_plan(storage, world["alice"], monday.id, {"day_of_week": 2})

    updated = planning.update_daily_plan(
        storage,
        world["alice"],
        monday.id,
        {"day_of_week": 3, "required_items": "Apron", "skill": "ignored"},
    )
    assert updated.day_of_week == 3
    assert updated.required_items == "Apron"
    assert updated.skill is None
    assert updated.topic == "Clay"


def test_other_teacher_cannot_author_days(world) -> None:
    storage = world["storage"]
    plan = _plan(world)

    with pytest.raises(PermissionDeniedError):
        planning.create_daily_plan(storage, world["bob"], plan.id, 1, {"topic": "x"})

    daily = planning.create_daily_plan(storage, world["admin"], plan.id, 1, {"topic": "by admin"})
    assert daily.topic == "by admin"


def test_daily_plan_for_missing_weekly_plan(world) -> None:
    with pytest.raises(NotFoundError, match="Weekly plan not found"):
        planning.create_daily_plan(world["storage"], world["alice"], 404, 1, {})


def test_notes_update_by_owner_and_admin(world) -> None:
    storage = world["storage"]
    plan = _plan(world)

    assert planning.update_weekly_plan_notes(storage, world["alice"], plan.id, "Quiz").notes == "Quiz"
    assert planning.update_weekly_plan_notes(storage, world["admin"], plan.id, None).notes == ""
    with pytest.raises(PermissionDeniedError):
        planning.update_weekly_plan_notes(storage, world["bob"], plan.id, "mine now")
