"""Authoring workflow for weekly plans and their daily breakdown."""
from __future__ import annotations

import logging
from typing import Any, Mapping

from weekly_planner.db.models import DailyPlan, Subject, User, WeeklyPlan
from weekly_planner.errors import (
    ConflictError,
    InvalidOperationError,
    NotFoundError,
    PermissionDeniedError,
)
from weekly_planner.services.access import load_daily_plan, load_weekly_plan
from weekly_planner.services.storage import (
    DUPLICATE_DAILY_PLAN,
    DUPLICATE_WEEKLY_PLAN,
    Storage,
)
from weekly_planner.services.subject_fields import (
    build_content,
    flatten_content,
    project_fields,
)

LOGGER = logging.getLogger(__name__)

WEEK_NOT_ACTIVE = "The selected planning week is not active"
SUBJECT_NOT_ASSIGNED = "You are not assigned to teach this subject in this grade"


def create_weekly_plan(
    storage: Storage,
    teacher: User,
    grade_id: int,
    subject_id: int,
    week_id: int,
    notes: str | None = None,
) -> WeeklyPlan:
    """Run the eligibility and uniqueness checks, then insert the plan.

    The plan always belongs to ``teacher``; checks run in order (active week,
    subject assignment, existing plan) and the first failure is raised.
    """
    week = storage.get_planning_week(week_id)
    if week is None or not week.is_active:
        LOGGER.info("Rejected plan for teacher %s: week %s not active", teacher.id, week_id)
        raise InvalidOperationError(WEEK_NOT_ACTIVE)

    if not storage.has_teacher_subject(teacher.id, grade_id, subject_id):
        LOGGER.info(
            "Rejected plan for teacher %s: not assigned to subject %s in grade %s",
            teacher.id,
            subject_id,
            grade_id,
        )
        raise PermissionDeniedError(SUBJECT_NOT_ASSIGNED)

    for existing in storage.list_grade_week_plans(grade_id, week_id):
        if existing.teacher_id == teacher.id and existing.subject_id == subject_id:
            raise ConflictError(DUPLICATE_WEEKLY_PLAN)

    plan = storage.create_weekly_plan(teacher.id, grade_id, subject_id, week_id, notes)
    LOGGER.info(
        "Created weekly plan %s (teacher=%s grade=%s subject=%s week=%s)",
        plan.id,
        teacher.id,
        grade_id,
        subject_id,
        week_id,
    )
    return plan


def update_weekly_plan_notes(
    storage: Storage, user: User, plan_id: int, notes: str | None
) -> WeeklyPlan:
    load_weekly_plan(storage, user, plan_id)
    plan = storage.update_weekly_plan_notes(plan_id, notes or "")
    if plan is None:
        raise NotFoundError.for_entity("Weekly plan")
    return plan


def _subject_for(storage: Storage, plan: WeeklyPlan) -> Subject:
    subject = storage.get_subject(plan.subject_id)
    if subject is None:
        raise NotFoundError.for_entity("Subject")
    return subject


def _ensure_day_free(
    storage: Storage, weekly_plan_id: int, day_of_week: int, exclude_id: int | None = None
) -> None:
    for sibling in storage.list_daily_plans_for_weekly_plan(weekly_plan_id):
        if sibling.day_of_week == day_of_week and sibling.id != exclude_id:
            raise ConflictError(DUPLICATE_DAILY_PLAN)


def create_daily_plan(
    storage: Storage,
    user: User,
    weekly_plan_id: int,
    day_of_week: int,
    values: Mapping[str, Any],
) -> DailyPlan:
    """Add one weekday to a plan, keeping only fields that suit the subject type."""
    plan = load_weekly_plan(storage, user, weekly_plan_id)
    subject = _subject_for(storage, plan)
    _ensure_day_free(storage, plan.id, day_of_week)
    content = build_content(subject.type, values)
    return storage.create_daily_plan(plan.id, day_of_week, flatten_content(content))


def update_daily_plan(
    storage: Storage, user: User, daily_plan_id: int, changes: Mapping[str, Any]
) -> DailyPlan:
    daily, plan = load_daily_plan(storage, user, daily_plan_id)
    updates = project_fields(_subject_for(storage, plan).type, changes)

    day_of_week = changes.get("day_of_week")
    if day_of_week is not None and day_of_week != daily.day_of_week:
        _ensure_day_free(storage, plan.id, day_of_week, exclude_id=daily.id)
        updates["day_of_week"] = day_of_week

    updated = storage.update_daily_plan(daily.id, updates)
    if updated is None:
        raise NotFoundError.for_entity("Daily plan")
    return updated


__all__ = [
    "SUBJECT_NOT_ASSIGNED",
    "WEEK_NOT_ACTIVE",
    "create_daily_plan",
    "create_weekly_plan",
    "update_daily_plan",
    "update_weekly_plan_notes",
]
