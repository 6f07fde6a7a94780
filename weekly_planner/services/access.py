"""Role and ownership rules shared by the API routes."""
from __future__ import annotations

from weekly_planner.db.models import DailyPlan, User, WeeklyPlan
from weekly_planner.errors import (
    InvalidOperationError,
    NotFoundError,
    PermissionDeniedError,
)
from weekly_planner.services.storage import Storage


def ensure_admin(user: User) -> None:
    if not user.is_admin:
        raise PermissionDeniedError()


def ensure_owner_or_admin(user: User, owner_id: int) -> None:
    """Teachers may only touch their own records; admins bypass the check."""
    if user.id != owner_id and not user.is_admin:
        raise PermissionDeniedError()


def ensure_not_self(user: User, target_id: int, message: str) -> None:
    if user.id == target_id:
        raise InvalidOperationError(message)


def load_weekly_plan(storage: Storage, user: User, plan_id: int) -> WeeklyPlan:
    plan = storage.get_weekly_plan(plan_id)
    if plan is None:
        raise NotFoundError.for_entity("Weekly plan")
    ensure_owner_or_admin(user, plan.teacher_id)
    return plan


def load_daily_plan(storage: Storage, user: User, plan_id: int) -> tuple[DailyPlan, WeeklyPlan]:
    """Return a daily plan with its parent, checking ownership through the parent."""
    daily = storage.get_daily_plan(plan_id)
    if daily is None:
        raise NotFoundError.for_entity("Daily plan")
    return daily, load_weekly_plan(storage, user, daily.weekly_plan_id)


__all__ = [
    "ensure_admin",
    "ensure_not_self",
    "ensure_owner_or_admin",
    "load_daily_plan",
    "load_weekly_plan",
]
