"""Daily plan endpoints; ownership is checked through the parent weekly plan."""
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from ..db.models import DailyPlan, User
from ..dependencies import get_current_user, get_storage
from ..schemas import DailyPlanCreate, DailyPlanRead, DailyPlanUpdate, MessageResponse
from ..services import planning
from ..services.access import load_daily_plan, load_weekly_plan
from ..services.storage import Storage

router = APIRouter(prefix="/api/daily-plans", tags=["daily-plans"])


@router.post("", response_model=DailyPlanRead, status_code=status.HTTP_201_CREATED)
def create_daily_plan(
    payload: DailyPlanCreate,
    storage: Storage = Depends(get_storage),
    user: User = Depends(get_current_user),
) -> DailyPlan:
    values = payload.model_dump(exclude={"weekly_plan_id", "day_of_week"})
    return planning.create_daily_plan(
        storage, user, payload.weekly_plan_id, payload.day_of_week, values
    )


@router.get("/weekly/{weekly_plan_id}", response_model=List[DailyPlanRead])
def list_daily_plans(
    weekly_plan_id: int,
    storage: Storage = Depends(get_storage),
    user: User = Depends(get_current_user),
) -> list[DailyPlan]:
    load_weekly_plan(storage, user, weekly_plan_id)
    return storage.list_daily_plans_for_weekly_plan(weekly_plan_id)


@router.get("/{plan_id}", response_model=DailyPlanRead)
def get_daily_plan(
    plan_id: int,
    storage: Storage = Depends(get_storage),
    user: User = Depends(get_current_user),
) -> DailyPlan:
    daily, _ = load_daily_plan(storage, user, plan_id)
    return daily


@router.put("/{plan_id}", response_model=DailyPlanRead)
def update_daily_plan(
    plan_id: int,
    payload: DailyPlanUpdate,
    storage: Storage = Depends(get_storage),
    user: User = Depends(get_current_user),
) -> DailyPlan:
    return planning.update_daily_plan(
        storage, user, plan_id, payload.model_dump(exclude_unset=True)
    )


@router.delete("/{plan_id}", response_model=MessageResponse)
def delete_daily_plan(
    plan_id: int,
    storage: Storage = Depends(get_storage),
    user: User = Depends(get_current_user),
) -> MessageResponse:
    daily, _ = load_daily_plan(storage, user, plan_id)
    storage.delete_daily_plan(daily.id)
    return MessageResponse(message="Daily plan deleted successfully")
