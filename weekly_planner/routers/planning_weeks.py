"""Planning week endpoints."""
from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, status

from ..db.models import PlanningWeek, User
from ..dependencies import get_current_user, get_storage, require_admin
from ..errors import NotFoundError
from ..schemas import MessageResponse, PlanningWeekCreate, PlanningWeekRead, PlanningWeekUpdate
from ..services.storage import PlanningWeekData, Storage

LOGGER = logging.getLogger(__name__)

router = APIRouter(prefix="/api/planning-weeks", tags=["planning-weeks"])


def _get_or_404(storage: Storage, week_id: int) -> PlanningWeek:
    week = storage.get_planning_week(week_id)
    if week is None:
        raise NotFoundError.for_entity("Planning week")
    return week


@router.get("", response_model=List[PlanningWeekRead])
def list_weeks(
    storage: Storage = Depends(get_storage), _: User = Depends(get_current_user)
) -> list[PlanningWeek]:
    return storage.list_planning_weeks()


@router.get("/active", response_model=List[PlanningWeekRead])
def list_active_weeks(
    storage: Storage = Depends(get_storage), _: User = Depends(get_current_user)
) -> list[PlanningWeek]:
    return storage.list_active_planning_weeks()


@router.get("/{week_id}", response_model=PlanningWeekRead)
def get_week(
    week_id: int,
    storage: Storage = Depends(get_storage),
    _: User = Depends(get_current_user),
) -> PlanningWeek:
    return _get_or_404(storage, week_id)


@router.post("", response_model=PlanningWeekRead, status_code=status.HTTP_201_CREATED)
def create_week(
    payload: PlanningWeekCreate,
    storage: Storage = Depends(get_storage),
    _: User = Depends(require_admin),
) -> PlanningWeek:
    return storage.create_planning_week(PlanningWeekData(**payload.model_dump()))


@router.put("/{week_id}", response_model=PlanningWeekRead)
def update_week(
    week_id: int,
    payload: PlanningWeekUpdate,
    storage: Storage = Depends(get_storage),
    _: User = Depends(require_admin),
) -> PlanningWeek:
    _get_or_404(storage, week_id)
    week = storage.update_planning_week(week_id, payload.model_dump(exclude_none=True))
    if week is None:
        raise NotFoundError.for_entity("Planning week")
    return week


@router.put("/{week_id}/toggle", response_model=PlanningWeekRead)
def toggle_week(
    week_id: int,
    storage: Storage = Depends(get_storage),
    admin: User = Depends(require_admin),
) -> PlanningWeek:
    week = storage.toggle_planning_week_active(week_id)
    if week is None:
        raise NotFoundError.for_entity("Planning week")
    LOGGER.info(
        "Admin %s set planning week %s active=%s", admin.username, week_id, week.is_active
    )
    return week


@router.delete("/{week_id}", response_model=MessageResponse)
def delete_week(
    week_id: int,
    storage: Storage = Depends(get_storage),
    _: User = Depends(require_admin),
) -> MessageResponse:
    if not storage.delete_planning_week(week_id):
        raise NotFoundError.for_entity("Planning week")
    return MessageResponse(message="Planning week deleted successfully")
