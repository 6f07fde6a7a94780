"""Weekly plan endpoints, including the complete view and exports."""
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status
from fastapi.responses import StreamingResponse

from ..db.models import User, WeeklyPlan
from ..dependencies import get_current_user, get_storage, require_admin
from ..errors import NotFoundError
from ..schemas import (
    MessageResponse,
    WeeklyPlanCompleteRead,
    WeeklyPlanCreate,
    WeeklyPlanNotesUpdate,
    WeeklyPlanRead,
)
from ..services import exports, planning
from ..services.access import ensure_owner_or_admin, load_weekly_plan
from ..services.storage import Storage, WeeklyPlanComplete

router = APIRouter(prefix="/api/weekly-plans", tags=["weekly-plans"])


def _load_complete(storage: Storage, user: User, plan_id: int) -> WeeklyPlanComplete:
    complete = storage.get_weekly_plan_complete(plan_id)
    if complete is None:
        raise NotFoundError.for_entity("Weekly plan")
    ensure_owner_or_admin(user, complete.plan.teacher_id)
    return complete


@router.post("", response_model=WeeklyPlanRead, status_code=status.HTTP_201_CREATED)
def create_weekly_plan(
    payload: WeeklyPlanCreate,
    storage: Storage = Depends(get_storage),
    user: User = Depends(get_current_user),
) -> WeeklyPlan:
    return planning.create_weekly_plan(
        storage,
        user,
        grade_id=payload.grade_id,
        subject_id=payload.subject_id,
        week_id=payload.week_id,
        notes=payload.notes,
    )


@router.get("/teacher/{teacher_id}", response_model=List[WeeklyPlanRead])
def teacher_plans(
    teacher_id: int,
    storage: Storage = Depends(get_storage),
    user: User = Depends(get_current_user),
) -> list[WeeklyPlan]:
    ensure_owner_or_admin(user, teacher_id)
    return storage.list_teacher_weekly_plans(teacher_id)


@router.get("/grade/{grade_id}/week/{week_id}", response_model=List[WeeklyPlanRead])
def grade_week_plans(
    grade_id: int,
    week_id: int,
    storage: Storage = Depends(get_storage),
    _: User = Depends(require_admin),
) -> list[WeeklyPlan]:
    return storage.list_grade_week_plans(grade_id, week_id)


@router.get(
    "/grade/{grade_id}/week/{week_id}/complete", response_model=List[WeeklyPlanCompleteRead]
)
def grade_week_complete_plans(
    grade_id: int,
    week_id: int,
    storage: Storage = Depends(get_storage),
    _: User = Depends(require_admin),
) -> list[WeeklyPlanCompleteRead]:
    completes = (
        storage.get_weekly_plan_complete(plan.id)
        for plan in storage.list_grade_week_plans(grade_id, week_id)
    )
    return [WeeklyPlanCompleteRead.from_complete(c) for c in completes if c is not None]


@router.get("/{plan_id}", response_model=WeeklyPlanRead)
def get_weekly_plan(
    plan_id: int,
    storage: Storage = Depends(get_storage),
    user: User = Depends(get_current_user),
) -> WeeklyPlan:
    return load_weekly_plan(storage, user, plan_id)


@router.get("/{plan_id}/complete", response_model=WeeklyPlanCompleteRead)
def get_complete_plan(
    plan_id: int,
    storage: Storage = Depends(get_storage),
    user: User = Depends(get_current_user),
) -> WeeklyPlanCompleteRead:
    return WeeklyPlanCompleteRead.from_complete(_load_complete(storage, user, plan_id))


@router.put("/{plan_id}/notes", response_model=WeeklyPlanRead)
def update_notes(
    plan_id: int,
    payload: WeeklyPlanNotesUpdate,
    storage: Storage = Depends(get_storage),
    user: User = Depends(get_current_user),
) -> WeeklyPlan:
    return planning.update_weekly_plan_notes(storage, user, plan_id, payload.notes)


@router.delete("/{plan_id}", response_model=MessageResponse)
def delete_weekly_plan(
    plan_id: int,
    storage: Storage = Depends(get_storage),
    user: User = Depends(get_current_user),
) -> MessageResponse:
    load_weekly_plan(storage, user, plan_id)
    storage.delete_weekly_plan(plan_id)
    return MessageResponse(message="Weekly plan deleted successfully")


@router.get("/{plan_id}/export/pdf")
@router.get("/{plan_id}/export-pdf", include_in_schema=False)
def export_pdf(
    plan_id: int,
    storage: Storage = Depends(get_storage),
    user: User = Depends(get_current_user),
) -> StreamingResponse:
    complete = _load_complete(storage, user, plan_id)
    filename = exports.export_filename(complete, "pdf")
    return StreamingResponse(
        iter([exports.build_plan_pdf(complete)]),
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.get("/{plan_id}/export/csv")
@router.get("/{plan_id}/export-excel", include_in_schema=False)
def export_csv(
    plan_id: int,
    storage: Storage = Depends(get_storage),
    user: User = Depends(get_current_user),
) -> StreamingResponse:
    complete = _load_complete(storage, user, plan_id)
    filename = exports.export_filename(complete, "csv")
    return StreamingResponse(
        iter([exports.build_plan_csv(complete).encode("utf-8")]),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
