"""Grade management endpoints."""
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from ..db.models import Grade, User
from ..dependencies import get_current_user, get_storage, require_admin
from ..errors import NotFoundError
from ..schemas import GradeCreate, GradeRead, MessageResponse, UserRead
from ..services.storage import Storage

router = APIRouter(prefix="/api", tags=["grades"])


@router.get("/grades", response_model=List[GradeRead])
def list_grades(
    storage: Storage = Depends(get_storage), _: User = Depends(get_current_user)
) -> list[Grade]:
    return storage.list_grades()


@router.post("/grades", response_model=GradeRead, status_code=status.HTTP_201_CREATED)
def create_grade(
    payload: GradeCreate,
    storage: Storage = Depends(get_storage),
    _: User = Depends(require_admin),
) -> Grade:
    return storage.create_grade(payload.name)


@router.put("/grades/{grade_id}", response_model=GradeRead)
def update_grade(
    grade_id: int,
    payload: GradeCreate,
    storage: Storage = Depends(get_storage),
    _: User = Depends(require_admin),
) -> Grade:
    grade = storage.update_grade(grade_id, payload.name)
    if grade is None:
        raise NotFoundError.for_entity("Grade")
    return grade


@router.delete("/grades/{grade_id}", response_model=MessageResponse)
def delete_grade(
    grade_id: int,
    storage: Storage = Depends(get_storage),
    _: User = Depends(require_admin),
) -> MessageResponse:
    if not storage.delete_grade(grade_id):
        raise NotFoundError.for_entity("Grade")
    return MessageResponse(message="Grade deleted successfully")


@router.get("/grade-teachers/{grade_id}", response_model=List[UserRead])
def grade_teachers(
    grade_id: int,
    storage: Storage = Depends(get_storage),
    _: User = Depends(require_admin),
) -> list[User]:
    return storage.get_grade_teachers(grade_id)
