"""Teacher-to-grade and teacher-to-subject assignment endpoints."""
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from ..db.models import Grade, Subject, TeacherGrade, TeacherSubject, User
from ..dependencies import get_current_user, get_storage, require_admin
from ..errors import NotFoundError
from ..schemas import (
    GradeRead,
    MessageResponse,
    SubjectRead,
    TeacherGradeCreate,
    TeacherGradeRead,
    TeacherSubjectCreate,
    TeacherSubjectRead,
)
from ..services.access import ensure_owner_or_admin
from ..services.storage import Storage

router = APIRouter(prefix="/api", tags=["assignments"])


def _require(storage: Storage, teacher_id: int, grade_id: int, subject_id: int | None = None) -> None:
    if storage.get_user(teacher_id) is None:
        raise NotFoundError.for_entity("Teacher")
    if storage.get_grade(grade_id) is None:
        raise NotFoundError.for_entity("Grade")
    if subject_id is not None and storage.get_subject(subject_id) is None:
        raise NotFoundError.for_entity("Subject")


@router.post(
    "/teacher-grades", response_model=TeacherGradeRead, status_code=status.HTTP_201_CREATED
)
def assign_grade(
    payload: TeacherGradeCreate,
    storage: Storage = Depends(get_storage),
    _: User = Depends(require_admin),
) -> TeacherGrade:
    _require(storage, payload.teacher_id, payload.grade_id)
    return storage.assign_teacher_to_grade(payload.teacher_id, payload.grade_id)


@router.delete("/teacher-grades/{teacher_id}/{grade_id}", response_model=MessageResponse)
def remove_grade(
    teacher_id: int,
    grade_id: int,
    storage: Storage = Depends(get_storage),
    _: User = Depends(require_admin),
) -> MessageResponse:
    if not storage.remove_teacher_from_grade(teacher_id, grade_id):
        raise NotFoundError("Assignment not found")
    return MessageResponse(message="Teacher removed from grade successfully")


@router.get("/teacher-grades/{teacher_id}", response_model=List[GradeRead])
def teacher_grades(
    teacher_id: int,
    storage: Storage = Depends(get_storage),
    user: User = Depends(get_current_user),
) -> list[Grade]:
    ensure_owner_or_admin(user, teacher_id)
    return storage.get_teacher_grades(teacher_id)


@router.post(
    "/teacher-subjects", response_model=TeacherSubjectRead, status_code=status.HTTP_201_CREATED
)
def assign_subject(
    payload: TeacherSubjectCreate,
    storage: Storage = Depends(get_storage),
    _: User = Depends(require_admin),
) -> TeacherSubject:
    _require(storage, payload.teacher_id, payload.grade_id, payload.subject_id)
    return storage.assign_teacher_to_subject(
        payload.teacher_id, payload.grade_id, payload.subject_id
    )


@router.delete(
    "/teacher-subjects/{teacher_id}/{grade_id}/{subject_id}", response_model=MessageResponse
)
def remove_subject(
    teacher_id: int,
    grade_id: int,
    subject_id: int,
    storage: Storage = Depends(get_storage),
    _: User = Depends(require_admin),
) -> MessageResponse:
    if not storage.remove_teacher_from_subject(teacher_id, grade_id, subject_id):
        raise NotFoundError("Assignment not found")
    return MessageResponse(message="Teacher removed from subject successfully")


@router.get("/teacher-subjects/{teacher_id}/{grade_id}", response_model=List[SubjectRead])
def teacher_subjects(
    teacher_id: int,
    grade_id: int,
    storage: Storage = Depends(get_storage),
    user: User = Depends(get_current_user),
) -> list[Subject]:
    ensure_owner_or_admin(user, teacher_id)
    return storage.get_teacher_subjects_for_grade(teacher_id, grade_id)
