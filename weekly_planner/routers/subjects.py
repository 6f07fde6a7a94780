"""Subject management endpoints."""
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from ..db.models import Subject, User
from ..dependencies import get_current_user, get_storage, require_admin
from ..errors import NotFoundError
from ..schemas import MessageResponse, SubjectCreate, SubjectRead
from ..services.storage import Storage

router = APIRouter(prefix="/api/subjects", tags=["subjects"])


@router.get("", response_model=List[SubjectRead])
def list_subjects(
    storage: Storage = Depends(get_storage), _: User = Depends(get_current_user)
) -> list[Subject]:
    return storage.list_subjects()


@router.post("", response_model=SubjectRead, status_code=status.HTTP_201_CREATED)
def create_subject(
    payload: SubjectCreate,
    storage: Storage = Depends(get_storage),
    _: User = Depends(require_admin),
) -> Subject:
    return storage.create_subject(payload.name, payload.type.value)


@router.put("/{subject_id}", response_model=SubjectRead)
def update_subject(
    subject_id: int,
    payload: SubjectCreate,
    storage: Storage = Depends(get_storage),
    _: User = Depends(require_admin),
) -> Subject:
    subject = storage.update_subject(subject_id, payload.name, payload.type.value)
    if subject is None:
        raise NotFoundError.for_entity("Subject")
    return subject


@router.delete("/{subject_id}", response_model=MessageResponse)
def delete_subject(
    subject_id: int,
    storage: Storage = Depends(get_storage),
    _: User = Depends(require_admin),
) -> MessageResponse:
    if not storage.delete_subject(subject_id):
        raise NotFoundError.for_entity("Subject")
    return MessageResponse(message="Subject deleted successfully")
