"""User administration and self-service profile endpoints."""
from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, File, UploadFile

from ..db.models import User
from ..dependencies import get_current_user, get_storage, require_admin
from ..errors import InvalidOperationError, NotFoundError, PermissionDeniedError
from ..schemas import (
    MessageResponse,
    PasswordChange,
    RoleUpdate,
    UserImportResult,
    UserRead,
    UserUpdate,
)
from ..security import verify_password
from ..services.access import ensure_not_self, ensure_owner_or_admin
from ..services.storage import Storage
from ..services.user_import import import_users

LOGGER = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["users"])


@router.get("/users", response_model=List[UserRead])
def list_users(
    storage: Storage = Depends(get_storage), _: User = Depends(require_admin)
) -> list[User]:
    return storage.list_users()


@router.get("/teachers", response_model=List[UserRead])
def list_teachers(
    storage: Storage = Depends(get_storage), _: User = Depends(require_admin)
) -> list[User]:
    return storage.list_teachers()


@router.post("/users/import", response_model=UserImportResult)
async def import_users_csv(
    file: UploadFile = File(...),
    storage: Storage = Depends(get_storage),
    admin: User = Depends(require_admin),
) -> UserImportResult:
    content = await file.read()
    result = import_users(storage, content)
    LOGGER.info("Admin %s imported users from %s", admin.username, file.filename)
    return UserImportResult(created=result.created, skipped=result.skipped, errors=result.errors)


@router.delete("/users/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    storage: Storage = Depends(get_storage),
    admin: User = Depends(require_admin),
) -> MessageResponse:
    ensure_not_self(admin, user_id, "You cannot delete your own account")
    if not storage.delete_user(user_id):
        raise NotFoundError.for_entity("User")
    return MessageResponse(message="User deleted successfully")


@router.patch("/users/{user_id}/role", response_model=UserRead)
def update_role(
    user_id: int,
    payload: RoleUpdate,
    storage: Storage = Depends(get_storage),
    admin: User = Depends(require_admin),
) -> User:
    ensure_not_self(admin, user_id, "You cannot modify your own admin status")
    user = storage.update_user(user_id, {"is_admin": payload.is_admin})
    if user is None:
        raise NotFoundError.for_entity("User")
    LOGGER.info("Admin %s set is_admin=%s for user %s", admin.username, payload.is_admin, user_id)
    return user


@router.patch("/users/{user_id}", response_model=UserRead)
def update_profile(
    user_id: int,
    payload: UserUpdate,
    storage: Storage = Depends(get_storage),
    current: User = Depends(get_current_user),
) -> User:
    ensure_owner_or_admin(current, user_id)
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("full_name") is None:
        changes.pop("full_name", None)
    user = storage.update_user(user_id, changes)
    if user is None:
        raise NotFoundError.for_entity("User")
    return user


@router.patch("/users/{user_id}/password", response_model=MessageResponse)
def change_password(
    user_id: int,
    payload: PasswordChange,
    storage: Storage = Depends(get_storage),
    current: User = Depends(get_current_user),
) -> MessageResponse:
    if current.id != user_id:
        raise PermissionDeniedError("You can only change your own password")
    if not verify_password(current.password, payload.current_password):
        raise InvalidOperationError("Current password is incorrect")
    storage.update_user(user_id, {"password": payload.new_password})
    LOGGER.info("User %s changed their password", current.username)
    return MessageResponse(message="Password updated successfully")
