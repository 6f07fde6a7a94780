"""Session login/logout and account registration."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, status

from ..db.models import User
from ..dependencies import get_current_user, get_storage, require_admin
from ..errors import AuthenticationError
from ..schemas import LoginRequest, MessageResponse, UserCreate, UserRead
from ..services.storage import Storage, UserData

LOGGER = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/login", response_model=UserRead)
def login(
    payload: LoginRequest,
    request: Request,
    storage: Storage = Depends(get_storage),
) -> User:
    user = storage.verify_user_credentials(payload.username, payload.password)
    if user is None:
        LOGGER.info("Failed login for %s", payload.username)
        raise AuthenticationError("Invalid username or password")
    request.session["user_id"] = user.id
    LOGGER.info("User %s logged in", user.username)
    return user


@router.post("/logout", response_model=MessageResponse)
def logout(request: Request, user: User = Depends(get_current_user)) -> MessageResponse:
    request.session.clear()
    LOGGER.info("User %s logged out", user.username)
    return MessageResponse(message="Logged out successfully")


@router.get("/user", response_model=UserRead)
def current_user(user: User = Depends(get_current_user)) -> User:
    return user


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register(
    payload: UserCreate,
    storage: Storage = Depends(get_storage),
    admin: User = Depends(require_admin),
) -> User:
    user = storage.create_user(
        UserData(
            username=payload.username,
            password=payload.password,
            full_name=payload.full_name,
            email=payload.email,
            is_admin=payload.is_admin,
        )
    )
    LOGGER.info("Admin %s created user %s", admin.username, user.username)
    return user
