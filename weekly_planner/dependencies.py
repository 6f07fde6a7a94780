"""FastAPI dependencies for shared services."""
from __future__ import annotations

from typing import Iterator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from .db import get_session
from .db.models import User
from .errors import AuthenticationError
from .services.access import ensure_admin
from .services.storage import SqlStorage, Storage


def get_db() -> Iterator[Session]:
    """One transaction per request: commit on success, roll back on error.

    Declared with ``scope="function"`` so the commit finishes before the
    response is sent and a failed commit reaches the client.
    """
    with get_session() as session:
        yield session


def get_storage(db: Session = Depends(get_db, scope="function")) -> Storage:
    return SqlStorage(db)


def get_current_user(request: Request, storage: Storage = Depends(get_storage)) -> User:
    user_id = request.session.get("user_id")
    if user_id is None:
        raise AuthenticationError()
    user = storage.get_user(user_id)
    if user is None:
        # The account was removed after the session was issued.
        request.session.clear()
        raise AuthenticationError()
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    ensure_admin(user)
    return user


__all__ = ["get_current_user", "get_db", "get_storage", "require_admin"]
