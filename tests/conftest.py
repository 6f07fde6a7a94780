from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Callable, Iterator

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Keep the import-time engine away from the on-disk development database.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SEED_DEMO_DATA", "0")

from fastapi.testclient import TestClient
from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

from weekly_planner.app import app
from weekly_planner.db import create_db_engine, create_session_factory, get_session, init_db
from weekly_planner.dependencies import get_db
from weekly_planner.services.memory_storage import MemoryStorage
from weekly_planner.services.storage import SqlStorage, Storage, UserData


@pytest.fixture()
def engine(tmp_path) -> Iterator[Engine]:
    engine = create_db_engine(f"sqlite:///{tmp_path / 'planner.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine) -> sessionmaker[Session]:
    return create_session_factory(engine)


@pytest.fixture()
def session(session_factory) -> Iterator[Session]:
    with get_session(session_factory) as session:
        yield session


@pytest.fixture(params=["sql", "memory"])
def storage(request, session) -> Storage:
    if request.param == "memory":
        return MemoryStorage()
    return SqlStorage(session)


@pytest.fixture()
def accounts(session_factory) -> dict[str, int]:
    """Create one admin and two teachers; return their ids by username."""
    with get_session(session_factory) as session:
        storage = SqlStorage(session)
        users = [
            storage.create_user(UserData("admin", "admin123", "Ada Admin", is_admin=True)),
            storage.create_user(UserData("alice", "teacher123", "Alice Teacher")),
            storage.create_user(UserData("bob", "teacher123", "Bob Teacher")),
        ]
        return {user.username: user.id for user in users}


@pytest.fixture()
def make_client(session_factory) -> Iterator[Callable[..., TestClient]]:
    """Return a factory of clients sharing one database, optionally logged in."""

    def override_get_db() -> Iterator[Session]:
        with get_session(session_factory) as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    def factory(username: str | None = None, password: str = "teacher123") -> TestClient:
        client = TestClient(app)
        if username is not None:
            response = client.post(
                "/api/login", json={"username": username, "password": password}
            )
            assert response.status_code == 200, response.text
        return client

    yield factory
    app.dependency_overrides.clear()
