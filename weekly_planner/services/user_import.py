"""Bulk creation of user accounts from an uploaded CSV file."""
from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pydantic import ValidationError

from weekly_planner.errors import InvalidOperationError, PlannerError, validation_message
from weekly_planner.services.storage import Storage, UserData

if TYPE_CHECKING:
    from weekly_planner.schemas import UserCreate

LOGGER = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("username", "password", "fullName")
TRUE_VALUES = {"1", "true", "yes", "y", "admin"}


@dataclass(slots=True)
class ImportResult:
    created: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


def _parse_row(row: dict[str, str]) -> UserCreate:
    """Validate a row with the same rules as ``POST /api/register``."""
    from weekly_planner.schemas import UserCreate  # noqa: F811

    return UserCreate.model_validate(
        {
            "username": row.get("username", ""),
            "password": row.get("password", ""),
            "fullName": row.get("fullName", ""),
            "email": row.get("email") or None,
            "isAdmin": row.get("isAdmin", "").lower() in TRUE_VALUES,
        }
    )


def import_users(storage: Storage, content: str | bytes) -> ImportResult:
    """Create one user per data row.

    Columns: ``username,password,fullName,email[,isAdmin]``. Existing
    usernames are skipped; invalid rows are reported with their line number
    and do not stop the import.
    """
    if isinstance(content, bytes):
        content = content.decode("utf-8-sig")

    reader = csv.DictReader(io.StringIO(content))
    if reader.fieldnames is None:
        raise InvalidOperationError("The uploaded file is empty")
    columns = {name.strip() for name in reader.fieldnames if name}
    missing = [column for column in REQUIRED_COLUMNS if column not in columns]
    if missing:
        raise InvalidOperationError(f"Missing required columns: {', '.join(missing)}")

    result = ImportResult()
    # Line 1 is the header row.
    for line_number, raw in enumerate(reader, start=2):
        row = {key.strip(): (value or "").strip() for key, value in raw.items() if key is not None}
        try:
            payload = _parse_row(row)
        except ValidationError as exc:
            result.errors.append(f"Row {line_number}: {validation_message(exc.errors())}")
            continue
        username = payload.username
        if storage.get_user_by_username(username) is not None:
            result.skipped.append(username)
            continue
        try:
            storage.create_user(
                UserData(
                    username=username,
                    password=payload.password,
                    full_name=payload.full_name,
                    email=payload.email,
                    is_admin=payload.is_admin,
                )
            )
        except PlannerError as exc:
            result.errors.append(f"Row {line_number}: {exc}")
            continue
        result.created.append(username)

    LOGGER.info(
        "User import finished: %d created, %d skipped, %d errors",
        len(result.created),
        len(result.skipped),
        len(result.errors),
    )
    return result


__all__ = ["ImportResult", "import_users"]
