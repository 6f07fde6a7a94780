"""Domain errors raised by the planning services."""
from __future__ import annotations


class PlannerError(Exception):
    """Base class for failures reported to API clients as ``{"message": ...}``."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class AuthenticationError(PlannerError):
    status_code = 401
    default_message = "Unauthorized"


class PermissionDeniedError(PlannerError):
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(PlannerError):
    status_code = 404
    default_message = "Not found"

    @classmethod
    def for_entity(cls, entity: str) -> "NotFoundError":
        return cls(f"{entity} not found")


class InvalidOperationError(PlannerError):
    """Request was well formed but violates a domain rule."""

    status_code = 400
    default_message = "Invalid operation"


class ConflictError(InvalidOperationError):
    """A uniqueness rule would be violated."""

    default_message = "Record already exists"


def validation_message(errors: list[dict]) -> str:
    """First pydantic error message, without pydantic's "Value error, " prefix."""
    if not errors:
        return "Invalid request"
    message = str(errors[0].get("msg", "Invalid request"))
    return message.removeprefix("Value error, ")


__all__ = [
    "AuthenticationError",
    "ConflictError",
    "InvalidOperationError",
    "NotFoundError",
    "PermissionDeniedError",
    "PlannerError",
    "validation_message",
]
