"""Convenient re-exports for the planner service layer."""
from __future__ import annotations

from .exports import build_plan_csv, build_plan_pdf, export_filename
from .memory_storage import MemoryStorage
from .storage import (
    PlanningWeekData,
    SqlStorage,
    Storage,
    UserData,
    WeeklyPlanComplete,
)
from .subject_fields import SubjectType
from .user_import import ImportResult, import_users

__all__ = [
    "ImportResult",
    "MemoryStorage",
    "PlanningWeekData",
    "SqlStorage",
    "Storage",
    "SubjectType",
    "UserData",
    "WeeklyPlanComplete",
    "build_plan_csv",
    "build_plan_pdf",
    "export_filename",
    "import_users",
]
