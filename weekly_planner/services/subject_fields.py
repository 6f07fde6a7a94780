"""Subject-type dispatch for daily plan content.

A daily plan row stores the union of every subject type's fields. The domain
layer works with one of three content variants instead; this module is the
only place that knows which fields belong to which subject type.
"""
from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import date
from enum import Enum
from typing import Any, Mapping, Union


class SubjectType(str, Enum):
    STANDARD = "standard"
    ART = "art"
    PE = "pe"


@dataclass(frozen=True, slots=True)
class StandardContent:
    topic: str | None = None
    books_and_pages: str | None = None
    homework: str | None = None
    homework_due_date: date | None = None
    assignments: str | None = None
    notes: str | None = None


@dataclass(frozen=True, slots=True)
class ArtContent:
    topic: str | None = None
    required_items: str | None = None
    notes: str | None = None


@dataclass(frozen=True, slots=True)
class PeContent:
    skill: str | None = None
    activity: str | None = None
    notes: str | None = None


DailyPlanContent = Union[StandardContent, ArtContent, PeContent]

_CONTENT_TYPES: dict[SubjectType, type] = {
    SubjectType.STANDARD: StandardContent,
    SubjectType.ART: ArtContent,
    SubjectType.PE: PeContent,
}

CONTENT_FIELDS: tuple[str, ...] = (
    "topic",
    "books_and_pages",
    "homework",
    "homework_due_date",
    "assignments",
    "notes",
    "required_items",
    "skill",
    "activity",
)

FIELD_LABELS: dict[str, str] = {
    "topic": "Lessons/Topics",
    "books_and_pages": "Books and Pages",
    "homework": "Homework",
    "homework_due_date": "Homework Due Date",
    "assignments": "Assessments",
    "notes": "Notes",
    "required_items": "Required Items",
    "skill": "Skill",
    "activity": "Activity",
}


def coerce_subject_type(value: SubjectType | str) -> SubjectType:
    """Return the enum member for ``value``; unknown types raise ``ValueError``."""
    if isinstance(value, SubjectType):
        return value
    return SubjectType(value)


def fields_for(subject_type: SubjectType | str) -> tuple[str, ...]:
    content_type = _CONTENT_TYPES[coerce_subject_type(subject_type)]
    return tuple(item.name for item in fields(content_type))


def columns_for(subject_type: SubjectType | str) -> list[tuple[str, str]]:
    """Return ``(field, label)`` pairs in display order for ``subject_type``."""
    return [(name, FIELD_LABELS[name]) for name in fields_for(subject_type)]


def build_content(subject_type: SubjectType | str, values: Mapping[str, Any]) -> DailyPlanContent:
    """Build the content variant for ``subject_type``, ignoring foreign fields."""
    content_type = _CONTENT_TYPES[coerce_subject_type(subject_type)]
    return content_type(**{name: values.get(name) for name in fields_for(subject_type)})


def content_from_row(subject_type: SubjectType | str, row: Any) -> DailyPlanContent:
    values = {name: getattr(row, name, None) for name in fields_for(subject_type)}
    return build_content(subject_type, values)


def flatten_content(content: DailyPlanContent) -> dict[str, Any]:
    """Expand a content variant into the full storage column set."""
    flat: dict[str, Any] = {name: None for name in CONTENT_FIELDS}
    for item in fields(content):
        flat[item.name] = getattr(content, item.name)
    return flat


def project_fields(subject_type: SubjectType | str, values: Mapping[str, Any]) -> dict[str, Any]:
    """Keep the applicable keys present in ``values``; null out the others.

    Used for partial updates, where absent keys must stay untouched.
    """
    applicable = set(fields_for(subject_type))
    projected: dict[str, Any] = {}
    for name, value in values.items():
        if name not in CONTENT_FIELDS:
            continue
        projected[name] = value if name in applicable else None
    return projected


__all__ = [
    "ArtContent",
    "CONTENT_FIELDS",
    "DailyPlanContent",
    "FIELD_LABELS",
    "PeContent",
    "StandardContent",
    "SubjectType",
    "build_content",
    "coerce_subject_type",
    "columns_for",
    "content_from_row",
    "fields_for",
    "flatten_content",
    "project_fields",
]
