"""Weekly plan model."""
from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from weekly_planner.db import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WeeklyPlan(Base):
    """A teacher's plan for one subject, in one grade, for one planning week."""

    __tablename__ = "weekly_plans"
    __table_args__ = (
        UniqueConstraint(
            "teacher_id",
            "subject_id",
            "grade_id",
            "week_id",
            name="uq_weekly_plans_teacher_subject_grade_week",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    teacher_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    grade_id: Mapped[int] = mapped_column(ForeignKey("grades.id"), nullable=False, index=True)
    subject_id: Mapped[int] = mapped_column(ForeignKey("subjects.id"), nullable=False, index=True)
    week_id: Mapped[int] = mapped_column(
        ForeignKey("planning_weeks.id"), nullable=False, index=True
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)

    def __repr__(self) -> str:  # pragma: no cover
        return f"WeeklyPlan(id={self.id!r}, teacher_id={self.teacher_id!r})"
