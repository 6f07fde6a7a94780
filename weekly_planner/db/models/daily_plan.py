"""Daily plan model."""
from __future__ import annotations

from datetime import date

from sqlalchemy import Date, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from weekly_planner.db import Base


class DailyPlan(Base):
    """One weekday of a weekly plan.

    The row carries the union of all subject-type fields; which of them are
    meaningful depends on the parent plan's subject type.
    """

    __tablename__ = "daily_plans"
    __table_args__ = (
        UniqueConstraint("weekly_plan_id", "day_of_week", name="uq_daily_plans_plan_day"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    weekly_plan_id: Mapped[int] = mapped_column(
        ForeignKey("weekly_plans.id"), nullable=False, index=True
    )
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False)  # 1=Monday .. 5=Friday
    topic: Mapped[str | None] = mapped_column(Text, nullable=True)
    books_and_pages: Mapped[str | None] = mapped_column(Text, nullable=True)
    homework: Mapped[str | None] = mapped_column(Text, nullable=True)
    homework_due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    assignments: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    required_items: Mapped[str | None] = mapped_column(Text, nullable=True)
    skill: Mapped[str | None] = mapped_column(Text, nullable=True)
    activity: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:  # pragma: no cover
        return f"DailyPlan(id={self.id!r}, day_of_week={self.day_of_week!r})"
