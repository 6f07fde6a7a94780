"""Teacher to grade assignment model."""
from __future__ import annotations

from sqlalchemy import ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from weekly_planner.db import Base


class TeacherGrade(Base):
    __tablename__ = "teacher_grades"
    __table_args__ = (
        UniqueConstraint("teacher_id", "grade_id", name="uq_teacher_grades_teacher_grade"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    teacher_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    grade_id: Mapped[int] = mapped_column(ForeignKey("grades.id"), nullable=False, index=True)

    def __repr__(self) -> str:  # pragma: no cover
        return f"TeacherGrade(teacher_id={self.teacher_id!r}, grade_id={self.grade_id!r})"
