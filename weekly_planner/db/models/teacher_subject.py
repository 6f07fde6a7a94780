"""Teacher subject competency, scoped to a grade."""
from __future__ import annotations

from sqlalchemy import ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from weekly_planner.db import Base


class TeacherSubject(Base):
    """Allows a teacher to author plans for ``subject_id`` within ``grade_id``."""

    __tablename__ = "teacher_subjects"
    __table_args__ = (
        UniqueConstraint(
            "teacher_id",
            "grade_id",
            "subject_id",
            name="uq_teacher_subjects_teacher_grade_subject",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    teacher_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    grade_id: Mapped[int] = mapped_column(ForeignKey("grades.id"), nullable=False, index=True)
    subject_id: Mapped[int] = mapped_column(ForeignKey("subjects.id"), nullable=False, index=True)

    def __repr__(self) -> str:  # pragma: no cover
        return (
            f"TeacherSubject(teacher_id={self.teacher_id!r}, grade_id={self.grade_id!r}, "
            f"subject_id={self.subject_id!r})"
        )
