"""Grade (class level) model."""
from __future__ import annotations

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from weekly_planner.db import Base


class Grade(Base):
    __tablename__ = "grades"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)

    def __repr__(self) -> str:  # pragma: no cover
        return f"Grade(id={self.id!r}, name={self.name!r})"
