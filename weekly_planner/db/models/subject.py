"""Subject model."""
from __future__ import annotations

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from weekly_planner.db import Base


class Subject(Base):
    """A taught subject; ``type`` selects which daily plan fields apply."""

    __tablename__ = "subjects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    type: Mapped[str] = mapped_column(String(16), nullable=False, default="standard")

    def __repr__(self) -> str:  # pragma: no cover
        return f"Subject(id={self.id!r}, name={self.name!r}, type={self.type!r})"
