"""Teachers ORM models."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from edufeedback.core.database import Base, BaseModelMixin

if TYPE_CHECKING:
    from edufeedback.modules.feedback.models import Feedback


class Teacher(BaseModelMixin, Base):
    """Rated teacher with its derived rating aggregate."""

    __tablename__ = "teachers"

    name: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    department: Mapped[str] = mapped_column(String(128), nullable=False)
    subject: Mapped[str] = mapped_column(String(128), nullable=False)
    average_rating: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    total_feedback: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    feedback_entries: Mapped[list["Feedback"]] = relationship(
        back_populates="teacher",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
