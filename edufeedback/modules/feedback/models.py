"""Feedback ORM models."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from edufeedback.core.database import Base, BaseModelMixin
from edufeedback.modules.teachers.models import Teacher


class Feedback(BaseModelMixin, Base):
    """One student's rating of one teacher."""

    __tablename__ = "feedback"
    __table_args__ = (
        UniqueConstraint("teacher_id", "student_id", name="uq_feedback_teacher_student"),
    )

    teacher_id: Mapped[UUID] = mapped_column(
        ForeignKey("teachers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    student_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Copied at submission time.
    student_name: Mapped[str] = mapped_column(String(128), nullable=False)
    subject: Mapped[str | None] = mapped_column(String(128), nullable=True)

    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)

    teacher: Mapped[Teacher] = relationship(back_populates="feedback_entries")
