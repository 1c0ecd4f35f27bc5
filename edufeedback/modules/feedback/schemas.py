"""Feedback schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field

from edufeedback.shared.schemas import CamelModel

MIN_RATING = 1
MAX_RATING = 5


class FeedbackCreate(CamelModel):
    """Feedback submission. Student name and subject are filled server side."""

    teacher_id: UUID
    rating: int = Field(ge=MIN_RATING, le=MAX_RATING, strict=True)
    comment: str | None = Field(default=None, max_length=5000)


class FeedbackRead(CamelModel):
    """Feedback response schema."""

    id: UUID
    teacher_id: UUID
    student_id: UUID
    student_name: str
    rating: int
    comment: str | None = None
    subject: str | None = None
    created_at: datetime


class ReceivedFeedbackRead(FeedbackRead):
    """Feedback annotated with the rated teacher's name."""

    teacher_name: str
