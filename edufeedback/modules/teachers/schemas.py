"""Teachers schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field

from edufeedback.shared.schemas import CamelModel


class TeacherCreate(CamelModel):
    """Create teacher request. Aggregate fields are not accepted."""

    name: str = Field(min_length=1, max_length=128)
    department: str = Field(min_length=1, max_length=128)
    subject: str = Field(min_length=1, max_length=128)


class TeacherRead(CamelModel):
    """Teacher response schema."""

    id: UUID
    name: str
    department: str
    subject: str
    average_rating: float
    total_feedback: int
    created_at: datetime
