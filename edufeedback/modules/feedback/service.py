"""Feedback business logic layer."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from edufeedback.core.database import get_db_session
from edufeedback.core.metrics import record_feedback_submitted
from edufeedback.modules.feedback.models import Feedback
from edufeedback.modules.feedback.repository import DUPLICATE_FEEDBACK_MESSAGE, FeedbackRepository
from edufeedback.modules.feedback.schemas import FeedbackCreate, FeedbackRead, ReceivedFeedbackRead
from edufeedback.modules.identity.schemas import Principal
from edufeedback.modules.teachers.repository import TeachersRepository
from edufeedback.shared.exceptions import ConflictException, NotFoundException
from edufeedback.shared.utils import parse_uuid

logger = logging.getLogger(__name__)


def mean_rating(ratings: Sequence[int]) -> float:
    """Arithmetic mean of ratings; 0.0 when there are none."""
    if not ratings:
        return 0.0
    return sum(ratings) / len(ratings)


class FeedbackService:
    """Feedback domain service.

    Submission and the teacher aggregate refresh run in the caller's
    transaction, so a failed refresh rolls back the inserted row too.
    """

    def __init__(
        self,
        feedback_repository: FeedbackRepository,
        teachers_repository: TeachersRepository,
    ) -> None:
        self.feedback_repository = feedback_repository
        self.teachers_repository = teachers_repository

    async def list_for_teacher(self, teacher_id: str | UUID) -> Sequence[Feedback]:
        """Feedback about one teacher, newest first; empty for ids that are not UUIDs."""
        parsed_id = parse_uuid(teacher_id)
        if parsed_id is None:
            return []
        return await self.feedback_repository.list_by_teacher(parsed_id)

    async def list_for_student(self, principal: Principal) -> Sequence[Feedback]:
        return await self.feedback_repository.list_by_student(principal.id)

    async def submitted_teacher_ids(self, principal: Principal) -> list[UUID]:
        """Ids of the teachers the principal has already rated."""
        return await self.feedback_repository.list_teacher_ids_for_student(principal.id)

    async def submit_feedback(self, payload: FeedbackCreate, principal: Principal) -> Feedback:
        """Store a student's feedback and recompute the teacher's aggregate."""
        # Row lock serializes submissions per teacher until commit.
        teacher = await self.teachers_repository.get_teacher_for_update(payload.teacher_id)
        if teacher is None:
            raise NotFoundException("Teacher not found")

        # Advisory only; the unique constraint settles concurrent submissions.
        if await self.feedback_repository.has_feedback(teacher.id, principal.id):
            raise ConflictException(DUPLICATE_FEEDBACK_MESSAGE)

        feedback = await self.feedback_repository.create_feedback(
            teacher_id=teacher.id,
            student_id=principal.id,
            student_name=principal.name,
            rating=payload.rating,
            comment=payload.comment,
            subject=teacher.subject,
        )

        ratings = await self.feedback_repository.list_ratings(teacher.id)
        await self.teachers_repository.update_aggregate(
            teacher,
            average_rating=mean_rating(ratings),
            total_feedback=len(ratings),
        )

        record_feedback_submitted(payload.rating)
        logger.info(
            "Feedback %s submitted for teacher %s (average %.2f over %d)",
            feedback.id,
            teacher.id,
            teacher.average_rating,
            teacher.total_feedback,
        )
        return feedback

    async def list_received(self) -> list[ReceivedFeedbackRead]:
        """All feedback across every teacher, annotated with the teacher name.

        Teacher accounts are not linked to teacher rows, so this cannot be
        narrowed to the caller's own ratings.
        """
        rows = await self.feedback_repository.list_with_teacher_names()
        return [
            ReceivedFeedbackRead(
                **FeedbackRead.model_validate(feedback).model_dump(),
                teacher_name=teacher_name,
            )
            for feedback, teacher_name in rows
        ]


async def get_feedback_service(session: AsyncSession = Depends(get_db_session)) -> FeedbackService:
    """Dependency provider for feedback service."""
    return FeedbackService(
        feedback_repository=FeedbackRepository(session),
        teachers_repository=TeachersRepository(session),
    )
