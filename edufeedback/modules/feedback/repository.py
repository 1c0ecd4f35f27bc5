"""Feedback repository layer."""

from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from edufeedback.modules.feedback.models import Feedback
from edufeedback.modules.teachers.models import Teacher
from edufeedback.shared.exceptions import ConflictException
from edufeedback.shared.utils import is_unique_violation

DUPLICATE_FEEDBACK_MESSAGE = "You have already submitted feedback for this teacher"


class FeedbackRepository:
    """DB operations for feedback domain."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_by_teacher(self, teacher_id: UUID) -> Sequence[Feedback]:
        stmt = (
            select(Feedback)
            .where(Feedback.teacher_id == teacher_id)
            .order_by(Feedback.created_at.desc())
        )
        return (await self.session.scalars(stmt)).all()

    async def list_by_student(self, student_id: UUID) -> Sequence[Feedback]:
        stmt = (
            select(Feedback)
            .where(Feedback.student_id == student_id)
            .order_by(Feedback.created_at.desc())
        )
        return (await self.session.scalars(stmt)).all()

    async def has_feedback(self, teacher_id: UUID, student_id: UUID) -> bool:
        stmt = select(
            exists().where(
                Feedback.teacher_id == teacher_id,
                Feedback.student_id == student_id,
            ),
        )
        return bool(await self.session.scalar(stmt))

    async def list_teacher_ids_for_student(self, student_id: UUID) -> list[UUID]:
        stmt = select(Feedback.teacher_id).where(Feedback.student_id == student_id)
        return list((await self.session.scalars(stmt)).all())

    async def list_ratings(self, teacher_id: UUID) -> list[int]:
        stmt = select(Feedback.rating).where(Feedback.teacher_id == teacher_id)
        return list((await self.session.scalars(stmt)).all())

    async def list_with_teacher_names(self) -> list[tuple[Feedback, str]]:
        stmt = (
            select(Feedback, Teacher.name)
            .join(Teacher, Teacher.id == Feedback.teacher_id)
            .order_by(Feedback.created_at.desc())
        )
        rows = (await self.session.execute(stmt)).all()
        return [(feedback, teacher_name) for feedback, teacher_name in rows]

    async def create_feedback(
        self,
        *,
        teacher_id: UUID,
        student_id: UUID,
        student_name: str,
        rating: int,
        comment: str | None,
        subject: str | None,
    ) -> Feedback:
        """Insert feedback; the (teacher, student) unique constraint rejects duplicates."""
        feedback = Feedback(
            teacher_id=teacher_id,
            student_id=student_id,
            student_name=student_name,
            rating=rating,
            comment=comment,
            subject=subject,
        )
        try:
            async with self.session.begin_nested():
                self.session.add(feedback)
                await self.session.flush()
        except IntegrityError as exc:
            if is_unique_violation(exc):
                raise ConflictException(DUPLICATE_FEEDBACK_MESSAGE) from exc
            raise
        return feedback
