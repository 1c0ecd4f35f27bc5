"""Teachers repository layer."""

from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from edufeedback.modules.teachers.models import Teacher


class TeachersRepository:
    """DB operations for teachers domain."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_teachers(self) -> Sequence[Teacher]:
        stmt = select(Teacher).order_by(Teacher.name.asc())
        return (await self.session.scalars(stmt)).all()

    async def get_teacher_by_id(self, teacher_id: UUID) -> Teacher | None:
        return await self.session.get(Teacher, teacher_id)

    async def get_teacher_for_update(self, teacher_id: UUID) -> Teacher | None:
        """Load teacher with a row lock held until the transaction ends."""
        stmt = (
            select(Teacher)
            .where(Teacher.id == teacher_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return await self.session.scalar(stmt)

    async def create_teacher(self, name: str, department: str, subject: str) -> Teacher:
        teacher = Teacher(
            name=name,
            department=department,
            subject=subject,
            average_rating=0.0,
            total_feedback=0,
        )
        self.session.add(teacher)
        await self.session.flush()
        return teacher

    async def delete_teacher(self, teacher: Teacher) -> None:
        """Delete teacher; its feedback goes with it via ON DELETE CASCADE."""
        await self.session.delete(teacher)
        await self.session.flush()

    async def update_aggregate(self, teacher: Teacher, average_rating: float, total_feedback: int) -> Teacher:
        teacher.average_rating = average_rating
        teacher.total_feedback = total_feedback
        await self.session.flush()
        return teacher
