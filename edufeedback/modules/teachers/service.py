"""Teachers business logic layer."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from edufeedback.core.database import get_db_session
from edufeedback.modules.identity.schemas import Principal
from edufeedback.modules.teachers.models import Teacher
from edufeedback.modules.teachers.repository import TeachersRepository
from edufeedback.modules.teachers.schemas import TeacherCreate
from edufeedback.shared.exceptions import NotFoundException
from edufeedback.shared.utils import parse_uuid

logger = logging.getLogger(__name__)


class TeachersService:
    """Teachers domain service."""

    def __init__(self, repository: TeachersRepository) -> None:
        self.repository = repository

    async def list_teachers(self) -> Sequence[Teacher]:
        """List all teachers ordered by name."""
        return await self.repository.list_teachers()

    async def get_teacher(self, teacher_id: str | UUID) -> Teacher:
        """Load teacher; ids that are not UUIDs are reported as not found."""
        parsed_id = parse_uuid(teacher_id)
        teacher = None if parsed_id is None else await self.repository.get_teacher_by_id(parsed_id)
        if teacher is None:
            raise NotFoundException("Teacher not found")
        return teacher

    async def create_teacher(self, payload: TeacherCreate, actor: Principal) -> Teacher:
        teacher = await self.repository.create_teacher(
            name=payload.name,
            department=payload.department,
            subject=payload.subject,
        )
        logger.info("Teacher %s (%s) created by %s", teacher.id, teacher.name, actor.id)
        return teacher

    async def delete_teacher(self, teacher_id: str | UUID, actor: Principal) -> None:
        """Delete teacher together with all of its feedback."""
        teacher = await self.get_teacher(teacher_id)
        await self.repository.delete_teacher(teacher)
        logger.info("Teacher %s deleted by %s", teacher.id, actor.id)


async def get_teachers_service(session: AsyncSession = Depends(get_db_session)) -> TeachersService:
    """Dependency provider for teachers service."""
    return TeachersService(TeachersRepository(session))
