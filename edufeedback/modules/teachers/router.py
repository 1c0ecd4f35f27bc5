"""Teachers API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from edufeedback.core.enums import RoleEnum
from edufeedback.modules.identity.schemas import Principal
from edufeedback.modules.identity.service import require_roles
from edufeedback.modules.teachers.schemas import TeacherCreate, TeacherRead
from edufeedback.modules.teachers.service import TeachersService, get_teachers_service
from edufeedback.shared.schemas import MessageResponse

router = APIRouter(prefix="/teachers", tags=["teachers"])


@router.get("", response_model=list[TeacherRead])
async def list_teachers(
    service: TeachersService = Depends(get_teachers_service),
) -> list[TeacherRead]:
    """List teachers ordered by name."""
    teachers = await service.list_teachers()
    return [TeacherRead.model_validate(item) for item in teachers]


@router.get("/{teacher_id}", response_model=TeacherRead)
async def get_teacher(
    teacher_id: str,
    service: TeachersService = Depends(get_teachers_service),
) -> TeacherRead:
    teacher = await service.get_teacher(teacher_id)
    return TeacherRead.model_validate(teacher)


@router.post("", response_model=TeacherRead, status_code=status.HTTP_201_CREATED)
async def create_teacher(
    payload: TeacherCreate,
    service: TeachersService = Depends(get_teachers_service),
    principal: Principal = Depends(require_roles(RoleEnum.ADMIN)),
) -> TeacherRead:
    """Add a teacher to the roster."""
    teacher = await service.create_teacher(payload, principal)
    return TeacherRead.model_validate(teacher)


@router.delete("/{teacher_id}", response_model=MessageResponse)
async def delete_teacher(
    teacher_id: str,
    service: TeachersService = Depends(get_teachers_service),
    principal: Principal = Depends(require_roles(RoleEnum.ADMIN)),
) -> MessageResponse:
    """Remove a teacher and all feedback about them."""
    await service.delete_teacher(teacher_id, principal)
    return MessageResponse(message="Teacher deleted successfully")
