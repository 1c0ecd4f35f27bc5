"""Feedback API router."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status

from edufeedback.core.enums import RoleEnum
from edufeedback.modules.feedback.schemas import FeedbackCreate, FeedbackRead, ReceivedFeedbackRead
from edufeedback.modules.feedback.service import FeedbackService, get_feedback_service
from edufeedback.modules.identity.schemas import Principal
from edufeedback.modules.identity.service import authenticate, require_roles

router = APIRouter(prefix="/feedback", tags=["feedback"])


@router.get("/teacher/{teacher_id}", response_model=list[FeedbackRead])
async def list_teacher_feedback(
    teacher_id: str,
    service: FeedbackService = Depends(get_feedback_service),
    _: Principal = Depends(authenticate),
) -> list[FeedbackRead]:
    """Feedback about one teacher, newest first."""
    items = await service.list_for_teacher(teacher_id)
    return [FeedbackRead.model_validate(item) for item in items]


@router.get("/my-submissions", response_model=list[UUID])
async def list_my_submissions(
    service: FeedbackService = Depends(get_feedback_service),
    principal: Principal = Depends(authenticate),
) -> list[UUID]:
    """Teacher ids the caller has already rated."""
    return await service.submitted_teacher_ids(principal)


@router.get("/mine", response_model=list[FeedbackRead])
async def list_my_feedback(
    service: FeedbackService = Depends(get_feedback_service),
    principal: Principal = Depends(require_roles(RoleEnum.STUDENT)),
) -> list[FeedbackRead]:
    """Full feedback entries written by the calling student."""
    items = await service.list_for_student(principal)
    return [FeedbackRead.model_validate(item) for item in items]


@router.post("", response_model=FeedbackRead, status_code=status.HTTP_201_CREATED)
async def submit_feedback(
    payload: FeedbackCreate,
    service: FeedbackService = Depends(get_feedback_service),
    principal: Principal = Depends(require_roles(RoleEnum.STUDENT)),
) -> FeedbackRead:
    """Rate a teacher once."""
    feedback = await service.submit_feedback(payload, principal)
    return FeedbackRead.model_validate(feedback)


@router.get("/received", response_model=list[ReceivedFeedbackRead])
async def list_received_feedback(
    service: FeedbackService = Depends(get_feedback_service),
    _: Principal = Depends(require_roles(RoleEnum.TEACHER)),
) -> list[ReceivedFeedbackRead]:
    """All feedback with teacher names, newest first."""
    return await service.list_received()
