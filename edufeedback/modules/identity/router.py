"""Identity API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from edufeedback.modules.identity.rate_limit import enforce_login_rate_limit, enforce_signup_rate_limit
from edufeedback.modules.identity.schemas import AuthResponse, LoginRequest, Principal, SignupRequest, UserRead
from edufeedback.modules.identity.service import IdentityService, authenticate, get_identity_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(enforce_signup_rate_limit)],
)
async def signup(
    payload: SignupRequest,
    service: IdentityService = Depends(get_identity_service),
) -> AuthResponse:
    """Create a student or teacher account and return a token."""
    return await service.signup(payload)


@router.post("/login", response_model=AuthResponse, dependencies=[Depends(enforce_login_rate_limit)])
async def login(
    payload: LoginRequest,
    service: IdentityService = Depends(get_identity_service),
) -> AuthResponse:
    """Sign in by email/password."""
    return await service.login(payload)


@router.get("/me", response_model=UserRead)
async def get_me(
    principal: Principal = Depends(authenticate),
    service: IdentityService = Depends(get_identity_service),
) -> UserRead:
    """Return profile of authenticated user."""
    user = await service.get_profile(principal)
    return UserRead.model_validate(user)
