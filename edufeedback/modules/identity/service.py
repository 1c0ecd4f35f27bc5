"""Identity business logic layer."""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from edufeedback.core.database import get_db_session
from edufeedback.core.enums import RoleEnum
from edufeedback.core.metrics import record_auth_attempt
from edufeedback.core.security import (
    InvalidTokenError,
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)
from edufeedback.modules.identity.models import User
from edufeedback.modules.identity.repository import IdentityRepository
from edufeedback.modules.identity.schemas import (
    AuthResponse,
    LoginRequest,
    Principal,
    SignupRequest,
    UserRead,
)
from edufeedback.shared.exceptions import (
    AuthenticationException,
    ConflictException,
    ForbiddenException,
    NotFoundException,
)

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

INVALID_CREDENTIALS = "Invalid email or password"


def issue_token(user: User) -> str:
    """Sign an access token for the given user."""
    return create_access_token(
        id=str(user.id),
        email=user.email,
        role=str(user.role),
        name=user.name,
    )


def _auth_response(user: User) -> AuthResponse:
    return AuthResponse(token=issue_token(user), user=UserRead.model_validate(user))


class IdentityService:
    """Identity domain service."""

    def __init__(self, repository: IdentityRepository) -> None:
        self.repository = repository

    async def signup(self, payload: SignupRequest) -> AuthResponse:
        """Register a student or teacher account and sign them in."""
        # Advisory only; the unique constraints settle concurrent signups.
        if await self.repository.get_user_by_email(payload.email) is not None:
            record_auth_attempt("signup", "conflict")
            raise ConflictException("Email already registered")

        try:
            user = await self.repository.create_user(
                email=payload.email,
                password_hash=hash_password(payload.password),
                name=payload.name,
                role=payload.role,
                department=payload.department,
            )
        except ConflictException:
            record_auth_attempt("signup", "conflict")
            raise

        record_auth_attempt("signup", "success")
        logger.info("User %s signed up with role %s", user.id, user.role)
        return _auth_response(user)

    async def login(self, payload: LoginRequest) -> AuthResponse:
        """Authenticate by email/password and issue a token."""
        user = await self.repository.get_user_by_email(payload.email)
        if user is None or not verify_password(payload.password, user.password_hash):
            record_auth_attempt("login", "rejected")
            logger.warning("Rejected login attempt for %s", payload.email)
            raise AuthenticationException(INVALID_CREDENTIALS)

        record_auth_attempt("login", "success")
        return _auth_response(user)

    async def get_profile(self, principal: Principal) -> User:
        """Load the stored user behind a principal."""
        user = await self.repository.get_user_by_id(principal.id)
        if user is None:
            raise NotFoundException("User not found")
        return user

    async def ensure_admin(self, email: str, password: str, name: str) -> User:
        """Create the bootstrap admin unless an account with that email exists."""
        existing = await self.repository.get_user_by_email(email)
        if existing is not None:
            if existing.role != RoleEnum.ADMIN:
                logger.warning("Bootstrap admin email %s belongs to a %s account", email, existing.role)
            return existing

        user = await self.repository.create_user(
            email=email,
            password_hash=hash_password(password),
            name=name,
            role=RoleEnum.ADMIN,
            department=None,
        )
        logger.info("Bootstrap admin %s created", email)
        return user


async def get_identity_service(session: AsyncSession = Depends(get_db_session)) -> IdentityService:
    """Dependency to provide identity service."""
    return IdentityService(IdentityRepository(session))


def principal_from_claims(claims: dict) -> Principal:
    """Build a principal from verified token claims."""
    try:
        return Principal(
            id=UUID(str(claims["id"])),
            email=str(claims["email"]),
            role=RoleEnum(claims["role"]),
            name=str(claims["name"]),
        )
    except (KeyError, ValueError) as exc:
        raise InvalidTokenError("Token claims are malformed") from exc


async def authenticate(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Principal:
    """Resolve the request principal from the bearer token."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationException("Access token required")

    try:
        return principal_from_claims(decode_token(credentials.credentials))
    except InvalidTokenError as exc:
        raise ForbiddenException("Invalid or expired token") from exc


def require_roles(*roles: RoleEnum):
    """Dependency factory for role-based access; runs after authenticate."""

    async def _checker(principal: Principal = Depends(authenticate)) -> Principal:
        if principal.role not in roles:
            raise ForbiddenException("Insufficient permissions")
        return principal

    return _checker
