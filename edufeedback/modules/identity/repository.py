"""Identity repository layer."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from edufeedback.core.enums import RoleEnum
from edufeedback.modules.identity.models import User
from edufeedback.shared.exceptions import ConflictException
from edufeedback.shared.utils import is_unique_violation, violated_constraint

USERNAME_CONSTRAINT = "uq_users_username"
EMAIL_CONSTRAINT = "uq_users_email"


def username_from_email(email: str) -> str:
    """Derive the username from the email local part."""
    return email.split("@", 1)[0]


class IdentityRepository:
    """DB operations for identity domain."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_user_by_id(self, user_id: UUID) -> User | None:
        return await self.session.get(User, user_id)

    async def get_user_by_email(self, email: str) -> User | None:
        stmt = select(User).where(User.email == email)
        return await self.session.scalar(stmt)

    async def create_user(
        self,
        *,
        email: str,
        password_hash: str,
        name: str,
        role: RoleEnum,
        department: str | None,
    ) -> User:
        """Insert a user; unique constraints on email/username decide duplicates."""
        user = User(
            username=username_from_email(email),
            email=email,
            password_hash=password_hash,
            name=name,
            role=role,
            department=department,
        )
        try:
            async with self.session.begin_nested():
                self.session.add(user)
                await self.session.flush()
        except IntegrityError as exc:
            if not is_unique_violation(exc):
                raise
            if violated_constraint(exc, USERNAME_CONSTRAINT, EMAIL_CONSTRAINT) == USERNAME_CONSTRAINT:
                raise ConflictException("Username already taken") from exc
            raise ConflictException("Email already registered") from exc
        return user
