"""Identity schemas."""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from edufeedback.core.enums import SELF_SIGNUP_ROLES, RoleEnum
from edufeedback.shared.schemas import CamelModel


class SignupRequest(BaseModel):
    """Self-service registration request."""

    name: str = Field(min_length=1, max_length=128)
    email: EmailStr
    password: str = Field(min_length=6)
    role: RoleEnum
    department: str | None = Field(default=None, max_length=128)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value

    @field_validator("role")
    @classmethod
    def reject_privileged_roles(cls, value: RoleEnum) -> RoleEnum:
        if value not in SELF_SIGNUP_ROLES:
            raise ValueError("Role must be either student or teacher")
        return value


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: EmailStr
    password: str = Field(min_length=1)


class UserRead(CamelModel):
    """Public user profile."""

    id: UUID
    email: str
    name: str
    role: RoleEnum
    department: str | None = None


class AuthResponse(BaseModel):
    """Token plus the profile it was issued for."""

    token: str
    user: UserRead


@dataclass(frozen=True, slots=True)
class Principal:
    """Identity attached to a request after token verification."""

    id: UUID
    email: str
    role: RoleEnum
    name: str
