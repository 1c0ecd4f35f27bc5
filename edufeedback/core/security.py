"""Security utilities for password hashing and JWT."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from edufeedback.core.config import get_settings

settings = get_settings()
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.password_bcrypt_rounds,
)

TOKEN_CLAIMS = ("id", "email", "role", "name")


class InvalidTokenError(Exception):
    """Raised when a token cannot be verified or has expired."""


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify plain password against hashed one."""
    return pwd_context.verify(plain_password, hashed_password)


def hash_password(password: str) -> str:
    """Hash password using bcrypt."""
    return pwd_context.hash(password)


def create_access_token(*, id: str, email: str, role: str, name: str) -> str:
    """Create signed access token carrying the principal claims."""
    payload: dict[str, Any] = {
        "sub": id,
        "id": id,
        "email": email,
        "role": role,
        "name": name,
        "exp": datetime.now(UTC) + timedelta(days=settings.access_token_expire_days),
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict[str, Any]:
    """Decode and validate JWT token, including expiry."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise InvalidTokenError("Invalid or expired token") from exc

    missing = [claim for claim in TOKEN_CLAIMS if not payload.get(claim)]
    if missing:
        raise InvalidTokenError(f"Token is missing claims: {', '.join(missing)}")
    return payload
