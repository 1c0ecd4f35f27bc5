"""Rate-limit dependencies for auth endpoints."""

from __future__ import annotations

from fastapi import Request

from edufeedback.core.config import get_settings
from edufeedback.core.rate_limit import get_rate_limiter
from edufeedback.shared.exceptions import RateLimitException


def _client_ip(request: Request) -> str:
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


async def _enforce_limit(request: Request, *, action: str, limit: int) -> None:
    settings = get_settings()
    key = f"auth:{action}:{_client_ip(request)}"
    allowed, retry_after = await get_rate_limiter().hit(
        key,
        limit=limit,
        window_seconds=settings.auth_rate_limit_window_seconds,
    )
    if not allowed:
        raise RateLimitException(
            f"Too many {action} requests. Try again in {retry_after} second(s).",
        )


async def enforce_signup_rate_limit(request: Request) -> None:
    """Apply rate limit for signup endpoint."""
    await _enforce_limit(
        request,
        action="signup",
        limit=get_settings().auth_rate_limit_signup_requests,
    )


async def enforce_login_rate_limit(request: Request) -> None:
    """Apply rate limit for login endpoint."""
    await _enforce_limit(
        request,
        action="login",
        limit=get_settings().auth_rate_limit_login_requests,
    )
