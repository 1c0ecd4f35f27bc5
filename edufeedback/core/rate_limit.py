"""Fixed-window rate limiter backends (in-memory and Redis)."""

from __future__ import annotations

import asyncio
import math
import time
from collections.abc import Callable
from typing import Any, Protocol

from edufeedback.core.config import Settings, get_settings


class RateLimiter(Protocol):
    """Common contract for limiter backends."""

    async def hit(self, key: str, *, limit: int, window_seconds: int) -> tuple[bool, int]:
        """Count one request; return (allowed, retry_after_seconds)."""

    async def clear(self) -> None:
        """Drop tracked counters (used in tests)."""


def _window_bounds(now: float, window_seconds: int) -> tuple[int, int]:
    window_index = int(now // window_seconds)
    window_end = (window_index + 1) * window_seconds
    return window_index, max(1, math.ceil(window_end - now))


class InMemoryFixedWindowRateLimiter:
    """Per-process counters keyed by (key, window index)."""

    def __init__(self, now_provider: Callable[[], float] | None = None) -> None:
        self._counters: dict[str, tuple[int, int]] = {}
        self._lock = asyncio.Lock()
        self._now = now_provider or time.time

    async def hit(self, key: str, *, limit: int, window_seconds: int) -> tuple[bool, int]:
        window_index, retry_after = _window_bounds(self._now(), window_seconds)
        async with self._lock:
            stored_window, count = self._counters.get(key, (window_index, 0))
            if stored_window != window_index:
                count = 0
            if count >= limit:
                self._counters[key] = (window_index, count)
                return False, retry_after
            self._counters[key] = (window_index, count + 1)
            return True, 0

    async def clear(self) -> None:
        async with self._lock:
            self._counters.clear()


class RedisFixedWindowRateLimiter:
    """Redis-backed limiter shared across app instances."""

    def __init__(
        self,
        *,
        redis_url: str,
        namespace: str,
        now_provider: Callable[[], float] | None = None,
    ) -> None:
        self._redis_url = redis_url
        self._namespace = namespace
        self._now = now_provider or time.time
        self._client: Any | None = None

    def _get_client(self) -> Any:
        if self._client is None:
            from redis.asyncio import from_url

            self._client = from_url(self._redis_url, encoding="utf-8", decode_responses=True)
        return self._client

    async def hit(self, key: str, *, limit: int, window_seconds: int) -> tuple[bool, int]:
        window_index, retry_after = _window_bounds(self._now(), window_seconds)
        storage_key = f"{self._namespace}:{key}:{window_index}"

        client = self._get_client()
        async with client.pipeline(transaction=True) as pipe:
            pipe.incr(storage_key)
            pipe.expire(storage_key, window_seconds)
            count, _ = await pipe.execute()

        if int(count) > limit:
            return False, retry_after
        return True, 0

    async def clear(self) -> None:
        client = self._get_client()
        async for storage_key in client.scan_iter(match=f"{self._namespace}:*", count=100):
            await client.delete(storage_key)


_rate_limiter: RateLimiter | None = None
_rate_limiter_signature: tuple[str, str | None, str] | None = None


def _build_rate_limiter(settings: Settings) -> RateLimiter:
    if settings.auth_rate_limit_backend == "redis":
        return RedisFixedWindowRateLimiter(
            redis_url=settings.redis_url or "",
            namespace=settings.auth_rate_limit_redis_namespace,
        )
    return InMemoryFixedWindowRateLimiter()


def get_rate_limiter() -> RateLimiter:
    """Return shared limiter instance for configured backend."""
    global _rate_limiter, _rate_limiter_signature
    settings = get_settings()
    signature = (
        settings.auth_rate_limit_backend,
        settings.redis_url,
        settings.auth_rate_limit_redis_namespace,
    )
    if _rate_limiter is None or _rate_limiter_signature != signature:
        _rate_limiter = _build_rate_limiter(settings)
        _rate_limiter_signature = signature
    return _rate_limiter
