"""Custom exception hierarchy and handlers."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)


class AppException(Exception):
    """Base application exception."""

    status_code = 400

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class AuthenticationException(AppException):
    """Raised when credentials are missing or wrong."""

    status_code = 401


class ForbiddenException(AppException):
    """Raised when the principal may not perform the operation."""

    status_code = 403


class NotFoundException(AppException):
    """Raised when entity is not found."""

    status_code = 404


class ConflictException(AppException):
    """Raised when a uniqueness rule is violated.

    Duplicates are reported as 400 to match the public API contract.
    """

    status_code = 400


class RateLimitException(AppException):
    """Raised when request rate limit is exceeded."""

    status_code = 429


def _error_response(status_code: int, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def first_validation_message(exc: RequestValidationError) -> str:
    """Return a readable message for the first validation error."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    message = str(first.get("msg", "Invalid request"))
    if location:
        return f"{'.'.join(location)}: {message}"
    return message


async def app_exception_handler(_: Request, exc: AppException) -> JSONResponse:
    """Handle custom domain exceptions."""
    return _error_response(exc.status_code, exc.message)


async def validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    """Report the first validation error with 400."""
    return _error_response(400, first_validation_message(exc))


async def http_exception_handler(_: Request, exc: HTTPException) -> JSONResponse:
    """Handle FastAPI HTTP exceptions in unified shape."""
    return _error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception("Unhandled error on %s %s: %s", request.method, request.url.path, exc)
    return _error_response(500, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
