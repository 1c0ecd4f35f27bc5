"""Shared utility functions."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.exc import IntegrityError


def utc_now() -> datetime:
    """Return aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_uuid(value: str | UUID) -> UUID | None:
    """Parse an identifier taken from a URL; None when it is not a UUID."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(value)
    except ValueError:
        return None


def _integrity_message(exc: IntegrityError) -> str:
    return str(getattr(exc, "orig", None) or exc).lower()


def is_unique_violation(exc: IntegrityError) -> bool:
    """Return True when the integrity error comes from a unique constraint.

    PostgreSQL reports ``duplicate key value violates unique constraint``;
    SQLite reports ``UNIQUE constraint failed``. Both contain "unique".
    """
    return "unique" in _integrity_message(exc)


def violated_constraint(exc: IntegrityError, *constraint_names: str) -> str | None:
    """Return which of the named constraints the database reported, if any."""
    message = _integrity_message(exc)
    for name in constraint_names:
        if f'"{name.lower()}"' in message:
            return name
    return None
