"""Seed idempotent demo data for local/non-production environments."""

from __future__ import annotations

import argparse
import asyncio
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from edufeedback.core.config import get_settings
from edufeedback.core.database import SessionLocal, close_engine
from edufeedback.core.enums import RoleEnum
from edufeedback.core.security import hash_password, verify_password
from edufeedback.modules.identity.models import User
from edufeedback.modules.identity.repository import username_from_email
from edufeedback.modules.teachers.models import Teacher

DEMO_PASSWORD = "DemoPass123!"

DEMO_USERS = (
    ("demo-admin@edufeedback.dev", "Demo Admin", RoleEnum.ADMIN),
    ("demo-teacher@edufeedback.dev", "Demo Teacher", RoleEnum.TEACHER),
    ("demo-student@edufeedback.dev", "Demo Student", RoleEnum.STUDENT),
)

DEMO_TEACHERS = (
    ("Ada Lovelace", "Computer Science", "Algorithms"),
    ("Emmy Noether", "Mathematics", "Algebra"),
    ("Marie Curie", "Physics", "Radioactivity"),
)


@dataclass(slots=True)
class SeedStats:
    users_created: int = 0
    users_updated: int = 0
    teachers_created: int = 0


async def _ensure_user(
    session: AsyncSession,
    *,
    email: str,
    name: str,
    role: RoleEnum,
) -> bool:
    user = await session.scalar(select(User).where(User.email == email))
    if user is None:
        session.add(
            User(
                username=username_from_email(email),
                email=email,
                password_hash=hash_password(DEMO_PASSWORD),
                name=name,
                role=role,
                department="Demo",
            ),
        )
        await session.flush()
        return True

    if not verify_password(DEMO_PASSWORD, user.password_hash):
        user.password_hash = hash_password(DEMO_PASSWORD)
    user.role = role
    user.name = name
    await session.flush()
    return False


async def _ensure_teacher(session: AsyncSession, *, name: str, department: str, subject: str) -> bool:
    existing = await session.scalar(
        select(Teacher).where(Teacher.name == name, Teacher.subject == subject),
    )
    if existing is not None:
        return False

    session.add(Teacher(name=name, department=department, subject=subject))
    await session.flush()
    return True


async def _run_seed(*, allow_production: bool) -> SeedStats:
    settings = get_settings()
    if settings.is_production and not allow_production:
        raise RuntimeError(
            "Refusing to seed demo data in production. "
            "Re-run with --allow-production only if you are absolutely sure.",
        )

    stats = SeedStats()

    async with SessionLocal() as session:
        try:
            for email, name, role in DEMO_USERS:
                if await _ensure_user(session, email=email, name=name, role=role):
                    stats.users_created += 1
                else:
                    stats.users_updated += 1

            for name, department, subject in DEMO_TEACHERS:
                if await _ensure_teacher(session, name=name, department=department, subject=subject):
                    stats.teachers_created += 1

            await session.commit()
        except Exception:
            await session.rollback()
            raise

    return stats


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Seed idempotent demo data for EduFeedback (accounts and teacher roster).",
    )
    parser.add_argument(
        "--allow-production",
        action="store_true",
        help="Allow seeding even when APP_ENV is production/prod.",
    )
    return parser


def _print_summary(stats: SeedStats) -> None:
    print("Demo seed completed.")
    print(f"- Users created: {stats.users_created}")
    print(f"- Users updated: {stats.users_updated}")
    print(f"- Teachers created: {stats.teachers_created}")
    print("")
    print("Demo credentials (non-production only):")
    for email, _, role in DEMO_USERS:
        print(f"- {role}: {email} / {DEMO_PASSWORD}")


async def _seed_and_close(*, allow_production: bool) -> SeedStats:
    try:
        return await _run_seed(allow_production=allow_production)
    finally:
        await close_engine()


def main() -> int:
    args = _build_parser().parse_args()

    try:
        stats = asyncio.run(_seed_and_close(allow_production=args.allow_production))
    except Exception as exc:
        print(f"Demo seed failed: {exc}")
        return 1

    _print_summary(stats)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
