"""In-memory fakes standing in for the SQLAlchemy repositories."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient

from edufeedback.core.enums import RoleEnum
from edufeedback.core.security import hash_password
from edufeedback.main import app
from edufeedback.modules.feedback.repository import DUPLICATE_FEEDBACK_MESSAGE
from edufeedback.modules.feedback.service import FeedbackService, get_feedback_service
from edufeedback.modules.identity.rate_limit import enforce_login_rate_limit, enforce_signup_rate_limit
from edufeedback.modules.identity.repository import username_from_email
from edufeedback.modules.identity.service import IdentityService, get_identity_service, issue_token
from edufeedback.modules.teachers.service import TeachersService, get_teachers_service
from edufeedback.shared.exceptions import ConflictException

BASE_TIME = datetime(2026, 10, 1, 9, 0, tzinfo=UTC)


@dataclass
class FakeUser:
    id: UUID
    username: str
    email: str
    password_hash: str
    name: str
    role: RoleEnum
    department: str | None
    created_at: datetime


@dataclass
class FakeTeacher:
    id: UUID
    name: str
    department: str
    subject: str
    created_at: datetime
    average_rating: float = 0.0
    total_feedback: int = 0


@dataclass
class FakeFeedback:
    id: UUID
    teacher_id: UUID
    student_id: UUID
    student_name: str
    rating: int
    comment: str | None
    subject: str | None
    created_at: datetime


@dataclass
class FakeStore:
    users: dict[UUID, FakeUser] = field(default_factory=dict)
    teachers: dict[UUID, FakeTeacher] = field(default_factory=dict)
    feedback: dict[UUID, FakeFeedback] = field(default_factory=dict)
    _ticks: int = 0

    def now(self) -> datetime:
        # Strictly increasing so "newest first" ordering is deterministic.
        self._ticks += 1
        return BASE_TIME + timedelta(seconds=self._ticks)

    def add_user(
        self,
        *,
        email: str,
        name: str,
        role: RoleEnum,
        password: str = "secret123",
        department: str | None = None,
    ) -> FakeUser:
        user = FakeUser(
            id=uuid4(),
            username=username_from_email(email),
            email=email,
            password_hash=hash_password(password),
            name=name,
            role=role,
            department=department,
            created_at=self.now(),
        )
        self.users[user.id] = user
        return user

    def add_teacher(self, *, name: str, subject: str, department: str = "Science") -> FakeTeacher:
        teacher = FakeTeacher(
            id=uuid4(),
            name=name,
            department=department,
            subject=subject,
            created_at=self.now(),
        )
        self.teachers[teacher.id] = teacher
        return teacher


class FakeIdentityRepository:
    def __init__(self, store: FakeStore) -> None:
        self.store = store

    async def get_user_by_id(self, user_id: UUID) -> FakeUser | None:
        return self.store.users.get(user_id)

    async def get_user_by_email(self, email: str) -> FakeUser | None:
        return next((user for user in self.store.users.values() if user.email == email), None)

    async def create_user(
        self,
        *,
        email: str,
        password_hash: str,
        name: str,
        role: RoleEnum,
        department: str | None,
    ) -> FakeUser:
        username = username_from_email(email)
        for user in self.store.users.values():
            if user.email == email:
                raise ConflictException("Email already registered")
            if user.username == username:
                raise ConflictException("Username already taken")
        user = FakeUser(
            id=uuid4(),
            username=username,
            email=email,
            password_hash=password_hash,
            name=name,
            role=role,
            department=department,
            created_at=self.store.now(),
        )
        self.store.users[user.id] = user
        return user


class FakeTeachersRepository:
    def __init__(self, store: FakeStore) -> None:
        self.store = store
        self.locked_ids: list[UUID] = []

    async def list_teachers(self) -> list[FakeTeacher]:
        return sorted(self.store.teachers.values(), key=lambda teacher: teacher.name)

    async def get_teacher_by_id(self, teacher_id: UUID) -> FakeTeacher | None:
        return self.store.teachers.get(teacher_id)

    async def get_teacher_for_update(self, teacher_id: UUID) -> FakeTeacher | None:
        self.locked_ids.append(teacher_id)
        return self.store.teachers.get(teacher_id)

    async def create_teacher(self, name: str, department: str, subject: str) -> FakeTeacher:
        teacher = FakeTeacher(
            id=uuid4(),
            name=name,
            department=department,
            subject=subject,
            created_at=self.store.now(),
        )
        self.store.teachers[teacher.id] = teacher
        return teacher

    async def delete_teacher(self, teacher: FakeTeacher) -> None:
        del self.store.teachers[teacher.id]
        for feedback_id in [
            item.id for item in self.store.feedback.values() if item.teacher_id == teacher.id
        ]:
            del self.store.feedback[feedback_id]

    async def update_aggregate(
        self,
        teacher: FakeTeacher,
        average_rating: float,
        total_feedback: int,
    ) -> FakeTeacher:
        teacher.average_rating = average_rating
        teacher.total_feedback = total_feedback
        return teacher


class FakeFeedbackRepository:
    def __init__(self, store: FakeStore) -> None:
        self.store = store
        self.create_calls = 0

    def _newest_first(self, items) -> list[FakeFeedback]:
        return sorted(items, key=lambda item: item.created_at, reverse=True)

    async def list_by_teacher(self, teacher_id: UUID) -> list[FakeFeedback]:
        return self._newest_first(
            item for item in self.store.feedback.values() if item.teacher_id == teacher_id
        )

    async def list_by_student(self, student_id: UUID) -> list[FakeFeedback]:
        return self._newest_first(
            item for item in self.store.feedback.values() if item.student_id == student_id
        )

    async def has_feedback(self, teacher_id: UUID, student_id: UUID) -> bool:
        return any(
            item.teacher_id == teacher_id and item.student_id == student_id
            for item in self.store.feedback.values()
        )

    async def list_teacher_ids_for_student(self, student_id: UUID) -> list[UUID]:
        return [item.teacher_id for item in self.store.feedback.values() if item.student_id == student_id]

    async def list_ratings(self, teacher_id: UUID) -> list[int]:
        return [item.rating for item in self.store.feedback.values() if item.teacher_id == teacher_id]

    async def list_with_teacher_names(self) -> list[tuple[FakeFeedback, str]]:
        return [
            (item, self.store.teachers[item.teacher_id].name)
            for item in self._newest_first(self.store.feedback.values())
        ]

    async def create_feedback(
        self,
        *,
        teacher_id: UUID,
        student_id: UUID,
        student_name: str,
        rating: int,
        comment: str | None,
        subject: str | None,
    ) -> FakeFeedback:
        self.create_calls += 1
        # Stands in for uq_feedback_teacher_student, independent of has_feedback.
        if any(
            item.teacher_id == teacher_id and item.student_id == student_id
            for item in self.store.feedback.values()
        ):
            raise ConflictException(DUPLICATE_FEEDBACK_MESSAGE)
        feedback = FakeFeedback(
            id=uuid4(),
            teacher_id=teacher_id,
            student_id=student_id,
            student_name=student_name,
            rating=rating,
            comment=comment,
            subject=subject,
            created_at=self.store.now(),
        )
        self.store.feedback[feedback.id] = feedback
        return feedback


def auth_headers(user: FakeUser) -> dict[str, str]:
    return {"Authorization": f"Bearer {issue_token(user)}"}


async def _no_rate_limit() -> None:
    return None


@pytest.fixture()
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture()
def client(store: FakeStore) -> Iterator[TestClient]:
    app.dependency_overrides[get_identity_service] = lambda: IdentityService(FakeIdentityRepository(store))
    app.dependency_overrides[get_teachers_service] = lambda: TeachersService(FakeTeachersRepository(store))
    app.dependency_overrides[get_feedback_service] = lambda: FeedbackService(
        feedback_repository=FakeFeedbackRepository(store),
        teachers_repository=FakeTeachersRepository(store),
    )
    app.dependency_overrides[enforce_signup_rate_limit] = _no_rate_limit
    app.dependency_overrides[enforce_login_rate_limit] = _no_rate_limit
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def admin(store: FakeStore) -> FakeUser:
    return store.add_user(email="admin@school.edu", name="Ada Admin", role=RoleEnum.ADMIN)


@pytest.fixture()
def student(store: FakeStore) -> FakeUser:
    return store.add_user(email="sam@school.edu", name="Sam Student", role=RoleEnum.STUDENT)


@pytest.fixture()
def teacher_user(store: FakeStore) -> FakeUser:
    return store.add_user(email="tess@school.edu", name="Tess Teacher", role=RoleEnum.TEACHER)
