"""Integration tests for the feedback flow against a running stack."""

from __future__ import annotations

import os
from collections.abc import AsyncIterator
from dataclasses import dataclass
from uuid import uuid4

import httpx
import pytest
import pytest_asyncio

API_BASE_URL = os.getenv("INTEGRATION_BASE_URL", "http://localhost:8000/api").rstrip("/")
HEALTHCHECK_URL = os.getenv("INTEGRATION_HEALTH_URL", "http://localhost:8000/health")
REQUEST_TIMEOUT_SECONDS = float(os.getenv("INTEGRATION_TIMEOUT_SECONDS", "15"))
ADMIN_EMAIL = os.getenv("INTEGRATION_ADMIN_EMAIL")
ADMIN_PASSWORD = os.getenv("INTEGRATION_ADMIN_PASSWORD")

_INTEGRATION_STACK_HEALTHY: bool | None = None
_INTEGRATION_STACK_ERROR: str | None = None


@dataclass(slots=True)
class AuthSession:
    user_id: str
    token: str

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


def _assert_status(response: httpx.Response, expected_status: int) -> None:
    assert response.status_code == expected_status, (
        f"{response.request.method} {response.request.url} -> "
        f"{response.status_code}, body={response.text}"
    )


async def _signup(client: httpx.AsyncClient, role: str) -> AuthSession:
    email = f"it-{role}-{uuid4().hex}@school.edu"
    password = "StrongPass123!"

    signup_response = await client.post(
        "/auth/signup",
        json={"name": f"IT {role}", "email": email, "password": password, "role": role},
    )
    _assert_status(signup_response, 201)

    login_response = await client.post("/auth/login", json={"email": email, "password": password})
    _assert_status(login_response, 200)
    payload = login_response.json()
    assert payload["user"]["email"] == email
    return AuthSession(user_id=payload["user"]["id"], token=payload["token"])


async def _login_admin(client: httpx.AsyncClient) -> AuthSession:
    response = await client.post("/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    _assert_status(response, 200)
    payload = response.json()
    assert payload["user"]["role"] == "admin"
    return AuthSession(user_id=payload["user"]["id"], token=payload["token"])


@pytest_asyncio.fixture()
async def api_client() -> AsyncIterator[httpx.AsyncClient]:
    global _INTEGRATION_STACK_HEALTHY, _INTEGRATION_STACK_ERROR  # noqa: PLW0603

    if not ADMIN_EMAIL or not ADMIN_PASSWORD:
        pytest.skip("INTEGRATION_ADMIN_EMAIL and INTEGRATION_ADMIN_PASSWORD are not set")

    if _INTEGRATION_STACK_HEALTHY is None:
        async with httpx.AsyncClient(timeout=min(REQUEST_TIMEOUT_SECONDS, 3.0)) as probe:
            try:
                health_response = await probe.get(HEALTHCHECK_URL)
            except httpx.HTTPError as exc:
                _INTEGRATION_STACK_HEALTHY = False
                _INTEGRATION_STACK_ERROR = f"Integration stack unavailable at {HEALTHCHECK_URL}: {exc}"
            else:
                _INTEGRATION_STACK_HEALTHY = health_response.status_code == 200
                _INTEGRATION_STACK_ERROR = (
                    None
                    if _INTEGRATION_STACK_HEALTHY
                    else f"Integration stack returned {health_response.status_code} for {HEALTHCHECK_URL}"
                )

    if not _INTEGRATION_STACK_HEALTHY:
        pytest.skip(_INTEGRATION_STACK_ERROR or "Integration stack is unavailable")

    async with httpx.AsyncClient(base_url=API_BASE_URL, timeout=REQUEST_TIMEOUT_SECONDS) as client:
        yield client


@pytest.mark.asyncio
async def test_feedback_flow_updates_aggregate_and_cascades_on_delete(
    api_client: httpx.AsyncClient,
) -> None:
    admin = await _login_admin(api_client)
    first_student = await _signup(api_client, "student")
    second_student = await _signup(api_client, "student")

    create_response = await api_client.post(
        "/teachers",
        headers=admin.headers,
        json={"name": f"Dr. IT {uuid4().hex[:6]}", "department": "Science", "subject": "Physics"},
    )
    _assert_status(create_response, 201)
    teacher = create_response.json()
    assert teacher["averageRating"] == 0
    assert teacher["totalFeedback"] == 0

    for student, rating in ((first_student, 4), (second_student, 2)):
        submit_response = await api_client.post(
            "/feedback",
            headers=student.headers,
            json={"teacherId": teacher["id"], "rating": rating, "comment": "integration"},
        )
        _assert_status(submit_response, 201)
        assert submit_response.json()["subject"] == "Physics"

    duplicate_response = await api_client.post(
        "/feedback",
        headers=first_student.headers,
        json={"teacherId": teacher["id"], "rating": 5},
    )
    _assert_status(duplicate_response, 400)
    assert duplicate_response.json()["error"] == "You have already submitted feedback for this teacher"

    teacher_response = await api_client.get(f"/teachers/{teacher['id']}")
    _assert_status(teacher_response, 200)
    assert teacher_response.json()["averageRating"] == 3.0
    assert teacher_response.json()["totalFeedback"] == 2

    submitted_response = await api_client.get("/feedback/my-submissions", headers=first_student.headers)
    _assert_status(submitted_response, 200)
    assert teacher["id"] in submitted_response.json()

    delete_response = await api_client.delete(f"/teachers/{teacher['id']}", headers=admin.headers)
    _assert_status(delete_response, 200)

    _assert_status(await api_client.get(f"/teachers/{teacher['id']}"), 404)
    listing_response = await api_client.get(
        f"/feedback/teacher/{teacher['id']}", headers=first_student.headers
    )
    _assert_status(listing_response, 200)
    assert listing_response.json() == []


@pytest.mark.asyncio
async def test_teacher_sees_received_feedback_and_students_cannot_manage_roster(
    api_client: httpx.AsyncClient,
) -> None:
    teacher_account = await _signup(api_client, "teacher")
    student = await _signup(api_client, "student")

    received_response = await api_client.get("/feedback/received", headers=teacher_account.headers)
    _assert_status(received_response, 200)
    assert isinstance(received_response.json(), list)

    forbidden_response = await api_client.post(
        "/teachers",
        headers=student.headers,
        json={"name": "Nope", "department": "None", "subject": "None"},
    )
    _assert_status(forbidden_response, 403)
