from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

import edufeedback.main as main_module


def _stub_database(monkeypatch: pytest.MonkeyPatch, *, ready: bool) -> None:
    async def _probe() -> bool:
        return ready

    monkeypatch.setattr(main_module, "_is_database_ready", _probe)


def test_health_does_not_touch_database(monkeypatch: pytest.MonkeyPatch) -> None:
    _stub_database(monkeypatch, ready=False)

    response = TestClient(main_module.app).get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_ready_reports_database_ok(monkeypatch: pytest.MonkeyPatch) -> None:
    _stub_database(monkeypatch, ready=True)

    response = TestClient(main_module.app).get("/ready")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ready"
    assert body["database"] == "ok"
    assert body["timestamp"].endswith("+00:00")


def test_ready_unavailable_database_uses_flat_error_body(monkeypatch: pytest.MonkeyPatch) -> None:
    _stub_database(monkeypatch, ready=False)

    response = TestClient(main_module.app).get("/ready")

    assert response.status_code == 503
    assert response.json() == {"error": "Database is not ready"}
