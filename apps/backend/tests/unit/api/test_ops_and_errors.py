"""
Name: Ops Endpoints and Error Mapping Tests

Responsibilities:
  - /healthz, /readyz, /metrics
  - X-Request-Id propagation
  - Typed service errors -> RFC7807 status codes
  - Oversized bodies -> 413
"""

from unittest.mock import MagicMock, patch

import pytest

from app.container import get_list_notifications_use_case
from app.crosscutting.exceptions import (
    AuthError,
    BackendError,
    BackendTimeoutError,
    BackofficeError,
    DatabaseError,
    SelectionStoreError,
)
from app.domain.roles import AppRole

pytestmark = pytest.mark.unit


def test_healthz(client):
    response = client.get("/healthz", headers={"X-Request-Id": "req-123"})

    assert response.status_code == 200
    assert response.json() == {"ok": True, "request_id": "req-123"}
    assert response.headers["x-request-id"] == "req-123"


def test_readyz_without_pool_or_redis(client):
    response = client.get("/readyz")

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["db"] == "skipped"
    assert body["selection_store"] == "memory"


def test_readyz_reports_unavailable_selection_store(client):
    store = MagicMock()
    store.ping.side_effect = SelectionStoreError("redis down")

    with patch("app.api.main.get_selection_store", return_value=store):
        response = client.get("/readyz")

    assert response.status_code == 503
    assert response.json()["ok"] is False
    assert response.json()["selection_store"] == "disconnected"


def test_readyz_reports_connected_selection_store(client):
    store = MagicMock()
    store.ping.return_value = True

    with patch("app.api.main.get_selection_store", return_value=store):
        response = client.get("/readyz")

    assert response.status_code == 200
    assert response.json()["selection_store"] == "connected"


def test_metrics_exposes_request_counters(client):
    client.get("/healthz")

    response = client.get("/metrics")

    assert response.status_code == 200
    assert "backoffice_requests_total" in response.text


@pytest.mark.parametrize(
    "error, status, code",
    [
        (DatabaseError("db down"), 503, "DATABASE_ERROR"),
        (SelectionStoreError("redis down"), 503, "SERVICE_UNAVAILABLE"),
        (BackendTimeoutError("slow"), 504, "BACKEND_TIMEOUT"),
        (BackendError("bad gateway", status_code=500), 502, "BACKEND_ERROR"),
        (AuthError("token revoked"), 401, "UNAUTHORIZED"),
        (BackofficeError("boom"), 500, "INTERNAL_ERROR"),
    ],
)
def test_service_errors_are_problem_details(client, login_as, error, status, code):
    _, headers = login_as(AppRole.PARTNER)
    failing = MagicMock()
    failing.execute.side_effect = error
    client.app.dependency_overrides[get_list_notifications_use_case] = lambda: failing

    try:
        response = client.get("/notifications", headers=headers)
    finally:
        client.app.dependency_overrides.clear()

    assert response.status_code == status
    assert response.headers["content-type"].startswith("application/problem+json")
    body = response.json()
    assert body["code"] == code
    assert body["detail"] == error.message
    assert body["errors"][0] == {"error_id": error.error_id}


def test_oversized_body_is_413(client):
    response = client.post(
        "/auth/login",
        content=b"x" * (2 * 1024 * 1024),
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 413
    assert response.json()["code"] == "PAYLOAD_TOO_LARGE"
