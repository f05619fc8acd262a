"""
Name: Error Responses, Service Error Mapping and Middleware Helper Tests

Responsibilities:
  - AppHTTPException factories (status, code, headers)
  - Typed service errors -> status/code table (MRO resolution)
  - X-Request-Id acceptance rules
  - BodyLimitMiddleware on bodies without Content-Length
"""

import asyncio
import json

import pytest

from app.api.exception_handlers import mapping_for
from app.crosscutting.error_responses import (
    ErrorCode,
    backend_error,
    backend_timeout,
    bad_request,
    conflict,
    forbidden,
    problem_details,
    schedule_denied,
    unauthorized,
)
from app.crosscutting.exceptions import (
    AuthError,
    BackendError,
    BackendTimeoutError,
    BackofficeError,
    SelectionStoreError,
)
from app.crosscutting.middleware import BodyLimitMiddleware, resolve_request_id
from app.infrastructure.db.errors import DatabaseConnectionError

pytestmark = pytest.mark.unit


class TestFactories:
    @pytest.mark.parametrize(
        "factory, status, code",
        [
            (bad_request, 400, ErrorCode.BAD_REQUEST),
            (forbidden, 403, ErrorCode.FORBIDDEN),
            (conflict, 409, ErrorCode.CONFLICT),
            (backend_error, 502, ErrorCode.BACKEND_ERROR),
            (backend_timeout, 504, ErrorCode.BACKEND_TIMEOUT),
        ],
    )
    def test_status_and_code(self, factory, status, code):
        exc = factory("mensaje")

        assert exc.status_code == status
        assert exc.code == code
        assert exc.detail == "mensaje"

    def test_unauthorized_sets_bearer_challenge(self):
        exc = unauthorized()

        assert exc.status_code == 401
        assert exc.headers == {"WWW-Authenticate": "Bearer"}

    def test_schedule_denied_carries_next_window(self):
        exc = schedule_denied(
            "Fuera de horario", role="employee", next_available="Lunes 08:00"
        )

        assert exc.status_code == 403
        assert exc.code == ErrorCode.SCHEDULE_DENIED
        assert exc.errors == [{"role": "employee", "next_available": "Lunes 08:00"}]


class TestProblemDetails:
    def test_body_shape(self):
        body = problem_details(
            ErrorCode.SCHEDULE_DENIED,
            403,
            "Fuera de horario para Empleado",
            instance="http://testserver/auth/select-role",
            errors=[{"role": "employee", "next_available": "Lunes 08:00"}],
        )

        assert body == {
            "type": "about:blank/schedule_denied",
            "title": "Fuera de horario",
            "status": 403,
            "detail": "Fuera de horario para Empleado",
            "code": "SCHEDULE_DENIED",
            "instance": "http://testserver/auth/select-role",
            "errors": [{"role": "employee", "next_available": "Lunes 08:00"}],
        }

    def test_empty_errors_are_omitted(self):
        body = problem_details(ErrorCode.NOT_FOUND, 404, "Horario no encontrado")

        assert "errors" not in body
        assert "instance" not in body


class TestServiceErrorMapping:
    @pytest.mark.parametrize(
        "error, status, code",
        [
            (DatabaseConnectionError("db"), 503, ErrorCode.DATABASE_ERROR),
            (SelectionStoreError("redis"), 503, ErrorCode.SERVICE_UNAVAILABLE),
            (BackendTimeoutError("slow"), 504, ErrorCode.BACKEND_TIMEOUT),
            (BackendError("bad"), 502, ErrorCode.BACKEND_ERROR),
            (AuthError("nope"), 401, ErrorCode.UNAUTHORIZED),
            (BackofficeError("boom"), 500, ErrorCode.INTERNAL_ERROR),
        ],
    )
    def test_mapping_follows_hierarchy(self, error, status, code):
        mapping = mapping_for(error)

        assert mapping.status_code == status
        assert mapping.code == code

    def test_unknown_subclass_falls_back_to_internal(self):
        class _Custom(BackofficeError):
            pass

        assert mapping_for(_Custom("x")).status_code == 500


class TestRequestId:
    def test_reuses_client_value(self):
        assert resolve_request_id("  abc-123 ") == "abc-123"

    @pytest.mark.parametrize("incoming", [None, "", "x" * 129, "bad\nvalue"])
    def test_generates_when_unusable(self, incoming):
        generated = resolve_request_id(incoming)

        assert generated != incoming
        assert len(generated) == 36


def _run(middleware, scope, chunks):
    sent = []
    pending = list(chunks)

    async def receive():
        return pending.pop(0)

    async def send(message):
        sent.append(message)

    asyncio.run(middleware(scope, receive, send))
    return sent


class TestBodyLimitWithoutContentLength:
    scope = {"type": "http", "method": "POST", "path": "/support/threads", "headers": []}

    def test_rejects_oversized_chunked_body(self):
        async def app(scope, receive, send):  # pragma: no cover
            raise AssertionError("no debería llegar a la app")

        sent = _run(
            BodyLimitMiddleware(app, max_bytes=10),
            self.scope,
            [
                {"type": "http.request", "body": b"123456", "more_body": True},
                {"type": "http.request", "body": b"789012", "more_body": False},
            ],
        )

        assert sent[0]["status"] == 413
        assert json.loads(sent[1]["body"])["code"] == "PAYLOAD_TOO_LARGE"

    def test_replays_small_chunked_body(self):
        seen = []

        async def app(scope, receive, send):
            while True:
                message = await receive()
                seen.append(message["body"])
                if not message.get("more_body"):
                    break
            await send({"type": "http.response.start", "status": 201, "headers": []})
            await send({"type": "http.response.body", "body": b""})

        sent = _run(
            BodyLimitMiddleware(app, max_bytes=10),
            self.scope,
            [
                {"type": "http.request", "body": b"abc", "more_body": True},
                {"type": "http.request", "body": b"def", "more_body": False},
            ],
        )

        assert seen == [b"abc", b"def"]
        assert sent[0]["status"] == 201
