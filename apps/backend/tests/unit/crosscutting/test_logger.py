"""
Name: Structured Logger Tests

Responsibilities:
  - JSON lines carry the request/session context
  - Credentials are hidden, personal data is masked
"""

import json
import logging
import sys

import pytest

from app.context import (
    clear_context,
    set_active_role_context,
    set_request_context,
    set_user_context,
)
from app.crosscutting.logger import JSONFormatter, mask_value, sanitize

pytestmark = pytest.mark.unit


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "backoffice-api", logging.INFO, __file__, 10, "hola %s", ("mundo",), None
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture(autouse=True)
def _clean_context():
    clear_context()
    yield
    clear_context()


class TestMasking:
    @pytest.mark.parametrize(
        "key, value, expected",
        [
            ("id_number", "1712345678", "***678"),
            ("phone", "0991234567", "***567"),
            ("email", "socio@mariscalsucre.ec", "s***@mariscalsucre.ec"),
            ("email", "sin-arroba", "***"),
            ("id_number", "12", "***"),
            ("phone", "", ""),
        ],
    )
    def test_mask_value(self, key, value, expected):
        assert mask_value(key, value) == expected

    def test_sanitize_nested(self):
        payload = {
            "password": "secreto123",
            "profile": {"id_number": "0912345678", "first_name": "Ana"},
            "roles": ["driver", "partner"],
        }

        assert sanitize(payload) == {
            "password": "***",
            "profile": {"id_number": "***678", "first_name": "Ana"},
            "roles": ["driver", "partner"],
        }

    def test_long_strings_are_truncated(self):
        assert sanitize("x" * 5000).endswith("…")
        assert len(sanitize("x" * 5000)) == 2001


class TestJSONFormatter:
    def test_includes_session_context(self):
        set_request_context(request_id="req-1", method="POST", path="/auth/select-role")
        set_user_context("user-1", "sess-1")
        set_active_role_context("manager")

        line = json.loads(JSONFormatter().format(_record(status_code=200)))

        assert line["message"] == "hola mundo"
        assert line["request_id"] == "req-1"
        assert line["route"] == "POST /auth/select-role"
        assert line["user_id"] == "user-1"
        assert line["session_id"] == "sess-1"
        assert line["active_role"] == "manager"
        assert line["status_code"] == 200

    def test_extras_are_sanitized(self):
        line = json.loads(
            JSONFormatter().format(_record(access_token="abc", email="ana@coop.ec"))
        )

        assert line["access_token"] == "***"
        assert line["email"] == "a***@coop.ec"

    def test_empty_context_is_omitted(self):
        line = json.loads(JSONFormatter().format(_record()))

        assert "user_id" not in line
        assert "active_role" not in line

    def test_exception_is_attached(self):
        try:
            raise ValueError("fallo")
        except ValueError:
            record = logging.LogRecord(
                "backoffice-api", logging.ERROR, __file__, 1, "x", None, sys.exc_info()
            )

        line = json.loads(JSONFormatter().format(record))

        assert line["exception"]["type"] == "ValueError"
        assert line["exception"]["message"] == "fallo"
