"""
Name: Access Token Tests

Responsibilities:
  - Round-trip of claims through create/decode
  - Rejection of expired, tampered and wrong-audience tokens
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import jwt
import pytest

from app.crosscutting.config import get_settings
from app.crosscutting.exceptions import AuthError
from app.identity.tokens import (
    JWT_ALGORITHM,
    MSG_EXPIRED_TOKEN,
    MSG_INVALID_TOKEN,
    create_access_token,
    decode_access_token,
)

pytestmark = pytest.mark.unit


def test_decode_returns_identity_claims():
    user_id = uuid4()
    token = create_access_token(user_id=user_id, email="a@b.ec", session_id="s-1")

    payload = decode_access_token(token)

    assert payload.user_id == user_id
    assert payload.email == "a@b.ec"
    assert payload.session_id == "s-1"


def test_missing_session_claim_falls_back_to_user_id():
    settings = get_settings()
    user_id = uuid4()
    token = jwt.encode(
        {
            "sub": str(user_id),
            "aud": settings.auth_jwt_audience,
            "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
        },
        settings.auth_jwt_secret,
        algorithm=JWT_ALGORITHM,
    )

    assert decode_access_token(token).session_id == str(user_id)


def test_expired_token_is_rejected():
    token = create_access_token(
        user_id=uuid4(), email=None, session_id="s", ttl_seconds=-10
    )

    with pytest.raises(AuthError) as exc_info:
        decode_access_token(token)

    assert exc_info.value.message == MSG_EXPIRED_TOKEN


def test_wrong_secret_is_rejected():
    token = jwt.encode(
        {"sub": str(uuid4()), "aud": "authenticated", "exp": 9999999999},
        "otro-secreto",
        algorithm=JWT_ALGORITHM,
    )

    with pytest.raises(AuthError) as exc_info:
        decode_access_token(token)

    assert exc_info.value.message == MSG_INVALID_TOKEN


def test_wrong_audience_is_rejected():
    settings = get_settings()
    token = jwt.encode(
        {"sub": str(uuid4()), "aud": "anon", "exp": 9999999999},
        settings.auth_jwt_secret,
        algorithm=JWT_ALGORITHM,
    )

    with pytest.raises(AuthError):
        decode_access_token(token)


def test_non_uuid_subject_is_rejected():
    settings = get_settings()
    token = jwt.encode(
        {"sub": "not-a-uuid", "aud": settings.auth_jwt_audience, "exp": 9999999999},
        settings.auth_jwt_secret,
        algorithm=JWT_ALGORITHM,
    )

    with pytest.raises(AuthError):
        decode_access_token(token)
