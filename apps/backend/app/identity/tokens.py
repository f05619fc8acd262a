"""
===============================================================================
TARJETA CRC — identity/tokens.py
===============================================================================

Módulo:
    Access tokens del servicio de auth (JWT HS256)

Responsabilidades:
    - Decodificar y validar access tokens (firma, exp, aud, claims mínimos).
    - Emitir tokens equivalentes para el gateway en memoria (tests / local).

Colaboradores:
    - PyJWT
    - crosscutting.config.get_settings (secreto + audiencia)
    - crosscutting.exceptions.AuthError

Notas:
    - session_id viene del claim "session_id"; si falta, se usa sub.
    - No loguear tokens.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt

from ..crosscutting.config import get_settings
from ..crosscutting.exceptions import AuthError

JWT_ALGORITHM: str = "HS256"

CLAIM_SUB: str = "sub"
CLAIM_EMAIL: str = "email"
CLAIM_SESSION_ID: str = "session_id"
CLAIM_AUD: str = "aud"
CLAIM_IAT: str = "iat"
CLAIM_EXP: str = "exp"

MSG_INVALID_TOKEN = "Token inválido"
MSG_EXPIRED_TOKEN = "Token expirado"


@dataclass(frozen=True, slots=True)
class TokenPayload:
    user_id: UUID
    email: str | None
    session_id: str


def create_access_token(
    *,
    user_id: UUID,
    email: str | None,
    session_id: str,
    ttl_seconds: int = 3600,
) -> str:
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload: dict[str, object] = {
        CLAIM_SUB: str(user_id),
        CLAIM_EMAIL: email,
        CLAIM_SESSION_ID: session_id,
        CLAIM_AUD: settings.auth_jwt_audience,
        CLAIM_IAT: int(now.timestamp()),
        CLAIM_EXP: int((now + timedelta(seconds=ttl_seconds)).timestamp()),
    }
    return jwt.encode(payload, settings.auth_jwt_secret, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> TokenPayload:
    """
    Decodifica un access token.

    Raises:
        AuthError: firma inválida, expirado o sin claims mínimos.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.auth_jwt_secret,
            algorithms=[JWT_ALGORITHM],
            audience=settings.auth_jwt_audience,
            options={"require": [CLAIM_SUB, CLAIM_EXP]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise AuthError(MSG_EXPIRED_TOKEN, original_error=exc) from exc
    except jwt.InvalidTokenError as exc:
        raise AuthError(MSG_INVALID_TOKEN, original_error=exc) from exc

    try:
        user_id = UUID(str(payload[CLAIM_SUB]))
    except ValueError as exc:
        raise AuthError(MSG_INVALID_TOKEN, original_error=exc) from exc

    email = payload.get(CLAIM_EMAIL)
    session_id = str(payload.get(CLAIM_SESSION_ID) or user_id)
    return TokenPayload(
        user_id=user_id,
        email=str(email) if email else None,
        session_id=session_id,
    )
