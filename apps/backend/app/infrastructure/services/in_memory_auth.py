"""
===============================================================================
TARJETA CRC — infrastructure/services/in_memory_auth.py
===============================================================================

Clase:
    InMemoryAuthGateway

Responsabilidades:
    - Implementar AuthGateway sin red (tests / desarrollo local).
    - Emitir JWT reales (PyJWT) firmados con el secreto configurado, para que
      require_user() los valide igual que los del servicio gestionado.
    - Revocar sesiones en sign_out.

Colaboradores:
    - identity.tokens (create/decode)
    - domain.services (AuthTokens / AuthIdentity / NewAccount)

Notas:
    - Passwords en claro: NUNCA usar en producción.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from threading import Lock
from typing import Any, Dict, Optional, Set
from uuid import UUID, uuid4

from ...crosscutting.exceptions import AuthError
from ...domain.services import AuthIdentity, AuthTokens, NewAccount
from ...identity.tokens import create_access_token, decode_access_token

_TOKEN_TTL_SECONDS = 3600


@dataclass
class _StoredUser:
    user_id: UUID
    email: str
    password: str
    metadata: Dict[str, Any] = field(default_factory=dict)


class InMemoryAuthGateway:
    def __init__(self) -> None:
        self._lock = Lock()
        self._users: Dict[str, _StoredUser] = {}
        self._revoked_sessions: Set[str] = set()
        self.sign_out_calls = 0

    # R: helper de seeding para tests/local.
    def register(
        self, email: str, password: str, user_id: Optional[UUID] = None
    ) -> AuthIdentity:
        return self._create(
            NewAccount(email=email, password=password), user_id=user_id
        )

    def _create(
        self, account: NewAccount, *, user_id: Optional[UUID] = None
    ) -> AuthIdentity:
        email = (account.email or "").strip().lower()
        if not email or not account.password:
            raise AuthError("Email y contraseña son requeridos")
        with self._lock:
            if email in self._users:
                raise AuthError("User already registered")
            stored = _StoredUser(
                user_id=user_id or uuid4(),
                email=email,
                password=account.password,
                metadata=dict(account.metadata),
            )
            self._users[email] = stored
        return AuthIdentity(user_id=stored.user_id, email=stored.email)

    def sign_in_with_password(self, email: str, password: str) -> AuthTokens:
        with self._lock:
            stored = self._users.get((email or "").strip().lower())
        if stored is None or stored.password != password:
            raise AuthError("Invalid login credentials")

        session_id = str(uuid4())
        token = create_access_token(
            user_id=stored.user_id,
            email=stored.email,
            session_id=session_id,
            ttl_seconds=_TOKEN_TTL_SECONDS,
        )
        return AuthTokens(
            access_token=token,
            refresh_token=uuid4().hex,
            expires_in=_TOKEN_TTL_SECONDS,
            identity=AuthIdentity(user_id=stored.user_id, email=stored.email),
            session_id=session_id,
        )

    def get_user(self, access_token: str) -> AuthIdentity:
        payload = decode_access_token(access_token)
        with self._lock:
            if payload.session_id in self._revoked_sessions:
                raise AuthError("Sesión finalizada")
        return AuthIdentity(user_id=payload.user_id, email=payload.email)

    def sign_up(self, account: NewAccount) -> AuthIdentity:
        return self._create(account)

    def sign_out(self, access_token: str) -> None:
        payload = decode_access_token(access_token)
        with self._lock:
            self._revoked_sessions.add(payload.session_id)
            self.sign_out_calls += 1

    def admin_create_user(self, account: NewAccount) -> AuthIdentity:
        return self._create(account)

    def is_revoked(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._revoked_sessions
