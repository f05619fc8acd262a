"""
===============================================================================
TARJETA CRC — infrastructure/services/hosted_auth_client.py
===============================================================================

Clase:
    HostedAuthClient (AuthGateway sobre HTTP)

Responsabilidades:
    - Hablar con el servicio de auth gestionado (API estilo GoTrue).
    - Traducir respuestas HTTP a value objects del dominio.
    - Clasificar errores: AuthError (400/401/403/422), BackendError (resto),
      BackendTimeoutError (timeout de red).
    - Medir latencia y fallas por operación (Prometheus).

Colaboradores:
    - httpx (cliente HTTP con timeout explícito)
    - domain.services (AuthTokens / AuthIdentity / NewAccount)
    - identity.tokens (session_id del access token)
    - crosscutting.metrics

Endpoints:
    POST /auth/v1/token?grant_type=password
    GET  /auth/v1/user
    POST /auth/v1/signup
    POST /auth/v1/logout
    POST /auth/v1/admin/users   (service key)
===============================================================================
"""

from __future__ import annotations

import time
from typing import Any, Optional
from uuid import UUID

import httpx

from ...crosscutting.exceptions import AuthError, BackendError, BackendTimeoutError
from ...crosscutting.logger import logger
from ...crosscutting.metrics import observe_backend_call, record_backend_failure
from ...domain.services import AuthIdentity, AuthTokens, NewAccount
from ...identity.tokens import decode_access_token

_AUTH_REJECTED_CODES = frozenset({400, 401, 403, 422})


def _error_message(resp: httpx.Response) -> str:
    """Mensaje legible del cuerpo de error (best-effort)."""
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:200]
    if isinstance(body, dict):
        for key in ("error_description", "msg", "message", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return resp.text[:200]


def _identity_from_user(payload: dict[str, Any]) -> AuthIdentity:
    try:
        return AuthIdentity(user_id=UUID(str(payload["id"])), email=payload.get("email"))
    except (KeyError, ValueError) as exc:
        raise BackendError(f"Respuesta de usuario inválida: {exc}") from exc


class HostedAuthClient:
    """
    Cliente síncrono del servicio de auth.

    Un httpx.Client por instancia (connection pooling); el container lo
    mantiene como singleton. Sin reintentos: cada falla se reporta una vez.
    """

    def __init__(
        self,
        *,
        base_url: str,
        anon_key: str,
        service_key: str = "",
        timeout_s: float = 10.0,
        client: Optional[httpx.Client] = None,
    ):
        if not base_url:
            raise ValueError("base_url is required for HostedAuthClient")
        self._base_url = base_url.rstrip("/")
        self._anon_key = anon_key
        self._service_key = service_key
        self._client = client or httpx.Client(timeout=timeout_s)

    # ------------------------------------------------------------------
    # Núcleo HTTP
    # ------------------------------------------------------------------
    def _headers(self, bearer: str | None = None, *, service: bool = False) -> dict:
        key = self._service_key if service else self._anon_key
        headers = {"apikey": key, "Content-Type": "application/json"}
        token = bearer or (key if service else None)
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _request(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        headers: dict,
        json: dict | None = None,
        params: dict | None = None,
    ) -> httpx.Response:
        url = f"{self._base_url}{path}"
        started = time.perf_counter()
        try:
            resp = self._client.request(
                method, url, headers=headers, json=json, params=params
            )
        except httpx.TimeoutException as exc:
            record_backend_failure(operation, "timeout")
            logger.warning(
                "hosted_auth: timeout",
                extra={"operation": operation, "error": str(exc)},
            )
            raise BackendTimeoutError(
                f"Auth service timeout ({operation})",
                operation=operation,
                original_error=exc,
            ) from exc
        except httpx.HTTPError as exc:
            record_backend_failure(operation, "network")
            logger.warning(
                "hosted_auth: error de red",
                extra={"operation": operation, "error": str(exc)},
            )
            raise BackendError(
                f"Auth service unreachable ({operation}): {exc}",
                operation=operation,
                original_error=exc,
            ) from exc
        finally:
            observe_backend_call(operation, time.perf_counter() - started)

        if resp.status_code < 400:
            return resp

        message = _error_message(resp)
        if resp.status_code in _AUTH_REJECTED_CODES:
            record_backend_failure(operation, "rejected")
            raise AuthError(message)

        record_backend_failure(operation, f"http_{resp.status_code}")
        logger.error(
            "hosted_auth: respuesta de error",
            extra={"operation": operation, "status": resp.status_code},
        )
        raise BackendError(
            f"Auth service error ({operation}): HTTP {resp.status_code} {message}",
            status_code=resp.status_code,
            operation=operation,
        )

    # ------------------------------------------------------------------
    # AuthGateway
    # ------------------------------------------------------------------
    def sign_in_with_password(self, email: str, password: str) -> AuthTokens:
        resp = self._request(
            "sign_in",
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            headers=self._headers(),
            json={"email": email, "password": password},
        )
        body = resp.json()
        try:
            access_token = body["access_token"]
            identity = _identity_from_user(body["user"])
        except (KeyError, TypeError) as exc:
            raise BackendError(f"Respuesta de sign-in inválida: {exc}") from exc

        # R: la sesión viaja sólo en el claim session_id; misma clave que require_user().
        try:
            session_id = decode_access_token(access_token).session_id
        except AuthError as exc:
            raise BackendError(
                "El servicio de auth emitió un token que no se puede validar",
                operation="sign_in",
                original_error=exc,
            ) from exc

        return AuthTokens(
            access_token=access_token,
            refresh_token=body.get("refresh_token", ""),
            expires_in=int(body.get("expires_in") or 0),
            identity=identity,
            session_id=session_id,
        )

    def get_user(self, access_token: str) -> AuthIdentity:
        resp = self._request(
            "get_user", "GET", "/auth/v1/user", headers=self._headers(access_token)
        )
        return _identity_from_user(resp.json())

    def sign_up(self, account: NewAccount) -> AuthIdentity:
        resp = self._request(
            "sign_up",
            "POST",
            "/auth/v1/signup",
            headers=self._headers(),
            json={
                "email": account.email,
                "password": account.password,
                "data": dict(account.metadata),
            },
        )
        body = resp.json()
        # R: con confirmación por email desactivada la respuesta trae {"user": ...}.
        return _identity_from_user(body.get("user") or body)

    def sign_out(self, access_token: str) -> None:
        self._request(
            "sign_out", "POST", "/auth/v1/logout", headers=self._headers(access_token)
        )

    def admin_create_user(self, account: NewAccount) -> AuthIdentity:
        if not self._service_key:
            raise BackendError("AUTH_SERVICE_KEY no configurada")
        resp = self._request(
            "admin_create_user",
            "POST",
            "/auth/v1/admin/users",
            headers=self._headers(service=True),
            json={
                "email": account.email,
                "password": account.password,
                "email_confirm": True,
                "user_metadata": dict(account.metadata),
            },
        )
        return _identity_from_user(resp.json())

    def close(self) -> None:
        self._client.close()
