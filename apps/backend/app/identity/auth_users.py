"""
===============================================================================
TARJETA CRC — identity/auth_users.py
===============================================================================

Módulo:
    Dependencias FastAPI de autenticación / rol activo

Responsabilidades:
    - Extraer el token desde Authorization: Bearer.
    - Validar el token (firma/exp local + sesión viva en el servicio de auth).
    - Resolver el rol activo (selectedRole) de la sesión y exigirlo
      (equivalente a ProtectedRoute).

Colaboradores:
    - identity.tokens: decodificación del access token.
    - container: AuthGateway, SelectionStore, RoleGrantRepository.
    - crosscutting.error_responses: unauthorized/forbidden estándar.
    - context: usuario, sesión y rol activo para correlación de logs.

Decisiones:
    - Un selectedRole que ya no está otorgado equivale a "sin rol activo".
    - No se revalida el horario en cada request (sólo al seleccionar).
    - No loguear tokens.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable
from uuid import UUID

from fastapi import Header, Request

from ..application.usecases.session import SessionCredentials
from ..container import (
    get_auth_gateway,
    get_role_grant_repository,
    get_selection_store,
)
from ..context import set_active_role_context, set_user_context
from ..crosscutting.error_responses import forbidden, unauthorized
from ..crosscutting.exceptions import AuthError
from ..crosscutting.logger import logger
from ..domain.roles import AppRole, UnknownRoleError, parse_role, role_label
from ..domain.services import SELECTED_ROLE_KEY
from .tokens import MSG_INVALID_TOKEN, decode_access_token

MSG_TOKEN_REQUIRED = "Token de autorización requerido"
MSG_ROLE_REQUIRED = "Debe seleccionar un rol para continuar"
MSG_ROLE_NOT_ALLOWED = "El rol {label} no tiene acceso a este recurso"


@dataclass(frozen=True, slots=True)
class CurrentUser:
    """Usuario autenticado del request."""

    user_id: UUID
    email: str | None
    session_id: str
    access_token: str
    active_role: AppRole | None = None

    def credentials(self) -> SessionCredentials:
        return SessionCredentials(
            user_id=self.user_id,
            email=self.email,
            access_token=self.access_token,
            session_id=self.session_id,
        )


# ---------------------------------------------------------------------------
# Extracción / validación
# ---------------------------------------------------------------------------


def _extract_bearer_token(authorization: str | None) -> str | None:
    """Extrae token desde `Authorization: Bearer <token>`."""
    if not authorization:
        return None
    parts = authorization.strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    token = parts[1].strip()
    return token or None


def get_current_user(token: str) -> CurrentUser:
    """
    Resuelve el usuario actual a partir del access token.

    Raises:
        AppHTTPException 401: token inválido, expirado o sesión cerrada.
        BackendError / BackendTimeoutError: el servicio de auth falló.
    """
    try:
        payload = decode_access_token(token)
        identity = get_auth_gateway().get_user(token)
    except AuthError as exc:
        raise unauthorized(exc.message or MSG_INVALID_TOKEN) from exc

    if identity.user_id != payload.user_id:
        raise unauthorized(MSG_INVALID_TOKEN)

    return CurrentUser(
        user_id=payload.user_id,
        email=identity.email or payload.email,
        session_id=payload.session_id,
        access_token=token,
    )


def resolve_active_role(user: CurrentUser) -> AppRole | None:
    """selectedRole de la sesión, si sigue otorgado."""
    stored = get_selection_store().get_item(user.session_id, SELECTED_ROLE_KEY)
    if not stored:
        return None
    try:
        role = parse_role(stored)
    except UnknownRoleError:
        logger.warning(
            "selectedRole desconocido en la sesión",
            extra={"user_id": str(user.user_id)},
        )
        return None
    if role not in get_role_grant_repository().list_roles(user.user_id):
        return None
    return role


# ---------------------------------------------------------------------------
# Dependencias FastAPI
# ---------------------------------------------------------------------------


def require_user() -> Callable:
    """Dependency FastAPI: requiere bearer token válido."""

    def dependency(
        request: Request,
        authorization: str | None = Header(None, alias="Authorization"),
    ) -> CurrentUser:
        token = _extract_bearer_token(authorization)
        if not token:
            raise unauthorized(MSG_TOKEN_REQUIRED)

        user = get_current_user(token)
        set_user_context(str(user.user_id), user.session_id)
        request.state.user = user
        return user

    return dependency


def require_active_role(*roles: AppRole) -> Callable:
    """
    Dependency FastAPI: requiere un rol activo (selectedRole) de la lista.

    Sin argumentos acepta cualquier rol activo.
    """
    allowed = frozenset(roles)

    def dependency(
        request: Request,
        authorization: str | None = Header(None, alias="Authorization"),
    ) -> CurrentUser:
        user = require_user()(request, authorization)
        active_role = resolve_active_role(user)
        if active_role is None:
            raise forbidden(MSG_ROLE_REQUIRED)
        if allowed and active_role not in allowed:
            raise forbidden(MSG_ROLE_NOT_ALLOWED.format(label=role_label(active_role)))

        set_active_role_context(active_role.value)
        user = replace(user, active_role=active_role)
        request.state.user = user
        return user

    return dependency
