"""
===============================================================================
TARJETA CRC — app/context.py (Contexto de sesión por request)
===============================================================================

Responsabilidades:
  - Guardar en ContextVars quién opera el back-office en este request:
    request_id, usuario, sesión del servicio de auth y rol activo.
  - Exponer ese contexto a logs sin pasarlo por cada caso de uso.

Colaboradores:
  - crosscutting.middleware: abre y cierra el contexto del request.
  - identity.auth_users: completa usuario/sesión y el rol activo.
  - crosscutting.logger: agrega get_context_dict() a cada línea JSON.

Restricciones:
  - Nunca email ni tokens; sólo identificadores y el valor del rol.
===============================================================================
"""

from __future__ import annotations

from contextvars import ContextVar

request_id_var: ContextVar[str] = ContextVar("request_id", default="")
route_var: ContextVar[str] = ContextVar("route", default="")
user_id_var: ContextVar[str] = ContextVar("user_id", default="")
session_id_var: ContextVar[str] = ContextVar("session_id", default="")
active_role_var: ContextVar[str] = ContextVar("active_role", default="")

_ALL_VARS = (
    ("request_id", request_id_var),
    ("route", route_var),
    ("user_id", user_id_var),
    ("session_id", session_id_var),
    ("active_role", active_role_var),
)


def set_request_context(*, request_id: str = "", method: str = "", path: str = "") -> None:
    request_id_var.set(request_id or "")
    route_var.set(f"{method} {path}".strip())


def set_user_context(user_id: str, session_id: str = "") -> None:
    """Usuario autenticado y sesión de la que cuelga su selectedRole."""
    user_id_var.set(user_id or "")
    session_id_var.set(session_id or "")


def set_active_role_context(role: str) -> None:
    active_role_var.set(role or "")


def get_context_dict() -> dict[str, str]:
    """Contexto actual, omitiendo lo que no está disponible."""
    return {name: value for name, var in _ALL_VARS if (value := var.get())}


def clear_context() -> None:
    for _, var in _ALL_VARS:
        var.set("")
