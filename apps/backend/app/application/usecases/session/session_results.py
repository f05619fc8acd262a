"""
===============================================================================
SESSION USE CASE RESULTS (Shared Result / Error Models)
===============================================================================

Business Goal:
    Tipos consistentes para el flujo login -> selección de rol -> sesión activa.

Why (Context / Intención):
    - Los use cases devuelven resultados tipados en lugar de propagar excepciones.
    - El router mapea SessionErrorCode -> HTTP en un único lugar.
    - Una denegación por horario lleva el rol y el próximo horario disponible
      para que el cliente los muestre sin parsear el mensaje.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ....domain.roles import AppRole
from ....domain.session import AuthSession

MSG_INVALID_CREDENTIALS = "Credenciales inválidas"
MSG_NO_ROLES = "No se encontraron roles para este usuario"
MSG_ROLES_LOAD_FAILED = "Error al cargar los roles del usuario"
MSG_ROLE_NOT_GRANTED = "No tiene asignado el rol {label}"
MSG_SCHEDULE_DENIED = (
    "No puede acceder con el rol {label} fuera del horario establecido. "
    "Próximo horario disponible: {next}"
)
MSG_NO_ACTIVE_ROLE = "Debe seleccionar un rol antes de cambiarlo"
MSG_BACKEND_ERROR = "El servicio de autenticación no está disponible"
MSG_BACKEND_TIMEOUT = "El servicio de autenticación no respondió a tiempo"


class SessionErrorCode(str, Enum):
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    NO_ROLES = "NO_ROLES"
    ROLE_NOT_GRANTED = "ROLE_NOT_GRANTED"
    SCHEDULE_DENIED = "SCHEDULE_DENIED"
    BACKEND_ERROR = "BACKEND_ERROR"
    BACKEND_TIMEOUT = "BACKEND_TIMEOUT"
    NOT_AUTHENTICATED = "NOT_AUTHENTICATED"


@dataclass(frozen=True)
class SessionError:
    code: SessionErrorCode
    message: str
    role: AppRole | None = None
    next_available: str | None = None


@dataclass
class SessionResult:
    """
    Contrato:
      - Éxito: error == None; session describe el estado alcanzado.
      - Falla: error != None; session es el estado en el que quedó el usuario
        (AwaitingCredentials si se cerró la sesión).
    """

    session: AuthSession
    error: SessionError | None = None
