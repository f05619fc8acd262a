"""
===============================================================================
ROLE REQUEST USE CASE RESULTS
===============================================================================

Responsibilities:
    - Códigos de error estables para el flujo de solicitudes de roles.
    - DTOs de resultado por caso de uso (submit / resolve / list).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from ....domain.entities import RoleRequest

MSG_SUBMITTED = "Solicitud de roles enviada correctamente"
MSG_RESOLVED = "Solicitud revisada correctamente"
MSG_FORBIDDEN_OTHER_USER = "No puedes crear solicitudes para otro usuario"
MSG_FORBIDDEN_NOT_ADMIN = "No tienes permisos para realizar esta acción"
MSG_RESOLUTION_REQUIRED = "ID de solicitud y acción son requeridos"
MSG_REQUEST_NOT_FOUND = "Solicitud no encontrada"
MSG_ALREADY_PROCESSED = "Esta solicitud ya ha sido procesada"
MSG_UNKNOWN_ROLE = "Rol desconocido: {value}"


class RoleRequestErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"


@dataclass(frozen=True)
class RoleRequestError:
    code: RoleRequestErrorCode
    message: str


@dataclass
class RoleRequestResult:
    request: RoleRequest | None = None
    message: str | None = None
    error: RoleRequestError | None = None


@dataclass
class ListRoleRequestsResult:
    requests: List[RoleRequest] = field(default_factory=list)
    error: RoleRequestError | None = None
