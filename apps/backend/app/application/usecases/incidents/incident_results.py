"""
===============================================================================
INCIDENT USE CASE RESULTS
===============================================================================

Responsibilities:
    - Códigos de error, mensajes y DTOs de resultado de incidentes de vía.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from ....domain.entities import IncidentAuditEntry, RoadIncident

MSG_REPORT_FORBIDDEN = "No tienes permisos para reportar incidentes"
MSG_MODERATE_FORBIDDEN = "No tienes permisos para moderar incidentes"
MSG_INCIDENT_NOT_FOUND = "Incidente no encontrado"
MSG_REQUIRED_FIELD = "El campo {field} es obligatorio"
MSG_INVALID_VALUE = "Valor inválido para {field}: {value}"
MSG_SAME_STATUS = "El incidente ya está en estado {status}"
MSG_STATUS_CHANGED = "El incidente fue moderado por otra persona; vuelva a cargarlo"
MSG_REPORTED = "Incidente reportado correctamente"
MSG_MODERATED = "Incidente marcado como {status}"

MAX_AFFECTED_ROUTES = 8


class IncidentErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"


@dataclass(frozen=True)
class IncidentError:
    code: IncidentErrorCode
    message: str


@dataclass
class IncidentResult:
    incident: RoadIncident | None = None
    history: List[IncidentAuditEntry] = field(default_factory=list)
    message: str = ""
    error: IncidentError | None = None


@dataclass
class IncidentListResult:
    incidents: List[RoadIncident] = field(default_factory=list)
    error: IncidentError | None = None
