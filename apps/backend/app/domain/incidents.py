"""
===============================================================================
TARJETA CRC — domain/incidents.py
===============================================================================

Módulo:
    Reglas de incidentes de vía

Responsabilidades:
    - Etiquetas visibles de tipos y estados.
    - Acciones de la bitácora propia de incidentes (incident_audit_log).
    - Aplicar una moderación sobre un incidente (estado + sellos de tiempo).

Colaboradores:
    - domain.entities (RoadIncident, IncidentStatus)
    - application.usecases.incidents
===============================================================================
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from uuid import UUID

from .entities import IncidentStatus, IncidentType, RoadIncident

INCIDENT_TYPE_LABELS: dict[IncidentType, str] = {
    IncidentType.ACCIDENT: "Accidente",
    IncidentType.ROAD_CLOSURE: "Cierre de Vía",
    IncidentType.PROTEST: "Manifestación",
    IncidentType.CONSTRUCTION: "Construcción",
    IncidentType.FINE: "Multa/Infracción",
    IncidentType.POLICE_CHECK: "Revisión Policía",
    IncidentType.OTHER: "Otro",
}

# Acciones de incident_audit_log.
INCIDENT_LOG_CREATED = "created"
INCIDENT_LOG_STATUS_CHANGE = "status_change"

CREATED_NOTE = "Incidente creado"


def default_moderation_note(status: IncidentStatus) -> str:
    return f"Incidente marcado como {status.value}"


def moderate(
    incident: RoadIncident,
    *,
    status: IncidentStatus,
    moderator_id: UUID,
    at: datetime,
) -> RoadIncident:
    """
    Copia moderada del incidente.

    resolved_at se fija al pasar a resuelto y se conserva en cambios
    posteriores (un incidente resuelto y luego cerrado sigue resuelto).
    """
    resolved_at = at if status == IncidentStatus.RESOLVED else incident.resolved_at
    return replace(
        incident,
        status=status,
        moderator_id=moderator_id,
        moderated_at=at,
        resolved_at=resolved_at,
        affected_routes=list(incident.affected_routes),
    )
