"""
===============================================================================
USE CASES: List / Get Road Incidents
===============================================================================

Reglas:
    - Cualquier usuario autenticado consulta incidentes (aviso a la flota).
    - Listado más nuevo primero, filtro opcional por estado.
    - El detalle incluye la bitácora del incidente en orden cronológico.
===============================================================================
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from ....domain.entities import IncidentStatus
from ....domain.repositories import IncidentRepository
from ._history import parse_choice
from .incident_results import (
    MSG_INCIDENT_NOT_FOUND,
    IncidentError,
    IncidentErrorCode,
    IncidentListResult,
    IncidentResult,
)


class ListIncidentsUseCase:
    def __init__(self, *, incidents: IncidentRepository) -> None:
        self._incidents = incidents

    def execute(self, status: Optional[str] = None, limit: int = 100) -> IncidentListResult:
        parsed: Optional[IncidentStatus] = None
        if status is not None and status.strip():
            parsed, error = parse_choice(IncidentStatus, status, "status")
            if error is not None:
                return IncidentListResult(error=error)
        return IncidentListResult(
            incidents=self._incidents.list_incidents(status=parsed, limit=limit)
        )


class GetIncidentUseCase:
    def __init__(self, *, incidents: IncidentRepository) -> None:
        self._incidents = incidents

    def execute(self, incident_id: UUID) -> IncidentResult:
        incident = self._incidents.get_incident(incident_id)
        if incident is None:
            return IncidentResult(
                error=IncidentError(IncidentErrorCode.NOT_FOUND, MSG_INCIDENT_NOT_FOUND)
            )
        return IncidentResult(
            incident=incident, history=self._incidents.list_log_entries(incident.id)
        )
