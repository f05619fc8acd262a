"""
===============================================================================
USE CASE: Report Road Incident
===============================================================================

Business Goal:
    Conductores, dirigentes y administradores reportan incidentes de vía
    (accidentes, cierres, operativos) para avisar al resto de la flota.

Reglas:
    - Rol activo en INCIDENT_REPORTER_ROLES; si no, FORBIDDEN.
    - title, description, incident_type y location_description obligatorios.
    - severity por defecto "media"; el estado inicial siempre es "activo".
    - Rutas afectadas: sin vacíos ni duplicados, hasta MAX_AFFECTED_ROUTES.
    - Se registra "created" en incident_audit_log y road_incidents.create
      en la bitácora general.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional
from uuid import UUID, uuid4

from ....audit import AuditAction, emit_audit_event
from ....domain.entities import (
    IncidentSeverity,
    IncidentStatus,
    IncidentType,
    RoadIncident,
    utcnow,
)
from ....domain.incidents import CREATED_NOTE, INCIDENT_LOG_CREATED
from ....domain.repositories import AuditEventRepository, IncidentRepository
from ....domain.roles import INCIDENT_REPORTER_ROLES, AppRole
from ._history import append_history, parse_choice
from .incident_results import (
    MAX_AFFECTED_ROUTES,
    MSG_INVALID_VALUE,
    MSG_REPORT_FORBIDDEN,
    MSG_REPORTED,
    MSG_REQUIRED_FIELD,
    IncidentError,
    IncidentErrorCode,
    IncidentResult,
)


@dataclass(frozen=True)
class ReportIncidentInput:
    actor_id: UUID
    actor_role: Optional[AppRole]
    incident_type: str
    title: str
    description: str
    location_description: str
    severity: str = IncidentSeverity.MEDIUM.value
    affected_routes: List[str] = field(default_factory=list)


def _validation(message: str) -> IncidentResult:
    return IncidentResult(
        error=IncidentError(IncidentErrorCode.VALIDATION_ERROR, message)
    )


def _clean_routes(routes: List[str]) -> List[str]:
    cleaned = [r.strip() for r in routes if r and r.strip()]
    return list(dict.fromkeys(cleaned))


class ReportIncidentUseCase:
    def __init__(
        self,
        *,
        incidents: IncidentRepository,
        audit_repo: AuditEventRepository | None = None,
    ) -> None:
        self._incidents = incidents
        self._audit_repo = audit_repo

    def execute(self, input_data: ReportIncidentInput) -> IncidentResult:
        if input_data.actor_role not in INCIDENT_REPORTER_ROLES:
            return IncidentResult(
                error=IncidentError(IncidentErrorCode.FORBIDDEN, MSG_REPORT_FORBIDDEN)
            )

        texts = {
            "title": (input_data.title or "").strip(),
            "description": (input_data.description or "").strip(),
            "location_description": (input_data.location_description or "").strip(),
        }
        for name, value in texts.items():
            if not value:
                return _validation(MSG_REQUIRED_FIELD.format(field=name))
        if not (input_data.incident_type or "").strip():
            return _validation(MSG_REQUIRED_FIELD.format(field="incident_type"))

        incident_type, error = parse_choice(
            IncidentType, input_data.incident_type, "incident_type"
        )
        if error is not None:
            return IncidentResult(error=error)
        severity, error = parse_choice(
            IncidentSeverity, input_data.severity or IncidentSeverity.MEDIUM.value, "severity"
        )
        if error is not None:
            return IncidentResult(error=error)

        routes = _clean_routes(list(input_data.affected_routes))
        if len(routes) > MAX_AFFECTED_ROUTES:
            return _validation(
                MSG_INVALID_VALUE.format(field="affected_routes", value=len(routes))
            )

        incident = RoadIncident(
            id=uuid4(),
            reporter_id=input_data.actor_id,
            incident_type=incident_type,
            title=texts["title"],
            description=texts["description"],
            location_description=texts["location_description"],
            severity=severity,
            status=IncidentStatus.ACTIVE,
            affected_routes=routes,
            created_at=utcnow(),
        )
        self._incidents.create_incident(incident)

        entry = append_history(
            self._incidents,
            incident_id=incident.id,
            user_id=input_data.actor_id,
            action=INCIDENT_LOG_CREATED,
            notes=CREATED_NOTE,
        )
        emit_audit_event(
            self._audit_repo,
            action=AuditAction.INCIDENT_REPORTED,
            actor_id=input_data.actor_id,
            target_id=incident.id,
            metadata={
                "table_name": "road_incidents",
                "incident_type": incident.incident_type,
                "severity": incident.severity,
            },
        )
        return IncidentResult(
            incident=incident,
            history=[entry] if entry is not None else [],
            message=MSG_REPORTED,
        )
