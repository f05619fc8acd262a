"""
===============================================================================
USE CASE: Moderate Road Incident
===============================================================================

Business Goal:
    Administración, gerencia y presidencia cambian el estado de un incidente
    (activo / resuelto / cerrado) dejando nota y rastro.

Reglas:
    - Rol activo en INCIDENT_MODERATOR_ROLES; si no, FORBIDDEN.
    - El nuevo estado debe diferir del actual (CONFLICT si es el mismo).
    - La escritura se condiciona al estado leído: si otro moderador cambió
      el incidente entretanto, CONFLICT y no se pisa su decisión.
    - resolved_at se fija al pasar a "resuelto".
    - incident_audit_log recibe "status_change" con {old_status, new_status}.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from ....audit import AuditAction, emit_audit_event
from ....crosscutting.metrics import record_incident_moderation
from ....domain.entities import IncidentStatus, utcnow
from ....domain.incidents import (
    INCIDENT_LOG_STATUS_CHANGE,
    default_moderation_note,
    moderate,
)
from ....domain.repositories import AuditEventRepository, IncidentRepository
from ....domain.roles import INCIDENT_MODERATOR_ROLES, AppRole
from ._history import append_history, parse_choice
from .incident_results import (
    MSG_INCIDENT_NOT_FOUND,
    MSG_MODERATE_FORBIDDEN,
    MSG_MODERATED,
    MSG_SAME_STATUS,
    MSG_STATUS_CHANGED,
    IncidentError,
    IncidentErrorCode,
    IncidentResult,
)


@dataclass(frozen=True)
class ModerateIncidentInput:
    actor_id: UUID
    actor_role: Optional[AppRole]
    incident_id: UUID
    status: str
    notes: Optional[str] = None


class ModerateIncidentUseCase:
    def __init__(
        self,
        *,
        incidents: IncidentRepository,
        audit_repo: AuditEventRepository | None = None,
    ) -> None:
        self._incidents = incidents
        self._audit_repo = audit_repo

    def execute(self, input_data: ModerateIncidentInput) -> IncidentResult:
        if input_data.actor_role not in INCIDENT_MODERATOR_ROLES:
            return self._error(IncidentErrorCode.FORBIDDEN, MSG_MODERATE_FORBIDDEN)

        status, error = parse_choice(IncidentStatus, input_data.status, "status")
        if error is not None:
            return IncidentResult(error=error)

        current = self._incidents.get_incident(input_data.incident_id)
        if current is None:
            return self._error(IncidentErrorCode.NOT_FOUND, MSG_INCIDENT_NOT_FOUND)
        if current.status == status:
            return self._error(
                IncidentErrorCode.CONFLICT, MSG_SAME_STATUS.format(status=status.value)
            )

        updated = moderate(
            current, status=status, moderator_id=input_data.actor_id, at=utcnow()
        )
        if not self._incidents.update_moderation(updated, expected_status=current.status):
            return self._error(IncidentErrorCode.CONFLICT, MSG_STATUS_CHANGED)

        record_incident_moderation(status.value)
        notes = (input_data.notes or "").strip() or default_moderation_note(status)
        append_history(
            self._incidents,
            incident_id=updated.id,
            user_id=input_data.actor_id,
            action=INCIDENT_LOG_STATUS_CHANGE,
            changes={"old_status": current.status.value, "new_status": status.value},
            notes=notes,
        )
        emit_audit_event(
            self._audit_repo,
            action=AuditAction.INCIDENT_MODERATED,
            actor_id=input_data.actor_id,
            target_id=updated.id,
            metadata={
                "table_name": "road_incidents",
                "old_status": current.status,
                "new_status": status,
            },
        )
        return IncidentResult(
            incident=updated,
            history=self._incidents.list_log_entries(updated.id),
            message=MSG_MODERATED.format(status=status.value),
        )

    @staticmethod
    def _error(code: IncidentErrorCode, message: str) -> IncidentResult:
        return IncidentResult(error=IncidentError(code=code, message=message))
