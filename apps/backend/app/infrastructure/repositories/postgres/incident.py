"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/incident.py
============================================================
Class: PostgresIncidentRepository

Responsibilities:
  - Persistir incidentes de vía (`road_incidents`).
  - Persistir la bitácora propia de incidentes (`incident_audit_log`).

Constraints / Notes:
  - La moderación es un UPDATE condicionado al estado leído (evita pisar
    la decisión de otro moderador).
  - photos queda fuera: depende del storage de archivos.
============================================================
"""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from psycopg.types.json import Json

from ....crosscutting.exceptions import DatabaseError
from ....domain.entities import (
    IncidentAuditEntry,
    IncidentSeverity,
    IncidentStatus,
    IncidentType,
    RoadIncident,
)
from ._base import PostgresRepository

_INCIDENT_COLUMNS = (
    "id, reporter_id, incident_type, title, description, location_description, "
    "severity, status, affected_routes, moderator_id, moderated_at, resolved_at, created_at"
)
_LOG_COLUMNS = "id, incident_id, user_id, action, changes, notes, created_at"


def _row_to_incident(row: tuple) -> RoadIncident:
    try:
        incident_type = IncidentType(row[2])
        severity = IncidentSeverity(row[6])
        status = IncidentStatus(row[7])
    except ValueError as exc:
        raise DatabaseError(f"Invalid incident row in database: {exc}") from exc
    return RoadIncident(
        id=row[0],
        reporter_id=row[1],
        incident_type=incident_type,
        title=row[3],
        description=row[4],
        location_description=row[5],
        severity=severity,
        status=status,
        affected_routes=list(row[8] or []),
        moderator_id=row[9],
        moderated_at=row[10],
        resolved_at=row[11],
        created_at=row[12],
    )


def _row_to_entry(row: tuple) -> IncidentAuditEntry:
    return IncidentAuditEntry(
        id=row[0],
        incident_id=row[1],
        user_id=row[2],
        action=row[3],
        changes=dict(row[4] or {}),
        notes=row[5],
        created_at=row[6],
    )


class PostgresIncidentRepository(PostgresRepository):
    def create_incident(self, incident: RoadIncident) -> None:
        self._execute(
            query="""
                INSERT INTO road_incidents (
                    id, reporter_id, incident_type, title, description,
                    location_description, severity, status, affected_routes
                )
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
            """,
            params=[
                incident.id,
                incident.reporter_id,
                incident.incident_type.value,
                incident.title,
                incident.description,
                incident.location_description,
                incident.severity.value,
                incident.status.value,
                list(incident.affected_routes),
            ],
            error_message="PostgresIncidentRepository: Failed to create incident",
            extra={"incident_id": str(incident.id)},
        )

    def get_incident(self, incident_id: UUID) -> Optional[RoadIncident]:
        row = self._fetchone(
            query=f"SELECT {_INCIDENT_COLUMNS} FROM road_incidents WHERE id = %s",
            params=[incident_id],
            error_message="PostgresIncidentRepository: Failed to get incident",
            extra={"incident_id": str(incident_id)},
        )
        return _row_to_incident(row) if row else None

    def list_incidents(
        self, *, status: Optional[IncidentStatus] = None, limit: int = 100
    ) -> List[RoadIncident]:
        if limit <= 0:
            return []
        where = "WHERE status = %s" if status is not None else ""
        params: list[object] = [status.value] if status is not None else []
        rows = self._fetchall(
            query=f"""
                SELECT {_INCIDENT_COLUMNS}
                FROM road_incidents
                {where}
                ORDER BY created_at DESC, id DESC
                LIMIT %s
            """,
            params=[*params, limit],
            error_message="PostgresIncidentRepository: Failed to list incidents",
            extra={"status": status.value if status else None},
        )
        return [_row_to_incident(row) for row in rows]

    def update_moderation(
        self, incident: RoadIncident, *, expected_status: IncidentStatus
    ) -> bool:
        rowcount = self._execute(
            query="""
                UPDATE road_incidents
                SET status = %s, moderator_id = %s, moderated_at = %s,
                    resolved_at = %s, updated_at = NOW()
                WHERE id = %s AND status = %s
            """,
            params=[
                incident.status.value,
                incident.moderator_id,
                incident.moderated_at,
                incident.resolved_at,
                incident.id,
                expected_status.value,
            ],
            error_message="PostgresIncidentRepository: Failed to moderate incident",
            extra={"incident_id": str(incident.id)},
        )
        return rowcount > 0

    def add_log_entry(self, entry: IncidentAuditEntry) -> None:
        self._execute(
            query="""
                INSERT INTO incident_audit_log (id, incident_id, user_id, action, changes, notes)
                VALUES (%s, %s, %s, %s, %s, %s)
            """,
            params=[
                entry.id,
                entry.incident_id,
                entry.user_id,
                entry.action,
                Json(entry.changes or {}),
                entry.notes,
            ],
            error_message="PostgresIncidentRepository: Failed to add log entry",
            extra={"incident_id": str(entry.incident_id)},
        )

    def list_log_entries(self, incident_id: UUID) -> List[IncidentAuditEntry]:
        rows = self._fetchall(
            query=f"""
                SELECT {_LOG_COLUMNS}
                FROM incident_audit_log
                WHERE incident_id = %s
                ORDER BY created_at ASC, id ASC
            """,
            params=[incident_id],
            error_message="PostgresIncidentRepository: Failed to list log entries",
            extra={"incident_id": str(incident_id)},
        )
        return [_row_to_entry(row) for row in rows]
