"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/incident.py
============================================================
Class: InMemoryIncidentRepository

Responsibilities:
  - Almacenar incidentes de vía y su bitácora en memoria.
  - Aplicar moderaciones sólo si el estado no cambió entre lectura y escritura.
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from threading import Lock
from typing import Dict, List, Optional
from uuid import UUID

from ....domain.entities import (
    IncidentAuditEntry,
    IncidentStatus,
    RoadIncident,
    utcnow,
)
from ....domain.repositories import IncidentRepository


def _copy(incident: RoadIncident) -> RoadIncident:
    return replace(incident, affected_routes=list(incident.affected_routes))


class InMemoryIncidentRepository(IncidentRepository):
    def __init__(self) -> None:
        self._lock = Lock()
        self._incidents: Dict[UUID, RoadIncident] = {}
        self._seq: Dict[UUID, int] = {}
        self._log: List[IncidentAuditEntry] = []

    def create_incident(self, incident: RoadIncident) -> None:
        stored = _copy(incident)
        stored.created_at = stored.created_at or utcnow()
        with self._lock:
            self._incidents[stored.id] = stored
            self._seq[stored.id] = len(self._seq)

    def get_incident(self, incident_id: UUID) -> Optional[RoadIncident]:
        with self._lock:
            incident = self._incidents.get(incident_id)
            return _copy(incident) if incident else None

    def list_incidents(
        self, *, status: Optional[IncidentStatus] = None, limit: int = 100
    ) -> List[RoadIncident]:
        if limit <= 0:
            return []
        with self._lock:
            items = [
                (self._seq[i.id], _copy(i))
                for i in self._incidents.values()
                if status is None or i.status == status
            ]
        items.sort(key=lambda pair: (pair[1].created_at, pair[0]), reverse=True)
        return [i for _, i in items[:limit]]

    def update_moderation(
        self, incident: RoadIncident, *, expected_status: IncidentStatus
    ) -> bool:
        with self._lock:
            stored = self._incidents.get(incident.id)
            if stored is None or stored.status != expected_status:
                return False
            stored.status = incident.status
            stored.moderator_id = incident.moderator_id
            stored.moderated_at = incident.moderated_at
            stored.resolved_at = incident.resolved_at
            return True

    def add_log_entry(self, entry: IncidentAuditEntry) -> None:
        stored = replace(
            entry, changes=dict(entry.changes), created_at=entry.created_at or utcnow()
        )
        with self._lock:
            self._log.append(stored)

    def list_log_entries(self, incident_id: UUID) -> List[IncidentAuditEntry]:
        with self._lock:
            return [
                replace(e, changes=dict(e.changes))
                for e in self._log
                if e.incident_id == incident_id
            ]
