"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/audit_event.py
============================================================
Class: InMemoryAuditEventRepository

Responsibilities:
  - Registrar eventos de auditoría en memoria (append-only).
  - Listar con filtros (prefijo de acción / actor) y paginación.

Collaborators:
  - domain.repositories.AuditEventRepository (contrato)
  - app/audit.py (emisor best-effort)
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from threading import Lock
from typing import List, Optional

from ....domain.entities import AuditEvent, utcnow
from ....domain.repositories import AuditEventRepository


class InMemoryAuditEventRepository(AuditEventRepository):
    def __init__(self) -> None:
        self._lock = Lock()
        self._events: List[AuditEvent] = []

    def record_event(self, event: AuditEvent) -> None:
        stored = replace(
            event,
            metadata=dict(event.metadata),
            created_at=event.created_at or utcnow(),
        )
        with self._lock:
            self._events.append(stored)

    def list_events(
        self,
        *,
        action_prefix: Optional[str] = None,
        actor: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[AuditEvent]:
        if limit <= 0:
            return []
        offset = max(offset, 0)
        with self._lock:
            # Más nuevos primero: recorrer al revés mantiene el desempate estable.
            events = [
                replace(e, metadata=dict(e.metadata))
                for e in reversed(self._events)
                if (not action_prefix or e.action.startswith(action_prefix))
                and (not actor or e.actor == actor)
            ]
        return events[offset : offset + limit]
