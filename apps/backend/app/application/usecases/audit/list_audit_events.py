"""
===============================================================================
USE CASE: List Audit Events
===============================================================================

Reglas:
    - Sólo rol activo administrador o presidente.
    - Más nuevos primero; filtro por prefijo de acción ("schedules.") y actor.
    - Paginación limit/offset (limit acotado a MAX_LIMIT).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional
from uuid import UUID

from ....domain.entities import AuditEvent
from ....domain.repositories import AuditEventRepository
from ....domain.roles import AppRole

AUDIT_VIEWER_ROLES = frozenset({AppRole.ADMINISTRATOR, AppRole.PRESIDENT})
MSG_FORBIDDEN = "No tienes permisos para ver la auditoría"

DEFAULT_LIMIT = 50
MAX_LIMIT = 200


class AuditErrorCode(str, Enum):
    FORBIDDEN = "FORBIDDEN"


@dataclass(frozen=True)
class AuditError:
    code: AuditErrorCode
    message: str


@dataclass(frozen=True)
class ListAuditEventsInput:
    actor_id: UUID
    actor_role: Optional[AppRole]
    action_prefix: Optional[str] = None
    actor: Optional[str] = None
    limit: int = DEFAULT_LIMIT
    offset: int = 0


@dataclass
class AuditEventListResult:
    events: List[AuditEvent] = field(default_factory=list)
    limit: int = DEFAULT_LIMIT
    offset: int = 0
    error: AuditError | None = None


class ListAuditEventsUseCase:
    def __init__(self, *, audit_repo: AuditEventRepository) -> None:
        self._audit_repo = audit_repo

    def execute(self, input_data: ListAuditEventsInput) -> AuditEventListResult:
        if input_data.actor_role not in AUDIT_VIEWER_ROLES:
            return AuditEventListResult(
                error=AuditError(AuditErrorCode.FORBIDDEN, MSG_FORBIDDEN)
            )

        limit = max(1, min(input_data.limit, MAX_LIMIT))
        offset = max(0, input_data.offset)
        events = self._audit_repo.list_events(
            action_prefix=(input_data.action_prefix or "").strip() or None,
            actor=(input_data.actor or "").strip() or None,
            limit=limit,
            offset=offset,
        )
        return AuditEventListResult(events=events, limit=limit, offset=offset)
