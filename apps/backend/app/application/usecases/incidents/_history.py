"""Escritura de incident_audit_log y parseo de enums crudos."""

from __future__ import annotations

from enum import Enum
from typing import Optional, TypeVar
from uuid import UUID, uuid4

from ....crosscutting.logger import logger
from ....domain.entities import IncidentAuditEntry, utcnow
from ....domain.repositories import IncidentRepository
from .incident_results import MSG_INVALID_VALUE, IncidentError, IncidentErrorCode

E = TypeVar("E", bound=Enum)


def parse_choice(
    enum_cls: type[E], value: str, field_name: str
) -> tuple[Optional[E], IncidentError | None]:
    try:
        return enum_cls(str(value).strip().lower()), None
    except ValueError:
        return None, IncidentError(
            IncidentErrorCode.VALIDATION_ERROR,
            MSG_INVALID_VALUE.format(field=field_name, value=value),
        )


def append_history(
    incidents: IncidentRepository,
    *,
    incident_id: UUID,
    user_id: UUID,
    action: str,
    changes: dict | None = None,
    notes: str | None = None,
) -> IncidentAuditEntry | None:
    """Best-effort: el incidente ya quedó guardado; una falla acá sólo se loguea."""
    entry = IncidentAuditEntry(
        id=uuid4(),
        incident_id=incident_id,
        user_id=user_id,
        action=action,
        changes=changes or {},
        notes=notes,
        created_at=utcnow(),
    )
    try:
        incidents.add_log_entry(entry)
    except Exception as exc:
        logger.error(
            "No se pudo registrar la bitácora del incidente",
            extra={"incident_id": str(incident_id), "action": action, "error": str(exc)},
        )
        return None
    return entry
