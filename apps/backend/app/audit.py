"""
===============================================================================
TARJETA CRC — app/audit.py (Bitácora del back-office)
===============================================================================

Responsabilidades:
  - Catálogo de acciones auditables (altas de usuarios, cambios de roles,
    solicitudes de roles, horarios, chat de buses, incidentes).
  - Construir el AuditEvent con actor "user:<uuid>" o "system".
  - Persistir best-effort: una falla de la bitácora no revierte la operación.

Colaboradores:
  - app.domain.entities.AuditEvent
  - app.domain.repositories.AuditEventRepository
  - casos de uso de accounts / role_requests / schedules / bus_chat / incidents

Reglas:
  - La metadata nunca lleva email, cédula, teléfono ni contraseñas.
  - Enums se guardan por valor; UUIDs y fechas como string.
===============================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from .crosscutting.logger import logger
from .domain.entities import AuditEvent
from .domain.repositories import AuditEventRepository

SYSTEM_ACTOR = "system"

_PERSONAL_DATA_KEYS = frozenset({"email", "id_number", "phone", "password"})


class AuditAction(str, Enum):
    USER_SIGNUP = "users.signup"
    USER_CREATED = "users.create"
    USER_ROLES_REPLACED = "user_roles.replace"
    USER_ROLE_REVOKED = "user_roles.delete"
    ROLE_REQUEST_CREATED = "role_requests.create"
    ROLE_REQUEST_RESOLVED = "role_requests.resolve"
    SCHEDULE_CREATED = "schedules.create"
    SCHEDULE_TOGGLED = "schedules.toggle"
    SCHEDULE_DELETED = "schedules.delete"
    BUS_CHAT_OPENED = "bus_chats.create"
    BUS_CHAT_CLOSED = "bus_chats.close"
    INCIDENT_REPORTED = "road_incidents.create"
    INCIDENT_MODERATED = "road_incidents.moderate"


def actor_for_user(user_id: UUID | None) -> str:
    if user_id is None:
        return SYSTEM_ACTOR
    return f"user:{user_id}"


def _metadata_value(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Enum):
        return _metadata_value(value.value)
    if isinstance(value, dict):
        return {
            str(k): _metadata_value(v)
            for k, v in value.items()
            if str(k) not in _PERSONAL_DATA_KEYS
        }
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_metadata_value(v) for v in value]
    return str(value)


def emit_audit_event(
    repository: AuditEventRepository | None,
    *,
    action: AuditAction | str,
    actor_id: UUID | None = None,
    target_id: UUID | None = None,
    metadata: dict[str, Any] | None = None,
) -> AuditEvent | None:
    """
    Registra una acción en la bitácora.

    Devuelve el evento persistido, o None si no hay repositorio o la
    escritura falló (queda en el log como warning).
    """
    if repository is None:
        return None

    action_name = action.value if isinstance(action, AuditAction) else action
    event = AuditEvent(
        id=uuid4(),
        actor=actor_for_user(actor_id),
        action=action_name,
        target_id=target_id,
        metadata=_metadata_value(metadata or {}),
    )

    try:
        repository.record_event(event)
    except Exception as exc:  # noqa: BLE001
        logger.warning(
            "No se pudo registrar el evento de auditoría",
            extra={"action": action_name, "error": str(exc)},
        )
        return None
    return event
