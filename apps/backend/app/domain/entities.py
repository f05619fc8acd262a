"""
===============================================================================
TARJETA CRC — domain/entities.py
===============================================================================

Módulo:
    Entidades del Dominio (Profile, RoleGrant, RoleRequest, Notification,
    ChatThread, ChatMessage, BusChat, BusChatMessage, RoadIncident,
    IncidentAuditEntry, AuditEvent)

Responsabilidades:
    - Definir estructuras centrales del back-office (sin infraestructura).
    - Brindar helpers mínimos para mantener invariantes simples.
    - Mantener tipos claros para casos de uso y repositorios.

Colaboradores:
    - domain.repositories: persisten/recuperan estas entidades.
    - application/usecases: construyen/consumen estas entidades.
    - interfaces/api: serializan DTOs basados en estas entidades.

Principios:
    - Sin dependencias a DB/Redis/FastAPI.
    - Las tablas viven en el backend gestionado; acá sólo el contrato.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional
from uuid import UUID

from .roles import AppRole


def utcnow() -> datetime:
    """Fecha/hora UTC."""
    return datetime.now(timezone.utc)


# Remitente de mensajes automáticos (bot de soporte / sistema).
SYSTEM_SENDER_ID = UUID("00000000-0000-0000-0000-000000000000")


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------


@dataclass
class Profile:
    """Datos personales 1:1 con la identidad de auth (tabla profiles)."""

    user_id: UUID
    first_name: str
    surname_1: str
    id_number: str
    middle_name: Optional[str] = None
    surname_2: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    avatar_url: Optional[str] = None
    email: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def display_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.surname_1) if p).strip()


# ---------------------------------------------------------------------------
# RoleGrant
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RoleGrant:
    """Par (usuario, rol) de la tabla user_roles."""

    user_id: UUID
    role: AppRole
    created_at: Optional[datetime] = None


# ---------------------------------------------------------------------------
# RoleRequest
# ---------------------------------------------------------------------------


class RoleRequestStatus(str, Enum):
    PENDING = "pending"
    PARTIAL = "partial"
    PROCESSED = "processed"
    # Valores históricos de solicitudes de un solo rol (sólo lectura).
    APPROVED = "approved"
    REJECTED = "rejected"


OPEN_REQUEST_STATUSES = frozenset({RoleRequestStatus.PENDING, RoleRequestStatus.PARTIAL})


@dataclass
class RoleRequest:
    """Solicitud de roles adicionales (tabla role_requests)."""

    id: UUID
    requester_id: UUID
    requested_roles: list[AppRole]
    justification: str
    status: RoleRequestStatus = RoleRequestStatus.PENDING
    approved_roles: list[AppRole] = field(default_factory=list)
    rejected_roles: list[AppRole] = field(default_factory=list)
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[UUID] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.status in OPEN_REQUEST_STATUSES

    def pending_roles(self) -> list[AppRole]:
        resolved = set(self.approved_roles) | set(self.rejected_roles)
        return [r for r in self.requested_roles if r not in resolved]


# ---------------------------------------------------------------------------
# Notification
# ---------------------------------------------------------------------------


class NotificationType(str, Enum):
    ROLE_REQUEST = "role_request"
    ROLE_RESPONSE = "role_response"
    INFO = "info"


@dataclass
class Notification:
    id: UUID
    user_id: UUID
    title: str
    message: str
    type: NotificationType = NotificationType.INFO
    metadata: Dict[str, Any] = field(default_factory=dict)
    read_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def is_read(self) -> bool:
        return self.read_at is not None


# ---------------------------------------------------------------------------
# Support chat
# ---------------------------------------------------------------------------


class ChatThreadStatus(str, Enum):
    ACTIVE = "active"
    CLOSED = "closed"


class ChatMessageType(str, Enum):
    TEXT = "text"
    SYSTEM = "system"


@dataclass
class ChatThread:
    id: UUID
    client_id: UUID
    subject: str
    status: ChatThreadStatus = ChatThreadStatus.ACTIVE
    last_message_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


@dataclass
class ChatMessage:
    id: UUID
    thread_id: UUID
    sender_id: UUID
    message_type: ChatMessageType
    content: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    created_at: Optional[datetime] = None


# ---------------------------------------------------------------------------
# Bus chat (dueño <-> conductor)
# ---------------------------------------------------------------------------


class BusChatStatus(str, Enum):
    ACTIVE = "active"
    CLOSED = "closed"


class BusChatMessageType(str, Enum):
    TEXT = "text"
    QUICK_ACTION = "quick_action"


@dataclass
class BusChat:
    """Canal entre el dueño de un bus y su conductor (tabla bus_chats)."""

    id: UUID
    bus_id: UUID
    owner_id: UUID
    driver_id: UUID
    status: BusChatStatus = BusChatStatus.ACTIVE
    last_activity_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    def is_participant(self, user_id: UUID) -> bool:
        return user_id in (self.owner_id, self.driver_id)


@dataclass
class BusChatMessage:
    """Fila de chat_messages con bus_chat_id."""

    id: UUID
    chat_id: UUID
    sender_id: UUID
    message_type: BusChatMessageType
    content: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    read_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


# ---------------------------------------------------------------------------
# Road incidents
# ---------------------------------------------------------------------------


class IncidentSeverity(str, Enum):
    LOW = "baja"
    MEDIUM = "media"
    HIGH = "alta"
    CRITICAL = "critica"


class IncidentStatus(str, Enum):
    ACTIVE = "activo"
    RESOLVED = "resuelto"
    CLOSED = "cerrado"


class IncidentType(str, Enum):
    ACCIDENT = "accidente"
    ROAD_CLOSURE = "cierre_via"
    PROTEST = "manifestacion"
    CONSTRUCTION = "construccion"
    FINE = "multa"
    POLICE_CHECK = "revision"
    OTHER = "otro"


@dataclass
class RoadIncident:
    """Incidente de vía reportado por conductores/dirigentes (road_incidents)."""

    id: UUID
    reporter_id: UUID
    incident_type: IncidentType
    title: str
    description: str
    location_description: str
    severity: IncidentSeverity = IncidentSeverity.MEDIUM
    status: IncidentStatus = IncidentStatus.ACTIVE
    affected_routes: list[str] = field(default_factory=list)
    moderator_id: Optional[UUID] = None
    moderated_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


@dataclass(slots=True)
class IncidentAuditEntry:
    """
    Fila de incident_audit_log.

    action: "created" o "status_change" (changes = {old_status, new_status}).
    """

    id: UUID
    incident_id: UUID
    user_id: UUID
    action: str
    changes: Dict[str, Any] = field(default_factory=dict)
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


# ---------------------------------------------------------------------------
# Audit log
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class AuditEvent:
    """
    Fila de audit_log (append-only).

    actor: "user:<uuid>" o "system".
    """

    id: UUID
    actor: str
    action: str
    target_id: Optional[UUID] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    created_at: Optional[datetime] = None
