"""
===============================================================================
TARJETA CRC — domain/__init__.py
===============================================================================

Módulo:
    Exportaciones de la Capa de Dominio (API pública del dominio)

Responsabilidades:
    - Centralizar exports para imports limpios en application/interfaces.
    - Mantener estable el “surface area” del dominio.

Colaboradores:
    - domain.roles / schedules / eligibility / session: flujo de roles.
    - domain.entities: entidades de tablas.
    - domain.repositories / services: puertos.

Reglas:
    - Solo re-exporta contratos/entidades del dominio.
    - No importar infraestructura aquí.
===============================================================================
"""

from .eligibility import RoleEligibility, evaluate_role_eligibility
from .entities import (
    AuditEvent,
    ChatMessage,
    ChatThread,
    Notification,
    Profile,
    RoleGrant,
    RoleRequest,
    RoleRequestStatus,
)
from .repositories import (
    AuditEventRepository,
    ChatRepository,
    NotificationRepository,
    ProfileRepository,
    RoleGrantRepository,
    RoleRequestRepository,
    ScheduleRepository,
)
from .roles import AppRole, parse_role
from .schedules import ScheduleWindow
from .services import AuthGateway, SelectionStore
from .session import AuthSession, RoleChoice, SessionState

__all__ = [
    # Roles / horarios / elegibilidad
    "AppRole",
    "parse_role",
    "ScheduleWindow",
    "RoleEligibility",
    "evaluate_role_eligibility",
    # Sesión
    "AuthSession",
    "RoleChoice",
    "SessionState",
    # Entidades
    "AuditEvent",
    "ChatMessage",
    "ChatThread",
    "Notification",
    "Profile",
    "RoleGrant",
    "RoleRequest",
    "RoleRequestStatus",
    # Puertos
    "AuditEventRepository",
    "ChatRepository",
    "NotificationRepository",
    "ProfileRepository",
    "RoleGrantRepository",
    "RoleRequestRepository",
    "ScheduleRepository",
    "AuthGateway",
    "SelectionStore",
]
