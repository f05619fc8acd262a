"""
In-Memory Repository Implementations.

For testing and local development. NOT FOR PRODUCTION.
Data is lost on process restart.
"""

from .audit_event import InMemoryAuditEventRepository
from .bus_chat import InMemoryBusChatRepository
from .chat import InMemoryChatRepository
from .incident import InMemoryIncidentRepository
from .notification import InMemoryNotificationRepository
from .profile import InMemoryProfileRepository
from .role_grant import InMemoryRoleGrantRepository
from .role_request import InMemoryRoleRequestRepository
from .schedule import InMemoryScheduleRepository

__all__ = [
    # Identidad
    "InMemoryProfileRepository",
    "InMemoryRoleGrantRepository",
    # Horarios
    "InMemoryScheduleRepository",
    # Solicitudes / notificaciones
    "InMemoryRoleRequestRepository",
    "InMemoryNotificationRepository",
    # Soporte
    "InMemoryChatRepository",
    # Operación
    "InMemoryBusChatRepository",
    "InMemoryIncidentRepository",
    # Auditoría
    "InMemoryAuditEventRepository",
]
