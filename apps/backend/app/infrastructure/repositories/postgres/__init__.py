"""
PostgreSQL Repository Implementations.

Production implementations using psycopg 3 + psycopg_pool (raw SQL).
"""

from .audit_event import PostgresAuditEventRepository
from .bus_chat import PostgresBusChatRepository
from .chat import PostgresChatRepository
from .incident import PostgresIncidentRepository
from .notification import PostgresNotificationRepository
from .profile import PostgresProfileRepository
from .role_grant import PostgresRoleGrantRepository
from .role_request import PostgresRoleRequestRepository
from .schedule import PostgresScheduleRepository

__all__ = [
    "PostgresProfileRepository",
    "PostgresRoleGrantRepository",
    "PostgresScheduleRepository",
    "PostgresRoleRequestRepository",
    "PostgresNotificationRepository",
    "PostgresChatRepository",
    "PostgresBusChatRepository",
    "PostgresIncidentRepository",
    "PostgresAuditEventRepository",
]
