"""
============================================================
TARJETA CRC
============================================================
Class: app.infrastructure.repositories (Package exports)

Responsibilities:
- Exponer implementaciones concretas de repositorios (Postgres e InMemory)
  en un único punto de importación.
- Mantener una API estable para el container.

Collaborators:
- Repositorios Postgres (SQL crudo)
- Repositorios InMemory (testing / local)
============================================================
"""

# ---------------------------
# In-memory implementations
# Usados para tests unitarios rápidos o entornos volátiles.
# ---------------------------
from .in_memory import (
    InMemoryAuditEventRepository,
    InMemoryBusChatRepository,
    InMemoryChatRepository,
    InMemoryIncidentRepository,
    InMemoryNotificationRepository,
    InMemoryProfileRepository,
    InMemoryRoleGrantRepository,
    InMemoryRoleRequestRepository,
    InMemoryScheduleRepository,
)

# ---------------------------
# Postgres implementations
# ---------------------------
from .postgres import (
    PostgresAuditEventRepository,
    PostgresBusChatRepository,
    PostgresChatRepository,
    PostgresIncidentRepository,
    PostgresNotificationRepository,
    PostgresProfileRepository,
    PostgresRoleGrantRepository,
    PostgresRoleRequestRepository,
    PostgresScheduleRepository,
)

__all__ = [
    # Postgres
    "PostgresProfileRepository",
    "PostgresRoleGrantRepository",
    "PostgresScheduleRepository",
    "PostgresRoleRequestRepository",
    "PostgresNotificationRepository",
    "PostgresChatRepository",
    "PostgresBusChatRepository",
    "PostgresIncidentRepository",
    "PostgresAuditEventRepository",
    # In-memory
    "InMemoryProfileRepository",
    "InMemoryRoleGrantRepository",
    "InMemoryScheduleRepository",
    "InMemoryRoleRequestRepository",
    "InMemoryNotificationRepository",
    "InMemoryChatRepository",
    "InMemoryBusChatRepository",
    "InMemoryIncidentRepository",
    "InMemoryAuditEventRepository",
]
