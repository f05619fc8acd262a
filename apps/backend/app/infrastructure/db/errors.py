"""
===============================================================================
CRC CARD — infrastructure/db/errors.py
===============================================================================

Componente:
  Errores del pool de la base de la cooperativa

Responsabilidades:
  - Distinguir "pool sin inicializar", "pool ya inicializado" y "DB caída".
  - Heredar de DatabaseError: si escapan de un request terminan en
    503 DATABASE_ERROR vía api/exception_handlers.
===============================================================================
"""

from ...crosscutting.exceptions import DatabaseError


class DatabasePoolError(DatabaseError):
    error_code: str = "DATABASE_POOL_ERROR"


class PoolAlreadyInitializedError(DatabasePoolError):
    """init_pool() llamado dos veces en el mismo proceso."""


class PoolNotInitializedError(DatabasePoolError):
    """Repositorio Postgres usado sin init_pool() (p.ej. sin DATABASE_URL en arranque)."""


class DatabaseConnectionError(DatabasePoolError):
    """La DB no respondió al check de conectividad."""

    error_code: str = "DATABASE_UNREACHABLE"
