"""Pool de conexiones a la base de la cooperativa y sus errores."""

from .errors import (
    DatabaseConnectionError,
    DatabasePoolError,
    PoolAlreadyInitializedError,
    PoolNotInitializedError,
)
from .pool import (
    check_pool,
    close_pool,
    get_pool,
    init_pool,
    is_pool_initialized,
    reset_pool,
)

__all__ = [
    "init_pool",
    "get_pool",
    "check_pool",
    "close_pool",
    "reset_pool",
    "is_pool_initialized",
    "DatabasePoolError",
    "PoolAlreadyInitializedError",
    "PoolNotInitializedError",
    "DatabaseConnectionError",
]
