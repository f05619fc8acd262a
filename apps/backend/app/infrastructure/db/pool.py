"""
===============================================================================
CRC CARD — infrastructure/db/pool.py
===============================================================================

Componente:
  Pool de conexiones a la base de la cooperativa (singleton por proceso)

Responsabilidades:
  - Abrir el pool en el arranque y cerrarlo al apagar.
  - Dejar cada conexión con statement_timeout, zona horaria de la
    cooperativa y application_name para identificar al back-office en
    pg_stat_activity.
  - Acotar la espera por una conexión libre (acquire_timeout).
  - SELECT 1 para /readyz.

Colaboradores:
  - psycopg_pool.ConnectionPool
  - api/main.py (lifespan, /readyz)
  - infrastructure/repositories/postgres/_base.py (get_pool)
===============================================================================
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Callable, Optional

from ...crosscutting.logger import logger
from .errors import (
    DatabaseConnectionError,
    PoolAlreadyInitializedError,
    PoolNotInitializedError,
)

if TYPE_CHECKING:
    from psycopg_pool import ConnectionPool

APPLICATION_NAME = "mariscal-sucre-backoffice"

_pool: Optional["ConnectionPool"] = None
_pool_lock = threading.Lock()


def connection_configurator(
    *, statement_timeout_ms: int, time_zone: str
) -> Callable[[object], None]:
    """Callback `configure` del pool: se aplica una vez por conexión nueva."""

    def configure(conn) -> None:
        if statement_timeout_ms > 0:
            conn.execute(
                "SELECT set_config('statement_timeout', %s, false)",
                (str(statement_timeout_ms),),
            )
        conn.execute("SELECT set_config('TimeZone', %s, false)", (time_zone,))
        conn.execute(
            "SELECT set_config('application_name', %s, false)", (APPLICATION_NAME,)
        )
        conn.commit()

    return configure


def init_pool(
    database_url: str,
    min_size: int,
    max_size: int,
    *,
    statement_timeout_ms: int = 30_000,
    time_zone: str = "UTC",
    acquire_timeout_seconds: float = 10.0,
) -> "ConnectionPool":
    global _pool

    with _pool_lock:
        if _pool is not None:
            raise PoolAlreadyInitializedError("El pool ya fue inicializado.")

        from psycopg_pool import ConnectionPool

        _pool = ConnectionPool(
            conninfo=database_url,
            min_size=min_size,
            max_size=max_size,
            timeout=acquire_timeout_seconds,
            configure=connection_configurator(
                statement_timeout_ms=statement_timeout_ms, time_zone=time_zone
            ),
            open=True,
        )
        logger.info(
            "Pool DB inicializado",
            extra={
                "min_size": min_size,
                "max_size": max_size,
                "statement_timeout_ms": statement_timeout_ms,
                "time_zone": time_zone,
            },
        )
        return _pool


def get_pool() -> "ConnectionPool":
    if _pool is None:
        raise PoolNotInitializedError(
            "Pool no inicializado. Llamar init_pool() primero."
        )
    return _pool


def is_pool_initialized() -> bool:
    return _pool is not None


def check_pool(timeout_seconds: float = 2.0) -> None:
    """
    SELECT 1 esperando a lo sumo timeout_seconds por una conexión.

    Raises:
        PoolNotInitializedError: sin init_pool().
        DatabaseConnectionError: la DB no responde.
    """
    pool = get_pool()
    try:
        with pool.connection(timeout=timeout_seconds) as conn:
            conn.execute("SELECT 1")
    except Exception as exc:
        raise DatabaseConnectionError(f"DB no disponible: {exc}") from exc


def close_pool() -> None:
    """Idempotente."""
    global _pool

    with _pool_lock:
        if _pool is None:
            return
        try:
            _pool.close()
        finally:
            _pool = None
        logger.info("Pool DB cerrado")


def reset_pool() -> None:
    """Descarta el singleton aunque close() falle (tests)."""
    global _pool

    with _pool_lock:
        if _pool is not None:
            try:
                _pool.close()
            except Exception as exc:  # noqa: BLE001
                logger.warning("Error cerrando pool DB", extra={"error": str(exc)})
        _pool = None
