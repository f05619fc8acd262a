"""
============================================================
TARJETA CRC — infrastructure/session_store.py
============================================================
Module: Role Selection Store (backends)

Responsibilities:
  - Persistir la selección de rol activo por sesión ("selectedRole").
  - Expirar entradas por TTL y acotar el store en memoria (LRU).
  - Backends:
      - Redis (producción, compartido entre workers)
      - In-memory (tests / local)

Collaborators:
  - domain.services.SelectionStore (contrato)
  - redis-py (cliente síncrono con socket timeouts)
  - crosscutting.exceptions.SelectionStoreError

Policy / Design Notes:
  - A diferencia de una caché, la selección NO es best-effort: si Redis
    falla se levanta SelectionStoreError y el request termina en 503.
  - Claves namespaced: "backoffice:session:<scope>:<key>".
============================================================
"""

from __future__ import annotations

import time
from collections import OrderedDict
from dataclasses import dataclass
from threading import Lock
from typing import Callable, Optional, Tuple

from ..crosscutting.exceptions import SelectionStoreError
from ..crosscutting.logger import logger


@dataclass(frozen=True, slots=True)
class _Entry:
    value: str
    expires_at: float


class InMemorySelectionStore:
    """
    Store en memoria con:
      - TTL por entrada
      - Tope de entradas con eviction LRU (OrderedDict)
      - Thread-safety con Lock

    NO comparte estado entre procesos.
    """

    def __init__(
        self,
        *,
        ttl_seconds: float = 3600,
        max_entries: int = 10_000,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")
        if max_entries <= 0:
            raise ValueError("max_entries must be > 0")
        self._ttl_seconds = float(ttl_seconds)
        self._max_entries = int(max_entries)
        self._clock = clock
        self._items: "OrderedDict[Tuple[str, str], _Entry]" = OrderedDict()
        self._lock = Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def get_item(self, scope: str, key: str) -> Optional[str]:
        now = self._clock()
        with self._lock:
            entry = self._items.get((scope, key))
            if entry is None:
                return None
            if entry.expires_at <= now:
                self._items.pop((scope, key), None)
                return None
            self._items.move_to_end((scope, key), last=True)
            return entry.value

    def set_item(self, scope: str, key: str, value: str) -> None:
        now = self._clock()
        with self._lock:
            if (scope, key) in self._items:
                self._items.move_to_end((scope, key), last=True)
            elif len(self._items) >= self._max_entries:
                self._purge_expired(now)
                if len(self._items) >= self._max_entries:
                    self._items.popitem(last=False)  # LRU
            self._items[(scope, key)] = _Entry(
                value=value, expires_at=now + self._ttl_seconds
            )

    def remove_item(self, scope: str, key: str) -> None:
        with self._lock:
            self._items.pop((scope, key), None)

    def _purge_expired(self, now: float) -> None:
        expired = [k for k, entry in self._items.items() if entry.expires_at <= now]
        for k in expired:
            del self._items[k]


class RedisSelectionStore:
    """Store Redis con TTL nativo (SET EX)."""

    KEY_PREFIX = "backoffice:session:"

    def __init__(
        self,
        *,
        redis_url: str,
        ttl_seconds: int = 3600,
        socket_timeout_seconds: float = 5.0,
        client=None,
    ) -> None:
        if not redis_url and client is None:
            raise ValueError("redis_url is required")

        if client is None:
            import redis

            client = redis.from_url(
                redis_url,
                decode_responses=True,
                socket_timeout=socket_timeout_seconds,
                socket_connect_timeout=socket_timeout_seconds,
            )
        self._client = client
        self._ttl_seconds = int(ttl_seconds)

    def _k(self, scope: str, key: str) -> str:
        return f"{self.KEY_PREFIX}{scope}:{key}"

    def _fail(self, operation: str, exc: Exception) -> SelectionStoreError:
        logger.error(
            "Selection store failure",
            extra={"operation": operation, "error": str(exc)},
        )
        return SelectionStoreError(
            f"Selection store {operation} failed: {exc}", original_error=exc
        )

    def get_item(self, scope: str, key: str) -> Optional[str]:
        try:
            return self._client.get(self._k(scope, key))
        except Exception as exc:
            raise self._fail("get", exc) from exc

    def set_item(self, scope: str, key: str, value: str) -> None:
        try:
            self._client.set(self._k(scope, key), value, ex=self._ttl_seconds)
        except Exception as exc:
            raise self._fail("set", exc) from exc

    def remove_item(self, scope: str, key: str) -> None:
        try:
            self._client.delete(self._k(scope, key))
        except Exception as exc:
            raise self._fail("remove", exc) from exc

    def ping(self) -> bool:
        try:
            return bool(self._client.ping())
        except Exception as exc:
            raise self._fail("ping", exc) from exc
