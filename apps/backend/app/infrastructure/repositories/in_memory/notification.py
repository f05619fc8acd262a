"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/notification.py
============================================================
Class: InMemoryNotificationRepository

Responsibilities:
  - Almacenar notificaciones en memoria (tests / local dev).
  - Listar por usuario (más nuevas primero) y marcar como leídas.
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from threading import Lock
from typing import Dict, List, Optional
from uuid import UUID

from ....domain.entities import Notification, utcnow
from ....domain.repositories import NotificationRepository


def _copy(notification: Notification) -> Notification:
    return replace(notification, metadata=dict(notification.metadata))


class InMemoryNotificationRepository(NotificationRepository):
    def __init__(self) -> None:
        self._lock = Lock()
        self._items: Dict[UUID, Notification] = {}
        self._seq: Dict[UUID, int] = {}

    def create_notification(self, notification: Notification) -> None:
        stored = _copy(notification)
        stored.created_at = stored.created_at or utcnow()
        with self._lock:
            self._items[stored.id] = stored
            self._seq[stored.id] = len(self._seq)

    def get_notification(self, notification_id: UUID) -> Optional[Notification]:
        with self._lock:
            item = self._items.get(notification_id)
            return _copy(item) if item else None

    def list_for_user(
        self, user_id: UUID, *, unread_only: bool = False, limit: int = 50
    ) -> List[Notification]:
        if limit <= 0:
            return []
        with self._lock:
            items = [
                (self._seq[n.id], _copy(n))
                for n in self._items.values()
                if n.user_id == user_id and not (unread_only and n.is_read)
            ]
        # R: created_at puede empatar; la secuencia de inserción desempata.
        items.sort(key=lambda pair: (pair[1].created_at, pair[0]), reverse=True)
        return [n for _, n in items[:limit]]

    def mark_read(
        self, notification_id: UUID, read_at: datetime
    ) -> Optional[Notification]:
        with self._lock:
            item = self._items.get(notification_id)
            if item is None:
                return None
            if item.read_at is None:
                item.read_at = read_at
            return _copy(item)
