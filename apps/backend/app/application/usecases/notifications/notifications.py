"""
===============================================================================
USE CASES: Notifications
===============================================================================

Business Goal:
    Bandeja de notificaciones in-app (solicitudes de roles, respuestas,
    avisos informativos).

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Classes:
    ListNotificationsUseCase, MarkNotificationReadUseCase

Responsibilities:
    - Listar las notificaciones propias (más nuevas primero, opcional
      sólo no leídas).
    - Marcar como leída; sólo el destinatario puede hacerlo.

Notas:
    - Notificación ajena se informa como NOT_FOUND (no se revela su existencia).
    - Marcar dos veces conserva el primer read_at.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List
from uuid import UUID

from ....domain.entities import Notification, utcnow
from ....domain.repositories import NotificationRepository

MSG_NOTIFICATION_NOT_FOUND = "Notificación no encontrada"

DEFAULT_LIMIT = 50
MAX_LIMIT = 200


class NotificationErrorCode(str, Enum):
    NOT_FOUND = "NOT_FOUND"


@dataclass(frozen=True)
class NotificationError:
    code: NotificationErrorCode
    message: str


@dataclass
class NotificationListResult:
    notifications: List[Notification] = field(default_factory=list)
    unread_count: int = 0


@dataclass
class NotificationResult:
    notification: Notification | None = None
    error: NotificationError | None = None


class ListNotificationsUseCase:
    def __init__(self, *, notifications: NotificationRepository) -> None:
        self._notifications = notifications

    def execute(
        self, user_id: UUID, *, unread_only: bool = False, limit: int = DEFAULT_LIMIT
    ) -> NotificationListResult:
        limit = max(1, min(limit, MAX_LIMIT))
        items = self._notifications.list_for_user(
            user_id, unread_only=unread_only, limit=limit
        )
        return NotificationListResult(
            notifications=items,
            unread_count=sum(1 for n in items if not n.is_read),
        )


class MarkNotificationReadUseCase:
    def __init__(self, *, notifications: NotificationRepository) -> None:
        self._notifications = notifications

    def execute(self, user_id: UUID, notification_id: UUID) -> NotificationResult:
        current = self._notifications.get_notification(notification_id)
        if current is None or current.user_id != user_id:
            return NotificationResult(
                error=NotificationError(
                    NotificationErrorCode.NOT_FOUND, MSG_NOTIFICATION_NOT_FOUND
                )
            )
        if current.is_read:
            return NotificationResult(notification=current)

        updated = self._notifications.mark_read(notification_id, utcnow())
        return NotificationResult(notification=updated or current)
