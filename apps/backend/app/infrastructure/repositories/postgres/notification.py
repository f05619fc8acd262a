"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/notification.py
============================================================
Class: PostgresNotificationRepository

Responsibilities:
  - Insertar/listar/marcar notificaciones (`notifications`).
============================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from psycopg.types.json import Json

from ....domain.entities import Notification, NotificationType
from ._base import PostgresRepository

_NOTIFICATION_COLUMNS = "id, user_id, title, message, type, metadata, read_at, created_at"


def _to_type(value: str) -> NotificationType:
    # R: tipos futuros no rompen la lectura; se degradan a info.
    try:
        return NotificationType(value)
    except ValueError:
        return NotificationType.INFO


def _row_to_notification(row: tuple) -> Notification:
    return Notification(
        id=row[0],
        user_id=row[1],
        title=row[2],
        message=row[3],
        type=_to_type(row[4]),
        metadata=dict(row[5] or {}),
        read_at=row[6],
        created_at=row[7],
    )


class PostgresNotificationRepository(PostgresRepository):
    def create_notification(self, notification: Notification) -> None:
        self._execute(
            query="""
                INSERT INTO notifications (id, user_id, title, message, type, metadata)
                VALUES (%s, %s, %s, %s, %s, %s)
            """,
            params=[
                notification.id,
                notification.user_id,
                notification.title,
                notification.message,
                notification.type.value,
                Json(notification.metadata or {}),
            ],
            error_message="PostgresNotificationRepository: Failed to create notification",
            extra={"user_id": str(notification.user_id)},
        )

    def get_notification(self, notification_id: UUID) -> Optional[Notification]:
        row = self._fetchone(
            query=f"SELECT {_NOTIFICATION_COLUMNS} FROM notifications WHERE id = %s",
            params=[notification_id],
            error_message="PostgresNotificationRepository: Failed to get notification",
            extra={"notification_id": str(notification_id)},
        )
        return _row_to_notification(row) if row else None

    def list_for_user(
        self, user_id: UUID, *, unread_only: bool = False, limit: int = 50
    ) -> List[Notification]:
        if limit <= 0:
            return []
        unread = "AND read_at IS NULL" if unread_only else ""
        rows = self._fetchall(
            query=f"""
                SELECT {_NOTIFICATION_COLUMNS}
                FROM notifications
                WHERE user_id = %s {unread}
                ORDER BY created_at DESC, id DESC
                LIMIT %s
            """,
            params=[user_id, limit],
            error_message="PostgresNotificationRepository: Failed to list notifications",
            extra={"user_id": str(user_id)},
        )
        return [_row_to_notification(row) for row in rows]

    def mark_read(
        self, notification_id: UUID, read_at: datetime
    ) -> Optional[Notification]:
        row = self._fetchone(
            query=f"""
                UPDATE notifications
                SET read_at = COALESCE(read_at, %s)
                WHERE id = %s
                RETURNING {_NOTIFICATION_COLUMNS}
            """,
            params=[read_at, notification_id],
            error_message="PostgresNotificationRepository: Failed to mark notification",
            extra={"notification_id": str(notification_id)},
        )
        return _row_to_notification(row) if row else None
