"""Schemas HTTP de notificaciones."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from app.domain.entities import Notification, NotificationType
from pydantic import BaseModel, Field


class NotificationRes(BaseModel):
    id: UUID
    title: str
    message: str
    type: NotificationType
    metadata: dict[str, Any] = Field(default_factory=dict)
    read: bool
    read_at: datetime | None = None
    created_at: datetime | None = None


class NotificationsListRes(BaseModel):
    notifications: list[NotificationRes]
    unread_count: int


def to_notification_res(n: Notification) -> NotificationRes:
    return NotificationRes(
        id=n.id,
        title=n.title,
        message=n.message,
        type=n.type,
        metadata=n.metadata,
        read=n.is_read,
        read_at=n.read_at,
        created_at=n.created_at,
    )
