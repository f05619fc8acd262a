from .notifications import (
    ListNotificationsUseCase,
    MarkNotificationReadUseCase,
    NotificationError,
    NotificationErrorCode,
    NotificationListResult,
    NotificationResult,
)

__all__ = [
    "ListNotificationsUseCase",
    "MarkNotificationReadUseCase",
    "NotificationError",
    "NotificationErrorCode",
    "NotificationListResult",
    "NotificationResult",
]
