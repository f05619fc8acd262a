"""Router de notificaciones in-app (sólo las propias)."""

from __future__ import annotations

from uuid import UUID

from app.application.usecases.notifications import (
    ListNotificationsUseCase,
    MarkNotificationReadUseCase,
)
from app.container import (
    get_list_notifications_use_case,
    get_mark_notification_read_use_case,
)
from app.identity.auth_users import CurrentUser, require_user
from fastapi import APIRouter, Depends, Query

from ..error_mapping import raise_notification_error
from ..schemas.notifications import (
    NotificationRes,
    NotificationsListRes,
    to_notification_res,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationsListRes)
def list_notifications(
    unread_only: bool = Query(False),
    limit: int = Query(50, ge=1, le=200),
    user: CurrentUser = Depends(require_user()),
    use_case: ListNotificationsUseCase = Depends(get_list_notifications_use_case),
):
    result = use_case.execute(user.user_id, unread_only=unread_only, limit=limit)
    return NotificationsListRes(
        notifications=[to_notification_res(n) for n in result.notifications],
        unread_count=result.unread_count,
    )


@router.post("/{notification_id}/read", response_model=NotificationRes)
def mark_notification_read(
    notification_id: UUID,
    user: CurrentUser = Depends(require_user()),
    use_case: MarkNotificationReadUseCase = Depends(get_mark_notification_read_use_case),
):
    result = use_case.execute(user.user_id, notification_id)
    if result.error is not None:
        raise_notification_error(result.error)
    return to_notification_res(result.notification)
