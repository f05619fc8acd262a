"""
Name: Notification Use Case Tests
"""

from uuid import uuid4

import pytest

from app.application.usecases.notifications import (
    ListNotificationsUseCase,
    MarkNotificationReadUseCase,
    NotificationErrorCode,
)
from app.domain.entities import Notification, NotificationType

pytestmark = pytest.mark.unit


def _notify(repo, user_id, title="Aviso") -> Notification:
    notification = Notification(
        id=uuid4(),
        user_id=user_id,
        title=title,
        message="Mensaje",
        type=NotificationType.INFO,
    )
    repo.create_notification(notification)
    return notification


def test_list_returns_newest_first_with_unread_count(repos):
    user_id = uuid4()
    _notify(repos.notifications, user_id, "primera")
    _notify(repos.notifications, user_id, "segunda")
    _notify(repos.notifications, uuid4(), "ajena")

    result = ListNotificationsUseCase(notifications=repos.notifications).execute(user_id)

    assert [n.title for n in result.notifications] == ["segunda", "primera"]
    assert result.unread_count == 2


def test_list_unread_only(repos):
    user_id = uuid4()
    first = _notify(repos.notifications, user_id, "leída")
    _notify(repos.notifications, user_id, "nueva")
    MarkNotificationReadUseCase(notifications=repos.notifications).execute(
        user_id, first.id
    )

    result = ListNotificationsUseCase(notifications=repos.notifications).execute(
        user_id, unread_only=True
    )

    assert [n.title for n in result.notifications] == ["nueva"]


def test_list_limit_is_clamped(repos):
    user_id = uuid4()
    for _ in range(3):
        _notify(repos.notifications, user_id)

    result = ListNotificationsUseCase(notifications=repos.notifications).execute(
        user_id, limit=0
    )

    assert len(result.notifications) == 1


def test_mark_read_sets_timestamp_once(repos):
    user_id = uuid4()
    note = _notify(repos.notifications, user_id)
    use_case = MarkNotificationReadUseCase(notifications=repos.notifications)

    first = use_case.execute(user_id, note.id)
    second = use_case.execute(user_id, note.id)

    assert first.notification.read_at is not None
    assert second.notification.read_at == first.notification.read_at


def test_mark_read_of_foreign_notification_is_not_found(repos):
    note = _notify(repos.notifications, uuid4())

    result = MarkNotificationReadUseCase(notifications=repos.notifications).execute(
        uuid4(), note.id
    )

    assert result.error.code == NotificationErrorCode.NOT_FOUND
    assert repos.notifications.get_notification(note.id).read_at is None
