"""
Name: Bus Chat Use Case Tests

Responsibilities:
  - Open: owner roles only, target must be a driver, active chat is reused
  - List: owners see their chats, drivers the assigned ones
  - Messages: text and quick actions, counterpart messages marked read
  - Close: owner only, closed chats reject new messages
"""

from uuid import uuid4

import pytest

from app.application.usecases.bus_chat import (
    BusChatErrorCode,
    BusChatMessagesInput,
    CloseBusChatUseCase,
    ListBusChatMessagesUseCase,
    ListBusChatsInput,
    ListBusChatsUseCase,
    OpenBusChatInput,
    OpenBusChatUseCase,
    PostBusChatMessageInput,
    PostBusChatMessageUseCase,
)
from app.domain.bus_chat import QUICK_ACTIONS
from app.domain.entities import BusChatMessageType, BusChatStatus
from app.domain.roles import AppRole

pytestmark = pytest.mark.unit


@pytest.fixture
def owner(user_factory):
    return user_factory.create(AppRole.PARTNER)


@pytest.fixture
def driver(user_factory):
    return user_factory.create(AppRole.DRIVER)


@pytest.fixture
def open_chat(repos):
    return OpenBusChatUseCase(chats=repos.bus_chats, grants=repos.grants, audit_repo=repos.audit)


@pytest.fixture
def post(repos):
    return PostBusChatMessageUseCase(chats=repos.bus_chats)


@pytest.fixture
def chat(open_chat, owner, driver):
    result = open_chat.execute(
        OpenBusChatInput(
            actor_id=owner.user_id,
            actor_role=AppRole.PARTNER,
            bus_id=uuid4(),
            driver_id=driver.user_id,
        )
    )
    assert result.error is None
    return result.chat


def _message(actor, chat, role=AppRole.DRIVER, **fields) -> PostBusChatMessageInput:
    return PostBusChatMessageInput(
        actor_id=actor.user_id, actor_role=role, chat_id=chat.id, **fields
    )


class TestOpen:
    def test_opens_active_chat_and_audits(self, chat, owner, driver, repos):
        assert chat.status == BusChatStatus.ACTIVE
        assert chat.owner_id == owner.user_id
        assert chat.driver_id == driver.user_id

        [event] = repos.audit.list_events(action_prefix="bus_chats.")
        assert event.action == "bus_chats.create"
        assert event.metadata["driver_id"] == str(driver.user_id)

    def test_reuses_active_chat_for_same_bus(self, open_chat, chat, owner, driver):
        again = open_chat.execute(
            OpenBusChatInput(
                actor_id=owner.user_id,
                actor_role=AppRole.PARTNER,
                bus_id=chat.bus_id,
                driver_id=driver.user_id,
            )
        )

        assert again.created is False
        assert again.chat.id == chat.id

    def test_driver_cannot_open_chats(self, open_chat, driver, owner):
        result = open_chat.execute(
            OpenBusChatInput(
                actor_id=driver.user_id,
                actor_role=AppRole.DRIVER,
                bus_id=uuid4(),
                driver_id=owner.user_id,
            )
        )

        assert result.error.code == BusChatErrorCode.FORBIDDEN

    def test_target_must_hold_driver_role(self, open_chat, owner, user_factory):
        client = user_factory.create(AppRole.CLIENT)

        result = open_chat.execute(
            OpenBusChatInput(
                actor_id=owner.user_id,
                actor_role=AppRole.PARTNER,
                bus_id=uuid4(),
                driver_id=client.user_id,
            )
        )

        assert result.error.code == BusChatErrorCode.VALIDATION_ERROR
        assert "Conductor" in result.error.message


class TestList:
    def test_owner_and_driver_views(self, repos, chat, owner, driver, user_factory):
        use_case = ListBusChatsUseCase(chats=repos.bus_chats)

        as_owner = use_case.execute(ListBusChatsInput(owner.user_id, AppRole.PARTNER))
        as_driver = use_case.execute(ListBusChatsInput(driver.user_id, AppRole.DRIVER))
        outsider = user_factory.create(AppRole.ADMINISTRATOR)
        as_admin = use_case.execute(
            ListBusChatsInput(outsider.user_id, AppRole.ADMINISTRATOR)
        )

        assert [c.id for c in as_owner.chats] == [chat.id]
        assert [c.id for c in as_driver.chats] == [chat.id]
        assert as_admin.chats == []

    def test_other_roles_are_forbidden(self, repos, owner):
        result = ListBusChatsUseCase(chats=repos.bus_chats).execute(
            ListBusChatsInput(owner.user_id, AppRole.CLIENT)
        )

        assert result.error.code == BusChatErrorCode.FORBIDDEN


class TestMessages:
    def test_text_message_touches_chat(self, post, repos, chat, driver):
        result = post.execute(_message(driver, chat, content="  Llegando a Durán  "))

        assert result.error is None
        [message] = result.messages
        assert message.content == "Llegando a Durán"
        assert message.message_type == BusChatMessageType.TEXT
        stored = repos.bus_chats.get_chat(chat.id)
        assert stored.last_activity_at == message.created_at

    def test_quick_action_uses_canned_text(self, post, chat, driver):
        result = post.execute(_message(driver, chat, quick_action="report_delay"))

        [message] = result.messages
        assert message.message_type == BusChatMessageType.QUICK_ACTION
        assert message.content == QUICK_ACTIONS["report_delay"]
        assert message.metadata == {"action_type": "report_delay"}

    def test_unknown_quick_action(self, post, chat, driver):
        result = post.execute(_message(driver, chat, quick_action="honk"))

        assert result.error.code == BusChatErrorCode.VALIDATION_ERROR

    @pytest.mark.parametrize("content", [None, "   ", "x" * 2001])
    def test_invalid_text_is_rejected(self, post, chat, driver, content):
        result = post.execute(_message(driver, chat, content=content))

        assert result.error.code == BusChatErrorCode.VALIDATION_ERROR

    def test_outsider_sees_not_found(self, post, chat, user_factory):
        stranger = user_factory.create(AppRole.DRIVER)

        result = post.execute(_message(stranger, chat, content="hola"))

        assert result.error.code == BusChatErrorCode.NOT_FOUND

    def test_reading_marks_counterpart_messages(self, post, repos, chat, owner, driver):
        post.execute(_message(driver, chat, content="Bus en terminal"))
        post.execute(_message(owner, chat, role=AppRole.PARTNER, content="Recibido"))

        result = ListBusChatMessagesUseCase(chats=repos.bus_chats).execute(
            BusChatMessagesInput(owner.user_id, AppRole.PARTNER, chat.id)
        )

        from_driver, from_owner = result.messages
        assert from_driver.read_at is not None
        assert from_owner.read_at is None


class TestClose:
    def test_owner_closes_and_chat_rejects_messages(self, repos, post, chat, owner, driver):
        use_case = CloseBusChatUseCase(chats=repos.bus_chats, audit_repo=repos.audit)

        closed = use_case.execute(BusChatMessagesInput(owner.user_id, AppRole.PARTNER, chat.id))

        assert closed.chat.status == BusChatStatus.CLOSED
        assert repos.audit.list_events(action_prefix="bus_chats.close")
        rejected = post.execute(_message(driver, chat, content="¿Sigo en ruta?"))
        assert rejected.error.code == BusChatErrorCode.CONFLICT

    def test_driver_cannot_close(self, repos, chat, driver):
        result = CloseBusChatUseCase(chats=repos.bus_chats).execute(
            BusChatMessagesInput(driver.user_id, AppRole.DRIVER, chat.id)
        )

        assert result.error.code == BusChatErrorCode.FORBIDDEN

    def test_closing_twice_is_idempotent(self, repos, chat, owner):
        use_case = CloseBusChatUseCase(chats=repos.bus_chats, audit_repo=repos.audit)
        request = BusChatMessagesInput(owner.user_id, AppRole.PARTNER, chat.id)

        use_case.execute(request)
        again = use_case.execute(request)

        assert again.error is None
        assert again.chat.status == BusChatStatus.CLOSED
        assert len(repos.audit.list_events(action_prefix="bus_chats.close")) == 1
