"""
===============================================================================
USE CASES: Bus Chat (dueño <-> conductor)
===============================================================================

Business Goal:
    Canal directo entre el dueño de un bus (socio o administrador) y el
    conductor asignado: texto libre y acciones rápidas (retraso, retiro
    del bus, ubicación).

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Classes:
    OpenBusChatUseCase, ListBusChatsUseCase, ListBusChatMessagesUseCase,
    PostBusChatMessageUseCase, CloseBusChatUseCase

Responsibilities:
    - Abrir (o reutilizar) el chat activo de un bus con un conductor.
    - Listar chats según el rol activo: dueños ven los propios, conductores
      los asignados.
    - Leer la transcripción marcando como leído lo enviado por la contraparte.
    - Publicar mensajes en chats activos y registrar la actividad.
    - Cerrar el chat (sólo el dueño).

Collaborators:
    - BusChatRepository, RoleGrantRepository
    - domain.bus_chat (acciones rápidas)
    - audit.emit_audit_event (apertura / cierre)

Notas:
    - Un chat ajeno responde "no encontrado" (no se revela su existencia).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from uuid import UUID, uuid4

from ....audit import AuditAction, emit_audit_event
from ....domain.bus_chat import quick_action_message
from ....domain.entities import (
    BusChat,
    BusChatMessage,
    BusChatMessageType,
    BusChatStatus,
    utcnow,
)
from ....domain.repositories import (
    AuditEventRepository,
    BusChatRepository,
    RoleGrantRepository,
)
from ....domain.roles import BUS_CHAT_ROLES, BUS_OWNER_ROLES, AppRole
from .bus_chat_results import (
    MAX_MESSAGE_LENGTH,
    MSG_CHAT_CLOSED,
    MSG_CHAT_NOT_FOUND,
    MSG_EMPTY_MESSAGE,
    MSG_FORBIDDEN,
    MSG_MESSAGE_TOO_LONG,
    MSG_NOT_A_DRIVER,
    MSG_OWNER_ONLY,
    MSG_SELF_CHAT,
    MSG_UNKNOWN_QUICK_ACTION,
    BusChatError,
    BusChatErrorCode,
    BusChatListResult,
    BusChatResult,
)

_FORBIDDEN = BusChatError(BusChatErrorCode.FORBIDDEN, MSG_FORBIDDEN)
_NOT_FOUND = BusChatError(BusChatErrorCode.NOT_FOUND, MSG_CHAT_NOT_FOUND)


def _error(code: BusChatErrorCode, message: str) -> BusChatResult:
    return BusChatResult(error=BusChatError(code=code, message=message))


def _participant_chat(
    chats: BusChatRepository, chat_id: UUID, user_id: UUID
) -> Optional[BusChat]:
    chat = chats.get_chat(chat_id)
    if chat is None or not chat.is_participant(user_id):
        return None
    return chat


@dataclass(frozen=True)
class OpenBusChatInput:
    actor_id: UUID
    actor_role: Optional[AppRole]
    bus_id: UUID
    driver_id: UUID


@dataclass(frozen=True)
class ListBusChatsInput:
    actor_id: UUID
    actor_role: Optional[AppRole]


@dataclass(frozen=True)
class BusChatMessagesInput:
    actor_id: UUID
    actor_role: Optional[AppRole]
    chat_id: UUID


@dataclass(frozen=True)
class PostBusChatMessageInput:
    actor_id: UUID
    actor_role: Optional[AppRole]
    chat_id: UUID
    content: Optional[str] = None
    quick_action: Optional[str] = None


class OpenBusChatUseCase:
    def __init__(
        self,
        *,
        chats: BusChatRepository,
        grants: RoleGrantRepository,
        audit_repo: AuditEventRepository | None = None,
    ) -> None:
        self._chats = chats
        self._grants = grants
        self._audit_repo = audit_repo

    def execute(self, input_data: OpenBusChatInput) -> BusChatResult:
        if input_data.actor_role not in BUS_OWNER_ROLES:
            return BusChatResult(error=_FORBIDDEN)
        if input_data.driver_id == input_data.actor_id:
            return _error(BusChatErrorCode.VALIDATION_ERROR, MSG_SELF_CHAT)
        if AppRole.DRIVER not in self._grants.list_roles(input_data.driver_id):
            return _error(BusChatErrorCode.VALIDATION_ERROR, MSG_NOT_A_DRIVER)

        existing = self._chats.find_active_chat(
            bus_id=input_data.bus_id,
            owner_id=input_data.actor_id,
            driver_id=input_data.driver_id,
        )
        if existing is not None:
            return BusChatResult(chat=existing, created=False)

        now = utcnow()
        chat = BusChat(
            id=uuid4(),
            bus_id=input_data.bus_id,
            owner_id=input_data.actor_id,
            driver_id=input_data.driver_id,
            status=BusChatStatus.ACTIVE,
            last_activity_at=now,
            created_at=now,
        )
        self._chats.create_chat(chat)

        emit_audit_event(
            self._audit_repo,
            action=AuditAction.BUS_CHAT_OPENED,
            actor_id=input_data.actor_id,
            target_id=chat.id,
            metadata={
                "table_name": "bus_chats",
                "bus_id": chat.bus_id,
                "driver_id": chat.driver_id,
            },
        )
        return BusChatResult(chat=chat, created=True)


class ListBusChatsUseCase:
    def __init__(self, *, chats: BusChatRepository) -> None:
        self._chats = chats

    def execute(self, input_data: ListBusChatsInput) -> BusChatListResult:
        if input_data.actor_role in BUS_OWNER_ROLES:
            return BusChatListResult(chats=self._chats.list_for_owner(input_data.actor_id))
        if input_data.actor_role == AppRole.DRIVER:
            return BusChatListResult(chats=self._chats.list_for_driver(input_data.actor_id))
        return BusChatListResult(error=_FORBIDDEN)


class ListBusChatMessagesUseCase:
    def __init__(self, *, chats: BusChatRepository) -> None:
        self._chats = chats

    def execute(self, input_data: BusChatMessagesInput) -> BusChatResult:
        if input_data.actor_role not in BUS_CHAT_ROLES:
            return BusChatResult(error=_FORBIDDEN)
        chat = _participant_chat(self._chats, input_data.chat_id, input_data.actor_id)
        if chat is None:
            return BusChatResult(error=_NOT_FOUND)

        # R: leer el chat es lo que marca como leídos los mensajes de la contraparte.
        self._chats.mark_read(chat.id, input_data.actor_id, utcnow())
        return BusChatResult(chat=chat, messages=self._chats.list_messages(chat.id))


class PostBusChatMessageUseCase:
    def __init__(self, *, chats: BusChatRepository) -> None:
        self._chats = chats

    def execute(self, input_data: PostBusChatMessageInput) -> BusChatResult:
        if input_data.actor_role not in BUS_CHAT_ROLES:
            return BusChatResult(error=_FORBIDDEN)

        if input_data.quick_action is not None:
            resolved = quick_action_message(input_data.quick_action)
            if resolved is None:
                return _error(
                    BusChatErrorCode.VALIDATION_ERROR,
                    MSG_UNKNOWN_QUICK_ACTION.format(value=input_data.quick_action),
                )
            content, metadata = resolved
            message_type = BusChatMessageType.QUICK_ACTION
        else:
            content = (input_data.content or "").strip()
            if not content:
                return _error(BusChatErrorCode.VALIDATION_ERROR, MSG_EMPTY_MESSAGE)
            if len(content) > MAX_MESSAGE_LENGTH:
                return _error(
                    BusChatErrorCode.VALIDATION_ERROR,
                    MSG_MESSAGE_TOO_LONG.format(max=MAX_MESSAGE_LENGTH),
                )
            metadata = {}
            message_type = BusChatMessageType.TEXT

        chat = _participant_chat(self._chats, input_data.chat_id, input_data.actor_id)
        if chat is None:
            return BusChatResult(error=_NOT_FOUND)
        if chat.status != BusChatStatus.ACTIVE:
            return _error(BusChatErrorCode.CONFLICT, MSG_CHAT_CLOSED)

        message = BusChatMessage(
            id=uuid4(),
            chat_id=chat.id,
            sender_id=input_data.actor_id,
            message_type=message_type,
            content=content,
            metadata=metadata,
            created_at=utcnow(),
        )
        self._chats.add_message(message)
        self._chats.touch_chat(chat.id, message.created_at)
        chat.last_activity_at = message.created_at
        return BusChatResult(chat=chat, messages=[message])


class CloseBusChatUseCase:
    def __init__(
        self,
        *,
        chats: BusChatRepository,
        audit_repo: AuditEventRepository | None = None,
    ) -> None:
        self._chats = chats
        self._audit_repo = audit_repo

    def execute(self, input_data: BusChatMessagesInput) -> BusChatResult:
        if input_data.actor_role not in BUS_CHAT_ROLES:
            return BusChatResult(error=_FORBIDDEN)
        chat = _participant_chat(self._chats, input_data.chat_id, input_data.actor_id)
        if chat is None:
            return BusChatResult(error=_NOT_FOUND)
        if chat.owner_id != input_data.actor_id or input_data.actor_role not in BUS_OWNER_ROLES:
            return _error(BusChatErrorCode.FORBIDDEN, MSG_OWNER_ONLY)
        if chat.status == BusChatStatus.CLOSED:
            return BusChatResult(chat=chat)

        closed = self._chats.set_status(chat.id, BusChatStatus.CLOSED)
        if closed is None:
            return BusChatResult(error=_NOT_FOUND)

        emit_audit_event(
            self._audit_repo,
            action=AuditAction.BUS_CHAT_CLOSED,
            actor_id=input_data.actor_id,
            target_id=closed.id,
            metadata={"table_name": "bus_chats", "bus_id": closed.bus_id},
        )
        return BusChatResult(chat=closed)
