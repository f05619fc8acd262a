"""
===============================================================================
USE CASES: Support Chat
===============================================================================

Business Goal:
    Chat de soporte cliente <-> asistente virtual. Cada conversación arranca
    con un saludo del bot y cada mensaje del cliente recibe una respuesta
    enlatada según palabras clave.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Classes:
    OpenSupportThreadUseCase, PostSupportMessageUseCase,
    ListSupportMessagesUseCase, ListSupportThreadsUseCase

Responsibilities:
    - Crear la conversación del cliente y publicar la bienvenida.
    - Guardar el mensaje del cliente + la respuesta del bot (remitente sistema).
    - Devolver la transcripción en orden de inserción.
    - Sólo el dueño de la conversación puede leerla o escribir en ella.

Collaborators:
    - ChatRepository
    - domain.support_bot (reply_for / WELCOME_MESSAGE)
===============================================================================
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID, uuid4

from ....domain.entities import (
    SYSTEM_SENDER_ID,
    ChatMessage,
    ChatMessageType,
    ChatThread,
    ChatThreadStatus,
    utcnow,
)
from ....domain.repositories import ChatRepository
from ....domain.support_bot import NEW_THREAD_SUBJECT, WELCOME_MESSAGE, reply_for
from .support_results import (
    MAX_MESSAGE_LENGTH,
    MSG_EMPTY_MESSAGE,
    MSG_MESSAGE_TOO_LONG,
    MSG_THREAD_CLOSED,
    MSG_THREAD_NOT_FOUND,
    SupportError,
    SupportErrorCode,
    ThreadListResult,
    ThreadResult,
)

_NOT_FOUND = SupportError(SupportErrorCode.NOT_FOUND, MSG_THREAD_NOT_FOUND)


def _bot_message(thread_id: UUID, content: str) -> ChatMessage:
    return ChatMessage(
        id=uuid4(),
        thread_id=thread_id,
        sender_id=SYSTEM_SENDER_ID,
        message_type=ChatMessageType.SYSTEM,
        content=content,
        metadata={"bot": True},
        created_at=utcnow(),
    )


def _owned_thread(
    chat: ChatRepository, thread_id: UUID, user_id: UUID
) -> Optional[ChatThread]:
    thread = chat.get_thread(thread_id)
    if thread is None or thread.client_id != user_id:
        return None
    return thread


class OpenSupportThreadUseCase:
    def __init__(self, *, chat: ChatRepository) -> None:
        self._chat = chat

    def execute(self, user_id: UUID, subject: str | None = None) -> ThreadResult:
        now = utcnow()
        thread = ChatThread(
            id=uuid4(),
            client_id=user_id,
            subject=(subject or "").strip() or NEW_THREAD_SUBJECT,
            status=ChatThreadStatus.ACTIVE,
            last_message_at=now,
            created_at=now,
        )
        self._chat.create_thread(thread)

        welcome = _bot_message(thread.id, WELCOME_MESSAGE)
        self._chat.add_message(welcome)
        return ThreadResult(thread=thread, messages=[welcome])


class PostSupportMessageUseCase:
    def __init__(self, *, chat: ChatRepository) -> None:
        self._chat = chat

    def execute(self, user_id: UUID, thread_id: UUID, content: str) -> ThreadResult:
        text = (content or "").strip()
        if not text:
            return ThreadResult(
                error=SupportError(SupportErrorCode.VALIDATION_ERROR, MSG_EMPTY_MESSAGE)
            )
        if len(text) > MAX_MESSAGE_LENGTH:
            return ThreadResult(
                error=SupportError(
                    SupportErrorCode.VALIDATION_ERROR,
                    MSG_MESSAGE_TOO_LONG.format(max=MAX_MESSAGE_LENGTH),
                )
            )

        thread = _owned_thread(self._chat, thread_id, user_id)
        if thread is None:
            return ThreadResult(error=_NOT_FOUND)
        if thread.status != ChatThreadStatus.ACTIVE:
            return ThreadResult(
                error=SupportError(SupportErrorCode.CONFLICT, MSG_THREAD_CLOSED)
            )

        user_message = ChatMessage(
            id=uuid4(),
            thread_id=thread.id,
            sender_id=user_id,
            message_type=ChatMessageType.TEXT,
            content=text,
            created_at=utcnow(),
        )
        self._chat.add_message(user_message)

        reply = _bot_message(thread.id, reply_for(text))
        self._chat.add_message(reply)
        self._chat.touch_thread(thread.id, reply.created_at)

        return ThreadResult(thread=thread, messages=[user_message, reply])


class ListSupportMessagesUseCase:
    def __init__(self, *, chat: ChatRepository) -> None:
        self._chat = chat

    def execute(self, user_id: UUID, thread_id: UUID) -> ThreadResult:
        thread = _owned_thread(self._chat, thread_id, user_id)
        if thread is None:
            return ThreadResult(error=_NOT_FOUND)
        return ThreadResult(thread=thread, messages=self._chat.list_messages(thread.id))


class ListSupportThreadsUseCase:
    def __init__(self, *, chat: ChatRepository) -> None:
        self._chat = chat

    def execute(self, user_id: UUID) -> ThreadListResult:
        return ThreadListResult(threads=self._chat.list_threads_for_client(user_id))
