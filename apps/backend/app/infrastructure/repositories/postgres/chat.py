"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/chat.py
============================================================
Class: PostgresChatRepository

Responsibilities:
  - Persistir hilos (`chat_threads`) y mensajes (`chat_messages`) de soporte.

Constraints / Notes:
  - chat_messages también guarda el chat de buses (bus_chat_id, ver
    postgres/bus_chat.py); acá sólo se leen mensajes con thread_id.
============================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from psycopg.types.json import Json

from ....crosscutting.exceptions import DatabaseError
from ....domain.entities import (
    ChatMessage,
    ChatMessageType,
    ChatThread,
    ChatThreadStatus,
)
from ._base import PostgresRepository

_THREAD_COLUMNS = "id, client_id, subject, status, last_message_at, created_at"
_MESSAGE_COLUMNS = "id, thread_id, sender_id, message_type, content, metadata, created_at"


def _row_to_thread(row: tuple) -> ChatThread:
    try:
        status = ChatThreadStatus(row[3])
    except ValueError as exc:
        raise DatabaseError(f"Invalid thread status in database: {row[3]}") from exc
    return ChatThread(
        id=row[0],
        client_id=row[1],
        subject=row[2] or "",
        status=status,
        last_message_at=row[4],
        created_at=row[5],
    )


def _row_to_message(row: tuple) -> ChatMessage:
    try:
        message_type = ChatMessageType(row[3])
    except ValueError as exc:
        raise DatabaseError(f"Invalid message type in database: {row[3]}") from exc
    return ChatMessage(
        id=row[0],
        thread_id=row[1],
        sender_id=row[2],
        message_type=message_type,
        content=row[4],
        metadata=dict(row[5] or {}),
        created_at=row[6],
    )


class PostgresChatRepository(PostgresRepository):
    def create_thread(self, thread: ChatThread) -> None:
        self._execute(
            query="""
                INSERT INTO chat_threads (id, client_id, subject, status, last_message_at)
                VALUES (%s, %s, %s, %s, %s)
            """,
            params=[
                thread.id,
                thread.client_id,
                thread.subject,
                thread.status.value,
                thread.last_message_at,
            ],
            error_message="PostgresChatRepository: Failed to create thread",
            extra={"thread_id": str(thread.id)},
        )

    def get_thread(self, thread_id: UUID) -> Optional[ChatThread]:
        row = self._fetchone(
            query=f"SELECT {_THREAD_COLUMNS} FROM chat_threads WHERE id = %s",
            params=[thread_id],
            error_message="PostgresChatRepository: Failed to get thread",
            extra={"thread_id": str(thread_id)},
        )
        return _row_to_thread(row) if row else None

    def list_threads_for_client(self, client_id: UUID) -> List[ChatThread]:
        rows = self._fetchall(
            query=f"""
                SELECT {_THREAD_COLUMNS}
                FROM chat_threads
                WHERE client_id = %s
                ORDER BY COALESCE(last_message_at, created_at) DESC, id DESC
            """,
            params=[client_id],
            error_message="PostgresChatRepository: Failed to list threads",
            extra={"client_id": str(client_id)},
        )
        return [_row_to_thread(row) for row in rows]

    def touch_thread(self, thread_id: UUID, at: datetime) -> None:
        self._execute(
            query="""
                UPDATE chat_threads
                SET last_message_at = %s, updated_at = NOW()
                WHERE id = %s
            """,
            params=[at, thread_id],
            error_message="PostgresChatRepository: Failed to touch thread",
            extra={"thread_id": str(thread_id)},
        )

    def add_message(self, message: ChatMessage) -> None:
        self._execute(
            query="""
                INSERT INTO chat_messages (
                    id, thread_id, sender_id, message_type, content, metadata
                )
                VALUES (%s, %s, %s, %s, %s, %s)
            """,
            params=[
                message.id,
                message.thread_id,
                message.sender_id,
                message.message_type.value,
                message.content,
                Json(message.metadata or {}),
            ],
            error_message="PostgresChatRepository: Failed to add message",
            extra={"thread_id": str(message.thread_id)},
        )

    def list_messages(self, thread_id: UUID) -> List[ChatMessage]:
        rows = self._fetchall(
            query=f"""
                SELECT {_MESSAGE_COLUMNS}
                FROM chat_messages
                WHERE thread_id = %s
                ORDER BY created_at ASC, id ASC
            """,
            params=[thread_id],
            error_message="PostgresChatRepository: Failed to list messages",
            extra={"thread_id": str(thread_id)},
        )
        return [_row_to_message(row) for row in rows]
