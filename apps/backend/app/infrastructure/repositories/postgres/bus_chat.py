"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/bus_chat.py
============================================================
Class: PostgresBusChatRepository

Responsibilities:
  - Persistir chats dueño <-> conductor (`bus_chats`).
  - Persistir sus mensajes en `chat_messages` (columna bus_chat_id).

Constraints / Notes:
  - Sólo se leen mensajes con bus_chat_id; los de soporte van por
    postgres/chat.py (thread_id).
============================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from psycopg.types.json import Json

from ....crosscutting.exceptions import DatabaseError
from ....domain.entities import (
    BusChat,
    BusChatMessage,
    BusChatMessageType,
    BusChatStatus,
)
from ._base import PostgresRepository

_CHAT_COLUMNS = "id, bus_id, owner_id, driver_id, status, last_activity_at, created_at"
_MESSAGE_COLUMNS = (
    "id, bus_chat_id, sender_id, message_type, content, metadata, read_at, created_at"
)


def _row_to_chat(row: tuple) -> BusChat:
    try:
        status = BusChatStatus(row[4])
    except ValueError as exc:
        raise DatabaseError(f"Invalid bus chat status in database: {row[4]}") from exc
    return BusChat(
        id=row[0],
        bus_id=row[1],
        owner_id=row[2],
        driver_id=row[3],
        status=status,
        last_activity_at=row[5],
        created_at=row[6],
    )


def _row_to_message(row: tuple) -> BusChatMessage:
    try:
        message_type = BusChatMessageType(row[3])
    except ValueError as exc:
        raise DatabaseError(f"Invalid message type in database: {row[3]}") from exc
    return BusChatMessage(
        id=row[0],
        chat_id=row[1],
        sender_id=row[2],
        message_type=message_type,
        content=row[4],
        metadata=dict(row[5] or {}),
        read_at=row[6],
        created_at=row[7],
    )


class PostgresBusChatRepository(PostgresRepository):
    def create_chat(self, chat: BusChat) -> None:
        self._execute(
            query="""
                INSERT INTO bus_chats (id, bus_id, owner_id, driver_id, status, last_activity_at)
                VALUES (%s, %s, %s, %s, %s, COALESCE(%s, NOW()))
            """,
            params=[
                chat.id,
                chat.bus_id,
                chat.owner_id,
                chat.driver_id,
                chat.status.value,
                chat.last_activity_at,
            ],
            error_message="PostgresBusChatRepository: Failed to create chat",
            extra={"chat_id": str(chat.id), "bus_id": str(chat.bus_id)},
        )

    def get_chat(self, chat_id: UUID) -> Optional[BusChat]:
        row = self._fetchone(
            query=f"SELECT {_CHAT_COLUMNS} FROM bus_chats WHERE id = %s",
            params=[chat_id],
            error_message="PostgresBusChatRepository: Failed to get chat",
            extra={"chat_id": str(chat_id)},
        )
        return _row_to_chat(row) if row else None

    def find_active_chat(
        self, *, bus_id: UUID, owner_id: UUID, driver_id: UUID
    ) -> Optional[BusChat]:
        row = self._fetchone(
            query=f"""
                SELECT {_CHAT_COLUMNS}
                FROM bus_chats
                WHERE bus_id = %s AND owner_id = %s AND driver_id = %s
                  AND status = %s
                ORDER BY created_at DESC
                LIMIT 1
            """,
            params=[bus_id, owner_id, driver_id, BusChatStatus.ACTIVE.value],
            error_message="PostgresBusChatRepository: Failed to find active chat",
            extra={"bus_id": str(bus_id)},
        )
        return _row_to_chat(row) if row else None

    def _list_by(self, column: str, user_id: UUID) -> List[BusChat]:
        # R: column sale de un literal interno (owner_id / driver_id), nunca del usuario.
        rows = self._fetchall(
            query=f"""
                SELECT {_CHAT_COLUMNS}
                FROM bus_chats
                WHERE {column} = %s
                ORDER BY COALESCE(last_activity_at, created_at) DESC, id DESC
            """,
            params=[user_id],
            error_message="PostgresBusChatRepository: Failed to list chats",
            extra={column: str(user_id)},
        )
        return [_row_to_chat(row) for row in rows]

    def list_for_owner(self, owner_id: UUID) -> List[BusChat]:
        return self._list_by("owner_id", owner_id)

    def list_for_driver(self, driver_id: UUID) -> List[BusChat]:
        return self._list_by("driver_id", driver_id)

    def set_status(self, chat_id: UUID, status: BusChatStatus) -> Optional[BusChat]:
        row = self._fetchone(
            query=f"""
                UPDATE bus_chats
                SET status = %s, updated_at = NOW()
                WHERE id = %s
                RETURNING {_CHAT_COLUMNS}
            """,
            params=[status.value, chat_id],
            error_message="PostgresBusChatRepository: Failed to update chat status",
            extra={"chat_id": str(chat_id)},
        )
        return _row_to_chat(row) if row else None

    def touch_chat(self, chat_id: UUID, at: datetime) -> None:
        self._execute(
            query="""
                UPDATE bus_chats
                SET last_activity_at = %s, updated_at = NOW()
                WHERE id = %s
            """,
            params=[at, chat_id],
            error_message="PostgresBusChatRepository: Failed to touch chat",
            extra={"chat_id": str(chat_id)},
        )

    def add_message(self, message: BusChatMessage) -> None:
        self._execute(
            query="""
                INSERT INTO chat_messages (
                    id, bus_chat_id, sender_id, message_type, content, metadata
                )
                VALUES (%s, %s, %s, %s, %s, %s)
            """,
            params=[
                message.id,
                message.chat_id,
                message.sender_id,
                message.message_type.value,
                message.content,
                Json(message.metadata or {}),
            ],
            error_message="PostgresBusChatRepository: Failed to add message",
            extra={"chat_id": str(message.chat_id)},
        )

    def list_messages(self, chat_id: UUID) -> List[BusChatMessage]:
        rows = self._fetchall(
            query=f"""
                SELECT {_MESSAGE_COLUMNS}
                FROM chat_messages
                WHERE bus_chat_id = %s
                ORDER BY created_at ASC, id ASC
            """,
            params=[chat_id],
            error_message="PostgresBusChatRepository: Failed to list messages",
            extra={"chat_id": str(chat_id)},
        )
        return [_row_to_message(row) for row in rows]

    def mark_read(self, chat_id: UUID, reader_id: UUID, at: datetime) -> int:
        return self._execute(
            query="""
                UPDATE chat_messages
                SET read_at = %s
                WHERE bus_chat_id = %s AND sender_id <> %s AND read_at IS NULL
            """,
            params=[at, chat_id, reader_id],
            error_message="PostgresBusChatRepository: Failed to mark messages read",
            extra={"chat_id": str(chat_id)},
        )
