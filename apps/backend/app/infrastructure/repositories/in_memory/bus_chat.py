"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/bus_chat.py
============================================================
Class: InMemoryBusChatRepository

Responsibilities:
  - Almacenar chats dueño <-> conductor y sus mensajes en memoria.
  - Marcar como leídos los mensajes de la contraparte.
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from threading import Lock
from typing import Dict, List, Optional
from uuid import UUID

from ....domain.entities import BusChat, BusChatMessage, BusChatStatus, utcnow
from ....domain.repositories import BusChatRepository


def _by_activity(chats: List[BusChat]) -> List[BusChat]:
    return sorted(
        chats,
        key=lambda c: (c.last_activity_at or c.created_at, str(c.id)),
        reverse=True,
    )


class InMemoryBusChatRepository(BusChatRepository):
    def __init__(self) -> None:
        self._lock = Lock()
        self._chats: Dict[UUID, BusChat] = {}
        self._messages: Dict[UUID, List[BusChatMessage]] = {}

    def create_chat(self, chat: BusChat) -> None:
        with self._lock:
            created_at = chat.created_at or utcnow()
            self._chats[chat.id] = replace(
                chat,
                created_at=created_at,
                last_activity_at=chat.last_activity_at or created_at,
            )
            self._messages.setdefault(chat.id, [])

    def get_chat(self, chat_id: UUID) -> Optional[BusChat]:
        with self._lock:
            chat = self._chats.get(chat_id)
            return replace(chat) if chat else None

    def find_active_chat(
        self, *, bus_id: UUID, owner_id: UUID, driver_id: UUID
    ) -> Optional[BusChat]:
        with self._lock:
            for chat in self._chats.values():
                if (
                    chat.status == BusChatStatus.ACTIVE
                    and chat.bus_id == bus_id
                    and chat.owner_id == owner_id
                    and chat.driver_id == driver_id
                ):
                    return replace(chat)
        return None

    def list_for_owner(self, owner_id: UUID) -> List[BusChat]:
        with self._lock:
            chats = [replace(c) for c in self._chats.values() if c.owner_id == owner_id]
        return _by_activity(chats)

    def list_for_driver(self, driver_id: UUID) -> List[BusChat]:
        with self._lock:
            chats = [replace(c) for c in self._chats.values() if c.driver_id == driver_id]
        return _by_activity(chats)

    def set_status(self, chat_id: UUID, status: BusChatStatus) -> Optional[BusChat]:
        with self._lock:
            chat = self._chats.get(chat_id)
            if chat is None:
                return None
            chat.status = status
            return replace(chat)

    def touch_chat(self, chat_id: UUID, at: datetime) -> None:
        with self._lock:
            chat = self._chats.get(chat_id)
            if chat is not None:
                chat.last_activity_at = at

    def add_message(self, message: BusChatMessage) -> None:
        stored = replace(
            message,
            metadata=dict(message.metadata),
            created_at=message.created_at or utcnow(),
        )
        with self._lock:
            self._messages.setdefault(message.chat_id, []).append(stored)

    def list_messages(self, chat_id: UUID) -> List[BusChatMessage]:
        with self._lock:
            return [
                replace(m, metadata=dict(m.metadata))
                for m in self._messages.get(chat_id, [])
            ]

    def mark_read(self, chat_id: UUID, reader_id: UUID, at: datetime) -> int:
        marked = 0
        with self._lock:
            for message in self._messages.get(chat_id, []):
                if message.sender_id != reader_id and message.read_at is None:
                    message.read_at = at
                    marked += 1
        return marked
