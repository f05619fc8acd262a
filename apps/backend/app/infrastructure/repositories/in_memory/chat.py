"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/chat.py
============================================================
Class: InMemoryChatRepository

Responsibilities:
  - Almacenar hilos y mensajes del chat de soporte en memoria.
  - Devolver mensajes en orden de inserción (orden del change-feed).
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from threading import Lock
from typing import Dict, List, Optional
from uuid import UUID

from ....domain.entities import ChatMessage, ChatThread, utcnow
from ....domain.repositories import ChatRepository


class InMemoryChatRepository(ChatRepository):
    def __init__(self) -> None:
        self._lock = Lock()
        self._threads: Dict[UUID, ChatThread] = {}
        self._messages: Dict[UUID, List[ChatMessage]] = {}

    def create_thread(self, thread: ChatThread) -> None:
        with self._lock:
            self._threads[thread.id] = replace(
                thread, created_at=thread.created_at or utcnow()
            )
            self._messages.setdefault(thread.id, [])

    def get_thread(self, thread_id: UUID) -> Optional[ChatThread]:
        with self._lock:
            thread = self._threads.get(thread_id)
            return replace(thread) if thread else None

    def list_threads_for_client(self, client_id: UUID) -> List[ChatThread]:
        with self._lock:
            threads = [
                replace(t) for t in self._threads.values() if t.client_id == client_id
            ]
        threads.sort(
            key=lambda t: (t.last_message_at or t.created_at, str(t.id)),
            reverse=True,
        )
        return threads

    def touch_thread(self, thread_id: UUID, at: datetime) -> None:
        with self._lock:
            thread = self._threads.get(thread_id)
            if thread is not None:
                thread.last_message_at = at

    def add_message(self, message: ChatMessage) -> None:
        stored = replace(
            message,
            metadata=dict(message.metadata),
            created_at=message.created_at or utcnow(),
        )
        with self._lock:
            self._messages.setdefault(message.thread_id, []).append(stored)

    def list_messages(self, thread_id: UUID) -> List[ChatMessage]:
        with self._lock:
            return [replace(m) for m in self._messages.get(thread_id, [])]
