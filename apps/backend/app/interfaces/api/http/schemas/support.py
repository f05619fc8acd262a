"""Schemas HTTP del chat de soporte."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from app.domain.entities import (
    ChatMessage,
    ChatMessageType,
    ChatThread,
    ChatThreadStatus,
)
from pydantic import BaseModel, Field


class OpenThreadReq(BaseModel):
    subject: str | None = Field(default=None, max_length=200)


class PostMessageReq(BaseModel):
    content: str = Field(..., max_length=4000)


class ChatMessageRes(BaseModel):
    id: UUID
    sender_id: UUID
    message_type: ChatMessageType
    content: str
    created_at: datetime | None = None


class ChatThreadRes(BaseModel):
    id: UUID
    subject: str
    status: ChatThreadStatus
    last_message_at: datetime | None = None
    created_at: datetime | None = None


class ThreadMessagesRes(BaseModel):
    thread: ChatThreadRes
    messages: list[ChatMessageRes]


class ThreadsListRes(BaseModel):
    threads: list[ChatThreadRes]


def to_message_res(m: ChatMessage) -> ChatMessageRes:
    return ChatMessageRes(
        id=m.id,
        sender_id=m.sender_id,
        message_type=m.message_type,
        content=m.content,
        created_at=m.created_at,
    )


def to_thread_res(t: ChatThread) -> ChatThreadRes:
    return ChatThreadRes(
        id=t.id,
        subject=t.subject,
        status=t.status,
        last_message_at=t.last_message_at,
        created_at=t.created_at,
    )
