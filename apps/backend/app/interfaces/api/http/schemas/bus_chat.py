"""Schemas HTTP del chat dueño <-> conductor."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from app.domain.entities import (
    BusChat,
    BusChatMessage,
    BusChatMessageType,
    BusChatStatus,
)
from pydantic import BaseModel, Field


class OpenBusChatReq(BaseModel):
    bus_id: UUID
    driver_id: UUID


class PostBusChatMessageReq(BaseModel):
    content: str | None = Field(default=None, max_length=4000)
    quick_action: str | None = Field(
        default=None, max_length=50, description="report_delay|retire_bus|location_ping"
    )


class BusChatMessageRes(BaseModel):
    id: UUID
    sender_id: UUID
    message_type: BusChatMessageType
    content: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    read_at: datetime | None = None
    created_at: datetime | None = None


class BusChatRes(BaseModel):
    id: UUID
    bus_id: UUID
    owner_id: UUID
    driver_id: UUID
    status: BusChatStatus
    last_activity_at: datetime | None = None
    created_at: datetime | None = None


class BusChatMessagesRes(BaseModel):
    chat: BusChatRes
    messages: list[BusChatMessageRes]


class BusChatsListRes(BaseModel):
    chats: list[BusChatRes]


def to_bus_chat_message_res(m: BusChatMessage) -> BusChatMessageRes:
    return BusChatMessageRes(
        id=m.id,
        sender_id=m.sender_id,
        message_type=m.message_type,
        content=m.content,
        metadata=dict(m.metadata),
        read_at=m.read_at,
        created_at=m.created_at,
    )


def to_bus_chat_res(c: BusChat) -> BusChatRes:
    return BusChatRes(
        id=c.id,
        bus_id=c.bus_id,
        owner_id=c.owner_id,
        driver_id=c.driver_id,
        status=c.status,
        last_activity_at=c.last_activity_at,
        created_at=c.created_at,
    )
