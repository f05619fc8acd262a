"""Schemas HTTP de auditoría."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from app.domain.entities import AuditEvent
from pydantic import BaseModel, Field


class AuditEventRes(BaseModel):
    id: UUID
    actor: str
    action: str
    target_id: UUID | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = None


class AuditEventsListRes(BaseModel):
    events: list[AuditEventRes]
    limit: int
    offset: int


def to_audit_event_res(event: AuditEvent) -> AuditEventRes:
    return AuditEventRes(
        id=event.id,
        actor=event.actor,
        action=event.action,
        target_id=event.target_id,
        metadata=event.metadata,
        created_at=event.created_at,
    )
