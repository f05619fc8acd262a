"""Schemas HTTP de incidentes de vía (road_incidents / incident_audit_log)."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from app.domain.entities import (
    IncidentAuditEntry,
    IncidentSeverity,
    IncidentStatus,
    IncidentType,
    RoadIncident,
)
from app.domain.incidents import INCIDENT_TYPE_LABELS
from pydantic import BaseModel, Field


class ReportIncidentReq(BaseModel):
    incident_type: str = Field(..., max_length=40)
    title: str = Field(..., max_length=200)
    description: str = Field(..., max_length=4000)
    location_description: str = Field(..., max_length=500)
    severity: str = Field(default=IncidentSeverity.MEDIUM.value, max_length=20)
    affected_routes: list[str] = Field(default_factory=list, max_length=20)


class ModerateIncidentReq(BaseModel):
    status: str = Field(..., max_length=20, description="activo|resuelto|cerrado")
    notes: str | None = Field(default=None, max_length=1000)


class IncidentLogRes(BaseModel):
    id: UUID
    user_id: UUID
    action: str
    changes: dict[str, Any] = Field(default_factory=dict)
    notes: str | None = None
    created_at: datetime | None = None


class IncidentRes(BaseModel):
    id: UUID
    reporter_id: UUID
    incident_type: IncidentType
    incident_type_label: str
    title: str
    description: str
    location_description: str
    severity: IncidentSeverity
    status: IncidentStatus
    affected_routes: list[str]
    moderator_id: UUID | None = None
    moderated_at: datetime | None = None
    resolved_at: datetime | None = None
    created_at: datetime | None = None


class IncidentDetailRes(BaseModel):
    message: str = ""
    incident: IncidentRes
    history: list[IncidentLogRes]


class IncidentsListRes(BaseModel):
    incidents: list[IncidentRes]


def to_incident_res(i: RoadIncident) -> IncidentRes:
    return IncidentRes(
        id=i.id,
        reporter_id=i.reporter_id,
        incident_type=i.incident_type,
        incident_type_label=INCIDENT_TYPE_LABELS[i.incident_type],
        title=i.title,
        description=i.description,
        location_description=i.location_description,
        severity=i.severity,
        status=i.status,
        affected_routes=list(i.affected_routes),
        moderator_id=i.moderator_id,
        moderated_at=i.moderated_at,
        resolved_at=i.resolved_at,
        created_at=i.created_at,
    )


def to_incident_log_res(e: IncidentAuditEntry) -> IncidentLogRes:
    return IncidentLogRes(
        id=e.id,
        user_id=e.user_id,
        action=e.action,
        changes=dict(e.changes),
        notes=e.notes,
        created_at=e.created_at,
    )
