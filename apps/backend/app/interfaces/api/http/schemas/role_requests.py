"""
===============================================================================
TARJETA CRC — schemas/role_requests.py
===============================================================================

Módulo:
    Schemas HTTP de solicitudes de roles (create / approve / list)

Notas:
    - Los roles llegan como strings crudos: el caso de uso los valida y
      devuelve el mensaje de negocio (400) en vez de un 422 genérico.
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from app.domain.entities import RoleRequest, RoleRequestStatus
from app.domain.roles import AppRole
from pydantic import BaseModel, Field


class CreateRoleRequestReq(BaseModel):
    user_id: UUID | None = None
    requested_roles: list[str] = Field(default_factory=list, max_length=20)
    justification: str = Field(default="", max_length=2000)


class ResolveRoleRequestReq(BaseModel):
    request_id: UUID | None = None
    approved_roles: list[str] = Field(default_factory=list, max_length=20)
    rejected_roles: list[str] = Field(default_factory=list, max_length=20)
    notes: str | None = Field(default=None, max_length=2000)


class RoleRequestRes(BaseModel):
    id: UUID
    user_id: UUID
    requested_roles: list[AppRole]
    justification: str
    status: RoleRequestStatus
    approved_roles: list[AppRole] = Field(default_factory=list)
    rejected_roles: list[AppRole] = Field(default_factory=list)
    reviewed_at: datetime | None = None
    reviewed_by: UUID | None = None
    notes: str | None = None
    created_at: datetime | None = None


class RoleRequestActionRes(BaseModel):
    message: str
    request: RoleRequestRes


class RoleRequestsListRes(BaseModel):
    requests: list[RoleRequestRes]


def to_role_request_res(request: RoleRequest) -> RoleRequestRes:
    return RoleRequestRes(
        id=request.id,
        user_id=request.requester_id,
        requested_roles=request.requested_roles,
        justification=request.justification,
        status=request.status,
        approved_roles=request.approved_roles,
        rejected_roles=request.rejected_roles,
        reviewed_at=request.reviewed_at,
        reviewed_by=request.reviewed_by,
        notes=request.notes,
        created_at=request.created_at,
    )
