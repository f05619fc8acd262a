"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/role_request.py
============================================================
Class: PostgresRoleRequestRepository

Responsibilities:
  - Persistir solicitudes de roles (`role_requests`).
  - Guardar listas de roles como arrays JSON (requested/approved/rejected).
  - Leer filas históricas de un solo rol (status approved/rejected).

Collaborators:
  - PostgresRepository
  - psycopg.types.json.Json
  - domain.entities.RoleRequest / RoleRequestStatus
============================================================
"""

from __future__ import annotations

from typing import Any, List, Optional, Sequence
from uuid import UUID

from psycopg.types.json import Json

from ....crosscutting.exceptions import DatabaseError
from ....domain.entities import RoleRequest, RoleRequestStatus
from ....domain.roles import AppRole
from ._base import PostgresRepository
from .role_grant import _to_role

_REQUEST_COLUMNS = (
    "id, requester_id, requested_roles, justification, status, "
    "approved_roles, rejected_roles, reviewed_at, reviewed_by, notes, created_at"
)
_REQUEST_ORDER_BY = "created_at DESC, id DESC"


def _to_roles(value: Any) -> list[AppRole]:
    # R: filas antiguas guardan un único rol como string.
    if value is None:
        return []
    if isinstance(value, str):
        return [_to_role(value)]
    return [_to_role(v) for v in value]


def _row_to_request(row: tuple) -> RoleRequest:
    try:
        status = RoleRequestStatus(row[4])
    except ValueError as exc:
        raise DatabaseError(f"Invalid role request status in database: {row[4]}") from exc

    return RoleRequest(
        id=row[0],
        requester_id=row[1],
        requested_roles=_to_roles(row[2]),
        justification=row[3],
        status=status,
        approved_roles=_to_roles(row[5]),
        rejected_roles=_to_roles(row[6]),
        reviewed_at=row[7],
        reviewed_by=row[8],
        notes=row[9],
        created_at=row[10],
    )


def _json_roles(roles: Sequence[AppRole]) -> Json:
    return Json([r.value for r in roles])


class PostgresRoleRequestRepository(PostgresRepository):
    def create_request(self, request: RoleRequest) -> None:
        self._execute(
            query="""
                INSERT INTO role_requests (
                    id, requester_id, requested_roles, justification, status,
                    approved_roles, rejected_roles
                )
                VALUES (%s, %s, %s, %s, %s, %s, %s)
            """,
            params=[
                request.id,
                request.requester_id,
                _json_roles(request.requested_roles),
                request.justification,
                request.status.value,
                _json_roles(request.approved_roles),
                _json_roles(request.rejected_roles),
            ],
            error_message="PostgresRoleRequestRepository: Failed to create request",
            extra={"request_id": str(request.id)},
        )

    def get_request(self, request_id: UUID) -> Optional[RoleRequest]:
        row = self._fetchone(
            query=f"SELECT {_REQUEST_COLUMNS} FROM role_requests WHERE id = %s",
            params=[request_id],
            error_message="PostgresRoleRequestRepository: Failed to get request",
            extra={"request_id": str(request_id)},
        )
        return _row_to_request(row) if row else None

    def list_requests(
        self,
        *,
        requester_id: Optional[UUID] = None,
        statuses: Optional[Sequence[RoleRequestStatus]] = None,
    ) -> List[RoleRequest]:
        conditions: list[str] = []
        params: list[object] = []

        if requester_id is not None:
            conditions.append("requester_id = %s")
            params.append(requester_id)
        if statuses:
            conditions.append("status = ANY(%s)")
            params.append([s.value for s in statuses])

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        rows = self._fetchall(
            query=f"""
                SELECT {_REQUEST_COLUMNS}
                FROM role_requests
                {where}
                ORDER BY {_REQUEST_ORDER_BY}
            """,
            params=params,
            error_message="PostgresRoleRequestRepository: Failed to list requests",
            extra={"requester_id": str(requester_id) if requester_id else None},
        )
        return [_row_to_request(row) for row in rows]

    def save_resolution(self, request: RoleRequest) -> None:
        self._execute(
            query="""
                UPDATE role_requests
                SET approved_roles = %s,
                    rejected_roles = %s,
                    status = %s,
                    reviewed_at = %s,
                    reviewed_by = %s,
                    notes = %s
                WHERE id = %s
            """,
            params=[
                _json_roles(request.approved_roles),
                _json_roles(request.rejected_roles),
                request.status.value,
                request.reviewed_at,
                request.reviewed_by,
                request.notes,
                request.id,
            ],
            error_message="PostgresRoleRequestRepository: Failed to save resolution",
            extra={"request_id": str(request.id), "status": request.status.value},
        )
