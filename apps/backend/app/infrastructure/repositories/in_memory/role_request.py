"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/role_request.py
============================================================
Class: InMemoryRoleRequestRepository

Responsibilities:
  - Almacenar solicitudes de roles en memoria (tests / local dev).
  - Persistir resoluciones (listas aprobadas/rechazadas + estado + revisión).

Collaborators:
  - domain.repositories.RoleRequestRepository (contrato)
  - domain.entities.RoleRequest

Constraints / Notes:
  - Copias defensivas (las listas de roles son mutables).
  - Orden: created_at DESC, id DESC (igual que Postgres).
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from threading import Lock
from typing import Dict, List, Optional, Sequence
from uuid import UUID

from ....domain.entities import RoleRequest, RoleRequestStatus, utcnow
from ....domain.repositories import RoleRequestRepository


def _copy(request: RoleRequest) -> RoleRequest:
    return replace(
        request,
        requested_roles=list(request.requested_roles),
        approved_roles=list(request.approved_roles),
        rejected_roles=list(request.rejected_roles),
    )


class InMemoryRoleRequestRepository(RoleRequestRepository):
    def __init__(self) -> None:
        self._lock = Lock()
        self._requests: Dict[UUID, RoleRequest] = {}

    def create_request(self, request: RoleRequest) -> None:
        stored = _copy(request)
        stored.created_at = stored.created_at or utcnow()
        with self._lock:
            self._requests[stored.id] = stored

    def get_request(self, request_id: UUID) -> Optional[RoleRequest]:
        with self._lock:
            request = self._requests.get(request_id)
            return _copy(request) if request else None

    def list_requests(
        self,
        *,
        requester_id: Optional[UUID] = None,
        statuses: Optional[Sequence[RoleRequestStatus]] = None,
    ) -> List[RoleRequest]:
        wanted = set(statuses) if statuses else None
        with self._lock:
            items = [
                _copy(r)
                for r in self._requests.values()
                if (requester_id is None or r.requester_id == requester_id)
                and (wanted is None or r.status in wanted)
            ]
        items.sort(key=lambda r: (r.created_at, str(r.id)), reverse=True)
        return items

    def save_resolution(self, request: RoleRequest) -> None:
        with self._lock:
            current = self._requests.get(request.id)
            if current is None:
                raise KeyError(f"Role request not found: {request.id}")
            self._requests[request.id] = replace(
                current,
                approved_roles=list(request.approved_roles),
                rejected_roles=list(request.rejected_roles),
                status=request.status,
                reviewed_at=request.reviewed_at,
                reviewed_by=request.reviewed_by,
                notes=request.notes,
            )
